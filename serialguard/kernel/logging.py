"""Loguru setup shared by every serialguard module.

The guard logs little on its own: skipped dispatches and cache sweeps at
DEBUG, plus whatever :class:`LoggingDiagnosticSink` reports. Handlers added
here are tracked so that reconfiguring never touches handlers installed by
the host application.

Examples
--------
>>> from serialguard.kernel.logging import get_logger
>>> logger = get_logger(__name__)
>>> logger.debug("Scanning state after {}", "todos/added")

Switching output for a whole process::

    from serialguard.kernel.logging import configure_logging
    configure_logging(level="DEBUG", format="rich")
"""

import os
import sys
from contextlib import suppress
from functools import lru_cache
from pathlib import Path
from typing import TYPE_CHECKING, Any, Literal

if TYPE_CHECKING:
    from loguru import Logger

from loguru import logger
from rich.logging import RichHandler

LogLevel = Literal["TRACE", "DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
LogFormat = Literal["console", "json", "structured", "rich"]

_PLAIN_TIME = "{time:YYYY-MM-DD HH:mm:ss} "
_GREEN_TIME = "<green>{time:YYYY-MM-DD HH:mm:ss}</green> "

_CURRENT_CONFIG: dict[str, Any] | None = None
_HANDLER_IDS: list[int] = []


def _stream_handler(
    format: LogFormat, use_color: bool, include_timestamp: bool
) -> dict[str, Any]:
    """Keyword arguments for ``logger.add`` of the main (non-file) handler."""
    if format == "rich":
        return {
            "sink": RichHandler(
                rich_tracebacks=True,
                markup=False,
                show_time=include_timestamp,
                show_level=True,
                show_path=True,
            ),
            "format": "{message}",
        }

    if format == "json":
        return {"sink": sys.stderr, "serialize": True}

    if format == "structured":
        colorize = use_color and sys.stderr.isatty()
        stamp = _GREEN_TIME if include_timestamp else ""
        level = "<level>{level: <8}</level>" if colorize else "{level: <8}"
        return {
            "sink": sys.stderr,
            "format": f"{stamp}[{level}]<cyan>{{name}}:{{function}}:{{line}}</cyan> | "
            "<level>{message}</level>",
            "colorize": colorize,
        }

    stamp = _PLAIN_TIME if include_timestamp else ""
    return {
        "sink": sys.stderr,
        "format": f"{stamp}{{level: <8}} | {{name}} | {{message}}",
        "colorize": False,
    }


def configure_logging(
    level: LogLevel = "INFO",
    format: LogFormat = "structured",
    output_file: str | Path | None = None,
    use_color: bool = True,
    include_timestamp: bool = True,
    force_reconfigure: bool = False,
    backtrace: bool = True,
    diagnose: bool = True,
) -> None:
    """Install serialguard's log handlers.

    Calling again with identical settings is a no-op. Different settings
    replace the handlers from the previous call.

    Parameters
    ----------
    level : LogLevel, default="INFO"
        Lowest level that reaches the handlers
    format : LogFormat, default="structured"
        ``console`` (plain text), ``json`` (one serialized record per line),
        ``structured`` (colored loguru format) or ``rich`` (RichHandler)
    output_file : str | Path | None, default=None
        Extra JSON-lines file, rotated at 10 MB
    use_color : bool, default=True
        Color the structured format when stderr is a terminal
    include_timestamp : bool, default=True
        Prefix records with the wall-clock time
    force_reconfigure : bool, default=False
        Rebuild handlers even when the settings are unchanged
    backtrace : bool, default=True
        Passed to loguru
    diagnose : bool, default=True
        Passed to loguru

    Examples
    --------
    Quiet test runs::

        configure_logging(level="WARNING", format="console")
    """
    global _CURRENT_CONFIG

    requested = {
        "level": level,
        "format": format,
        "output_file": str(output_file) if output_file else None,
        "use_color": use_color,
        "include_timestamp": include_timestamp,
        "backtrace": backtrace,
        "diagnose": diagnose,
    }
    if requested == _CURRENT_CONFIG and not force_reconfigure:
        return

    if _CURRENT_CONFIG is None:
        # Loguru's default stderr handler would print every record twice
        with suppress(ValueError):
            logger.remove(0)
    _remove_own_handlers()

    common = {"level": level, "backtrace": backtrace, "diagnose": diagnose}
    _HANDLER_IDS.append(
        logger.add(**_stream_handler(format, use_color, include_timestamp), **common)
    )

    if output_file:
        path = Path(output_file)
        path.parent.mkdir(parents=True, exist_ok=True)
        _HANDLER_IDS.append(
            logger.add(
                sink=path,
                serialize=True,
                rotation="10 MB",
                retention="1 week",
                **common,
            )
        )

    _CURRENT_CONFIG = requested


@lru_cache(maxsize=256)
def get_logger(name: str) -> "Logger":
    """Return the package logger bound to ``module=name``.

    Configures logging from ``SERIALGUARD_LOG_LEVEL`` and
    ``SERIALGUARD_LOG_FORMAT`` on first use if nothing was configured yet.
    """
    _ensure_configured()
    return logger.bind(module=name)


def reset_logging() -> None:
    """Remove handlers added by :func:`configure_logging` and forget its settings."""
    global _CURRENT_CONFIG

    _remove_own_handlers()
    _CURRENT_CONFIG = None


def _remove_own_handlers() -> None:
    while _HANDLER_IDS:
        with suppress(ValueError):
            logger.remove(_HANDLER_IDS.pop())


def _ensure_configured() -> None:
    if _CURRENT_CONFIG is None:
        level = os.getenv("SERIALGUARD_LOG_LEVEL", "INFO").upper()
        format_type = os.getenv("SERIALGUARD_LOG_FORMAT", "structured").lower()
        configure_logging(level=level, format=format_type)  # type: ignore[arg-type]
