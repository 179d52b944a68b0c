"""Configuration data models for serialguard."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal

from serialguard.kernel.middleware.models import MiddlewareConfig

LogLevelName = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
LogFormatName = Literal["console", "json", "structured", "rich"]


@dataclass(frozen=True, slots=True)
class LoggingConfig:
    """Logging configuration for serialguard.

    Attributes
    ----------
    level : str, default="INFO"
        Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    format : str, default="structured"
        Output format (console, json, structured, rich)
    output_file : str | None, default=None
        Optional file path to write logs to
    use_color : bool, default=True
        Use ANSI color codes (auto-disabled for non-TTY)
    include_timestamp : bool, default=True
        Include timestamp in log output

    Examples
    --------
    TOML configuration:

    ```toml
    [tool.serialguard.logging]
    level = "DEBUG"
    format = "rich"
    ```

    Environment variable overrides:

    ```bash
    export SERIALGUARD_LOG_LEVEL=DEBUG
    export SERIALGUARD_LOG_FORMAT=json
    ```
    """

    level: LogLevelName = "INFO"
    format: LogFormatName = "structured"
    output_file: str | None = None
    use_color: bool = True
    include_timestamp: bool = True


@dataclass(frozen=True, slots=True)
class SerialGuardConfig:
    """Complete serialguard configuration.

    Attributes
    ----------
    middleware : MiddlewareConfig
        Options of the invariant middleware
    logging : LoggingConfig
        Logging setup

    Examples
    --------
    ```toml
    [tool.serialguard]
    ignored_actions = ["persist/REHYDRATE"]
    ignored_paths = ["session.socket", "uploads.*.handle"]
    warn_after = 64

    [tool.serialguard.logging]
    level = "WARNING"
    ```
    """

    middleware: MiddlewareConfig = field(default_factory=MiddlewareConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
