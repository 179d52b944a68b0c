"""Configuration loader for serialguard.

Two kinds of files are understood:

1. A ``kind: Config`` YAML manifest, named explicitly or through the
   ``SERIALGUARD_CONFIG_PATH`` env var. Options live under ``spec``.
2. TOML: the ``[tool.serialguard]`` table of a ``pyproject.toml``, found in
   the working directory or one of its parents, or a standalone TOML file.

Middleware options sit at the top level of the section, logging options in a
nested ``logging`` table. Custom classifiers and enumerators are named by
import path, e.g. ``is_serializable = "myapp.serial:is_serializable"``.
String values may reference environment variables as ``${NAME}``.
"""

from __future__ import annotations

import os
import re
import tomllib
from collections.abc import Callable
from functools import lru_cache
from pathlib import Path
from typing import Any, get_args

import pydantic
import yaml

from serialguard.kernel.config.models import (
    LogFormatName,
    LoggingConfig,
    LogLevelName,
    SerialGuardConfig,
)
from serialguard.kernel.exceptions import ConfigurationError, ValidationError
from serialguard.kernel.logging import get_logger
from serialguard.kernel.middleware.models import MiddlewareConfig
from serialguard.kernel.resolver import resolve_callable

logger = get_logger(__name__)

PYPROJECT = "pyproject.toml"
SECTION = "serialguard"

_BOOLEAN_WORDS = {
    **dict.fromkeys(("true", "1", "yes", "on", "enabled"), True),
    **dict.fromkeys(("false", "0", "no", "off", "disabled"), False),
}


def _parse_bool_env(value: str) -> bool:
    """Read a boolean written the way people write them in shells.

    Raises
    ------
    ValueError
        If the word is not one of the recognized spellings
    """
    try:
        return _BOOLEAN_WORDS[value.strip().lower()]
    except KeyError:
        raise ValueError(
            f"Invalid boolean value: {value!r}. Expected one of: {sorted(_BOOLEAN_WORDS)}"
        ) from None


# option name -> (environment variable, converter)
_MIDDLEWARE_ENV: dict[str, tuple[str, Callable[[str], Any]]] = {
    "warn_after": ("SERIALGUARD_WARN_AFTER", float),
    "disable_cache": ("SERIALGUARD_DISABLE_CACHE", _parse_bool_env),
}
_LOGGING_ENV: dict[str, tuple[str, Callable[[str], Any]]] = {
    "level": ("SERIALGUARD_LOG_LEVEL", str.upper),
    "format": ("SERIALGUARD_LOG_FORMAT", str.lower),
    "output_file": ("SERIALGUARD_LOG_FILE", str),
}
_CALLABLE_OPTIONS = ("is_serializable", "get_entries")


def _apply_env_overrides(
    options: dict[str, Any], overrides: dict[str, tuple[str, Callable[[str], Any]]]
) -> dict[str, Any]:
    """Return ``options`` updated from the environment; unparsable values are skipped."""
    result = dict(options)
    for name, (variable, convert) in overrides.items():
        raw = os.getenv(variable)
        if not raw:
            continue
        try:
            result[name] = convert(raw)
        except ValueError:
            logger.warning("Ignoring invalid {}={!r}", variable, raw)
            continue
        logger.debug("{} overridden from {}: {!r}", name, variable, result[name])
    return result


@lru_cache(maxsize=32)
def _load_and_parse_cached(path_str: str) -> SerialGuardConfig:
    return ConfigLoader()._load_and_parse(Path(path_str))


class ConfigLoader:
    """Finds, reads and validates serialguard configuration files."""

    ENV_VAR_PATTERN = re.compile(r"\$\{([^}]+)\}")

    def load_config_file(self, path: str | Path | None = None) -> SerialGuardConfig:
        """Load the configuration at ``path``, or the discovered one.

        Results are cached per absolute path; see :func:`clear_config_cache`.

        Raises
        ------
        FileNotFoundError
            If ``path`` does not exist or nothing can be discovered
        ConfigurationError
            If the file cannot be parsed or holds invalid options
        """
        config_path = self._find_config_file(path)
        return _load_and_parse_cached(str(config_path.absolute()))

    def _load_and_parse(self, config_path: Path) -> SerialGuardConfig:
        logger.info("Loading configuration from {path}", path=config_path)
        if config_path.suffix in (".yaml", ".yml"):
            section = self._read_yaml_section(config_path)
        else:
            section = self._read_toml_section(config_path)
            if section is None:
                logger.warning("No [tool.serialguard] section in {}, using defaults", config_path)
                return get_default_config()
        return self._parse_config(self._substitute_env_vars(section), source=config_path.name)

    def _read_yaml_section(self, config_path: Path) -> dict[str, Any]:
        """Return the ``spec`` mapping of a ``kind: Config`` manifest."""
        try:
            data = yaml.safe_load(config_path.read_text(encoding="utf-8"))
        except yaml.YAMLError as e:
            raise ConfigurationError(config_path.name, f"invalid YAML: {e}") from e

        if not isinstance(data, dict):
            raise ConfigurationError(
                config_path.name, f"expected a mapping, got {type(data).__name__}"
            )
        if data.get("kind") != "Config":
            raise ConfigurationError(
                config_path.name,
                f"must use 'kind: Config' manifest format, got 'kind: {data.get('kind')}'",
            )

        section = data.get("spec") or {}
        if not isinstance(section, dict):
            raise ConfigurationError(config_path.name, "'spec' field must be a mapping")
        return section

    def _read_toml_section(self, config_path: Path) -> dict[str, Any] | None:
        """Return the serialguard table of a TOML file, or None if a pyproject lacks one."""
        try:
            data = tomllib.loads(config_path.read_text(encoding="utf-8"))
        except tomllib.TOMLDecodeError as e:
            raise ConfigurationError(config_path.name, f"invalid TOML: {e}") from e

        section = data.get("tool", {}).get(SECTION)
        if section is not None:
            return section
        if config_path.name == PYPROJECT:
            return None
        return data

    def _find_config_file(self, path: str | Path | None) -> Path:
        """Locate the configuration file.

        Lookup order: the ``path`` argument, ``SERIALGUARD_CONFIG_PATH``, a
        ``pyproject.toml`` in the working directory, then the nearest parent
        ``pyproject.toml`` that has a ``[tool.serialguard]`` table.

        Raises
        ------
        FileNotFoundError
            If no candidate exists
        """
        if path:
            explicit = Path(path)
            if not explicit.exists():
                raise FileNotFoundError(f"Configuration file not found: {explicit}")
            return explicit

        if env_path := os.getenv("SERIALGUARD_CONFIG_PATH"):
            from_env = Path(env_path)
            if from_env.exists():
                logger.debug("Using config from SERIALGUARD_CONFIG_PATH: {}", from_env)
                return from_env
            logger.warning("SERIALGUARD_CONFIG_PATH set but file not found: {}", from_env)

        local = Path(PYPROJECT)
        if local.exists():
            return local

        for directory in Path.cwd().parents:
            candidate = directory / PYPROJECT
            if candidate.exists() and _has_section(candidate):
                return candidate

        raise FileNotFoundError(
            "No configuration file found. Provide a kind: Config YAML path, "
            "set SERIALGUARD_CONFIG_PATH, or add [tool.serialguard] to pyproject.toml"
        )

    def _substitute_env_vars(self, data: Any) -> Any:
        """Replace ``${VAR}`` in every string; unknown variables stay as written."""
        if isinstance(data, dict):
            return {key: self._substitute_env_vars(value) for key, value in data.items()}
        if isinstance(data, list):
            return [self._substitute_env_vars(item) for item in data]
        if not isinstance(data, str):
            return data

        def lookup(match: re.Match[str]) -> str:
            value = os.environ.get(match.group(1))
            if value is None:
                logger.debug("Environment variable {} not set, keeping placeholder", match[0])
                return match.group(0)
            return value

        return self.ENV_VAR_PATTERN.sub(lookup, data)

    def _parse_config(self, data: dict[str, Any], source: str) -> SerialGuardConfig:
        logging_data = data.get("logging", {})
        if not isinstance(logging_data, dict):
            raise ConfigurationError(source, "'logging' must be a table")

        options = {key: value for key, value in data.items() if key != "logging"}
        return SerialGuardConfig(
            middleware=self._parse_middleware_config(options, source),
            logging=self._parse_logging_config(logging_data, source),
        )

    def _parse_middleware_config(self, options: dict[str, Any], source: str) -> MiddlewareConfig:
        """Build MiddlewareConfig from file options.

        ``SERIALGUARD_WARN_AFTER`` and ``SERIALGUARD_DISABLE_CACHE`` win over
        the file, then import paths of ``is_serializable`` / ``get_entries``
        are resolved.
        """
        options = _apply_env_overrides(options, _MIDDLEWARE_ENV)
        for name in _CALLABLE_OPTIONS:
            if isinstance(options.get(name), str):
                options[name] = resolve_callable(options[name])

        try:
            return MiddlewareConfig(**options)
        except (pydantic.ValidationError, ValidationError) as e:
            raise ConfigurationError(source, str(e)) from e

    def _parse_logging_config(self, logging_data: dict[str, Any], source: str) -> LoggingConfig:
        """Build LoggingConfig; ``SERIALGUARD_LOG_*`` variables win over the file."""
        settings = _apply_env_overrides(logging_data, _LOGGING_ENV)
        unknown = set(settings) - set(LoggingConfig.__dataclass_fields__)
        if unknown:
            raise ConfigurationError(source, f"unknown logging options: {sorted(unknown)}")
        for name, choices in (("level", LogLevelName), ("format", LogFormatName)):
            allowed = get_args(choices)
            if name in settings and settings[name] not in allowed:
                raise ConfigurationError(
                    source, f"logging {name} must be one of {list(allowed)}, got {settings[name]!r}"
                )
        return LoggingConfig(**settings)


def _has_section(pyproject: Path) -> bool:
    with pyproject.open("rb") as f:
        return SECTION in tomllib.load(f).get("tool", {})


def load_config(path: str | Path | None = None) -> SerialGuardConfig:
    """Load configuration, falling back to defaults when no file is found.

    Parameters
    ----------
    path : str | Path | None
        Configuration file, or None to discover one

    Returns
    -------
    SerialGuardConfig
        The loaded configuration, or the defaults
    """
    try:
        return ConfigLoader().load_config_file(path)
    except FileNotFoundError:
        logger.info("No configuration file found, using defaults")
        return get_default_config()


def clear_config_cache() -> None:
    """Forget cached configurations so the next load re-reads the files."""
    _load_and_parse_cached.cache_clear()


def get_default_config() -> SerialGuardConfig:
    """Return the built-in defaults."""
    return SerialGuardConfig()
