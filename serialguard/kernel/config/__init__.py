"""Configuration models and loading."""

from serialguard.kernel.config.loader import clear_config_cache, load_config
from serialguard.kernel.config.models import LoggingConfig, SerialGuardConfig

__all__ = ["LoggingConfig", "SerialGuardConfig", "clear_config_cache", "load_config"]
