"""Core exception hierarchy for serialguard.

Only configuration problems are raised as exceptions. Serializability
violations are reported as diagnostics and never interrupt a dispatch.
All serialguard exceptions inherit from SerialGuardError for easy handling.
"""

from __future__ import annotations

# ============================================================================
# Base Exception
# ============================================================================


class SerialGuardError(Exception):
    """Base exception for all serialguard errors.

    Catch this to handle every error raised by the package itself. Errors
    raised by caller-supplied classifiers or enumerators are never wrapped.
    """

    pass


# ============================================================================
# Configuration & Validation Errors
# ============================================================================


class ConfigurationError(SerialGuardError):
    """Raised when a configuration source is invalid or unreadable.

    Examples
    --------
    Example usage::

        raise ConfigurationError("serialguard.yaml", "expected 'kind: Config'")
    """

    def __init__(self, component: str, reason: str) -> None:
        """Initialize configuration error.

        Args
        ----
            component: Name of the component or file with invalid configuration
            reason: Explanation of what's wrong
        """
        super().__init__(f"Configuration error in '{component}': {reason}")
        self.component = component
        self.reason = reason


class ValidationError(SerialGuardError):
    """Raised when a configuration value fails validation.

    Examples
    --------
    Example usage::

        raise ValidationError("warn_after", "must be non-negative", value=-1)
    """

    def __init__(self, field: str, constraint: str, value: object = None) -> None:
        """Initialize validation error.

        Args
        ----
            field: Name of the field that failed validation
            constraint: Description of the validation constraint
            value: The invalid value (optional)
        """
        if value is not None:
            msg = f"Validation failed for '{field}': {constraint} (got {value!r})"
        else:
            msg = f"Validation failed for '{field}': {constraint}"
        super().__init__(msg)
        self.field = field
        self.constraint = constraint
        self.value = value


class ResolveError(SerialGuardError):
    """Raised when a dotted path to a callable cannot be resolved."""

    def __init__(self, path: str, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Cannot resolve '{path}': {reason}")
