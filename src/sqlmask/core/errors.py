#!/usr/bin/env python3
"""
Error Taxonomy
Usage errors, configuration errors and resource errors raised by sqlmask.
"""


class SqlMaskError(Exception):
    """Base class for all sqlmask errors."""


class UnsupportedDialectError(SqlMaskError, ValueError):
    """Raised when a database type has no registered dialect."""

    def __init__(self, db_type: str):
        super().__init__(f"Unsupported database type: {db_type}")
        self.db_type = db_type


class UnsupportedObfuscationMethodError(SqlMaskError, ValueError):
    """Raised for an obfuscation method code or name that is not recognised."""

    def __init__(self, method):
        super().__init__(f"Invalid obfuscation method: {method!r}")
        self.method = method


class InvalidRuleError(SqlMaskError, ValueError):
    """Raised when an obfuscation rule carries unusable parameters."""


class BinaryValueError(SqlMaskError, TypeError):
    """Raised when a binary column receives a value that is neither bytes nor str."""

    def __init__(self, value):
        super().__init__(
            f"Binary types require bytes or str data, got {type(value).__name__}"
        )
        self.value = value


class RandomSourceUnavailableError(SqlMaskError, RuntimeError):
    """Raised when no cryptographically strong random source is available."""


class ConfigurationError(SqlMaskError, ValueError):
    """Raised when a configuration file or environment is invalid."""
