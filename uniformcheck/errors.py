"""Custom exceptions for the uniformity checker."""

from __future__ import annotations


class UniformCheckError(Exception):
    """Base error type for application specific failures."""


class MissingFileError(UniformCheckError):
    """Raised when a required configuration file could not be located."""


class ConfigurationError(UniformCheckError):
    """Raised when a range or configuration value is invalid."""


class GeneratorUnavailableError(UniformCheckError):
    """Raised when sampling is requested without a generator to draw from."""


class RangeViolationAnomaly(UniformCheckError):
    """Raised in strict sampling mode when a draw falls outside the range."""

    def __init__(self, value: int, minimum: int, maximum: int) -> None:
        super().__init__(
            f"Generated value {value} outside expected range {minimum}-{maximum}"
        )
        self.value = value
        self.minimum = minimum
        self.maximum = maximum
