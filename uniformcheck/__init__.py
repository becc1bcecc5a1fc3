"""Uniformity checker for bounded random integer generators."""

from .app import CommandOutcome, UniformityCheckerApp
from .generator import RangeConfig, SeededGenerator
from .validation import StatisticalValidator, ValidationResult

__all__ = [
    "CommandOutcome",
    "RangeConfig",
    "SeededGenerator",
    "StatisticalValidator",
    "UniformityCheckerApp",
    "ValidationResult",
]
