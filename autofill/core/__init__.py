"""Core utilities: configuration, errors and logging."""
from .config import (
    ConfidenceThresholds,
    HeuristicMapperConfig,
    HeuristicWeights,
    MappingEngineConfig,
    PerformanceConfig,
    Settings,
    ThresholdConfig,
)
from .errors import AutofillError, ConfigError, DuplicateProfileKeyError
from .logging import setup_logging

__all__ = [
    "AutofillError",
    "ConfigError",
    "ConfidenceThresholds",
    "DuplicateProfileKeyError",
    "HeuristicMapperConfig",
    "HeuristicWeights",
    "MappingEngineConfig",
    "PerformanceConfig",
    "Settings",
    "ThresholdConfig",
    "setup_logging",
]
