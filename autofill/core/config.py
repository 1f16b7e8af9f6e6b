"""Engine configuration using pydantic-settings."""
from pathlib import Path

import yaml
from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from .errors import ConfigError


class HeuristicWeights(BaseModel):
    """Relative weights of the heuristic scoring signals."""

    exact_match: float = Field(default=1.0, ge=0)
    partial_match: float = Field(default=0.6, ge=0)
    autocomplete_match: float = Field(default=0.9, ge=0)
    name_attribute_match: float = Field(default=0.8, ge=0)
    id_attribute_match: float = Field(default=0.7, ge=0)
    type_bonus: float = Field(default=0.2, ge=0)
    synonym_bonus: float = Field(default=0.8, ge=0)


class ConfidenceThresholds(BaseModel):
    """Bucket boundaries used for heuristic statistics."""

    high: float = Field(default=0.8, ge=0, le=1)
    medium: float = Field(default=0.5, ge=0, le=1)
    low: float = Field(default=0.3, ge=0, le=1)


class HeuristicMapperConfig(BaseModel):
    """Tier 2 heuristic mapper options."""

    min_confidence: float = Field(default=0.4, ge=0, le=1)
    max_mappings_per_field: int = Field(default=1, ge=1)
    enable_work_experience: bool = True
    enable_address_decomposition: bool = True
    enable_repeatable_sections: bool = False
    confidence_thresholds: ConfidenceThresholds = ConfidenceThresholds()


class ThresholdConfig(BaseModel):
    """Sufficiency and filtering thresholds for the mapping engine."""

    vendor_adapter_min_success: float = Field(default=0.8, ge=0, le=1)
    heuristic_min_success: float = Field(default=0.7, ge=0, le=1)
    overall_min_confidence: float = Field(default=0.3, ge=0, le=1)


class PerformanceConfig(BaseModel):
    """Time budget and tier scheduling."""

    max_mapping_time: float = Field(default=5000, ge=0)
    enable_parallel_tiers: bool = False


class MappingEngineConfig(BaseModel):
    """Top-level mapping engine options."""

    enable_vendor_adapters: bool = True
    enable_heuristic_mapping: bool = True
    enable_llm_fallback: bool = False
    heuristic: HeuristicMapperConfig = HeuristicMapperConfig()
    weights: HeuristicWeights = HeuristicWeights()
    thresholds: ThresholdConfig = ThresholdConfig()
    performance: PerformanceConfig = PerformanceConfig()


class Settings(BaseSettings):
    """Application settings loaded from YAML or environment."""

    model_config = SettingsConfigDict(
        env_prefix="AUTOFILL_", env_nested_delimiter="__"
    )

    log_level: str = "INFO"
    mapping: MappingEngineConfig = MappingEngineConfig()

    @classmethod
    def from_yaml(cls, path: Path) -> "Settings":
        """Load settings from a YAML file.

        Args:
            path: Path to the YAML configuration file.

        Returns:
            Settings instance with loaded configuration.

        Raises:
            ConfigError: If the file is missing or is not a YAML mapping.
        """
        if not path.exists():
            raise ConfigError(f"Settings file not found: {path}")
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
        if not isinstance(data, dict):
            raise ConfigError(f"Settings file must contain a mapping: {path}")
        return cls(**data)
