"""Composable field mapping strategies."""
from .attribute import (
    COMMON_AUTOCOMPLETE_MAPPINGS,
    COMMON_NAME_MAPPINGS,
    AttributeStrategy,
    AttributeStrategyConfig,
    build_attribute_index,
    create_aria_label_strategy,
    create_autocomplete_strategy,
    create_automation_id_strategy,
    create_id_strategy,
    create_name_strategy,
    create_placeholder_strategy,
)
from .base import (
    ExecutionOutcome,
    MappingStrategy,
    StrategyContext,
    StrategyResult,
    create_field_mapping,
    execute_parallel,
    execute_waterfall,
    normalize_text,
    run_strategy,
)
from .custom import (
    CustomMappingFunction,
    CustomStrategy,
    CustomStrategyConfig,
    create_css_class_strategy,
    create_custom_strategy,
    create_dropdown_strategy,
    create_file_upload_strategy,
    create_textarea_strategy,
)
from .factory import StrategySpec, build_strategies, build_strategy, validate_strategy_spec
from .label import LabelPattern, LabelStrategy, LabelStrategyConfig, create_label_strategy

__all__ = [
    "AttributeStrategy",
    "AttributeStrategyConfig",
    "COMMON_AUTOCOMPLETE_MAPPINGS",
    "COMMON_NAME_MAPPINGS",
    "CustomMappingFunction",
    "CustomStrategy",
    "CustomStrategyConfig",
    "ExecutionOutcome",
    "LabelPattern",
    "LabelStrategy",
    "LabelStrategyConfig",
    "MappingStrategy",
    "StrategyContext",
    "StrategyResult",
    "StrategySpec",
    "build_attribute_index",
    "build_strategies",
    "build_strategy",
    "create_aria_label_strategy",
    "create_autocomplete_strategy",
    "create_automation_id_strategy",
    "create_css_class_strategy",
    "create_custom_strategy",
    "create_dropdown_strategy",
    "create_field_mapping",
    "create_file_upload_strategy",
    "create_id_strategy",
    "create_label_strategy",
    "create_name_strategy",
    "create_placeholder_strategy",
    "create_textarea_strategy",
    "execute_parallel",
    "execute_waterfall",
    "normalize_text",
    "run_strategy",
    "validate_strategy_spec",
]
