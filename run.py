"""CLI entry point: map an extracted form schema onto a user profile."""
import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Optional

from pydantic import ValidationError

from autofill.core.config import Settings
from autofill.core.errors import AutofillError
from autofill.core.logging import setup_logging
from autofill.extractor.models import ExtractedFormSchema
from autofill.profile.manager import load_profile
from autofill.workflow.engine import MappingEngine


def main(argv: Optional[list[str]] = None) -> int:
    """Map form fields and print the result as JSON."""
    parser = argparse.ArgumentParser(
        description="Map extracted job application form fields to profile keys"
    )
    parser.add_argument(
        "schema",
        help="Path to the extracted form schema JSON file"
    )
    parser.add_argument(
        "--profile", "-p",
        default="config/profile.yaml",
        help="Path to profile YAML file"
    )
    parser.add_argument(
        "--config", "-c",
        default="config/settings.yaml",
        help="Path to settings YAML file"
    )
    parser.add_argument(
        "--url",
        help="Page URL (overrides the schema's url)"
    )
    parser.add_argument(
        "--debug", "-d",
        action="store_true",
        help="Enable debug logging"
    )

    args = parser.parse_args(argv)
    logger = logging.getLogger(__name__)

    try:
        config_path = Path(args.config)
        settings = Settings.from_yaml(config_path) if config_path.exists() else Settings()
        # stdout carries the JSON result
        setup_logging("DEBUG" if args.debug else settings.log_level, sys.stderr)

        profile = load_profile(Path(args.profile))
        schema = ExtractedFormSchema.model_validate_json(
            Path(args.schema).read_text(encoding="utf-8")
        )
    except (AutofillError, ValidationError, OSError) as e:
        setup_logging("INFO", sys.stderr)
        logger.error(f"Failed to load inputs: {e}")
        return 1

    if len(profile) == 0:
        logger.error("No user profile configured")
        return 1
    if args.url:
        schema = schema.model_copy(update={"url": args.url})

    engine = MappingEngine(settings.mapping)
    result = engine.map_form_fields(schema, profile)

    print(json.dumps(result.to_dict(), indent=2))
    logger.info(
        f"Mapped {len(result.mappings)}/{len(schema.fields)} fields "
        f"using {result.source.value}"
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
