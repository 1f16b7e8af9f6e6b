"""Greenhouse ATS adapter.

Greenhouse labels inputs with ``aria-label`` and uses snake_case names
such as ``first_name``.
"""
import logging

from ...mapping.models import FieldMapping
from ..base_handler import BaseAdapter, MappingBuilder, label_contains
from ..detector import parse_url
from ..strategies import create_field_mapping

logger = logging.getLogger(__name__)


class GreenhouseAdapter(BaseAdapter):
    """Adapter for Greenhouse application forms."""

    ATS_NAME = "Greenhouse"
    VENDOR = "GREENHOUSE"
    DOMAINS = ("greenhouse.io", "boards.greenhouse.io")
    PRIORITY = 100
    MIN_CONFIDENCE = 0.4

    ARIA_LABEL_FIELDS: dict[str, str] = {
        "first name": "First Name",
        "last name": "Last Name",
        "email": "Email",
        "email address": "Email",
        "phone": "Phone",
        "phone number": "Phone",
        "cover letter": "Cover Letter",
        "resume": "Resume",
        "linkedin": "LinkedIn",
        "portfolio": "Portfolio",
        "website": "Website",
    }

    NAME_FIELDS: dict[str, str] = {
        "first_name": "First Name",
        "last_name": "Last Name",
        "email": "Email",
        "phone": "Phone",
        "phone_number": "Phone",
        "cover_letter": "Cover Letter",
        "resume": "Resume",
        "linkedin_url": "LinkedIn",
        "website": "Website",
        "portfolio": "Portfolio",
    }

    TEXTAREA_CLASSES = (".textarea-field", ".form-field")

    def can_handle(self, url: str) -> bool:
        if super().can_handle(url):
            return True
        parts = parse_url(url)
        if parts is None:
            return False
        return "/jobs/" in parts.path and "greenhouse" in parts.hostname.lower()

    def compose(self, builder: MappingBuilder) -> MappingBuilder:
        return (
            builder
            .match_by_attribute("aria-label", self.ARIA_LABEL_FIELDS, self.confidence("ARIA_LABEL"), "exact")
            .match_by_attribute("name", self.NAME_FIELDS, self.confidence("NAME_ATTRIBUTE"), "exact")
            .add_custom_mapping(self._map_greenhouse_fields, "Greenhouse Fields", self.confidence("TEXTAREA"))
        )

    def _is_cover_letter(self, field) -> bool:
        return (
            any(c in field.selector for c in self.TEXTAREA_CLASSES)
            or "cover" in (field.attributes.name or "")
            or label_contains(field.label, ["cover"])
        )

    def _map_greenhouse_fields(self, schema, profile_keys, claimed, params) -> list[FieldMapping]:
        """Textareas, file uploads and URL inputs."""
        mappings = []
        for i, field in enumerate(schema.fields):
            if i in claimed:
                continue

            if field.element_type == "textarea" and "Cover Letter" in profile_keys:
                if self._is_cover_letter(field):
                    mappings.append(create_field_mapping(
                        field, i, "Cover Letter", self.confidence("TEXTAREA"),
                        "Greenhouse textarea detected as cover letter field",
                    ))
                    continue

            if field.attributes.type == "file" and "Resume" in profile_keys:
                mappings.append(create_field_mapping(
                    field, i, "Resume", self.confidence("FILE_UPLOAD"),
                    "File input detected as resume upload",
                ))
                continue

            if field.attributes.type == "url":
                if label_contains(field.label, ["linkedin"]) and "LinkedIn" in profile_keys:
                    mappings.append(create_field_mapping(
                        field, i, "LinkedIn", self.confidence("URL_FIELD"),
                        "URL field detected as LinkedIn profile",
                    ))
                elif label_contains(field.label, ["portfolio", "website"]) and "Portfolio" in profile_keys:
                    mappings.append(create_field_mapping(
                        field, i, "Portfolio", self.confidence("PORTFOLIO_URL"),
                        "URL field detected as portfolio/website",
                    ))
        return mappings
