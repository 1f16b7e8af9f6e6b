"""Lever ATS adapter."""
import logging

from ...mapping.models import FieldMapping
from ..base_handler import BaseAdapter, MappingBuilder, label_contains
from ..detector import VENDOR_DOMAIN_PATTERNS, ATSType, matches_domain_pattern
from ..label_patterns import APPLICATION_PATTERNS, CONTACT_INFO_PATTERNS
from ..strategies import create_field_mapping

logger = logging.getLogger(__name__)


class LeverAdapter(BaseAdapter):
    """Adapter for Lever application forms.

    Lever posts a single ``name`` field for the full name and collects
    links as ``urls[<Site>]``.
    """

    ATS_NAME = "Lever"
    VENDOR = "LEVER"
    DOMAINS = ("lever.co", "jobs.lever.co")
    PRIORITY = 90
    MIN_CONFIDENCE = 0.4

    NAME_FIELDS: dict[str, str] = {
        "name": "Full Name",
        "email": "Email",
        "phone": "Phone",
        "org": "Current Company",
        "location": "Current Location",
        "urls[linkedin]": "LinkedIn",
        "urls[github]": "GitHub",
        "urls[portfolio]": "Portfolio",
        "urls[other]": "Website",
        "comments": "Cover Letter",
        "resume": "Resume",
    }

    def can_handle(self, url: str) -> bool:
        if super().can_handle(url):
            return True
        return matches_domain_pattern(url, VENDOR_DOMAIN_PATTERNS[ATSType.LEVER])

    def compose(self, builder: MappingBuilder) -> MappingBuilder:
        return (
            builder
            .match_by_attribute("name", self.NAME_FIELDS, self.confidence("NAME_ATTRIBUTE"), "exact")
            .match_by_label(
                [*CONTACT_INFO_PATTERNS, *APPLICATION_PATTERNS], self.confidence("ENHANCED_LABELS")
            )
            .add_custom_mapping(self._map_lever_fields, "Lever Fields", self.confidence("TEXTAREA"))
        )

    def _map_lever_fields(self, schema, profile_keys, claimed, params) -> list[FieldMapping]:
        """Resume uploads and the free-text comments box."""
        mappings = []
        for i, field in enumerate(schema.fields):
            if i in claimed:
                continue
            if field.attributes.type == "file" and "Resume" in profile_keys:
                mappings.append(create_field_mapping(
                    field, i, "Resume", self.confidence("FILE_UPLOAD"),
                    "Lever file input detected as resume upload",
                ))
            elif (
                field.element_type == "textarea"
                and "Cover Letter" in profile_keys
                and (
                    "comments" in (field.attributes.name or "")
                    or label_contains(field.label, ["additional information", "cover"])
                )
            ):
                mappings.append(create_field_mapping(
                    field, i, "Cover Letter", self.confidence("TEXTAREA"),
                    "Lever comments textarea detected as cover letter",
                ))
        return mappings
