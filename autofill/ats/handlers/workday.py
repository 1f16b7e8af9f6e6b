"""Workday ATS adapter.

Workday forms identify fields with ``data-automation-id`` and wrap inputs
in ``.wd-input`` / ``.wd-select`` containers.
"""
import logging
import re

from ...mapping.models import FieldMapping
from ..base_handler import BaseAdapter, MappingBuilder
from ..detector import parse_url
from ..strategies import create_field_mapping, normalize_text

logger = logging.getLogger(__name__)


class WorkdayAdapter(BaseAdapter):
    """Adapter for Workday application forms."""

    ATS_NAME = "Workday"
    VENDOR = "WORKDAY"
    DOMAINS = ("workday.com", "myworkday.com")
    PRIORITY = 100
    MIN_CONFIDENCE = 0.3

    AUTOMATION_ID_FIELDS: dict[str, str] = {
        "firstName": "First Name",
        "lastname": "Last Name",
        "email": "Email",
        "emailaddress": "Email",
        "phone": "Phone",
        "phonenumber": "Phone",
        "address": "Address",
        "streetaddress": "Address",
        "city": "City",
        "state": "State",
        "country": "Country",
        "zipcode": "Zip Code",
        "postalcode": "Zip Code",
        "location": "Current Location",
        "currentlocation": "Current Location",
        "workauthorization": "Work Authorization",
        "jobtitle": "Current Job Title",
        "company": "Current Company",
        "salary": "Current Salary",
        "desiredsalary": "Desired Salary",
        "startdate": "Available Start Date",
        "availabilitydate": "Available Start Date",
    }

    NAME_FIELDS: dict[str, str] = {
        "fname": "First Name",
        "lname": "Last Name",
        "email": "Email",
        "phone": "Phone",
        "address1": "Address",
        "city": "City",
        "state": "State",
        "zip": "Zip Code",
        "country": "Country",
    }

    # Workday's own wording, tried in order
    LABEL_PATTERNS: list[tuple[tuple[str, ...], str]] = [
        (("given name", "first name"), "First Name"),
        (("family name", "last name", "surname"), "Last Name"),
        (("email address", "contact email"), "Email"),
        (("telephone", "phone number", "mobile"), "Phone"),
        (("street address", "address line"), "Address"),
        (("current location", "work location"), "Current Location"),
        (("postal code", "zip code"), "Zip Code"),
    ]

    WIDGET_CLASSES = (".wd-input", ".wd-select")
    LOCATION_OPTION_HINTS = ("united states", "canada", "location")

    TENANT_PATTERNS = [
        re.compile(r"\.myworkday\.com$"),
        re.compile(r"\w+-\w+\.workday\.com$"),
    ]
    TENANT_PATHS = ("/jobs/", "/requisition/", "/career")

    def can_handle(self, url: str) -> bool:
        if super().can_handle(url):
            return True
        parts = parse_url(url)
        if parts is None:
            return False
        hostname = parts.hostname.lower()
        if any(p.search(hostname) for p in self.TENANT_PATTERNS):
            return True
        return "workday" in hostname and any(p in parts.path for p in self.TENANT_PATHS)

    def compose(self, builder: MappingBuilder) -> MappingBuilder:
        return (
            builder
            .match_by_attribute(
                "data-automation-id", self.AUTOMATION_ID_FIELDS,
                self.confidence("AUTOMATION_ID"), "contains",
            )
            .match_by_attribute("name", self.NAME_FIELDS, self.confidence("NAME_ATTRIBUTE"), "contains")
            .add_custom_mapping(
                self._map_workday_fields, "Workday Fields", self.confidence("ENHANCED_LABELS")
            )
        )

    def _map_workday_fields(self, schema, profile_keys, claimed, params) -> list[FieldMapping]:
        """Widget-specific inputs first, then Workday label wording."""
        mappings = []
        for i, field in enumerate(schema.fields):
            if i in claimed:
                continue

            if any(c in field.selector for c in self.WIDGET_CLASSES):
                if field.attributes.type == "file" and "Resume" in profile_keys:
                    mappings.append(create_field_mapping(
                        field, i, "Resume", self.confidence("FILE_UPLOAD"),
                        "Workday file input detected as resume upload",
                    ))
                    continue

                if field.element_type == "select" and field.options and "Current Location" in profile_keys:
                    texts = [o.text.lower() for o in field.options]
                    if any(hint in t for t in texts for hint in self.LOCATION_OPTION_HINTS):
                        mappings.append(create_field_mapping(
                            field, i, "Current Location", self.confidence("LOCATION_DROPDOWN"),
                            "Workday select with location options detected",
                        ))
                        continue

            label = normalize_text(field.label)
            for patterns, profile_key in self.LABEL_PATTERNS:
                if profile_key in profile_keys and any(p in label for p in patterns):
                    mappings.append(create_field_mapping(
                        field, i, profile_key, self.confidence("ENHANCED_LABELS"),
                        f"Workday enhanced label match: \"{field.label}\" -> {profile_key}",
                    ))
                    break
        return mappings
