"""Shared fixtures for mapping tests."""
from typing import Any, Callable, Optional

import pytest

from autofill.extractor.models import (
    ExtractedFormSchema,
    FormFieldAttributes,
    FormFieldSchema,
    SelectOption,
)
from autofill.profile.manager import ProfileField, UserProfile, WorkExperience

WORKDAY_URL = "https://acme.wd5.myworkday.com/en-US/careers/job/apply"
GREENHOUSE_URL = "https://boards.greenhouse.io/acme/jobs/12345"
LEVER_URL = "https://jobs.lever.co/acme/1234-abcd/apply"
GENERIC_URL = "https://careers.example.com/apply"


def build_field(
    idx: int,
    label: str = "",
    element_type: str = "input",
    selector: str = "",
    options: Optional[list[str]] = None,
    **attributes: Any,
) -> FormFieldSchema:
    """Field factory; attributes use field names such as data_automation_id."""
    return FormFieldSchema(
        idx=idx,
        label=label,
        element_type=element_type,
        selector=selector or f"#field-{idx}",
        attributes=FormFieldAttributes(**attributes),
        options=[SelectOption(value=o, text=o) for o in options] if options else None,
    )


def build_schema(fields: list[FormFieldSchema], url: str = GENERIC_URL) -> ExtractedFormSchema:
    return ExtractedFormSchema(fields=fields, url=url)


@pytest.fixture
def make_field() -> Callable[..., FormFieldSchema]:
    return build_field


@pytest.fixture
def make_schema() -> Callable[..., ExtractedFormSchema]:
    return build_schema


@pytest.fixture
def profile() -> UserProfile:
    return UserProfile(fields=[
        ProfileField(label="First Name", value="Jane", type="personal"),
        ProfileField(label="Last Name", value="Doe", type="personal"),
        ProfileField(label="Email", value="jane@example.com", type="personal"),
        ProfileField(label="Phone", value="555-0100", type="personal"),
        ProfileField(label="Address", value="1 Main St", type="personal"),
        ProfileField(label="City", value="Springfield", type="personal"),
        ProfileField(label="State", value="IL", type="personal"),
        ProfileField(label="Zip Code", value="62701", type="personal"),
        ProfileField(label="Country", value="United States", type="personal"),
        ProfileField(label="LinkedIn", value="https://linkedin.com/in/jane", type="work"),
        ProfileField(label="Resume", value="/docs/resume.pdf", type="work"),
        ProfileField(label="Cover Letter", value="Dear hiring team", type="work"),
        ProfileField(label="Gender", value="Female", type="eeo", is_sensitive=True),
    ])


@pytest.fixture
def work_profile() -> UserProfile:
    return UserProfile(fields=[
        ProfileField(label="Email", value="jane@example.com", type="personal"),
        ProfileField(
            label="Work Experience",
            type="workExperience",
            value=[WorkExperience(title="Engineer", company="Acme", start_date="2020-01")],
        ),
    ])
