"""Reusable label pattern sets for label-based field mapping.

Within a set, more specific groups come before generic ones because the
first matching group wins.
"""
from .strategies.label import LabelPattern, LabelStrategy, create_label_strategy

CONTACT_INFO_PATTERNS: list[LabelPattern] = [
    LabelPattern(["first name", "given name", "fname"], "First Name"),
    LabelPattern(["last name", "family name", "surname", "lname"], "Last Name"),
    LabelPattern(["email", "email address", "e-mail"], "Email"),
    LabelPattern(["phone", "telephone", "mobile", "cell"], "Phone"),
]

ADDRESS_PATTERNS: list[LabelPattern] = [
    LabelPattern(["address line 2", "address2", "apt", "apartment", "suite"], "Address Line 2"),
    LabelPattern(["street", "address", "address line 1", "address1"], "Address"),
    LabelPattern(["city", "town", "locality"], "City"),
    LabelPattern(["state", "province", "region"], "State"),
    LabelPattern(["zip", "postal", "postcode", "zip code"], "Zip Code"),
    LabelPattern(["country", "nation"], "Country"),
]

WORK_EXPERIENCE_PATTERNS: list[LabelPattern] = [
    LabelPattern(["job title", "position", "title", "role"], "Current Job Title"),
    LabelPattern(["company", "employer", "organization"], "Current Company"),
    LabelPattern(["current location", "work location", "location"], "Current Location"),
    LabelPattern(["desired salary", "expected salary", "salary expectation"], "Desired Salary"),
    LabelPattern(["salary", "current salary", "compensation"], "Current Salary"),
]

APPLICATION_PATTERNS: list[LabelPattern] = [
    LabelPattern(["cover letter", "motivation letter"], "Cover Letter"),
    LabelPattern(["resume", "cv", "curriculum vitae"], "Resume"),
    LabelPattern(["linkedin", "linkedin profile"], "LinkedIn"),
    LabelPattern(["portfolio", "website", "personal website"], "Portfolio"),
    LabelPattern(["start date", "available", "availability"], "Available Start Date"),
    LabelPattern(["work authorization", "visa status", "eligibility"], "Work Authorization"),
]

ALL_LABEL_PATTERNS: dict[str, list[LabelPattern]] = {
    "CONTACT_INFO": CONTACT_INFO_PATTERNS,
    "ADDRESS": ADDRESS_PATTERNS,
    "WORK_EXPERIENCE": WORK_EXPERIENCE_PATTERNS,
    "APPLICATION": APPLICATION_PATTERNS,
}

COMPREHENSIVE_PATTERNS: list[LabelPattern] = [
    *CONTACT_INFO_PATTERNS,
    *ADDRESS_PATTERNS,
    *WORK_EXPERIENCE_PATTERNS,
    *APPLICATION_PATTERNS,
]


def create_contact_info_strategy(confidence: float = 0.8) -> LabelStrategy:
    return create_label_strategy(CONTACT_INFO_PATTERNS, confidence, strategy_id="label-contact-info")


def create_address_strategy(confidence: float = 0.8) -> LabelStrategy:
    return create_label_strategy(ADDRESS_PATTERNS, confidence, strategy_id="label-address")


def create_work_experience_strategy(confidence: float = 0.8) -> LabelStrategy:
    return create_label_strategy(
        WORK_EXPERIENCE_PATTERNS, confidence, strategy_id="label-work-experience"
    )


def create_application_strategy(confidence: float = 0.8) -> LabelStrategy:
    return create_label_strategy(APPLICATION_PATTERNS, confidence, strategy_id="label-application")


def create_comprehensive_label_strategy(confidence: float = 0.8) -> LabelStrategy:
    return create_label_strategy(
        COMPREHENSIVE_PATTERNS, confidence, strategy_id="label-comprehensive"
    )
