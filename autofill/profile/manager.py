"""User profile models and profile-key helpers."""
import logging
from collections import Counter
from pathlib import Path
from typing import Literal, Optional, Union

import yaml
from pydantic import BaseModel, ConfigDict, model_validator
from pydantic.alias_generators import to_camel

from ..core.errors import ConfigError, DuplicateProfileKeyError

logger = logging.getLogger(__name__)

ProfileFieldType = Literal["personal", "work", "custom", "eeo", "workExperience"]

# Alternative form labels for canonical profile keys
PROFILE_SYNONYMS: dict[str, list[str]] = {
    "First Name": ["Given Name", "Forename", "First", "fname"],
    "Last Name": ["Surname", "Family Name", "Last", "lname"],
    "Email": ["Email Address", "E-mail", "Contact Email", "Primary Email"],
    "Phone": ["Phone Number", "Telephone", "Mobile", "Contact Number"],
    "Address": ["Street Address", "Home Address", "Mailing Address"],
    "City": ["Town", "Municipality", "Locality"],
    "State": ["Province", "Region", "Territory"],
    "Country": ["Nation", "Nationality"],
    "Zip Code": ["Postal Code", "ZIP", "Post Code"],
}


class WorkExperience(BaseModel):
    """One work history entry."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    title: str = ""
    company: str = ""
    location: str = ""
    start_date: str = ""
    end_date: str = ""
    description: str = ""


class ProfileField(BaseModel):
    """A labelled profile value. The label is the profile key."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    label: str
    value: Union[str, list[WorkExperience]] = ""
    type: ProfileFieldType = "custom"
    is_sensitive: bool = False


class UserProfile(BaseModel):
    """Ordered profile fields with unique labels."""

    fields: list[ProfileField] = []

    @model_validator(mode="after")
    def _reject_duplicate_labels(self) -> "UserProfile":
        counts = Counter(f.label for f in self.fields)
        duplicates = [label for label, count in counts.items() if count > 1]
        if duplicates:
            raise DuplicateProfileKeyError(duplicates)
        return self

    def __len__(self) -> int:
        return len(self.fields)

    def get(self, label: str) -> Optional[ProfileField]:
        """Return the profile field with this label."""
        for field in self.fields:
            if field.label == label:
                return field
        return None

    def keys(self) -> list[str]:
        """Profile keys, including work experience sub-field keys."""
        keys: list[str] = []
        for field in self.fields:
            keys.append(field.label)
            if field.type == "workExperience" and isinstance(field.value, list) and field.value:
                for sub_key in WorkExperience.model_fields:
                    keys.append(f"{field.label}.{to_camel(sub_key)}")
        return keys

    def is_sensitive(self, profile_key: str) -> bool:
        """Sensitivity of a key; work experience sub-keys inherit it from their parent."""
        field = self.get(profile_key)
        if field is None and "." in profile_key:
            parent = self.get(profile_key.split(".", 1)[0])
            if parent and parent.type == "workExperience":
                field = parent
        return field.is_sensitive if field else False

    def key_type(self, profile_key: str) -> Optional[str]:
        """Field type for a key; work experience sub-keys report workExperienceField."""
        if "." in profile_key:
            parent = self.get(profile_key.split(".", 1)[0])
            if parent and parent.type == "workExperience":
                return "workExperienceField"
            return None
        field = self.get(profile_key)
        return field.type if field else None

    def validate_keys(self, keys: list[str]) -> tuple[list[str], list[str]]:
        """Split keys into those present in the profile and those that are not."""
        known = set(self.keys())
        valid = [k for k in keys if k in known]
        invalid = [k for k in keys if k not in known]
        return valid, invalid

    def work_experience_field(self) -> Optional[ProfileField]:
        """First work experience field holding a list of entries."""
        for field in self.fields:
            if field.type == "workExperience" and isinstance(field.value, list):
                return field
        return None


def find_canonical_profile_key(form_label: str, profile_keys: list[str]) -> Optional[str]:
    """Find the profile key a form label refers to, directly or by synonym."""
    normalized = form_label.lower().strip()
    if not normalized:
        return None

    for key in profile_keys:
        if key.lower() == normalized:
            return key

    for canonical_key, synonyms in PROFILE_SYNONYMS.items():
        if canonical_key not in profile_keys:
            continue
        if any(s.lower() == normalized for s in synonyms):
            return canonical_key

    return None


def load_profile(path: Path) -> UserProfile:
    """Load profile from YAML file.

    The file holds either a list of profile fields or a mapping with a
    ``fields`` list.

    Args:
        path: Path to the profile YAML file.

    Returns:
        UserProfile instance with loaded data.

    Raises:
        ConfigError: If the file is missing or malformed.
        pydantic.ValidationError: If fields are invalid or labels repeat.
    """
    logger.info(f"Loading profile from {path}")
    if not path.exists():
        raise ConfigError(f"Profile file not found: {path}")

    with open(path, encoding="utf-8") as f:
        data = yaml.safe_load(f) or []

    if isinstance(data, list):
        data = {"fields": data}
    if not isinstance(data, dict):
        raise ConfigError(f"Profile file must contain a list or mapping: {path}")

    profile = UserProfile(**data)
    logger.info(f"Loaded {len(profile)} profile fields")
    return profile
