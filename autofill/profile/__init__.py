"""User profile models and helpers."""
from .manager import (
    PROFILE_SYNONYMS,
    ProfileField,
    UserProfile,
    WorkExperience,
    find_canonical_profile_key,
    load_profile,
)

__all__ = [
    "PROFILE_SYNONYMS",
    "ProfileField",
    "UserProfile",
    "WorkExperience",
    "find_canonical_profile_key",
    "load_profile",
]
