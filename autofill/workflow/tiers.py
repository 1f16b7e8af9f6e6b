"""Contract for pluggable mapping tiers consulted after the heuristic tier."""
from typing import Optional, Protocol, runtime_checkable

from ..extractor.models import ExtractedFormSchema
from ..mapping.models import MappingResult
from ..profile.manager import UserProfile


@runtime_checkable
class MappingTier(Protocol):
    """A late mapping tier, such as a language-model backed mapper.

    ``previous`` is the best result produced so far. Returned mappings are
    merged with it, highest confidence per field winning.
    """

    def map_fields(
        self,
        form_schema: ExtractedFormSchema,
        profile: UserProfile,
        previous: Optional[MappingResult] = None,
    ) -> MappingResult: ...
