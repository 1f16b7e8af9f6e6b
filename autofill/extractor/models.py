"""Data models for form schemas produced by the DOM extractor."""
from typing import Any, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

LabelSource = Literal[
    "for-attribute",
    "wrapping-label",
    "aria-label",
    "aria-labelledby",
    "placeholder",
    "geometric-proximity",
    "fallback",
]
ElementType = Literal["input", "select", "textarea"]


class FormFieldAttributes(BaseModel):
    """HTML attributes captured for a form element.

    Hyphenated attributes are exposed with underscores and accept their HTML
    names as input. Unknown attributes are kept as extras.
    """

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    name: Optional[str] = None
    id: Optional[str] = None
    type: Optional[str] = None
    placeholder: Optional[str] = None
    required: Optional[bool] = None
    autocomplete: Optional[str] = None
    aria_label: Optional[str] = Field(default=None, alias="aria-label")
    aria_labelledby: Optional[str] = Field(default=None, alias="aria-labelledby")
    data_automation_id: Optional[str] = Field(
        default=None, alias="data-automation-id"
    )

    def get(self, attribute: str) -> Optional[str]:
        """Return a string attribute by its HTML name, or None."""
        key = attribute.replace("-", "_")
        value: Any = None
        if key in type(self).model_fields:
            value = getattr(self, key)
        elif self.model_extra:
            value = self.model_extra.get(attribute, self.model_extra.get(key))
        return value if isinstance(value, str) else None


class SelectOption(BaseModel):
    """One choice of a select element."""

    value: str
    text: str


class FormFieldSchema(BaseModel):
    """A single form field extracted from the page."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    idx: int
    label: str = ""
    label_source: LabelSource = "fallback"
    label_confidence: float = 0.0
    selector: str = ""
    fallback_selectors: list[str] = []
    element_type: ElementType = "input"
    attributes: FormFieldAttributes = FormFieldAttributes()
    options: Optional[list[SelectOption]] = None


class ExtractedFormSchema(BaseModel):
    """Ordered form fields from one page snapshot."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    fields: list[FormFieldSchema] = []
    url: str = ""
    timestamp: float = 0
    extraction_source: Literal["manual", "mutation-observer"] = "manual"

    def subset(self, indices: list[int]) -> "ExtractedFormSchema":
        """Build a sub-schema of the given fields, re-indexed from zero."""
        fields = [
            self.fields[i].model_copy(update={"idx": position})
            for position, i in enumerate(indices)
        ]
        return self.model_copy(update={"fields": fields})
