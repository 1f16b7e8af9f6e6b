"""Form schema models consumed by the mapping engine."""
from .models import ExtractedFormSchema, FormFieldAttributes, FormFieldSchema, SelectOption

__all__ = ["ExtractedFormSchema", "FormFieldAttributes", "FormFieldSchema", "SelectOption"]
