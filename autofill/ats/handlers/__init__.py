"""Vendor adapters."""
from .greenhouse import GreenhouseAdapter
from .lever import LeverAdapter
from .workday import WorkdayAdapter

__all__ = [
    "GreenhouseAdapter",
    "LeverAdapter",
    "WorkdayAdapter",
]
