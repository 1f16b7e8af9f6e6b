"""Registry of vendor adapters."""
import logging
from typing import Optional

from .base_handler import BaseAdapter
from .handlers import GreenhouseAdapter, LeverAdapter, WorkdayAdapter

logger = logging.getLogger(__name__)


# Highest priority first; ties keep registration order
VENDOR_ADAPTERS: list[BaseAdapter] = sorted(
    [GreenhouseAdapter(), WorkdayAdapter(), LeverAdapter()],
    key=lambda adapter: adapter.PRIORITY,
    reverse=True,
)


def select_adapter(url: str, adapters: Optional[list[BaseAdapter]] = None) -> Optional[BaseAdapter]:
    """First adapter, by priority, that can handle the URL."""
    for adapter in adapters if adapters is not None else VENDOR_ADAPTERS:
        if adapter.can_handle(url):
            logger.info(f"Using {adapter.ATS_NAME} adapter")
            return adapter

    logger.info("No vendor adapter available - will use heuristic mapping")
    return None


def get_all_compatible_adapters(url: str) -> list[BaseAdapter]:
    return [a for a in VENDOR_ADAPTERS if a.can_handle(url)]
