"""Process-wide internal store used by the API."""

import logging
from functools import lru_cache

from ..config import get_settings
from ..services.store import InMemoryStore, InternalStore

logger = logging.getLogger(__name__)


@lru_cache(maxsize=1)
def get_store() -> InternalStore:
    """Internal store seeded from CRM_MIGRATION_STORE_PATH, or empty."""
    settings = get_settings()
    if settings.store_path:
        return InMemoryStore.from_json_file(settings.store_path)
    logger.warning("No internal store configured; duplicate detection will find nothing")
    return InMemoryStore()
