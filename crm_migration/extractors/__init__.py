"""Source adapters for external CRMs."""

from typing import Dict, Optional, Type

from .base import BaseSourceAdapter, PageResult
from .jobnimbus import JobNimbusAdapter
from .acculynx import AccuLynxAdapter
from ..config import Settings, get_settings
from ..models.dry_run import DateFilter, MigrationSource

ADAPTERS: Dict[MigrationSource, Type[BaseSourceAdapter]] = {
    MigrationSource.JOBNIMBUS: JobNimbusAdapter,
    MigrationSource.ACCULYNX: AccuLynxAdapter,
}


def create_adapter(
    source: MigrationSource,
    credential: str,
    settings: Optional[Settings] = None,
    date_filter: Optional[DateFilter] = None,
) -> BaseSourceAdapter:
    """Create the adapter for a source using configured base URLs and timeouts."""
    settings = settings or get_settings()
    base_urls = {
        MigrationSource.JOBNIMBUS: settings.jobnimbus_base_url,
        MigrationSource.ACCULYNX: settings.acculynx_base_url,
    }
    return ADAPTERS[source](
        credential,
        base_url=base_urls[source],
        timeout=settings.http_timeout,
        date_filter=date_filter,
    )


__all__ = [
    "BaseSourceAdapter",
    "PageResult",
    "JobNimbusAdapter",
    "AccuLynxAdapter",
    "ADAPTERS",
    "create_adapter",
]
