"""JobNimbus source adapter."""

import json
import logging
from typing import Any, Dict, List, Tuple

from .base import BaseSourceAdapter
from ..services.normalizer import FieldProfile

logger = logging.getLogger(__name__)


class JobNimbusAdapter(BaseSourceAdapter):
    """
    Adapter for the JobNimbus public API.

    Lists are paged with ``size``/``from`` (a record offset) and come back
    as ``{"count": <total>, "results": [...]}``. Records are keyed by
    ``jnid`` and use snake_case names.
    """

    service = "jobnimbus"
    display_name = "JobNimbus"
    DOCUMENT_MULTIPLIER = 2

    FIELD_PROFILE = FieldProfile(
        id_fields=("id", "jnid"),
        first_name_field="first_name",
        last_name_field="last_name",
        email_fields=("email",),
        phone_fields=("phone", "mobile_phone", "home_phone"),
        contact_address_paths=("address_line1",),
        job_name_fields=("name", "title"),
        job_status_fields=("status", "status_name"),
        job_address_paths=("address.line1", "address_line1", "address"),
    )

    def _build_params(self, page: int, page_size: int) -> Dict[str, Any]:
        params: Dict[str, Any] = {
            "size": page_size,
            "from": (page - 1) * page_size,
        }
        date_filter = self._build_date_filter()
        if date_filter:
            params["filter"] = date_filter
        return params

    def _build_date_filter(self) -> str:
        """Elasticsearch-style range filter on date_created (epoch seconds)."""
        if not self.date_filter or self.date_filter.is_empty:
            return ""
        bounds = {}
        if self.date_filter.after:
            bounds["gte"] = int(self.date_filter.after.timestamp())
        if self.date_filter.before:
            bounds["lte"] = int(self.date_filter.before.timestamp())
        return json.dumps({"must": [{"range": {"date_created": bounds}}]})

    def _parse_response(self, payload: Any) -> Tuple[List[Dict[str, Any]], int]:
        items = payload.get("results")
        if items is None:
            raise KeyError("results")
        if not isinstance(items, list):
            raise TypeError("results is not a list")
        return items, int(payload.get("count", len(items)))
