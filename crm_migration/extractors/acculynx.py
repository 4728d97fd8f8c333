"""AccuLynx source adapter."""

import logging
from typing import Any, Dict, List, Tuple

from .base import BaseSourceAdapter
from ..services.normalizer import FieldProfile

logger = logging.getLogger(__name__)


class AccuLynxAdapter(BaseSourceAdapter):
    """
    Adapter for the AccuLynx v2 API.

    Lists are paged with ``pageSize``/``pageStartIndex`` and come back as
    ``{"count": <total>, "items": [...]}``. Names are camelCase and job
    addresses are nested objects.
    """

    service = "acculynx"
    display_name = "AccuLynx"
    DOCUMENT_MULTIPLIER = 3

    FIELD_PROFILE = FieldProfile(
        id_fields=("id",),
        first_name_field="firstName",
        last_name_field="lastName",
        email_fields=("email", "emailAddress"),
        phone_fields=("phone", "mobilePhone"),
        contact_address_paths=("address.street",),
        job_name_fields=("name", "title", "jobName"),
        job_status_fields=("status",),
        job_address_paths=("address.street", "address"),
    )

    def _build_params(self, page: int, page_size: int) -> Dict[str, Any]:
        params: Dict[str, Any] = {
            "pageSize": page_size,
            "pageStartIndex": (page - 1) * page_size,
        }
        if self.date_filter and self.date_filter.after:
            params["createdStartDate"] = self.date_filter.after.date().isoformat()
        if self.date_filter and self.date_filter.before:
            params["createdEndDate"] = self.date_filter.before.date().isoformat()
        return params

    def _parse_response(self, payload: Any) -> Tuple[List[Dict[str, Any]], int]:
        # Some list endpoints return a bare array instead of the envelope
        if isinstance(payload, list):
            return payload, len(payload)
        items = payload.get("items")
        if items is None:
            raise KeyError("items")
        if not isinstance(items, list):
            raise TypeError("items is not a list")
        return items, int(payload.get("count", len(items)))
