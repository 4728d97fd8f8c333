"""Normalization of provider-specific records into canonical contacts and jobs."""

import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple

from ..models.record import ExternalRecord, CanonicalContact, CanonicalJob

logger = logging.getLogger(__name__)

UNKNOWN_NAME = "Unknown"
UNTITLED_JOB = "Untitled Job"
MIN_NAME_LENGTH = 2


@dataclass(frozen=True)
class FieldProfile:
    """
    Where a provider keeps each canonical field.

    Paths use dot notation and are tried in order; the first non-empty
    value wins. Job address paths list nested street-style paths before
    flat strings.
    """
    id_fields: Tuple[str, ...] = ("id",)
    first_name_field: str = "first_name"
    last_name_field: str = "last_name"
    email_fields: Tuple[str, ...] = ("email",)
    phone_fields: Tuple[str, ...] = ("phone",)
    contact_address_paths: Tuple[str, ...] = ()
    job_name_fields: Tuple[str, ...] = ("name", "title")
    job_status_fields: Tuple[str, ...] = ("status",)
    job_address_paths: Tuple[str, ...] = ("address.street", "address")


def is_usable_name(name: Optional[str]) -> bool:
    """False for names an importer could not use (blank, sentinel, too short)."""
    if not name:
        return False
    return name != UNKNOWN_NAME and len(name) >= MIN_NAME_LENGTH


def _clean(value: Any) -> Optional[str]:
    """Coerce scalars to a stripped string; blanks and containers become None."""
    if value is None or isinstance(value, (dict, list, bool)):
        return None
    text = str(value).strip()
    return text or None


class RecordNormalizer:
    """Converts ExternalRecords into CanonicalContact / CanonicalJob."""

    def __init__(self, profile: FieldProfile):
        self.profile = profile

    def resolve_id(self, data: Dict[str, Any]) -> Optional[str]:
        """Find the provider-assigned id in a raw payload."""
        for key in self.profile.id_fields:
            value = _clean(data.get(key))
            if value:
                return value
        return None

    def _first(self, record: ExternalRecord, paths: Tuple[str, ...]) -> Optional[str]:
        for path in paths:
            value = _clean(record.get_field(path))
            if value:
                return value
        return None

    def contact_name(self, record: ExternalRecord) -> str:
        """Join first/last name; missing parts collapse to an empty string."""
        first = _clean(record.data.get(self.profile.first_name_field)) or ""
        last = _clean(record.data.get(self.profile.last_name_field)) or ""
        return f"{first} {last}".strip()

    def normalize_contact(self, record: ExternalRecord) -> CanonicalContact:
        name = self.contact_name(record)
        return CanonicalContact(
            external_id=record.id,
            name=name or UNKNOWN_NAME,
            email=self._first(record, self.profile.email_fields),
            phone=self._first(record, self.profile.phone_fields),
            address=self._first(record, self.profile.contact_address_paths),
            raw=record,
            raw_name=name,
        )

    def normalize_job(self, record: ExternalRecord) -> CanonicalJob:
        # A nested "address" object is discarded by _clean; only strings count
        return CanonicalJob(
            external_id=record.id,
            name=self._first(record, self.profile.job_name_fields) or UNTITLED_JOB,
            status=self._first(record, self.profile.job_status_fields),
            address=self._first(record, self.profile.job_address_paths),
            raw=record,
        )
