"""Read-only access to the internal contact/job store."""

import json
import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Union

from ..errors import StoreQueryError
from ..models.record import InternalContact, InternalJob

logger = logging.getLogger(__name__)


class InternalStore(ABC):
    """
    Organization-scoped lookups against already-imported records.

    The contract is read-only. Each lookup takes the whole candidate set for
    one heuristic so a dry run costs a fixed number of round trips rather
    than one per sampled record. Results are ordered by internal id.
    """

    @abstractmethod
    def find_contacts_by_email(self, org_id: str, emails: Iterable[str]) -> List[InternalContact]:
        """Contacts whose email equals any of ``emails`` (case-insensitive)."""
        pass

    @abstractmethod
    def find_contacts_by_phone(self, org_id: str, phone_fragments: Iterable[str]) -> List[InternalContact]:
        """Contacts whose stored phone contains any of ``phone_fragments``."""
        pass

    @abstractmethod
    def find_jobs_by_address(self, org_id: str, address_fragments: Iterable[str]) -> List[InternalJob]:
        """Jobs whose property address contains any of ``address_fragments`` (case-sensitive)."""
        pass


class InMemoryStore(InternalStore):
    """InternalStore over per-organization lists held in memory."""

    def __init__(
        self,
        contacts: Optional[Dict[str, List[InternalContact]]] = None,
        jobs: Optional[Dict[str, List[InternalJob]]] = None
    ):
        self._contacts = {org: sorted(items, key=_sort_key) for org, items in (contacts or {}).items()}
        self._jobs = {org: sorted(items, key=_sort_key) for org, items in (jobs or {}).items()}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "InMemoryStore":
        """
        Build from ``{"organizations": {org_id: {"contacts": [...], "jobs": [...]}}}``.
        """
        contacts: Dict[str, List[InternalContact]] = {}
        jobs: Dict[str, List[InternalJob]] = {}
        for org_id, org_data in (data.get("organizations") or {}).items():
            contacts[org_id] = [InternalContact.from_dict(org_id, c) for c in org_data.get("contacts", [])]
            jobs[org_id] = [InternalJob.from_dict(org_id, j) for j in org_data.get("jobs", [])]
        return cls(contacts=contacts, jobs=jobs)

    @classmethod
    def from_json_file(cls, path: Union[str, Path]) -> "InMemoryStore":
        """Load store contents from a JSON file."""
        try:
            with open(path) as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            raise StoreQueryError(f"Could not load internal store from {path}: {e}") from e
        store = cls.from_dict(data)
        logger.info(f"Loaded internal store from {path} ({len(store._contacts)} organizations)")
        return store

    def find_contacts_by_email(self, org_id: str, emails: Iterable[str]) -> List[InternalContact]:
        wanted = {e.lower() for e in emails if e}
        if not wanted:
            return []
        return [
            c for c in self._contacts.get(org_id, [])
            if c.email and c.email.lower() in wanted
        ]

    def find_contacts_by_phone(self, org_id: str, phone_fragments: Iterable[str]) -> List[InternalContact]:
        fragments = [p for p in phone_fragments if p]
        if not fragments:
            return []
        return [
            c for c in self._contacts.get(org_id, [])
            if c.phone and any(f in c.phone for f in fragments)
        ]

    def find_jobs_by_address(self, org_id: str, address_fragments: Iterable[str]) -> List[InternalJob]:
        fragments = [a for a in address_fragments if a]
        if not fragments:
            return []
        return [
            j for j in self._jobs.get(org_id, [])
            if j.property_address and any(f in j.property_address for f in fragments)
        ]


def _sort_key(item: Union[InternalContact, InternalJob]):
    return item.id
