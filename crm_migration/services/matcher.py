"""Duplicate detection of external records against the internal store."""

import re
import logging
from typing import Callable, Dict, List, Optional, Sequence, TypeVar

from .store import InternalStore
from ..errors import StoreQueryError
from ..models.record import (
    CanonicalContact,
    CanonicalJob,
    InternalContact,
    InternalJob,
    RecordType,
)
from ..models.dry_run import DuplicateMatch, MatchType, MatchAction

logger = logging.getLogger(__name__)

# Leading slice of the sample checked against the store
CONTACT_MATCH_LIMIT = 50
JOB_MATCH_LIMIT = 30

MIN_PHONE_DIGITS = 10
MIN_ADDRESS_LENGTH = 5
ADDRESS_PREFIX_LENGTH = 20
UNKNOWN_INTERNAL_NAME = "Unknown"

T = TypeVar("T", InternalContact, InternalJob)


def normalize_phone(phone: Optional[str]) -> str:
    """Strip everything but digits."""
    return re.sub(r"\D", "", phone or "")


def phone_fragment(phone: Optional[str]) -> Optional[str]:
    """Last 10 digits of a phone number, or None if it has fewer than 10."""
    digits = normalize_phone(phone)
    if len(digits) < MIN_PHONE_DIGITS:
        return None
    return digits[-MIN_PHONE_DIGITS:]


def address_fragment(address: Optional[str]) -> Optional[str]:
    """Leading slice of an address used for containment matching."""
    if not isinstance(address, str) or len(address) <= MIN_ADDRESS_LENGTH:
        return None
    return address[:ADDRESS_PREFIX_LENGTH]


def _first_match(candidates: Sequence[T], predicate: Callable[[T], bool]) -> Optional[T]:
    """Lowest-id candidate satisfying predicate."""
    hits = [c for c in candidates if predicate(c)]
    if not hits:
        return None
    return min(hits, key=lambda c: c.id)


class DuplicateMatcher:
    """
    Finds external records that already exist internally.

    Contacts are matched by email, then by phone; the first hit wins and
    yields action "update". Jobs are matched by address and yield action
    "skip". Each external record produces at most one match.
    """

    def __init__(
        self,
        store: InternalStore,
        org_id: str,
        contact_limit: int = CONTACT_MATCH_LIMIT,
        job_limit: int = JOB_MATCH_LIMIT
    ):
        self.store = store
        self.org_id = org_id
        self.contact_limit = contact_limit
        self.job_limit = job_limit

    def match_contacts(self, contacts: Sequence[CanonicalContact]) -> List[DuplicateMatch]:
        """Match the bounded contact prefix by email, then phone."""
        subset = list(contacts[:self.contact_limit])
        if not subset:
            return []

        emails = sorted({c.email.lower() for c in subset if c.email})
        email_candidates = (
            self._lookup(self.store.find_contacts_by_email, emails) if emails else []
        )

        found: Dict[int, DuplicateMatch] = {}
        for idx, contact in enumerate(subset):
            if not contact.email:
                continue
            wanted = contact.email.lower()
            existing = _first_match(
                email_candidates,
                lambda c: bool(c.email) and c.email.lower() == wanted,
            )
            if existing:
                found[idx] = self._contact_match(contact, existing, MatchType.EMAIL)

        # Phone is only consulted for contacts without an email match
        pending = {
            idx: phone_fragment(contact.phone)
            for idx, contact in enumerate(subset)
            if idx not in found
        }
        fragments = sorted({f for f in pending.values() if f})
        phone_candidates = (
            self._lookup(self.store.find_contacts_by_phone, fragments) if fragments else []
        )

        for idx, fragment in pending.items():
            if not fragment:
                continue
            existing = _first_match(
                phone_candidates,
                lambda c: bool(c.phone) and fragment in c.phone,
            )
            if existing:
                found[idx] = self._contact_match(subset[idx], existing, MatchType.PHONE)

        matches = [found[idx] for idx in sorted(found)]
        logger.info(
            f"Contact duplicates: {len(matches)} of {len(subset)} checked "
            f"({sum(1 for m in matches if m.match_type == MatchType.EMAIL)} by email)"
        )
        return matches

    def match_jobs(self, jobs: Sequence[CanonicalJob]) -> List[DuplicateMatch]:
        """Match the bounded job prefix by property address."""
        subset = list(jobs[:self.job_limit])
        fragments_by_idx = {idx: address_fragment(job.address) for idx, job in enumerate(subset)}
        fragments = sorted({f for f in fragments_by_idx.values() if f})
        if not fragments:
            return []

        candidates = self._lookup(self.store.find_jobs_by_address, fragments)

        matches = []
        for idx, job in enumerate(subset):
            fragment = fragments_by_idx[idx]
            if not fragment:
                continue
            existing = _first_match(
                candidates,
                lambda j: bool(j.property_address) and fragment in j.property_address,
            )
            if existing:
                matches.append(DuplicateMatch(
                    type=RecordType.JOB,
                    external_id=job.external_id,
                    external_name=job.name,
                    matched_internal_id=existing.id,
                    matched_internal_name=existing.property_address or UNKNOWN_INTERNAL_NAME,
                    match_type=MatchType.ADDRESS,
                    action=MatchAction.SKIP,
                ))

        logger.info(f"Job duplicates: {len(matches)} of {len(subset)} checked")
        return matches

    def _contact_match(
        self,
        contact: CanonicalContact,
        existing: InternalContact,
        match_type: MatchType
    ) -> DuplicateMatch:
        return DuplicateMatch(
            type=RecordType.CONTACT,
            external_id=contact.external_id,
            external_name=contact.name,
            matched_internal_id=existing.id,
            matched_internal_name=existing.name or UNKNOWN_INTERNAL_NAME,
            match_type=match_type,
            action=MatchAction.UPDATE,
        )

    def _lookup(self, query: Callable, values: List[str]) -> list:
        """Run one batched store query, surfacing failures as StoreQueryError."""
        try:
            return list(query(self.org_id, values))
        except StoreQueryError:
            raise
        except Exception as e:
            logger.error(f"Internal store lookup {getattr(query, '__name__', query)} failed: {e}")
            raise StoreQueryError(f"Internal store query failed: {e}") from e
