"""Sample external -> internal field mappings for human review."""

from typing import Any, Dict, List, Optional, Sequence

from .normalizer import UNKNOWN_NAME
from ..models.record import CanonicalContact, CanonicalJob, RecordType
from ..models.dry_run import MigrationSource, SampleMapping

MAX_CONTACT_MAPPINGS = 5
MAX_JOB_MAPPINGS = 3

GENERATED_ID = "(will be generated)"
UNKNOWN_CONTACT = "Unknown Contact"
DEFAULT_JOB_STATUS = "NEW"

# Keys are lowercase external status strings
JOB_STATUS_MAP: Dict[str, str] = {
    "lead": "NEW",
    "new": "NEW",
    "open": "IN_PROGRESS",
    "in progress": "IN_PROGRESS",
    "working": "IN_PROGRESS",
    "pending": "PENDING",
    "closed": "COMPLETED",
    "won": "COMPLETED",
    "completed": "COMPLETED",
    "lost": "CANCELLED",
    "cancelled": "CANCELLED",
}


def map_job_status(external_status: Optional[str]) -> str:
    """Translate an external job status; unknown or missing values map to NEW."""
    return JOB_STATUS_MAP.get((external_status or "").lower(), DEFAULT_JOB_STATUS)


class SampleMappingBuilder:
    """Renders a handful of records the way the importer would create them."""

    def __init__(
        self,
        org_id: str,
        source: MigrationSource,
        max_contacts: int = MAX_CONTACT_MAPPINGS,
        max_jobs: int = MAX_JOB_MAPPINGS
    ):
        self.org_id = org_id
        self.source = source
        self.max_contacts = max_contacts
        self.max_jobs = max_jobs

    def build(
        self,
        contacts: Sequence[CanonicalContact],
        jobs: Sequence[CanonicalJob]
    ) -> List[SampleMapping]:
        """Contact mappings first, then job mappings."""
        mappings = [self.contact_mapping(c) for c in contacts[:self.max_contacts]]
        mappings.extend(self.job_mapping(j) for j in jobs[:self.max_jobs])
        return mappings

    def contact_mapping(self, contact: CanonicalContact) -> SampleMapping:
        external: Dict[str, Any] = {
            "id": contact.external_id,
            "name": contact.name,
            "email": contact.email,
            "phone": contact.phone,
        }
        internal: Dict[str, Any] = {
            "id": GENERATED_ID,
            "org_id": self.org_id,
            "name": contact.name if contact.name and contact.name != UNKNOWN_NAME else UNKNOWN_CONTACT,
            "email": contact.email or None,
            "phone": contact.phone or None,
            "source": self.source.value,
            "external_id": contact.external_id,
        }
        return SampleMapping(type=RecordType.CONTACT, external=external, internal=internal)

    def job_mapping(self, job: CanonicalJob) -> SampleMapping:
        external: Dict[str, Any] = {
            "id": job.external_id,
            "name": job.name,
            "status": job.status,
            "address": job.address,
        }
        internal: Dict[str, Any] = {
            "id": GENERATED_ID,
            "org_id": self.org_id,
            "name": job.name,
            "property_address": job.address or None,
            "status": map_job_status(job.status),
            "external_id": job.external_id,
        }
        return SampleMapping(type=RecordType.JOB, external=external, internal=internal)
