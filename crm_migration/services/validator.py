"""Field completeness validation for canonical records."""

import logging
from typing import List, Sequence

from .normalizer import is_usable_name
from ..models.record import CanonicalContact, CanonicalJob, RecordType
from ..models.dry_run import ValidationError

logger = logging.getLogger(__name__)

INVALID_CONTACT_NAME = "Missing or invalid contact name"


class FieldValidator:
    """
    Validator for canonical records before import.

    Contacts need a usable name. Jobs are currently not checked for name or
    address completeness.
    """

    def validate_contact(self, contact: CanonicalContact) -> List[ValidationError]:
        """Validate a single contact."""
        errors = []

        if not is_usable_name(contact.name):
            errors.append(ValidationError(
                type=RecordType.CONTACT,
                external_id=contact.external_id,
                field="name",
                error=INVALID_CONTACT_NAME,
                value=contact.name if contact.raw_name is None else contact.raw_name,
            ))

        return errors

    def validate_job(self, job: CanonicalJob) -> List[ValidationError]:
        """Jobs carry no completeness rules yet."""
        return []

    def validate_contacts(self, contacts: Sequence[CanonicalContact]) -> List[ValidationError]:
        """Validate a batch of contacts."""
        errors = []
        for contact in contacts:
            errors.extend(self.validate_contact(contact))

        if errors:
            logger.info(f"{len(errors)} of {len(contacts)} contacts failed validation")
        return errors

    def validate_jobs(self, jobs: Sequence[CanonicalJob]) -> List[ValidationError]:
        """Validate a batch of jobs."""
        errors = []
        for job in jobs:
            errors.extend(self.validate_job(job))
        return errors
