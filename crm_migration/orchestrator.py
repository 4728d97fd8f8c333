"""Dry-run orchestrator - previews a migration without writing anything."""

import math
import logging
from datetime import datetime
from typing import Callable, List, Optional

from .config import Settings
from .errors import InvalidRequestError, MissingCredentialsError
from .extractors import BaseSourceAdapter, create_adapter
from .models.record import CanonicalContact, CanonicalJob, RecordType
from .models.dry_run import (
    MigrationSource,
    DryRunOptions,
    DryRunResult,
    DryRunSummary,
    DuplicateMatch,
    ValidationError,
    MIN_SAMPLE_SIZE,
    MAX_SAMPLE_SIZE,
    MAX_DUPLICATES_RETURNED,
    MAX_VALIDATION_ERRORS_RETURNED,
)
from .services.store import InternalStore
from .services.matcher import DuplicateMatcher, CONTACT_MATCH_LIMIT, JOB_MATCH_LIMIT
from .services.validator import FieldValidator
from .services.mapping import SampleMappingBuilder

logger = logging.getLogger(__name__)

# Recommendation thresholds
HIGH_DUPLICATE_PERCENT = 20
LARGE_CONTACT_COUNT = 5000
MANY_VALIDATION_ERRORS = 10
MANY_DOCUMENTS = 1000

# Import throughput used for the duration estimate (records per minute)
CONTACTS_PER_MINUTE = 100
JOBS_PER_MINUTE = 50


def estimate_duration(total_contacts: int, total_jobs: int) -> str:
    """Human-readable import duration estimate."""
    minutes = math.ceil(total_contacts / CONTACTS_PER_MINUTE + total_jobs / JOBS_PER_MINUTE)
    if minutes < 60:
        return f"{minutes} minutes"
    return f"{math.ceil(minutes / 60)} hours"


def duplicate_rate(duplicates: int, sampled: int) -> float:
    """Duplicates as a percentage of sampled records."""
    return duplicates * 100 / max(sampled, 1)


def build_recommendations(
    duplicates: int,
    sampled: int,
    total_contacts: int,
    validation_errors: int,
    total_documents: int
) -> List[str]:
    """Advisories triggered independently by fixed thresholds."""
    recommendations = []

    rate = duplicate_rate(duplicates, sampled)
    if rate > HIGH_DUPLICATE_PERCENT:
        # Halves round up
        shown = math.floor(rate + 0.5)
        recommendations.append(
            f"High duplicate rate ({shown}%). Consider cleaning up existing data "
            f"first or using \"update\" mode."
        )

    if total_contacts > LARGE_CONTACT_COUNT:
        recommendations.append("Large contact list. Consider importing in batches by date range.")

    if validation_errors > MANY_VALIDATION_ERRORS:
        recommendations.append(
            f"{validation_errors} records have validation issues. Review before importing."
        )

    if total_documents > MANY_DOCUMENTS:
        recommendations.append(
            "Many documents to import. Document migration may take significant time."
        )

    return recommendations


class DryRunOrchestrator:
    """
    Runs one dry run as a linear pipeline.

    Steps:
    - Fetch one page of contacts and jobs from the source adapter
    - Normalize them to canonical records
    - Match a bounded prefix against the internal store
    - Validate contacts
    - Build sample mappings
    - Aggregate totals, recommendations and a duration estimate

    Any failure aborts the run; there is no partial result. The internal
    store is only ever queried.
    """

    def __init__(
        self,
        adapter: BaseSourceAdapter,
        store: InternalStore,
        org_id: str,
        source: MigrationSource,
        options: Optional[DryRunOptions] = None
    ):
        """
        Initialize the orchestrator.

        Args:
            adapter: Source adapter holding the caller's credentials
            store: Read-only internal store
            org_id: Organization the dry run is scoped to
            source: Source system being previewed
            options: Request options (defaults apply when omitted)
        """
        self.adapter = adapter
        self.store = store
        self.org_id = org_id
        self.source = source
        self.options = options or DryRunOptions()
        self.matcher = DuplicateMatcher(store, org_id)
        self.validator = FieldValidator()
        self.mapping_builder = SampleMappingBuilder(org_id, source)

    def run(self) -> DryRunResult:
        """Run the dry run and return the assembled result."""
        started_at = datetime.utcnow()
        options = self.options
        self._check_sample_size(options.sample_size)

        logger.info(
            f"Starting {self.source.value} dry run for org {self.org_id} "
            f"(sample size {options.sample_size})"
        )

        total_contacts = 0
        total_jobs = 0
        total_documents = 0
        contacts: List[CanonicalContact] = []
        jobs: List[CanonicalJob] = []

        if not options.skip_contacts:
            page = self.adapter.get_contacts(1, options.sample_size)
            total_contacts = page.total_count
            contacts = [self.adapter.normalize_contact(r) for r in page.records]

        if not options.skip_jobs:
            page = self.adapter.get_jobs(1, options.sample_size)
            total_jobs = page.total_count
            jobs = [self.adapter.normalize_job(r) for r in page.records]
            total_documents = total_jobs * self.adapter.DOCUMENT_MULTIPLIER

        contact_subset = contacts[:CONTACT_MATCH_LIMIT]
        job_subset = jobs[:JOB_MATCH_LIMIT]

        duplicates: List[DuplicateMatch] = []
        duplicates.extend(self.matcher.match_contacts(contact_subset))
        duplicates.extend(self.matcher.match_jobs(job_subset))

        validation_errors: List[ValidationError] = self.validator.validate_contacts(contact_subset)
        validation_errors.extend(self.validator.validate_jobs(job_subset))

        sample_mappings = self.mapping_builder.build(contact_subset, job_subset)

        contact_dups = sum(1 for d in duplicates if d.type == RecordType.CONTACT)
        job_dups = sum(1 for d in duplicates if d.type == RecordType.JOB)

        summary = DryRunSummary(
            total_records=total_contacts + total_jobs,
            contacts_to_import=total_contacts - contact_dups,
            jobs_to_import=total_jobs - job_dups,
            documents_to_import=0 if options.skip_documents else total_documents,
            duplicates_found=len(duplicates),
            validation_errors=len(validation_errors),
        )

        result = DryRunResult(
            source=self.source,
            summary=summary,
            duplicates=duplicates[:MAX_DUPLICATES_RETURNED],
            validation_errors=validation_errors[:MAX_VALIDATION_ERRORS_RETURNED],
            sample_mappings=sample_mappings,
            estimated_duration=estimate_duration(total_contacts, total_jobs),
            recommendations=build_recommendations(
                duplicates=len(duplicates),
                sampled=len(contacts) + len(jobs),
                total_contacts=total_contacts,
                validation_errors=len(validation_errors),
                total_documents=total_documents,
            ),
        )

        elapsed = (datetime.utcnow() - started_at).total_seconds()
        logger.info(
            f"Dry run complete in {elapsed:.2f}s: {summary.total_records} records, "
            f"{summary.duplicates_found} duplicates, {summary.validation_errors} validation errors"
        )
        return result

    @staticmethod
    def _check_sample_size(sample_size: int) -> None:
        if not MIN_SAMPLE_SIZE <= sample_size <= MAX_SAMPLE_SIZE:
            raise InvalidRequestError(
                f"sampleSize must be between {MIN_SAMPLE_SIZE} and {MAX_SAMPLE_SIZE}",
                details={"sampleSize": sample_size},
            )


def run_dry_run(
    source: MigrationSource,
    org_id: str,
    store: InternalStore,
    api_key: Optional[str] = None,
    access_token: Optional[str] = None,
    options: Optional[DryRunOptions] = None,
    settings: Optional[Settings] = None,
    adapter_factory: Callable[..., BaseSourceAdapter] = create_adapter
) -> DryRunResult:
    """
    Validate inputs, build the source adapter and run one dry run.

    Raises:
        MissingCredentialsError: If neither credential is supplied
        InvalidRequestError: If the options are out of range
        UpstreamError: If the source CRM fails
        StoreQueryError: If an internal store lookup fails
    """
    credential = api_key or access_token
    if not credential:
        raise MissingCredentialsError()

    options = options or DryRunOptions()
    options.validate()

    adapter = adapter_factory(
        source,
        credential,
        settings=settings,
        date_filter=options.date_filter,
    )
    try:
        return DryRunOrchestrator(adapter, store, org_id, source, options).run()
    finally:
        adapter.close()
