"""Dry-run request and result models."""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional
from enum import Enum
from datetime import datetime, timezone

from dateutil import parser as date_parser

from .record import RecordType
from ..errors import InvalidRequestError, UnsupportedSourceError

MIN_SAMPLE_SIZE = 10
MAX_SAMPLE_SIZE = 500
DEFAULT_SAMPLE_SIZE = 100

# Response payload limits; summary counts are never clipped
MAX_DUPLICATES_RETURNED = 20
MAX_VALIDATION_ERRORS_RETURNED = 20


class MigrationSource(str, Enum):
    """External CRMs a dry run can read from."""
    JOBNIMBUS = "JOBNIMBUS"
    ACCULYNX = "ACCULYNX"

    @classmethod
    def parse(cls, value: str) -> "MigrationSource":
        """Resolve a source identifier case-insensitively."""
        try:
            return cls((value or "").strip().upper())
        except ValueError:
            raise UnsupportedSourceError(value)


class MatchType(str, Enum):
    """Heuristic that produced a duplicate match."""
    EMAIL = "email"
    PHONE = "phone"
    ADDRESS = "address"
    NAME = "name"


class MatchAction(str, Enum):
    """What the importer would do with a matched record."""
    UPDATE = "update"
    SKIP = "skip"


@dataclass
class DuplicateMatch:
    """An external record that already exists in the internal store."""
    type: RecordType
    external_id: str
    external_name: str
    matched_internal_id: str
    matched_internal_name: str
    match_type: MatchType
    action: MatchAction

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary representation."""
        return {
            "type": self.type.value,
            "externalId": self.external_id,
            "externalName": self.external_name,
            "matchedInternalId": self.matched_internal_id,
            "matchedInternalName": self.matched_internal_name,
            "matchType": self.match_type.value,
            "action": self.action.value,
        }


@dataclass
class ValidationError:
    """A field problem found on a canonical record."""
    type: RecordType
    external_id: str
    field: str
    error: str
    value: Optional[Any] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary representation."""
        return {
            "type": self.type.value,
            "externalId": self.external_id,
            "field": self.field,
            "error": self.error,
            "value": self.value,
        }


@dataclass
class SampleMapping:
    """An illustrative external -> internal field mapping."""
    type: RecordType
    external: Dict[str, Any]
    internal: Dict[str, Any]

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary representation."""
        return {
            "type": self.type.value,
            "external": self.external,
            "internal": self.internal,
        }


def parse_datetime(value: Optional[str]) -> Optional[datetime]:
    """Parse a date string; naive values are taken as UTC."""
    if value is None or value == "":
        return None
    try:
        parsed = date_parser.parse(value)
    except (ValueError, OverflowError) as e:
        raise ValueError(f"Invalid date: {value}") from e
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


@dataclass
class DateFilter:
    """Optional creation-date window passed through to the source."""
    after: Optional[datetime] = None
    before: Optional[datetime] = None

    @property
    def is_empty(self) -> bool:
        return self.after is None and self.before is None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "after": self.after.isoformat() if self.after else None,
            "before": self.before.isoformat() if self.before else None,
        }


@dataclass
class DryRunOptions:
    """Options controlling what a dry run fetches."""
    skip_contacts: bool = False
    skip_jobs: bool = False
    skip_documents: bool = False
    date_filter: Optional[DateFilter] = None
    sample_size: int = DEFAULT_SAMPLE_SIZE

    def validate(self) -> None:
        """
        Check option bounds.

        Raises:
            InvalidRequestError: If sample_size or the date window is invalid
        """
        if isinstance(self.sample_size, bool) or not isinstance(self.sample_size, int):
            raise InvalidRequestError(
                "sampleSize must be an integer",
                details={"sampleSize": self.sample_size},
            )
        if not MIN_SAMPLE_SIZE <= self.sample_size <= MAX_SAMPLE_SIZE:
            raise InvalidRequestError(
                f"sampleSize must be between {MIN_SAMPLE_SIZE} and {MAX_SAMPLE_SIZE}",
                details={"sampleSize": self.sample_size},
            )
        window = self.date_filter
        if window and window.after and window.before and window.after > window.before:
            raise InvalidRequestError(
                "dateFilter.after must not be later than dateFilter.before",
                details={"dateFilter": window.to_dict()},
            )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "skip_contacts": self.skip_contacts,
            "skip_jobs": self.skip_jobs,
            "skip_documents": self.skip_documents,
            "date_filter": self.date_filter.to_dict() if self.date_filter else None,
            "sample_size": self.sample_size,
        }


@dataclass
class DryRunSummary:
    """Unclipped totals for a dry run."""
    total_records: int = 0
    contacts_to_import: int = 0
    jobs_to_import: int = 0
    documents_to_import: int = 0
    duplicates_found: int = 0
    validation_errors: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "totalRecords": self.total_records,
            "contactsToImport": self.contacts_to_import,
            "jobsToImport": self.jobs_to_import,
            "documentsToImport": self.documents_to_import,
            "duplicatesFound": self.duplicates_found,
            "validationErrors": self.validation_errors,
        }


@dataclass
class DryRunResult:
    """The complete preview returned to the caller."""
    source: MigrationSource
    summary: DryRunSummary = field(default_factory=DryRunSummary)
    duplicates: List[DuplicateMatch] = field(default_factory=list)
    validation_errors: List[ValidationError] = field(default_factory=list)
    sample_mappings: List[SampleMapping] = field(default_factory=list)
    estimated_duration: str = "0 minutes"
    recommendations: List[str] = field(default_factory=list)
    success: bool = True

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the wire representation (camelCase keys)."""
        return {
            "success": self.success,
            "source": self.source.value,
            "summary": self.summary.to_dict(),
            "duplicates": [d.to_dict() for d in self.duplicates],
            "validationErrors": [e.to_dict() for e in self.validation_errors],
            "sampleMappings": [m.to_dict() for m in self.sample_mappings],
            "estimatedDuration": self.estimated_duration,
            "recommendations": list(self.recommendations),
        }
