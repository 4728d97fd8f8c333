"""Data models for the dry-run engine."""

from .record import (
    ExternalRecord,
    CanonicalContact,
    CanonicalJob,
    InternalContact,
    InternalJob,
    RecordType,
)
from .dry_run import (
    MigrationSource,
    MatchType,
    MatchAction,
    DuplicateMatch,
    ValidationError,
    SampleMapping,
    DateFilter,
    DryRunOptions,
    DryRunSummary,
    DryRunResult,
    MIN_SAMPLE_SIZE,
    MAX_SAMPLE_SIZE,
    DEFAULT_SAMPLE_SIZE,
)

__all__ = [
    "ExternalRecord",
    "CanonicalContact",
    "CanonicalJob",
    "InternalContact",
    "InternalJob",
    "RecordType",
    "MigrationSource",
    "MatchType",
    "MatchAction",
    "DuplicateMatch",
    "ValidationError",
    "SampleMapping",
    "DateFilter",
    "DryRunOptions",
    "DryRunSummary",
    "DryRunResult",
    "MIN_SAMPLE_SIZE",
    "MAX_SAMPLE_SIZE",
    "DEFAULT_SAMPLE_SIZE",
]
