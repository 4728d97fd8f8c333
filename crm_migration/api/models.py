"""Pydantic models for API requests and responses."""

from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, StrictBool, field_validator, model_validator
from pydantic.alias_generators import to_camel

from ..models.dry_run import (
    DateFilter,
    DryRunOptions,
    MIN_SAMPLE_SIZE,
    MAX_SAMPLE_SIZE,
    parse_datetime,
)


class CamelModel(BaseModel):
    """Accepts and emits camelCase keys; snake_case is accepted too."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# Request Models
class DateFilterModel(CamelModel):
    after: Optional[datetime] = None
    before: Optional[datetime] = None

    @field_validator("after", "before", mode="before")
    @classmethod
    def parse_date(cls, value: Any) -> Optional[datetime]:
        if value is None or isinstance(value, datetime):
            return value
        if not isinstance(value, str):
            raise ValueError("must be a date string")
        return parse_datetime(value)

    @model_validator(mode="after")
    def check_window(self) -> "DateFilterModel":
        if self.after and self.before and self.after > self.before:
            raise ValueError("after must not be later than before")
        return self


class DryRunOptionsModel(CamelModel):
    skip_contacts: Optional[StrictBool] = None
    skip_jobs: Optional[StrictBool] = None
    skip_documents: Optional[StrictBool] = None
    date_filter: Optional[DateFilterModel] = None
    sample_size: Optional[int] = Field(default=None, ge=MIN_SAMPLE_SIZE, le=MAX_SAMPLE_SIZE)


class DryRunRequest(CamelModel):
    api_key: Optional[str] = None
    access_token: Optional[str] = None
    options: Optional[DryRunOptionsModel] = None

    @property
    def credential(self) -> Optional[str]:
        return self.api_key or self.access_token

    def to_options(self, default_sample_size: int) -> DryRunOptions:
        """Convert to engine options, filling defaults."""
        opts = self.options or DryRunOptionsModel()
        date_filter = None
        if opts.date_filter and (opts.date_filter.after or opts.date_filter.before):
            date_filter = DateFilter(after=opts.date_filter.after, before=opts.date_filter.before)
        return DryRunOptions(
            skip_contacts=bool(opts.skip_contacts),
            skip_jobs=bool(opts.skip_jobs),
            skip_documents=bool(opts.skip_documents),
            date_filter=date_filter,
            sample_size=opts.sample_size or default_sample_size,
        )


# Response Models
class DryRunSummaryResponse(CamelModel):
    total_records: int = 0
    contacts_to_import: int = 0
    jobs_to_import: int = 0
    documents_to_import: int = 0
    duplicates_found: int = 0
    validation_errors: int = 0


class DuplicateMatchResponse(CamelModel):
    type: str
    external_id: str
    external_name: str
    matched_internal_id: str
    matched_internal_name: str
    match_type: str
    action: str


class ValidationErrorResponse(CamelModel):
    type: str
    external_id: str
    field: str
    error: str
    value: Optional[Any] = None


class SampleMappingResponse(CamelModel):
    type: str
    external: Dict[str, Any]
    internal: Dict[str, Any]


class DryRunResponse(CamelModel):
    success: bool
    source: str
    summary: DryRunSummaryResponse
    duplicates: List[DuplicateMatchResponse] = Field(default_factory=list)
    validation_errors: List[ValidationErrorResponse] = Field(default_factory=list)
    sample_mappings: List[SampleMappingResponse] = Field(default_factory=list)
    estimated_duration: str
    recommendations: List[str] = Field(default_factory=list)


class SourceListResponse(BaseModel):
    sources: List[str]


class ErrorResponse(BaseModel):
    error: str
    details: Optional[Any] = None
