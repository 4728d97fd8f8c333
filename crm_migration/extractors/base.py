"""Base source adapter interface."""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple
import logging

import requests
from requests.adapters import HTTPAdapter

from ..errors import UpstreamError
from ..models.record import ExternalRecord, CanonicalContact, CanonicalJob
from ..models.dry_run import DateFilter
from ..services.normalizer import FieldProfile, RecordNormalizer

logger = logging.getLogger(__name__)


@dataclass
class PageResult:
    """One page of records plus the provider-reported total."""
    records: List[ExternalRecord] = field(default_factory=list)
    total_count: int = 0

    def __len__(self) -> int:
        return len(self.records)


class BaseSourceAdapter(ABC):
    """
    Base class for external CRM adapters.

    An adapter owns everything provider-specific: base URL, authentication,
    pagination parameters, response envelopes and field names. Callers only
    see PageResults of ExternalRecords and the canonical records produced
    by normalize_contact / normalize_job.
    """

    service: str = ""
    display_name: str = ""
    FIELD_PROFILE: FieldProfile = FieldProfile()
    # Documents per job, used to estimate attachment volume
    DOCUMENT_MULTIPLIER: int = 1

    ENDPOINTS: Dict[str, str] = {
        "contacts": "/contacts",
        "jobs": "/jobs",
    }

    def __init__(
        self,
        credential: str,
        base_url: str,
        timeout: float = 30.0,
        date_filter: Optional[DateFilter] = None,
        session: Optional[requests.Session] = None
    ):
        """
        Initialize the adapter.

        Args:
            credential: API key or access token supplied by the caller
            base_url: Provider API root
            timeout: Per-request transport timeout in seconds
            date_filter: Optional creation-date window
            session: Custom requests session
        """
        self.credential = credential
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.date_filter = date_filter
        self._session = session or self._create_session()
        self.normalizer = RecordNormalizer(self.FIELD_PROFILE)

    def _create_session(self) -> requests.Session:
        """Create a requests session. Failures are not retried."""
        session = requests.Session()
        adapter = HTTPAdapter(max_retries=0)
        session.mount("https://", adapter)
        session.mount("http://", adapter)
        session.headers["Accept"] = "application/json"
        return session

    def _get_auth_headers(self) -> Dict[str, str]:
        return {"Authorization": f"Bearer {self.credential}"}

    @abstractmethod
    def _build_params(self, page: int, page_size: int) -> Dict[str, Any]:
        """Provider pagination and filter parameters for a 1-based page."""
        pass

    @abstractmethod
    def _parse_response(self, payload: Any) -> Tuple[List[Dict[str, Any]], int]:
        """Split a response body into (items, total_count)."""
        pass

    def get_contacts(self, page: int = 1, page_size: int = 100) -> PageResult:
        """Fetch one page of contacts."""
        return self._fetch_page("contacts", page, page_size)

    def get_jobs(self, page: int = 1, page_size: int = 100) -> PageResult:
        """Fetch one page of jobs."""
        return self._fetch_page("jobs", page, page_size)

    def normalize_contact(self, record: ExternalRecord) -> CanonicalContact:
        return self.normalizer.normalize_contact(record)

    def normalize_job(self, record: ExternalRecord) -> CanonicalJob:
        return self.normalizer.normalize_job(record)

    def _fetch_page(self, entity: str, page: int, page_size: int) -> PageResult:
        """
        Fetch and parse one page of an entity.

        Raises:
            UpstreamError: On transport failure, rejected credentials,
                non-2xx status or a malformed body
        """
        if page < 1:
            raise ValueError("page is 1-based")

        url = f"{self.base_url}{self.ENDPOINTS[entity]}"
        params = self._build_params(page, page_size)
        logger.debug(f"GET {url} params={params}")

        try:
            response = self._session.get(
                url,
                headers=self._get_auth_headers(),
                params=params,
                timeout=self.timeout,
            )
        except requests.exceptions.RequestException as e:
            raise UpstreamError(self.display_name, f"request failed: {e}") from e

        if response.status_code in (401, 403):
            raise UpstreamError(
                self.display_name,
                "credentials were rejected",
                status=response.status_code,
            )
        if not response.ok:
            raise UpstreamError(
                self.display_name,
                f"HTTP error {response.status_code} listing {entity}",
                status=response.status_code,
            )

        try:
            payload = response.json()
        except ValueError as e:
            raise UpstreamError(self.display_name, f"invalid JSON listing {entity}") from e

        try:
            items, total_count = self._parse_response(payload)
        except (AttributeError, KeyError, TypeError, ValueError) as e:
            raise UpstreamError(self.display_name, f"unexpected {entity} response shape") from e

        records = [self.create_record(entity, item) for item in items]
        logger.info(
            f"Fetched {len(records)} of {total_count} {entity} from {self.display_name}"
        )
        return PageResult(records=records, total_count=total_count)

    def create_record(self, entity: str, item: Dict[str, Any]) -> ExternalRecord:
        """Wrap a raw item, resolving its provider-assigned id."""
        if not isinstance(item, dict):
            raise UpstreamError(self.display_name, f"unexpected {entity} item: {type(item).__name__}")
        record_id = self.normalizer.resolve_id(item) or ""
        return ExternalRecord(
            id=record_id,
            source_service=self.service,
            entity=entity,
            data=item,
        )

    def close(self) -> None:
        self._session.close()
