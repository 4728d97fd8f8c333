"""Shared fixtures: fake HTTP sessions, sample payloads and stores."""

from typing import Any, Dict, List, Optional
from unittest.mock import Mock

import pytest

from crm_migration.extractors import AccuLynxAdapter, JobNimbusAdapter
from crm_migration.models.record import InternalContact, InternalJob
from crm_migration.services.store import InMemoryStore, InternalStore

ORG_ID = "org_1"


class FakeResponse:
    def __init__(self, status_code: int = 200, payload: Any = None, invalid_json: bool = False):
        self.status_code = status_code
        self._payload = payload
        self._invalid_json = invalid_json
        self.text = "" if payload is None else str(payload)

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 400

    def json(self) -> Any:
        if self._invalid_json:
            raise ValueError("No JSON object could be decoded")
        return self._payload


class FakeSession:
    """Stands in for requests.Session; routes GETs by URL suffix."""

    def __init__(self, responses: Optional[Dict[str, Any]] = None):
        self.responses = responses or {}
        self.calls: List[Dict[str, Any]] = []
        self.closed = False

    def get(self, url, headers=None, params=None, timeout=None):
        self.calls.append({"url": url, "headers": headers, "params": params, "timeout": timeout})
        for suffix, response in self.responses.items():
            if url.endswith(suffix):
                if isinstance(response, Exception):
                    raise response
                return response
        return FakeResponse(404, {"error": "not found"})

    def close(self):
        self.closed = True


def jobnimbus_session(contacts=None, jobs=None, contacts_total=None, jobs_total=None) -> FakeSession:
    contacts = contacts or []
    jobs = jobs or []
    return FakeSession({
        "/contacts": FakeResponse(200, {
            "count": len(contacts) if contacts_total is None else contacts_total,
            "results": contacts,
        }),
        "/jobs": FakeResponse(200, {
            "count": len(jobs) if jobs_total is None else jobs_total,
            "results": jobs,
        }),
    })


def acculynx_session(contacts=None, jobs=None, contacts_total=None, jobs_total=None) -> FakeSession:
    contacts = contacts or []
    jobs = jobs or []
    return FakeSession({
        "/contacts": FakeResponse(200, {
            "count": len(contacts) if contacts_total is None else contacts_total,
            "items": contacts,
        }),
        "/jobs": FakeResponse(200, {
            "count": len(jobs) if jobs_total is None else jobs_total,
            "items": jobs,
        }),
    })


def make_jobnimbus(session: FakeSession, **kwargs) -> JobNimbusAdapter:
    return JobNimbusAdapter("jn-key", base_url="https://jn.test/api1", session=session, **kwargs)


def make_acculynx(session: FakeSession, **kwargs) -> AccuLynxAdapter:
    return AccuLynxAdapter("al-key", base_url="https://al.test/api/v2", session=session, **kwargs)


def watched(store: InternalStore) -> Mock:
    """Wrap a store so every call made against it is recorded."""
    return Mock(spec=InternalStore, wraps=store)


@pytest.fixture
def store() -> InMemoryStore:
    return InMemoryStore(
        contacts={
            ORG_ID: [
                InternalContact(id="c_001", org_id=ORG_ID, name="Jane Doe", email="jane@example.com", phone="555-000-0000"),
                InternalContact(id="c_002", org_id=ORG_ID, name="Phone Match", email="other@example.com", phone="(555) 123-4567"),
                InternalContact(id="c_003", org_id=ORG_ID, name="Digits Only", email=None, phone="5551234567"),
            ],
            "org_2": [
                InternalContact(id="c_900", org_id="org_2", name="Other Org", email="bob@example.com"),
            ],
        },
        jobs={
            ORG_ID: [
                InternalJob(id="j_001", org_id=ORG_ID, name="Roof", property_address="123 Main Street, Springfield IL"),
            ],
        },
    )
