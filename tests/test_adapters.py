import json
from datetime import datetime, timezone

import pytest
import requests

from conftest import (
    FakeResponse,
    FakeSession,
    acculynx_session,
    jobnimbus_session,
    make_acculynx,
    make_jobnimbus,
)
from crm_migration.config import Settings
from crm_migration.errors import UpstreamError
from crm_migration.extractors import AccuLynxAdapter, JobNimbusAdapter, create_adapter
from crm_migration.models.dry_run import DateFilter, MigrationSource

JANUARY = datetime(2024, 1, 1, tzinfo=timezone.utc)
JUNE = datetime(2024, 6, 30, tzinfo=timezone.utc)


@pytest.mark.unit
def test_jobnimbus_page_request() -> None:
    session = jobnimbus_session(contacts=[{"jnid": "jn1", "first_name": "Jane"}], contacts_total=240)
    adapter = make_jobnimbus(session)

    page = adapter.get_contacts(page=3, page_size=50)

    call = session.calls[0]
    assert call["url"] == "https://jn.test/api1/contacts"
    assert call["headers"] == {"Authorization": "Bearer jn-key"}
    assert call["params"] == {"size": 50, "from": 100}
    assert call["timeout"] == 30.0
    assert page.total_count == 240
    assert len(page) == 1
    record = page.records[0]
    assert record.id == "jn1"
    assert record.source_service == "jobnimbus"
    assert record.entity == "contacts"


@pytest.mark.unit
def test_jobnimbus_date_filter_is_a_range_query() -> None:
    session = jobnimbus_session()
    adapter = make_jobnimbus(session, date_filter=DateFilter(after=JANUARY, before=JUNE))

    adapter.get_jobs()

    query = json.loads(session.calls[0]["params"]["filter"])
    assert query == {"must": [{"range": {"date_created": {
        "gte": int(JANUARY.timestamp()),
        "lte": int(JUNE.timestamp()),
    }}}]}


@pytest.mark.unit
def test_jobnimbus_open_ended_date_filter() -> None:
    session = jobnimbus_session()
    make_jobnimbus(session, date_filter=DateFilter(after=JANUARY)).get_jobs()

    query = json.loads(session.calls[0]["params"]["filter"])
    assert query["must"][0]["range"]["date_created"] == {"gte": int(JANUARY.timestamp())}


@pytest.mark.unit
def test_jobnimbus_without_filter_sends_none() -> None:
    session = jobnimbus_session()
    make_jobnimbus(session, date_filter=DateFilter()).get_jobs()

    assert "filter" not in session.calls[0]["params"]


@pytest.mark.unit
def test_acculynx_page_request() -> None:
    session = acculynx_session(jobs=[{"id": "a1", "name": "Roof"}], jobs_total=12)
    adapter = make_acculynx(session, date_filter=DateFilter(before=JUNE))

    page = adapter.get_jobs(page=2, page_size=10)

    call = session.calls[0]
    assert call["url"] == "https://al.test/api/v2/jobs"
    assert call["params"] == {"pageSize": 10, "pageStartIndex": 10, "createdEndDate": "2024-06-30"}
    assert page.total_count == 12
    assert page.records[0].id == "a1"


@pytest.mark.unit
def test_acculynx_accepts_bare_list() -> None:
    session = FakeSession({"/contacts": FakeResponse(200, [{"id": "a1"}, {"id": "a2"}])})

    page = make_acculynx(session).get_contacts()

    assert page.total_count == 2
    assert [r.id for r in page.records] == ["a1", "a2"]


@pytest.mark.unit
def test_missing_count_falls_back_to_page_length() -> None:
    session = FakeSession({"/contacts": FakeResponse(200, {"results": [{"jnid": "x"}]})})

    assert make_jobnimbus(session).get_contacts().total_count == 1


@pytest.mark.unit
@pytest.mark.parametrize("status", [401, 403])
def test_rejected_credentials(status) -> None:
    session = FakeSession({"/contacts": FakeResponse(status, {"message": "nope"})})

    with pytest.raises(UpstreamError) as exc_info:
        make_jobnimbus(session).get_contacts()

    error = exc_info.value
    assert error.message == "JobNimbus: credentials were rejected"
    assert error.status == status
    assert error.details == {"provider": "JobNimbus", "status": status}
    assert error.status_code == 500


@pytest.mark.unit
def test_server_error() -> None:
    session = FakeSession({"/jobs": FakeResponse(502, {"message": "bad gateway"})})

    with pytest.raises(UpstreamError, match="HTTP error 502"):
        make_acculynx(session).get_jobs()


@pytest.mark.unit
def test_transport_failure() -> None:
    session = FakeSession({"/jobs": requests.exceptions.ConnectTimeout("timed out")})

    with pytest.raises(UpstreamError, match="request failed"):
        make_acculynx(session).get_jobs()


@pytest.mark.unit
def test_invalid_json() -> None:
    session = FakeSession({"/contacts": FakeResponse(200, invalid_json=True)})

    with pytest.raises(UpstreamError, match="invalid JSON"):
        make_jobnimbus(session).get_contacts()


@pytest.mark.unit
@pytest.mark.parametrize(
    "payload",
    [{"count": 3}, {"results": "nope"}, {"results": [], "count": "many"}, "text"],
)
def test_malformed_jobnimbus_body(payload) -> None:
    session = FakeSession({"/contacts": FakeResponse(200, payload)})

    with pytest.raises(UpstreamError, match="unexpected contacts response shape"):
        make_jobnimbus(session).get_contacts()


@pytest.mark.unit
def test_non_object_item() -> None:
    session = FakeSession({"/jobs": FakeResponse(200, {"items": ["oops"], "count": 1})})

    with pytest.raises(UpstreamError, match="unexpected jobs item"):
        make_acculynx(session).get_jobs()


@pytest.mark.unit
def test_create_adapter_uses_settings() -> None:
    settings = Settings(
        jobnimbus_base_url="https://jn.example/api1",
        acculynx_base_url="https://al.example/v2",
        http_timeout=12.5,
    )

    jn = create_adapter(MigrationSource.JOBNIMBUS, "k", settings=settings)
    al = create_adapter(MigrationSource.ACCULYNX, "k", settings=settings, date_filter=DateFilter(after=JANUARY))

    assert isinstance(jn, JobNimbusAdapter)
    assert jn.base_url == "https://jn.example/api1"
    assert jn.timeout == 12.5
    assert isinstance(al, AccuLynxAdapter)
    assert al.date_filter.after == JANUARY
    jn.close()
    al.close()


@pytest.mark.unit
def test_default_session_has_no_retries() -> None:
    adapter = JobNimbusAdapter("k", base_url="https://jn.example/api1/")

    assert adapter.base_url == "https://jn.example/api1"
    assert adapter._session.get_adapter("https://jn.example").max_retries.total == 0
    adapter.close()
