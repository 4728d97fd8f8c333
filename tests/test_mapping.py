import pytest

from crm_migration.models.dry_run import MigrationSource
from crm_migration.models.record import CanonicalContact, CanonicalJob, RecordType
from crm_migration.services.mapping import (
    GENERATED_ID,
    JOB_STATUS_MAP,
    SampleMappingBuilder,
    map_job_status,
)


@pytest.mark.unit
@pytest.mark.parametrize(
    "external, internal",
    [
        ("lead", "NEW"),
        ("new", "NEW"),
        ("open", "IN_PROGRESS"),
        ("in progress", "IN_PROGRESS"),
        ("working", "IN_PROGRESS"),
        ("pending", "PENDING"),
        ("closed", "COMPLETED"),
        ("won", "COMPLETED"),
        ("completed", "COMPLETED"),
        ("lost", "CANCELLED"),
        ("cancelled", "CANCELLED"),
    ],
)
def test_status_table(external, internal) -> None:
    assert map_job_status(external) == internal
    assert map_job_status(external.upper()) == internal


@pytest.mark.unit
def test_status_table_is_complete() -> None:
    assert len(JOB_STATUS_MAP) == 11


@pytest.mark.unit
@pytest.mark.parametrize("status", [None, "", "On Hold", "canceled"])
def test_unknown_status_defaults_to_new(status) -> None:
    assert map_job_status(status) == "NEW"


@pytest.mark.unit
def test_build_limits_and_orders_mappings() -> None:
    contacts = [CanonicalContact(external_id=f"c{i}", name=f"Person {i}") for i in range(8)]
    jobs = [CanonicalJob(external_id=f"j{i}", name=f"Job {i}") for i in range(6)]

    mappings = SampleMappingBuilder("org_1", MigrationSource.JOBNIMBUS).build(contacts, jobs)

    assert [m.type for m in mappings] == [RecordType.CONTACT] * 5 + [RecordType.JOB] * 3
    assert mappings[0].external["id"] == "c0"
    assert mappings[5].external["id"] == "j0"


@pytest.mark.unit
def test_contact_mapping_fields() -> None:
    builder = SampleMappingBuilder("org_1", MigrationSource.ACCULYNX)

    mapping = builder.contact_mapping(
        CanonicalContact(external_id="c1", name="Jane Doe", email="jane@example.com", phone="")
    )

    assert mapping.external == {"id": "c1", "name": "Jane Doe", "email": "jane@example.com", "phone": ""}
    assert mapping.internal == {
        "id": GENERATED_ID,
        "org_id": "org_1",
        "name": "Jane Doe",
        "email": "jane@example.com",
        "phone": None,
        "source": "ACCULYNX",
        "external_id": "c1",
    }


@pytest.mark.unit
def test_unknown_contact_name_is_relabelled() -> None:
    builder = SampleMappingBuilder("org_1", MigrationSource.JOBNIMBUS)

    assert builder.contact_mapping(CanonicalContact(external_id="c1", name="Unknown")).internal["name"] == "Unknown Contact"
    assert builder.contact_mapping(CanonicalContact(external_id="c2", name="")).internal["name"] == "Unknown Contact"
    assert builder.contact_mapping(CanonicalContact(external_id="c3", name="J")).internal["name"] == "J"


@pytest.mark.unit
def test_job_mapping_fields() -> None:
    builder = SampleMappingBuilder("org_1", MigrationSource.JOBNIMBUS)

    mapping = builder.job_mapping(
        CanonicalJob(external_id="j1", name="Roof", status="Won", address="1 Elm St")
    )

    assert mapping.external == {"id": "j1", "name": "Roof", "status": "Won", "address": "1 Elm St"}
    assert mapping.internal == {
        "id": GENERATED_ID,
        "org_id": "org_1",
        "name": "Roof",
        "property_address": "1 Elm St",
        "status": "COMPLETED",
        "external_id": "j1",
    }
    assert mapping.to_dict()["type"] == "job"
