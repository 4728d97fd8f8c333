import pytest

from crm_migration.extractors import JobNimbusAdapter
from crm_migration.models.record import CanonicalContact, CanonicalJob, ExternalRecord, RecordType
from crm_migration.services.normalizer import RecordNormalizer
from crm_migration.services.validator import FieldValidator, INVALID_CONTACT_NAME


@pytest.mark.unit
@pytest.mark.parametrize("name", ["", "Unknown", "J"])
def test_unusable_contact_name_is_reported(name) -> None:
    errors = FieldValidator().validate_contact(CanonicalContact(external_id="e1", name=name))

    assert len(errors) == 1
    error = errors[0]
    assert error.type == RecordType.CONTACT
    assert error.external_id == "e1"
    assert error.field == "name"
    assert error.error == INVALID_CONTACT_NAME
    assert error.value == name


@pytest.mark.unit
def test_two_character_name_passes() -> None:
    assert FieldValidator().validate_contact(CanonicalContact(external_id="e1", name="Al")) == []


@pytest.mark.unit
def test_jobs_are_never_flagged() -> None:
    jobs = [CanonicalJob(external_id="j1", name="Untitled Job"), CanonicalJob(external_id="j2", name="")]
    assert FieldValidator().validate_jobs(jobs) == []


@pytest.mark.unit
def test_batch_preserves_order() -> None:
    contacts = [
        CanonicalContact(external_id="e1", name="Unknown"),
        CanonicalContact(external_id="e2", name="Jane Doe"),
        CanonicalContact(external_id="e3", name="X"),
    ]

    errors = FieldValidator().validate_contacts(contacts)

    assert [e.external_id for e in errors] == ["e1", "e3"]


@pytest.mark.unit
def test_reports_the_name_the_provider_sent() -> None:
    normalizer = RecordNormalizer(JobNimbusAdapter.FIELD_PROFILE)
    blank = normalizer.normalize_contact(ExternalRecord(id="e1", source_service="jobnimbus", entity="contacts", data={}))
    short = normalizer.normalize_contact(
        ExternalRecord(id="e2", source_service="jobnimbus", entity="contacts", data={"first_name": " J "})
    )

    errors = FieldValidator().validate_contacts([blank, short])

    assert blank.name == "Unknown"
    assert [e.value for e in errors] == ["", "J"]
