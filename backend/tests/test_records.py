"""Tests for record normalization at the report boundary."""

import uuid
from datetime import datetime, timedelta, timezone

import pytest
from pydantic import ValidationError

from app.reports.records import TenderRecord, TransactionRecord, as_utc, first_or_none
from app.tenders.models import StageCategory, TenderStatus

from conftest import make_employee, make_tender


def _raw_tender(**fields) -> dict:
    data = {
        "id": str(uuid.uuid4()),
        "status": "active",
        "created_at": datetime(2026, 1, 1, 9, 0),
        "updated_at": datetime(2026, 1, 2, 9, 0),
    }
    data.update(fields)
    return data


def _raw_stage(name: str = "Preparation") -> dict:
    return {"id": str(uuid.uuid4()), "name": name, "category": "tender_dept"}


class TestFirstOrNone:
    def test_unwraps_single_element_list(self):
        assert first_or_none([1]) == 1

    def test_empty_list_is_none(self):
        assert first_or_none([]) is None

    def test_plain_value_passes_through(self):
        assert first_or_none("x") == "x"

    def test_none_stays_none(self):
        assert first_or_none(None) is None


class TestTenderRecord:
    def test_relation_as_list_of_one(self):
        """Joined rows often return the related stage as a list."""
        record = TenderRecord.model_validate(_raw_tender(stage=[_raw_stage("Bidding")]))
        assert record.stage is not None
        assert record.stage.name == "Bidding"
        assert record.stage.category == StageCategory.TENDER_DEPT

    def test_relation_as_empty_list(self):
        record = TenderRecord.model_validate(_raw_tender(stage=[], manager=[]))
        assert record.stage is None
        assert record.manager is None

    def test_relation_as_object(self):
        record = TenderRecord.model_validate(_raw_tender(stage=_raw_stage()))
        assert record.stage.name == "Preparation"

    def test_naive_datetimes_become_utc(self):
        record = TenderRecord.model_validate(_raw_tender())
        assert record.created_at.tzinfo is not None
        assert record.created_at == datetime(2026, 1, 1, 9, 0, tzinfo=timezone.utc)

    def test_offset_datetimes_converted_to_utc(self):
        moscow = timezone(timedelta(hours=3))
        record = TenderRecord.model_validate(
            _raw_tender(submission_deadline=datetime(2026, 1, 5, 12, 0, tzinfo=moscow))
        )
        assert record.submission_deadline == datetime(2026, 1, 5, 9, 0, tzinfo=timezone.utc)

    def test_unknown_status_rejected(self):
        with pytest.raises(ValidationError):
            TenderRecord.model_validate(_raw_tender(status="archived"))

    def test_records_are_immutable(self):
        record = make_tender()
        with pytest.raises(ValidationError):
            record.status = TenderStatus.WON

    def test_employees_one_per_relationship(self):
        """The same person as manager and specialist is listed for both roles."""
        person = make_employee()
        record = make_tender(manager=person, specialist=person)
        assert [e.id for e in record.employees] == [person.id, person.id]

    def test_employees_skip_missing(self):
        specialist = make_employee("Ivan")
        record = make_tender(specialist=specialist)
        assert record.employees == [specialist]


class TestTransactionRecord:
    def test_category_key_falls_back_to_relation(self):
        category_id = str(uuid.uuid4())
        record = TransactionRecord.model_validate(
            {
                "id": str(uuid.uuid4()),
                "amount": -500,
                "direction": "expense",
                "occurred_at": datetime(2026, 2, 1),
                "category": [{"id": category_id, "name": "Office"}],
            }
        )
        assert str(record.category_key) == category_id
        assert record.category_name == "Office"
        assert record.magnitude == 500


def test_as_utc_keeps_aware_instant():
    aware = datetime(2026, 1, 1, 3, 0, tzinfo=timezone(timedelta(hours=3)))
    assert as_utc(aware) == datetime(2026, 1, 1, 0, 0, tzinfo=timezone.utc)
