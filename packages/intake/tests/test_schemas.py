"""Tests for contact intake schemas."""

import pytest
from intake.schemas import (
    ContactRecord,
    StatusKind,
    SubmissionPhase,
    SubmissionResult,
    UiStatus,
)
from pydantic import ValidationError as PydanticValidationError


class TestEnums:
    """Tests for enum values."""

    def test_status_kind_values(self):
        assert StatusKind.INFO.value == "info"
        assert StatusKind.SUCCESS.value == "success"
        assert StatusKind.ERROR.value == "error"

    def test_submission_phase_values(self):
        assert SubmissionPhase.IDLE.value == "idle"
        assert SubmissionPhase.SAVING.value == "saving"
        assert SubmissionPhase.PREDICTING.value == "predicting"


class TestContactRecord:
    """Tests for ContactRecord."""

    def test_valid_record(self):
        record = ContactRecord(name="John Smith", phone_number="442079460199")
        assert record.name == "John Smith"
        assert record.phone_number == "442079460199"

    def test_record_is_immutable(self):
        record = ContactRecord(name="John Smith", phone_number="442079460199")
        with pytest.raises(PydanticValidationError):
            record.name = "Jane"

    def test_rejects_empty_name(self):
        with pytest.raises(PydanticValidationError):
            ContactRecord(name="", phone_number="442079460199")

    def test_rejects_short_phone(self):
        with pytest.raises(PydanticValidationError):
            ContactRecord(name="John", phone_number="123")

    def test_rejects_non_digit_phone(self):
        with pytest.raises(PydanticValidationError):
            ContactRecord(name="John", phone_number="+442079460199")


class TestSubmissionResult:
    """Tests for SubmissionResult."""

    def test_from_record(self):
        record = ContactRecord(name="John Smith", phone_number="442079460199")

        result = SubmissionResult.from_record(record, "abc123")

        assert result.name == "John Smith"
        assert result.phone_number == "442079460199"
        assert result.document_id == "abc123"

    def test_serializes_document_id(self):
        result = SubmissionResult(name="A", phone_number="1234567", document_id="d1")
        assert result.model_dump() == {
            "name": "A",
            "phone_number": "1234567",
            "document_id": "d1",
        }


class TestUiStatus:
    """Tests for UiStatus."""

    def test_status_is_immutable(self):
        status = UiStatus(message="Saving...", kind=StatusKind.INFO)
        with pytest.raises(PydanticValidationError):
            status.kind = StatusKind.ERROR
