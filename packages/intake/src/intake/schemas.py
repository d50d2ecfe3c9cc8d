"""Pydantic schemas for the contact intake form.

A contact is a flat record: a name and a digits-only phone number.
Everything else here is transient UI state for the most recent submission.
"""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

# =============================================================================
# Constants
# =============================================================================

PHONE_MIN_DIGITS: int = 7
PHONE_MAX_DIGITS: int = 15

# Substituted when the inference response has no candidate text
PREDICTION_FALLBACK_TEXT = "Could not determine country of origin."


# =============================================================================
# Enums
# =============================================================================


class StatusKind(str, Enum):
    """Kind of the single active status banner."""

    INFO = "info"
    SUCCESS = "success"
    ERROR = "error"


class SubmissionPhase(str, Enum):
    """Where the submission sequencer currently is."""

    IDLE = "idle"
    SAVING = "saving"
    PREDICTING = "predicting"


# =============================================================================
# Records
# =============================================================================


class ContactRecord(BaseModel):
    """A validated contact, immutable once created.

    Built on submit from the trimmed name and sanitized phone number.
    """

    model_config = ConfigDict(frozen=True)

    name: str = Field(min_length=1)
    phone_number: str = Field(
        pattern=rf"^[0-9]{{{PHONE_MIN_DIGITS},{PHONE_MAX_DIGITS}}}$"
    )


class SubmissionResult(BaseModel):
    """The most recently saved contact plus its document id.

    Held only for the "last submission" panel.
    """

    model_config = ConfigDict(frozen=True)

    name: str
    phone_number: str
    document_id: str

    @classmethod
    def from_record(cls, record: ContactRecord, document_id: str) -> "SubmissionResult":
        return cls(
            name=record.name,
            phone_number=record.phone_number,
            document_id=document_id,
        )


class UiStatus(BaseModel):
    """The single active status. Replaced, never merged."""

    model_config = ConfigDict(frozen=True)

    message: str
    kind: StatusKind
