"""Status reporting for the contact form.

Pure projections from the sequencer's phase and last outcome to the single
status banner. Nothing here holds state.
"""

from intake.errors import (
    AuthError,
    IntakeError,
    PredictionError,
    StoreError,
    ValidationError,
)
from intake.schemas import StatusKind, SubmissionPhase, UiStatus

# =============================================================================
# Messages
# =============================================================================

SESSION_NOT_READY_MESSAGE = "Authentication is not ready. Please wait a moment."
INVALID_FIELDS_MESSAGE = (
    "Please enter a valid name and phone number (7-15 digits only)."
)
SAVING_MESSAGE = "Saving contact data..."
PREDICTING_MESSAGE = "Predicting country..."
SUBMISSION_SUCCESS_MESSAGE = "Data saved and prediction requested!"
STORE_FAILED_MESSAGE = "Failed to save data to cloud. Check logs for details."
PREDICTION_FAILED_MESSAGE = (
    "Contact saved, but failed to predict country. Check logs for API errors."
)
AUTH_FAILED_MESSAGE = "Authentication failed. Check logs for details."
INIT_FAILED_MESSAGE = "Identity service failed to initialize. Check logs."
UNEXPECTED_ERROR_MESSAGE = "An unexpected error occurred during submission."

_PHASE_MESSAGES = {
    SubmissionPhase.SAVING: SAVING_MESSAGE,
    SubmissionPhase.PREDICTING: PREDICTING_MESSAGE,
}


def status_for_phase(phase: SubmissionPhase) -> UiStatus | None:
    """Interim status while a submission is in flight, None when idle."""
    message = _PHASE_MESSAGES.get(phase)
    if message is None:
        return None
    return UiStatus(message=message, kind=StatusKind.INFO)


def status_for_error(error: IntakeError) -> UiStatus:
    """Error banner for a failed step.

    Store, prediction and auth failures use fixed user-facing messages;
    validation errors carry their own.
    """
    if isinstance(error, StoreError):
        message = STORE_FAILED_MESSAGE
    elif isinstance(error, PredictionError):
        message = PREDICTION_FAILED_MESSAGE
    elif isinstance(error, AuthError):
        message = str(error) or AUTH_FAILED_MESSAGE
    elif isinstance(error, ValidationError):
        message = str(error) or INVALID_FIELDS_MESSAGE
    else:
        message = str(error) or UNEXPECTED_ERROR_MESSAGE
    return UiStatus(message=message, kind=StatusKind.ERROR)


def status_for_success() -> UiStatus:
    """Terminal success banner after save and prediction both completed."""
    return UiStatus(message=SUBMISSION_SUCCESS_MESSAGE, kind=StatusKind.SUCCESS)


def is_interim(status: UiStatus | None) -> bool:
    """True for in-progress info states (spinner), False for terminal ones."""
    return status is not None and status.kind == StatusKind.INFO


def status_for_unexpected_error() -> UiStatus:
    """Error banner for a failure outside the store and prediction steps."""
    return UiStatus(message=UNEXPECTED_ERROR_MESSAGE, kind=StatusKind.ERROR)
