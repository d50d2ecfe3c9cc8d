"""Contact intake form controller.

Holds the form's state, validates input, and runs the submission sequence:

    idle -> saving -> predicting -> idle (result or error)

The store write always completes before the prediction request is sent.
A failed save aborts before any prediction. A failed prediction is reported
but the saved record stays saved and is shown as the last submission.

Observers subscribe to be told after every state change; the render layer
reads the form's fields (or its view, see intake.view) when notified.
"""

import logging
from collections.abc import Callable
from typing import Protocol

from intake.errors import PredictionError, StoreError, ValidationError
from intake.schemas import (
    ContactRecord,
    SubmissionPhase,
    SubmissionResult,
    UiStatus,
)
from intake.session import SessionBootstrapper
from intake.status import (
    INVALID_FIELDS_MESSAGE,
    SESSION_NOT_READY_MESSAGE,
    status_for_error,
    status_for_phase,
    status_for_success,
    status_for_unexpected_error,
)
from intake.validation import sanitize_phone, validate_name, validate_phone

logger = logging.getLogger("contact-intake-form")

FormListener = Callable[["ContactIntakeForm"], None]


class ContactStore(Protocol):
    """Append-only document store for contact records."""

    async def save(self, record: ContactRecord, author_identity: str | None) -> str: ...


class Predictor(Protocol):
    """Inference client for country-of-origin predictions."""

    async def predict(self, name: str, phone_number: str) -> str: ...


class ContactIntakeForm:
    """View-model for the two-field contact form."""

    def __init__(
        self,
        session: SessionBootstrapper,
        store: ContactStore,
        predictor: Predictor,
    ):
        self.session = session
        self.session.on_change = self._on_session_change
        self._store = store
        self._predictor = predictor
        self._listeners: list[FormListener] = []

        # Input fields
        self.name: str = ""
        self.phone_number: str = ""

        # Submission state
        self.phase: SubmissionPhase = SubmissionPhase.IDLE
        self.status: UiStatus | None = None
        self.prediction: str | None = None
        self.last_submission: SubmissionResult | None = None

    # -------------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------------

    async def mount(self) -> None:
        """Bootstrap the session. Auth errors surface through the status banner."""
        await self.session.start()

    def unmount(self) -> None:
        """Tear down the identity subscription and drop observers."""
        self.session.stop()
        self._listeners.clear()

    def _on_session_change(self) -> None:
        if self.session.error is not None:
            self._set_status(status_for_error(self.session.error))
        else:
            self._publish()

    # -------------------------------------------------------------------------
    # Observers
    # -------------------------------------------------------------------------

    def subscribe(self, listener: FormListener) -> Callable[[], None]:
        """Register a listener called after every change. Returns an unsubscriber."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _publish(self) -> None:
        for listener in list(self._listeners):
            listener(self)

    def _set_status(self, status: UiStatus | None) -> None:
        self.status = status
        self._publish()

    # -------------------------------------------------------------------------
    # Input
    # -------------------------------------------------------------------------

    @property
    def is_busy(self) -> bool:
        return self.phase != SubmissionPhase.IDLE

    @property
    def can_submit(self) -> bool:
        """Whether the submit control is enabled."""
        return not self.is_busy and self.session.session_ready

    def set_name(self, value: str) -> None:
        if self.is_busy:
            return
        self.name = value
        self._publish()

    def set_phone_number(self, value: str) -> None:
        """Store a phone keystroke with non-digits stripped."""
        if self.is_busy:
            return
        self.phone_number = sanitize_phone(value)
        self._publish()

    def build_record(self) -> ContactRecord:
        """Validate the current fields into a record.

        Raises:
            ValidationError: If the name is blank or the phone isn't 7-15 digits.
        """
        if not validate_name(self.name) or not validate_phone(self.phone_number):
            raise ValidationError(INVALID_FIELDS_MESSAGE)
        return ContactRecord(name=self.name.strip(), phone_number=self.phone_number)

    # -------------------------------------------------------------------------
    # Submission
    # -------------------------------------------------------------------------

    async def submit(self) -> bool:
        """Run one save-then-predict submission.

        Returns:
            False if the submit control was disabled (a submission is already
            in flight), True otherwise. The outcome is in ``status``, and the
            form is always back to idle when this returns or is cancelled.
        """
        if self.is_busy:
            logger.debug("Submit ignored: submission already in progress")
            return False

        self.last_submission = None
        self.prediction = None
        self.status = None

        if not self.session.session_ready:
            self._set_status(status_for_error(ValidationError(SESSION_NOT_READY_MESSAGE)))
            return True

        try:
            record = self.build_record()
        except ValidationError as e:
            logger.debug(f"Submission rejected: {e}")
            self._set_status(status_for_error(e))
            return True

        try:
            await self._save_and_predict(record)
        except Exception as e:
            logger.exception(f"Unexpected error during submission: {e!r}")
            self._finish(status_for_unexpected_error())
        finally:
            if self.is_busy:
                # Cancelled mid-flight: drop the interim status and unlock
                logger.warning(f"Submission abandoned in phase {self.phase.value}")
                self.phase = SubmissionPhase.IDLE
                self._set_status(None)
        return True

    async def _save_and_predict(self, record: ContactRecord) -> None:
        self._transition(SubmissionPhase.SAVING)
        try:
            document_id = await self._store.save(record, self.session.identity)
        except StoreError as e:
            logger.error(f"Submission failed while saving: {e}")
            self._finish(status_for_error(e))
            return

        self._transition(SubmissionPhase.PREDICTING)
        result = SubmissionResult.from_record(record, document_id)
        try:
            self.prediction = await self._predictor.predict(
                record.name, record.phone_number
            )
        except PredictionError as e:
            logger.error(f"Prediction failed for document {document_id}: {e}")
            self._complete(result)
            self._finish(status_for_error(e))
            return

        self._complete(result)
        self._finish(status_for_success())

    def _transition(self, phase: SubmissionPhase) -> None:
        logger.debug(f"Submission phase {self.phase.value} -> {phase.value}")
        self.phase = phase
        self._set_status(status_for_phase(phase))

    def _complete(self, result: SubmissionResult) -> None:
        # Record persisted: show it and clear the inputs for the next entry
        self.last_submission = result
        self.name = ""
        self.phone_number = ""

    def _finish(self, status: UiStatus) -> None:
        logger.debug(f"Submission phase {self.phase.value} -> idle ({status.kind.value})")
        self.phase = SubmissionPhase.IDLE
        self._set_status(status)
