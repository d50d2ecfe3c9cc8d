"""Display elements for the contact form.

A FormView is a read-only snapshot of everything the page shows: the status
banner, the input fields and submit control, the prediction panel and the
last-submission summary. ``render_form_html`` turns it into a page.
"""

from html import escape

from pydantic import BaseModel

from intake.form import ContactIntakeForm
from intake.schemas import (
    PHONE_MAX_DIGITS,
    StatusKind,
    SubmissionPhase,
    SubmissionResult,
)
from intake.status import is_interim

CONNECTING_MESSAGE = "Connecting to identity service..."
ANALYZING_MESSAGE = "Gemini is analyzing the data..."
PREDICTION_TITLE = "Country Prediction"
LOADING_USER_ID = "Loading..."

SUBMIT_LABELS = {
    SubmissionPhase.IDLE: "Submit & Analyze",
    SubmissionPhase.SAVING: "Saving...",
    SubmissionPhase.PREDICTING: "Predicting...",
}


# =============================================================================
# Panels
# =============================================================================


class StatusBanner(BaseModel):
    """The single status banner."""

    message: str
    kind: StatusKind
    spinning: bool


class InputField(BaseModel):
    """One text input."""

    value: str
    placeholder: str
    disabled: bool
    max_length: int | None = None


class SubmitControl(BaseModel):
    """The submit button."""

    label: str
    disabled: bool
    busy: bool


class PredictionPanel(BaseModel):
    """Prediction display: a spinner while predicting, then the text."""

    title: str
    text: str
    loading: bool


class FormView(BaseModel):
    """Snapshot of the whole page."""

    user_id: str
    connecting: str | None
    status: StatusBanner | None
    name: InputField
    phone_number: InputField
    submit: SubmitControl
    prediction: PredictionPanel | None
    last_submission: SubmissionResult | None


# =============================================================================
# Projection
# =============================================================================


def _prediction_panel(form: ContactIntakeForm) -> PredictionPanel | None:
    if form.phase == SubmissionPhase.PREDICTING:
        return PredictionPanel(title=PREDICTION_TITLE, text=ANALYZING_MESSAGE, loading=True)
    if form.prediction:
        return PredictionPanel(title=PREDICTION_TITLE, text=form.prediction, loading=False)
    return None


def build_form_view(form: ContactIntakeForm) -> FormView:
    """Project the form's current state into a FormView."""
    status = None
    if form.status is not None:
        status = StatusBanner(
            message=form.status.message,
            kind=form.status.kind,
            spinning=is_interim(form.status),
        )

    return FormView(
        user_id=form.session.identity or LOADING_USER_ID,
        connecting=None if form.session.session_ready else CONNECTING_MESSAGE,
        status=status,
        name=InputField(
            value=form.name,
            placeholder="Full Name (e.g., John Smith)",
            disabled=form.is_busy,
        ),
        phone_number=InputField(
            value=form.phone_number,
            placeholder="Phone Number (e.g., 442079460199)",
            disabled=form.is_busy,
            max_length=PHONE_MAX_DIGITS,
        ),
        submit=SubmitControl(
            label=SUBMIT_LABELS[form.phase],
            disabled=not form.can_submit,
            busy=form.is_busy,
        ),
        prediction=_prediction_panel(form),
        last_submission=form.last_submission,
    )


# =============================================================================
# HTML
# =============================================================================

_STATUS_COLORS = {
    StatusKind.SUCCESS: ("#f0fdf4", "#166534"),
    StatusKind.ERROR: ("#fef2f2", "#b91c1c"),
    StatusKind.INFO: ("#eff6ff", "#1d4ed8"),
}


def render_form_html(view: FormView, action: str) -> str:
    """Render a FormView as a standalone HTML page.

    Args:
        view: The form snapshot to render.
        action: URL the form posts ``name`` and ``phone_number`` to.

    Returns:
        The HTML document.
    """
    html = f"""<!DOCTYPE html>
<html lang="en">
<head><meta charset="utf-8"><title>Contact &amp; Analysis</title></head>
<body style="font-family: Arial, sans-serif; background: #f3f4f6;">
    <div style="max-width: 520px; margin: 40px auto; background: #fff; padding: 32px; border-radius: 16px;">
        <h1 style="color: #1f2937; text-align: center;">Contact &amp; Analysis</h1>
        <p style="font-size: 12px; color: #9ca3af; text-align: center;">User ID: <span style="font-family: monospace;">{escape(view.user_id)}</span></p>
    """

    if view.connecting:
        html += f"""
        <div style="background: #fefce8; color: #a16207; padding: 12px; border-radius: 12px; margin-bottom: 16px;">{escape(view.connecting)}</div>
        """

    if view.status:
        background, color = _STATUS_COLORS[view.status.kind]
        html += f"""
        <div class="status status-{view.status.kind.value}" style="background: {background}; color: {color}; padding: 12px; border-radius: 12px; margin-bottom: 16px;">{escape(view.status.message)}</div>
        """

    disabled = " disabled" if view.name.disabled else ""
    submit_disabled = " disabled" if view.submit.disabled else ""
    html += f"""
        <form method="post" action="{escape(action)}">
            <p><input type="text" name="name" value="{escape(view.name.value)}" placeholder="{escape(view.name.placeholder)}" required{disabled}></p>
            <p><input type="tel" name="phone_number" value="{escape(view.phone_number.value)}" placeholder="{escape(view.phone_number.placeholder)}" maxlength="{view.phone_number.max_length}" required{disabled}></p>
            <button type="submit"{submit_disabled}>{escape(view.submit.label)}</button>
        </form>
    """

    if view.prediction:
        html += f"""
        <div style="border: 1px solid #e5e7eb; padding: 16px; border-radius: 12px; margin-top: 16px;">
            <h3 style="margin-top: 0; color: #1f2937;">{escape(view.prediction.title)}</h3>
            <p style="font-style: italic; color: #374151;">{escape(view.prediction.text)}</p>
        </div>
        """

    if view.last_submission:
        submission = view.last_submission
        html += f"""
        <div style="border-top: 1px solid #e5e7eb; margin-top: 24px; padding-top: 16px;">
            <h3 style="color: #374151;">Last Submission Details</h3>
            <p>Name: <strong>{escape(submission.name)}</strong></p>
            <p>Phone: <strong>{escape(submission.phone_number)}</strong></p>
            <p style="font-size: 12px; color: #6b7280;">Saved to document: <span style="font-family: monospace;">{escape(submission.document_id)}</span></p>
        </div>
        """

    html += """
    </div>
</body>
</html>
"""

    return html
