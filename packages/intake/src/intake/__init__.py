"""Contact intake form: validation, session bootstrap, save-then-predict submission."""

from intake.config import ConfigurationError, IntakeConfig, load_config
from intake.errors import (
    AuthError,
    IntakeError,
    PredictionError,
    StoreError,
    ValidationError,
)
from intake.form import ContactIntakeForm
from intake.prediction import PredictionClient
from intake.schemas import (
    PREDICTION_FALLBACK_TEXT,
    ContactRecord,
    StatusKind,
    SubmissionPhase,
    SubmissionResult,
    UiStatus,
)
from intake.session import SessionBootstrapper
from intake.validation import sanitize_phone, validate_name, validate_phone
from intake.view import FormView, build_form_view, render_form_html

__all__ = [
    "PREDICTION_FALLBACK_TEXT",
    "AuthError",
    "ConfigurationError",
    "ContactIntakeForm",
    "ContactRecord",
    "FormView",
    "IntakeConfig",
    "IntakeError",
    "PredictionClient",
    "PredictionError",
    "SessionBootstrapper",
    "StatusKind",
    "StoreError",
    "SubmissionPhase",
    "SubmissionResult",
    "UiStatus",
    "ValidationError",
    "build_form_view",
    "load_config",
    "render_form_html",
    "sanitize_phone",
    "validate_name",
    "validate_phone",
]
