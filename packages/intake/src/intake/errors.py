"""Error taxonomy for a contact submission.

Every error is terminal for the current submission attempt. None of them
are retried. The message is what the status banner shows; lower-level
detail goes to the logs.
"""


class IntakeError(Exception):
    """Base class for contact intake errors."""

    pass


class ValidationError(IntakeError):
    """Form fields failed validation. No network call was made."""

    pass


class AuthError(IntakeError):
    """Identity service initialization or sign-in failed."""

    pass


class StoreError(IntakeError):
    """The contact record could not be written to the document store."""

    pass


class PredictionError(IntakeError):
    """The inference API call failed. The saved record is kept."""

    pass
