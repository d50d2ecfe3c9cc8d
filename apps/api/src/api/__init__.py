"""API package for the Contact Intake form.

This FastAPI application hosts:
- Page sessions (one form and one identity per page load)
- Contact submission (save to the document store, then predict country)
- JSON and HTML views of the form
"""

from api.main import app

__all__ = ["app"]
