"""Fixtures wiring the contact form to in-process fakes."""

import pytest
from fakes import FakeIdentityProvider, FakePredictor, FakeStore
from intake.form import ContactIntakeForm
from intake.session import SessionBootstrapper


@pytest.fixture
def provider() -> FakeIdentityProvider:
    return FakeIdentityProvider()


@pytest.fixture
def store() -> FakeStore:
    return FakeStore()


@pytest.fixture
def predictor() -> FakePredictor:
    return FakePredictor()


@pytest.fixture
def form(provider, store, predictor) -> ContactIntakeForm:
    """An unmounted form wired to the fakes."""
    return ContactIntakeForm(SessionBootstrapper(provider), store, predictor)


@pytest.fixture
async def mounted_form(form) -> ContactIntakeForm:
    """A form whose session is signed in and ready."""
    await form.mount()
    return form
