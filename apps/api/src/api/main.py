"""FastAPI application hosting the contact intake form.

Each page session owns one ContactIntakeForm with its own identity.

Flow:
1. POST /sessions - Page load: sign in and mount a form
2. PATCH /sessions/{id}/fields - Keystrokes (phone sanitized to digits)
3. POST /sessions/{id}/submit - Save the contact, then predict its country
4. GET /sessions/{id} - Current form view (status, prediction, last submission)
5. GET /sessions/{id}/page - The same view rendered as an HTML page
6. DELETE /sessions/{id} - Unmount
"""

import asyncio
import contextlib
import logging

# Load environment variables from project root
import os
from contextlib import asynccontextmanager
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from functools import lru_cache
from uuid import UUID, uuid4

from dotenv import load_dotenv
from fastapi import Depends, FastAPI, Form, HTTPException, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import HTMLResponse, RedirectResponse
from intake.config import IntakeConfig, load_config
from intake.form import ContactIntakeForm
from intake.prediction import PredictionClient
from intake.session import SessionBootstrapper
from intake.view import FormView, build_form_view, render_form_html
from pydantic import BaseModel

from api.auth.identity import JwtIdentityProvider
from api.db.database import create_engine, create_session_factory, init_db
from api.db.store import ContactStoreWriter

_project_root = os.path.dirname(
    os.path.dirname(os.path.dirname(os.path.dirname(os.path.dirname(__file__))))
)
load_dotenv(os.path.join(_project_root, ".env.local"))
load_dotenv()  # Also try default .env

logger = logging.getLogger("contact-intake-api")

# Idle page sessions are unmounted after this long
PAGE_SESSION_TTL_SECONDS: int = 1800


# =============================================================================
# Page Session Registry
# =============================================================================


@dataclass
class PageSession:
    """A mounted form and when it was last touched."""

    form: ContactIntakeForm
    id: UUID = field(default_factory=uuid4)
    last_seen_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def touch(self) -> None:
        self.last_seen_at = datetime.now(timezone.utc)

    def is_expired(self) -> bool:
        """Idle for longer than the TTL, and not mid-submission."""
        expires_at = self.last_seen_at + timedelta(seconds=PAGE_SESSION_TTL_SECONDS)
        return not self.form.is_busy and datetime.now(timezone.utc) > expires_at


class PageRegistry:
    """In-memory page sessions with TTL cleanup.

    All operations are protected by asyncio.Lock.
    """

    def __init__(self):
        self._pages: dict[UUID, PageSession] = {}
        self._lock = asyncio.Lock()
        self._cleanup_task: asyncio.Task | None = None

    async def add(self, form: ContactIntakeForm) -> PageSession:
        """Register a mounted form."""
        page = PageSession(form=form)
        async with self._lock:
            self._pages[page.id] = page
        return page

    async def get(self, page_id: UUID) -> PageSession | None:
        """Get a page by ID and mark it as seen, or None if not found/expired."""
        async with self._lock:
            page = self._pages.get(page_id)
            if page is not None:
                page.touch()
            return page

    async def remove(self, page_id: UUID) -> bool:
        """Unmount and remove a page. Returns False if it wasn't registered."""
        async with self._lock:
            page = self._pages.pop(page_id, None)
        if page is None:
            return False
        page.form.unmount()
        return True

    async def count(self) -> int:
        """Count mounted pages."""
        async with self._lock:
            return len(self._pages)

    async def clear(self) -> None:
        """Unmount and remove every page."""
        async with self._lock:
            pages = list(self._pages.values())
            self._pages.clear()
        for page in pages:
            page.form.unmount()

    async def cleanup_expired(self) -> int:
        """Unmount idle pages. Returns count of removed pages."""
        async with self._lock:
            expired_ids = [
                page_id for page_id, page in self._pages.items() if page.is_expired()
            ]
            expired = [self._pages.pop(page_id) for page_id in expired_ids]
        for page in expired:
            page.form.unmount()
        return len(expired)

    async def start_cleanup_task(self, interval_seconds: int = 60) -> None:
        """Start background cleanup task."""
        if self._cleanup_task is None:
            self._cleanup_task = asyncio.create_task(
                self._periodic_cleanup(interval_seconds)
            )

    async def stop_cleanup_task(self) -> None:
        """Stop background cleanup task."""
        if self._cleanup_task:
            self._cleanup_task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await self._cleanup_task
            self._cleanup_task = None

    async def _periodic_cleanup(self, interval_seconds: int) -> None:
        """Periodically unmount idle pages."""
        while True:
            await asyncio.sleep(interval_seconds)
            removed = await self.cleanup_expired()
            if removed > 0:
                logger.info(f"Unmounted {removed} idle page session(s)")


# Global registry instance
registry = PageRegistry()


# =============================================================================
# App Lifecycle
# =============================================================================


@lru_cache
def get_config() -> IntakeConfig:
    """Build-time configuration, loaded once."""
    return load_config()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Connect the document store and run page cleanup."""
    config = get_config()
    engine = create_engine(config.database_url)
    try:
        await init_db(engine)
        app.state.session_factory = create_session_factory(engine)
    except Exception as e:
        # Saves fail with a StoreError instead of the app refusing to start
        logger.error(f"Document store initialization error: {e!r}")
        app.state.session_factory = None

    await registry.start_cleanup_task(interval_seconds=60)
    yield
    await registry.stop_cleanup_task()
    await registry.clear()
    await engine.dispose()


app = FastAPI(
    title="Contact Intake API",
    description="Contact form that saves each entry and predicts its country of origin",
    version="0.1.0",
    lifespan=lifespan,
)

# CORS middleware for web frontend
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # Configure appropriately for production
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# =============================================================================
# Dependencies
# =============================================================================


def get_contact_store(
    request: Request, config: IntakeConfig = Depends(get_config)
) -> ContactStoreWriter:
    """Store writer bound to the app's session factory."""
    session_factory = getattr(request.app.state, "session_factory", None)
    return ContactStoreWriter(session_factory, config)


def get_prediction_client(
    config: IntakeConfig = Depends(get_config),
) -> PredictionClient:
    return PredictionClient(config)


def get_identity_provider() -> JwtIdentityProvider:
    """A fresh identity provider for each page load."""
    return JwtIdentityProvider()


# =============================================================================
# Request/Response Models
# =============================================================================


class SessionResponse(BaseModel):
    """Response after a page load."""

    session_id: UUID
    view: FormView


class FieldsUpdate(BaseModel):
    """Keystroke update for one or both inputs."""

    name: str | None = None
    phone_number: str | None = None


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    timestamp: str
    active_sessions: int
    ttl_seconds: int


# =============================================================================
# Endpoints
# =============================================================================


async def _get_page(session_id: UUID) -> PageSession:
    page = await registry.get(session_id)
    if page is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Session not found or expired",
        )
    return page


def _ensure_idle(form: ContactIntakeForm) -> None:
    if form.is_busy:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="A submission is already in progress",
        )


def _apply_fields(form: ContactIntakeForm, name: str | None, phone_number: str | None) -> None:
    if name is not None:
        form.set_name(name)
    if phone_number is not None:
        form.set_phone_number(phone_number)


@app.get("/health", response_model=HealthResponse)
async def health_check():
    """Health check endpoint."""
    await registry.cleanup_expired()

    return HealthResponse(
        status="healthy",
        timestamp=datetime.now(timezone.utc).isoformat(),
        active_sessions=await registry.count(),
        ttl_seconds=PAGE_SESSION_TTL_SECONDS,
    )


@app.post(
    "/sessions", response_model=SessionResponse, status_code=status.HTTP_201_CREATED
)
async def create_session(
    config: IntakeConfig = Depends(get_config),
    store: ContactStoreWriter = Depends(get_contact_store),
    predictor: PredictionClient = Depends(get_prediction_client),
    provider: JwtIdentityProvider = Depends(get_identity_provider),
):
    """Load the page: mount a form and establish its session identity.

    Auth failures do not fail the request; they show up in the view's
    status banner and the form is still marked ready.
    """
    await registry.cleanup_expired()

    session = SessionBootstrapper(
        provider, initial_auth_token=config.initial_auth_token
    )
    form = ContactIntakeForm(session, store, predictor)
    await form.mount()
    page = await registry.add(form)

    logger.info(f"Mounted page session {page.id} for {session.identity}")

    return SessionResponse(session_id=page.id, view=build_form_view(form))


@app.get("/sessions/{session_id}", response_model=FormView)
async def get_session_view(session_id: UUID):
    """Current view of a page session."""
    page = await _get_page(session_id)
    return build_form_view(page.form)


@app.patch("/sessions/{session_id}/fields", response_model=FormView)
async def update_fields(session_id: UUID, update: FieldsUpdate):
    """Apply keystrokes. Inputs are locked while a submission is in flight."""
    page = await _get_page(session_id)
    _ensure_idle(page.form)
    _apply_fields(page.form, update.name, update.phone_number)
    return build_form_view(page.form)


@app.post("/sessions/{session_id}/submit", response_model=FormView)
async def submit_form(session_id: UUID):
    """Submit the form: save the contact, then request the prediction.

    Returns 409 if a submission is already in flight for this page. Every
    other outcome, including validation, store and prediction failures,
    is reported in the returned view's status.
    """
    page = await _get_page(session_id)
    _ensure_idle(page.form)

    accepted = await page.form.submit()
    if not accepted:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="A submission is already in progress",
        )

    return build_form_view(page.form)


@app.delete("/sessions/{session_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_session(session_id: UUID):
    """Unmount a page session."""
    removed = await registry.remove(session_id)
    if not removed:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Session not found or expired",
        )


# =============================================================================
# HTML Page
# =============================================================================


@app.get("/sessions/{session_id}/page", response_class=HTMLResponse)
async def get_page(session_id: UUID):
    """Render the form page."""
    page = await _get_page(session_id)
    view = build_form_view(page.form)
    return HTMLResponse(render_form_html(view, action=f"/sessions/{session_id}/page"))


@app.post("/sessions/{session_id}/page")
async def submit_page(
    session_id: UUID,
    name: str = Form(""),
    phone_number: str = Form(""),
):
    """Handle the HTML form post, then redirect back to the page."""
    page = await _get_page(session_id)
    _ensure_idle(page.form)
    _apply_fields(page.form, name, phone_number)
    await page.form.submit()
    return RedirectResponse(
        url=f"/sessions/{session_id}/page", status_code=status.HTTP_303_SEE_OTHER
    )


if __name__ == "__main__":
    import uvicorn

    logging.basicConfig(
        level=os.getenv("LOG_LEVEL", "INFO").upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    uvicorn.run(app, host="0.0.0.0", port=8000)
