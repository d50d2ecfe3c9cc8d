"""Tests for the contact store writer against a temporary SQLite database."""

import sys
from pathlib import Path

import pytest

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from intake.config import IntakeConfig
from intake.errors import StoreError
from intake.schemas import ContactRecord
from sqlalchemy.exc import OperationalError

from api.db.database import create_engine, create_session_factory, init_db
from api.db.models import DOCUMENT_ID_LENGTH, generate_document_id
from api.db.store import ContactStoreWriter


@pytest.fixture
async def engine(tmp_path):
    db_engine = create_engine(f"sqlite+aiosqlite:///{tmp_path / 'contacts.db'}")
    await init_db(db_engine)
    yield db_engine
    await db_engine.dispose()


@pytest.fixture
def session_factory(engine):
    return create_session_factory(engine)


@pytest.fixture
def writer(session_factory) -> ContactStoreWriter:
    return ContactStoreWriter(session_factory, IntakeConfig(app_id="test-app"))


def make_record(**kwargs) -> ContactRecord:
    """Helper to create a ContactRecord with defaults."""
    defaults = {"name": "John Smith", "phone_number": "442079460199"}
    defaults.update(kwargs)
    return ContactRecord(**defaults)


class TestGenerateDocumentId:
    def test_length_and_charset(self):
        document_id = generate_document_id()
        assert len(document_id) == DOCUMENT_ID_LENGTH
        assert document_id.isalnum()

    def test_ids_are_unique(self):
        assert len({generate_document_id() for _ in range(100)}) == 100


class TestContactStoreWriter:
    """Tests for ContactStoreWriter."""

    @pytest.mark.asyncio
    async def test_save_returns_document_id(self, writer):
        document_id = await writer.save(make_record(), "uid-1")

        assert len(document_id) == DOCUMENT_ID_LENGTH

    @pytest.mark.asyncio
    async def test_saved_document_fields(self, writer):
        document_id = await writer.save(make_record(), "uid-1")

        document = await writer.get(document_id)

        assert document is not None
        assert document.name == "John Smith"
        assert document.phone_number == "442079460199"
        assert document.author_identity == "uid-1"
        assert document.collection_path == "artifacts/test-app/public/data/contacts"
        assert document.created_at is not None

    @pytest.mark.asyncio
    async def test_writes_are_append_only(self, writer):
        first = await writer.save(make_record(), "uid-1")
        second = await writer.save(make_record(), "uid-1")

        assert first != second
        assert await writer.count() == 2

    @pytest.mark.asyncio
    async def test_collections_are_scoped_by_app_id(self, writer, session_factory):
        other = ContactStoreWriter(session_factory, IntakeConfig(app_id="other-app"))
        document_id = await writer.save(make_record(), "uid-1")

        assert await other.count() == 0
        assert await other.get(document_id) is None

    @pytest.mark.asyncio
    async def test_missing_identity_raises(self, writer):
        with pytest.raises(StoreError):
            await writer.save(make_record(), None)

        assert await writer.count() == 0

    @pytest.mark.asyncio
    async def test_missing_store_handle_raises(self):
        writer = ContactStoreWriter(None, IntakeConfig())

        with pytest.raises(StoreError):
            await writer.save(make_record(), "uid-1")

    @pytest.mark.asyncio
    async def test_write_failure_raises_store_error(self, tmp_path):
        # No tables created, so the INSERT fails
        db_engine = create_engine(f"sqlite+aiosqlite:///{tmp_path / 'empty.db'}")
        writer = ContactStoreWriter(create_session_factory(db_engine), IntakeConfig())

        with pytest.raises(StoreError) as exc_info:
            await writer.save(make_record(), "uid-1")

        assert isinstance(exc_info.value.__cause__, OperationalError)
        await db_engine.dispose()

    @pytest.mark.asyncio
    async def test_read_failures_raise_store_error(self, tmp_path):
        db_engine = create_engine(f"sqlite+aiosqlite:///{tmp_path / 'empty.db'}")
        writer = ContactStoreWriter(create_session_factory(db_engine), IntakeConfig())

        with pytest.raises(StoreError) as exc_info:
            await writer.get("abc")
        assert isinstance(exc_info.value.__cause__, OperationalError)

        with pytest.raises(StoreError) as exc_info:
            await writer.count()
        assert isinstance(exc_info.value.__cause__, OperationalError)

        await db_engine.dispose()
