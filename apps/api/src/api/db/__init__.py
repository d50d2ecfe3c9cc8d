"""Database module for the API.

Provides the contact document model, async engine/session management, and
the store writer.
"""

from api.db.database import (
    Base,
    create_engine,
    create_session_factory,
    init_db,
)
from api.db.models import ContactDocument, generate_document_id
from api.db.store import ContactStoreWriter

__all__ = [
    "Base",
    "ContactDocument",
    "ContactStoreWriter",
    "create_engine",
    "create_session_factory",
    "generate_document_id",
    "init_db",
]
