"""SQLAlchemy models for the contact document store.

Contacts are stored as append-only documents under a collection path,
``artifacts/{app_id}/public/data/contacts``. Documents are never updated
or deleted.
"""

import secrets
import string
from datetime import datetime

from sqlalchemy import DateTime, Index, String, func
from sqlalchemy.orm import Mapped, mapped_column

from api.db.database import Base

DOCUMENT_ID_LENGTH = 20


def generate_document_id(length: int = DOCUMENT_ID_LENGTH) -> str:
    """Generate a random alphanumeric document id."""
    chars = string.ascii_letters + string.digits
    return "".join(secrets.choice(chars) for _ in range(length))


class ContactDocument(Base):
    """A saved contact with its author and server-assigned creation time."""

    __tablename__ = "contact_documents"

    id: Mapped[str] = mapped_column(
        String(DOCUMENT_ID_LENGTH), primary_key=True, default=generate_document_id
    )
    collection_path: Mapped[str] = mapped_column(String(255), nullable=False)

    # Contact fields
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    phone_number: Mapped[str] = mapped_column(String(15), nullable=False)

    # Added on save
    author_identity: Mapped[str] = mapped_column(String(128), nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )

    # Indexes
    __table_args__ = (
        Index("ix_contact_documents_collection_path", "collection_path"),
        Index("ix_contact_documents_author_identity", "author_identity"),
    )
