"""Contact store writer.

Appends contact documents to the fixed public contacts collection of one
application. There is no update or delete.
"""

import logging

from intake.config import IntakeConfig
from intake.errors import StoreError
from intake.schemas import ContactRecord
from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from api.db.models import ContactDocument, generate_document_id

logger = logging.getLogger("contact-intake-store")


class ContactStoreWriter:
    """Writes contact records to the document store."""

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession] | None,
        config: IntakeConfig,
    ):
        """Initialize the writer.

        Args:
            session_factory: Store handle. None when the store failed to initialize.
            config: Intake configuration; its app id scopes the collection path.
        """
        self._session_factory = session_factory
        self.collection_path = config.collection_path

    async def save(self, record: ContactRecord, author_identity: str | None) -> str:
        """Save a contact record and return its generated document id.

        Args:
            record: The validated contact.
            author_identity: Session identity of the submitting user.

        Returns:
            The new document's id.

        Raises:
            StoreError: If the identity or store handle is unavailable, or
                the write fails.
        """
        if self._session_factory is None or not author_identity:
            raise StoreError("Document store or user identity not available for saving.")

        document = ContactDocument(
            id=generate_document_id(),
            collection_path=self.collection_path,
            name=record.name,
            phone_number=record.phone_number,
            author_identity=author_identity,
        )

        try:
            async with self._session_factory() as session:
                session.add(document)
                await session.commit()
        except SQLAlchemyError as e:
            logger.error(f"Error writing document to {self.collection_path}: {e}")
            raise StoreError("Failed to save data to cloud.") from e

        logger.info(f"Document successfully written with ID: {document.id}")
        return document.id

    async def get(self, document_id: str) -> ContactDocument | None:
        """Fetch a saved document from this collection, or None."""
        if self._session_factory is None:
            raise StoreError("Document store not available.")

        try:
            async with self._session_factory() as session:
                result = await session.execute(
                    select(ContactDocument).where(
                        ContactDocument.id == document_id,
                        ContactDocument.collection_path == self.collection_path,
                    )
                )
                return result.scalar_one_or_none()
        except SQLAlchemyError as e:
            logger.error(f"Error reading document {document_id}: {e}")
            raise StoreError("Failed to read data from cloud.") from e

    async def count(self) -> int:
        """Count documents in this collection."""
        if self._session_factory is None:
            raise StoreError("Document store not available.")

        try:
            async with self._session_factory() as session:
                result = await session.execute(
                    select(func.count())
                    .select_from(ContactDocument)
                    .where(ContactDocument.collection_path == self.collection_path)
                )
                return result.scalar_one()
        except SQLAlchemyError as e:
            logger.error(f"Error counting documents in {self.collection_path}: {e}")
            raise StoreError("Failed to read data from cloud.") from e
