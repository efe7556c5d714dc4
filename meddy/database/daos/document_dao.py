from datetime import datetime

from sqlalchemy import delete, select

from meddy.database.daos.base import BaseDao, as_uuid, require_uuid
from meddy.database.entities import Document, Suggestion


class DocumentDao(BaseDao):
    """Persistence operations on `Document` revisions."""

    def create(self, document_id, title: str, kind: str, content: str | None, user_id) -> Document:
        """Insert a new revision of ``document_id``."""
        document = Document(
            id=require_uuid(document_id, "document id"),
            title=title,
            kind=kind,
            content=content,
            user_id=require_uuid(user_id, "user id"),
        )
        self.session.add(document)
        self.session.flush()
        return document

    def get_revisions(self, document_id) -> list[Document]:
        document_id = as_uuid(document_id)
        if document_id is None:
            return []
        stmt = select(Document).where(Document.id == document_id).order_by(Document.created_at.asc())
        return list(self.session.scalars(stmt))

    def get_latest(self, document_id) -> Document | None:
        document_id = as_uuid(document_id)
        if document_id is None:
            return None
        stmt = (
            select(Document)
            .where(Document.id == document_id)
            .order_by(Document.created_at.desc())
            .limit(1)
        )
        return self.session.scalars(stmt).first()

    def delete_after(self, document_id, timestamp: datetime) -> int:
        """
        Drop every revision created after ``timestamp`` along with the
        suggestions attached to those revisions. Returns the number of
        revisions removed.
        """
        document_id = as_uuid(document_id)
        if document_id is None:
            return 0
        self.session.execute(
            delete(Suggestion).where(
                Suggestion.document_id == document_id,
                Suggestion.document_created_at > timestamp,
            )
        )
        result = self.session.execute(
            delete(Document).where(
                Document.id == document_id,
                Document.created_at > timestamp,
            )
        )
        self.session.flush()
        return result.rowcount
