import uuid
from datetime import datetime

from sqlalchemy import Boolean, DateTime, ForeignKey, ForeignKeyConstraint, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from meddy.database.entities.base import Base, utcnow


class Suggestion(Base):
    """An edit proposal attached to one revision of a document."""

    __tablename__ = "suggestion"
    __table_args__ = (
        ForeignKeyConstraint(
            ["document_id", "document_created_at"],
            ["document.id", "document.created_at"],
        ),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    document_id: Mapped[uuid.UUID] = mapped_column(Uuid, index=True)
    document_created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True))
    original_text: Mapped[str] = mapped_column(Text)
    suggested_text: Mapped[str] = mapped_column(Text)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    is_resolved: Mapped[bool] = mapped_column(Boolean, default=False)
    user_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("app_user.id"))
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)

    def to_dict(self) -> dict:
        return {
            "id": str(self.id),
            "documentId": str(self.document_id),
            "documentCreatedAt": self.document_created_at,
            "originalText": self.original_text,
            "suggestedText": self.suggested_text,
            "description": self.description,
            "isResolved": self.is_resolved,
            "userId": str(self.user_id),
            "createdAt": self.created_at,
        }
