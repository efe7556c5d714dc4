import uuid
from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from meddy.database.entities.base import Base, utcnow


class Document(Base):
    """
    A generated artifact (usually the patient file).

    The primary key is ``(id, created_at)``: every save inserts a new row, so
    the rows sharing an ``id`` form the document's revision history.
    """

    __tablename__ = "document"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), primary_key=True, default=utcnow)
    title: Mapped[str] = mapped_column(Text)
    content: Mapped[str | None] = mapped_column(Text, nullable=True)
    kind: Mapped[str] = mapped_column(String(16), default="text")
    user_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("app_user.id"), index=True)

    def to_dict(self) -> dict:
        return {
            "id": str(self.id),
            "createdAt": self.created_at,
            "title": self.title,
            "content": self.content,
            "kind": self.kind,
            "userId": str(self.user_id),
        }
