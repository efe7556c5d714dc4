import uuid
from datetime import datetime
from typing import Any

from sqlalchemy import JSON, DateTime, ForeignKey, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from meddy.database.entities.base import Base, utcnow


class Message(Base):
    """
    A single turn within a chat.

    ``content`` is stored as JSON: a plain string for simple turns, or a list
    of parts (``text``, ``tool-call``, ``tool-result``) for tool exchanges.
    """

    __tablename__ = "message"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    chat_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("chat.id"), index=True)
    role: Mapped[str] = mapped_column(String(16))
    content: Mapped[Any] = mapped_column(JSON)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)

    chat = relationship("Chat", back_populates="messages")

    def to_dict(self) -> dict:
        return {
            "id": str(self.id),
            "chatId": str(self.chat_id),
            "role": self.role,
            "content": self.content,
            "createdAt": self.created_at,
        }
