import uuid
from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from meddy.database.entities.base import Base, utcnow


class Chat(Base):
    """A conversation thread owned by a user."""

    __tablename__ = "chat"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)
    title: Mapped[str] = mapped_column(Text)
    user_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("app_user.id"), index=True)
    visibility: Mapped[str] = mapped_column(String(16), default="private")

    messages = relationship(
        "Message",
        back_populates="chat",
        cascade="all, delete-orphan",
        order_by="Message.created_at",
    )

    def to_dict(self) -> dict:
        return {
            "id": str(self.id),
            "createdAt": self.created_at,
            "title": self.title,
            "userId": str(self.user_id),
            "visibility": self.visibility,
        }
