import uuid
from datetime import datetime

from sqlalchemy import DateTime, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from meddy.database.entities.base import Base, utcnow


class User(Base):
    """
    A registered user (patient) of the assistant.

    Holds the login credentials (bcrypt hash only) and the small profile the
    assistant fills in during the conversation (name and age).
    """

    __tablename__ = "app_user"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    email: Mapped[str] = mapped_column(String(64), unique=True, index=True)
    password: Mapped[str | None] = mapped_column(String(128), nullable=True)
    name: Mapped[str | None] = mapped_column(String(128), nullable=True)
    # free text: patients answer "42", "about 40", "6 months", ...
    age: Mapped[str | None] = mapped_column(String(32), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)

    def to_dict(self) -> dict:
        return {
            "id": str(self.id),
            "email": self.email,
            "name": self.name,
            "age": self.age,
            "createdAt": self.created_at,
        }
