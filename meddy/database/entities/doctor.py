import uuid

from sqlalchemy import Integer, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from meddy.database.entities.base import Base


class Doctor(Base):
    """A doctor directory entry the assistant can recommend."""

    __tablename__ = "doctor"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    name: Mapped[str] = mapped_column(String(128))
    degree: Mapped[str | None] = mapped_column(String(128), nullable=True)
    speciality: Mapped[str] = mapped_column(String(128), index=True)
    yoe: Mapped[int | None] = mapped_column(Integer, nullable=True)
    location: Mapped[str | None] = mapped_column(String(256), nullable=True)
    city: Mapped[str | None] = mapped_column(String(128), nullable=True)
    consult_fee: Mapped[int | None] = mapped_column(Integer, nullable=True)

    def to_dict(self) -> dict:
        return {
            "id": str(self.id),
            "name": self.name,
            "degree": self.degree,
            "speciality": self.speciality,
            "yoe": self.yoe,
            "location": self.location,
            "city": self.city,
            "consultFee": self.consult_fee,
        }
