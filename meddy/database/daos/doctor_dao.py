from sqlalchemy import func, select

from meddy.database.daos.base import BaseDao
from meddy.database.entities import Doctor


class DoctorDao(BaseDao):
    """Read access to the doctor directory, plus bulk seeding."""

    def get_by_speciality(self, speciality: str) -> list[Doctor]:
        stmt = (
            select(Doctor)
            .where(func.lower(Doctor.speciality) == speciality.strip().lower())
            .order_by(Doctor.name)
        )
        return list(self.session.scalars(stmt))

    def create_many(self, doctors: list[dict]) -> list[Doctor]:
        rows = [Doctor(**doctor) for doctor in doctors]
        self.session.add_all(rows)
        self.session.flush()
        return rows
