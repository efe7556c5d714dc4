from sqlalchemy import select

from meddy.database.daos.base import BaseDao, as_uuid
from meddy.database.entities import User


class UserDao(BaseDao):
    """Persistence operations on `User` rows."""

    def get_by_email(self, email: str) -> list[User]:
        return list(self.session.scalars(select(User).where(User.email == email)))

    def get_by_id(self, user_id) -> User | None:
        user_id = as_uuid(user_id)
        if user_id is None:
            return None
        return self.session.get(User, user_id)

    def create(self, email: str, password_hash: str) -> User:
        user = User(email=email, password=password_hash)
        self.session.add(user)
        self.session.flush()
        return user

    def update_info(self, user_id, name: str | None = None, age: str | None = None) -> User | None:
        """Update the profile fields that were provided; others keep their value."""
        user = self.get_by_id(user_id)
        if user is None:
            return None
        if name is not None:
            user.name = name
        if age is not None:
            user.age = age
        self.session.flush()
        return user
