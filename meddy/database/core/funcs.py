"""
Query surface of the persistence layer.

Request handlers and tools call these functions instead of touching
sessions or DAOs: each function opens its own transactional scope and
returns plain dictionaries (or lists of them) so that results stay usable
after the session is closed.
"""

from datetime import datetime

from meddy.api.utils import hash_password, verify_password
from meddy.database.core.database import session_scope
from meddy.database.daos import (
    ChatDao,
    DoctorDao,
    DocumentDao,
    MessageDao,
    SuggestionDao,
    UserDao,
)
from meddy.utils.logger import get_logger

logger = get_logger("funcs")


# ------------------------ Users ------------------------


def get_user(email: str) -> list[dict]:
    """Return the users registered under ``email`` (zero or one), including the password hash."""
    with session_scope() as session:
        return [
            {**user.to_dict(), "password": user.password}
            for user in UserDao(session).get_by_email(email)
        ]


def get_user_by_id(user_id: str) -> dict | None:
    with session_scope() as session:
        user = UserDao(session).get_by_id(user_id)
        return user.to_dict() if user else None


def create_user(email: str, password: str) -> dict:
    with session_scope() as session:
        user = UserDao(session).create(email=email, password_hash=hash_password(password))
        logger.info(f"Created user {user.id}")
        return user.to_dict()


def authenticate_user(email: str, password: str) -> dict | None:
    """Return the user when ``password`` matches the stored hash, else ``None``."""
    users = get_user(email)
    if not users:
        return None
    user = users[0]
    if not verify_password(password, user.pop("password")):
        return None
    return user


def update_user_info(user_id: str, name: str | None = None, age: str | None = None) -> dict | None:
    with session_scope() as session:
        user = UserDao(session).update_info(user_id, name=name, age=age)
        return user.to_dict() if user else None


# ------------------------ Chats ------------------------


def save_chat(id: str, user_id: str, title: str) -> dict:
    with session_scope() as session:
        return ChatDao(session).create(chat_id=id, user_id=user_id, title=title).to_dict()


def get_chat_by_id(id: str) -> dict | None:
    with session_scope() as session:
        chat = ChatDao(session).get_by_id(id)
        return chat.to_dict() if chat else None


def get_chats_by_user_id(user_id: str) -> list[dict]:
    with session_scope() as session:
        return [chat.to_dict() for chat in ChatDao(session).get_by_user_id(user_id)]


def delete_chat_by_id(id: str) -> bool:
    with session_scope() as session:
        return ChatDao(session).delete(id)


def update_chat_visibility_by_id(chat_id: str, visibility: str) -> dict | None:
    with session_scope() as session:
        chat = ChatDao(session).update_visibility(chat_id, visibility)
        return chat.to_dict() if chat else None


# ------------------------ Messages ------------------------


def save_messages(messages: list[dict]) -> None:
    with session_scope() as session:
        MessageDao(session).create_many(messages)


def get_messages_by_chat_id(id: str) -> list[dict]:
    with session_scope() as session:
        return [message.to_dict() for message in MessageDao(session).get_by_chat_id(id)]


# ------------------------ Documents ------------------------


def save_document(id: str, title: str, kind: str, content: str | None, user_id: str) -> dict:
    with session_scope() as session:
        document = DocumentDao(session).create(
            document_id=id, title=title, kind=kind, content=content, user_id=user_id
        )
        return document.to_dict()


def get_documents_by_id(id: str) -> list[dict]:
    with session_scope() as session:
        return [document.to_dict() for document in DocumentDao(session).get_revisions(id)]


def get_document_by_id(id: str) -> dict | None:
    with session_scope() as session:
        document = DocumentDao(session).get_latest(id)
        return document.to_dict() if document else None


def delete_documents_by_id_after_timestamp(id: str, timestamp: datetime) -> int:
    with session_scope() as session:
        return DocumentDao(session).delete_after(id, timestamp)


# ------------------------ Suggestions ------------------------


def save_suggestions(suggestions: list[dict]) -> None:
    with session_scope() as session:
        SuggestionDao(session).create_many(suggestions)


def get_suggestions_by_document_id(document_id: str) -> list[dict]:
    with session_scope() as session:
        return [s.to_dict() for s in SuggestionDao(session).get_by_document_id(document_id)]


# ------------------------ Doctors ------------------------


def get_doctor_by_speciality(speciality: str) -> list[dict]:
    with session_scope() as session:
        return [doctor.to_dict() for doctor in DoctorDao(session).get_by_speciality(speciality)]


def save_doctors(doctors: list[dict]) -> int:
    with session_scope() as session:
        return len(DoctorDao(session).create_many(doctors))
