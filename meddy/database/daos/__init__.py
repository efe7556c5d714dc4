"""
The `daos` package provides the Data Access Layer for the application.

It is responsible for all interactions with the database entities,
encapsulating CRUD operations that support the core functionality
of the system. Each DAO operates on a specific entity and abstracts
away the direct SQLAlchemy queries, offering a cleaner API to the
service layer (`core.funcs`).

Contents
--------
- UserDao
    Handles user persistence:
    * Creates users (password already hashed by the caller)
    * Fetches users by email or ID
    * Updates the profile (name, age)

- ChatDao
    Manages chat records:
    * Creates chats and fetches them by ID or owner
    * Deletes a chat together with its messages
    * Updates the visibility flag

- MessageDao
    Manages message records:
    * Bulk-creates messages within a chat
    * Fetches messages by chat (chronological order)

- DocumentDao
    Manages document revisions:
    * Creates revisions, fetches all or the latest
    * Deletes revisions newer than a timestamp

- SuggestionDao
    Manages edit suggestions attached to document revisions.

- DoctorDao
    Queries the doctor directory by speciality; bulk-seeds it.
"""
from meddy.database.daos.user_dao import UserDao
from meddy.database.daos.chat_dao import ChatDao
from meddy.database.daos.message_dao import MessageDao
from meddy.database.daos.document_dao import DocumentDao
from meddy.database.daos.suggestion_dao import SuggestionDao
from meddy.database.daos.doctor_dao import DoctorDao

__all__ = ["UserDao", "ChatDao", "MessageDao", "DocumentDao", "SuggestionDao", "DoctorDao"]
