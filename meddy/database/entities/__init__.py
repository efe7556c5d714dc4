"""
The `entities` package defines the ORM models of the application,
representing the database tables as Python classes via SQLAlchemy.

These entity classes are the foundation of the persistence layer,
used by DAOs (`daos` package) to perform CRUD operations.

Contents
--------
- User
    Represents a registered patient.
    * Stores credentials (with hashed password)
    * Holds the profile gathered in conversation (name, age)

- Chat
    Represents a conversation belonging to a user.
    * Stores chat ID, title, and owner (user_id)
    * Carries a visibility flag (private/public)

- Message
    Represents a single turn within a chat.
    * Stores role (user/assistant/tool) and JSON content
    * Records creation timestamp

- Document
    Represents a generated artifact (the patient file).
    * Keyed by (id, created_at): each save is a new revision

- Suggestion
    Represents an edit proposal attached to one document revision.

- Doctor
    Represents a doctor directory entry.
    * Speciality, city, years of experience, consultation fee
"""
from meddy.database.entities.base import Base
from meddy.database.entities.user import User
from meddy.database.entities.chat import Chat
from meddy.database.entities.message import Message
from meddy.database.entities.document import Document
from meddy.database.entities.suggestion import Suggestion
from meddy.database.entities.doctor import Doctor

__all__ = ["Base", "User", "Chat", "Message", "Document", "Suggestion", "Doctor"]
