from datetime import datetime, timedelta

from sqlalchemy import select

from meddy.database.daos.base import BaseDao, as_uuid, require_uuid
from meddy.database.entities import Message
from meddy.database.entities.base import utcnow


class MessageDao(BaseDao):
    """Persistence operations on `Message` rows."""

    def create_many(self, messages: list[dict]) -> list[Message]:
        """
        Insert messages in order.

        Each dict carries ``id``, ``chat_id``, ``role``, ``content`` and an
        optional ``created_at``.
        """
        rows = []
        now = utcnow()
        for index, message in enumerate(messages):
            # keep batch order stable under ORDER BY created_at
            created_at: datetime = message.get("created_at") or now + timedelta(microseconds=index)
            row = Message(
                id=require_uuid(message["id"], "message id"),
                chat_id=require_uuid(message["chat_id"], "chat id"),
                role=message["role"],
                content=message["content"],
                created_at=created_at,
            )
            self.session.add(row)
            rows.append(row)
        self.session.flush()
        return rows

    def get_by_chat_id(self, chat_id) -> list[Message]:
        chat_id = as_uuid(chat_id)
        if chat_id is None:
            return []
        stmt = select(Message).where(Message.chat_id == chat_id).order_by(Message.created_at.asc())
        return list(self.session.scalars(stmt))
