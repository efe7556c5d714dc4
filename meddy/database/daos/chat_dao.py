from sqlalchemy import delete, select

from meddy.database.daos.base import BaseDao, as_uuid, require_uuid
from meddy.database.entities import Chat, Message


class ChatDao(BaseDao):
    """Persistence operations on `Chat` rows."""

    def create(self, chat_id, user_id, title: str) -> Chat:
        chat = Chat(id=require_uuid(chat_id, "chat id"), user_id=require_uuid(user_id, "user id"), title=title)
        self.session.add(chat)
        self.session.flush()
        return chat

    def get_by_id(self, chat_id) -> Chat | None:
        chat_id = as_uuid(chat_id)
        if chat_id is None:
            return None
        return self.session.get(Chat, chat_id)

    def get_by_user_id(self, user_id) -> list[Chat]:
        user_id = as_uuid(user_id)
        if user_id is None:
            return []
        stmt = select(Chat).where(Chat.user_id == user_id).order_by(Chat.created_at.desc())
        return list(self.session.scalars(stmt))

    def delete(self, chat_id) -> bool:
        """Delete a chat together with its messages. Returns False when it does not exist."""
        chat = self.get_by_id(chat_id)
        if chat is None:
            return False
        self.session.execute(delete(Message).where(Message.chat_id == chat.id))
        self.session.delete(chat)
        self.session.flush()
        return True

    def update_visibility(self, chat_id, visibility: str) -> Chat | None:
        chat = self.get_by_id(chat_id)
        if chat is None:
            return None
        chat.visibility = visibility
        self.session.flush()
        return chat
