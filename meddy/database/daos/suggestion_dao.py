from sqlalchemy import select

from meddy.database.daos.base import BaseDao, as_uuid
from meddy.database.entities import Suggestion


class SuggestionDao(BaseDao):
    """Persistence operations on `Suggestion` rows."""

    def create_many(self, suggestions: list[dict]) -> list[Suggestion]:
        rows = []
        for suggestion in suggestions:
            row = Suggestion(
                id=as_uuid(suggestion["id"]),
                document_id=as_uuid(suggestion["document_id"]),
                document_created_at=suggestion["document_created_at"],
                original_text=suggestion["original_text"],
                suggested_text=suggestion["suggested_text"],
                description=suggestion.get("description"),
                is_resolved=suggestion.get("is_resolved", False),
                user_id=as_uuid(suggestion["user_id"]),
            )
            self.session.add(row)
            rows.append(row)
        self.session.flush()
        return rows

    def get_by_document_id(self, document_id) -> list[Suggestion]:
        document_id = as_uuid(document_id)
        if document_id is None:
            return []
        stmt = (
            select(Suggestion)
            .where(Suggestion.document_id == document_id)
            .order_by(Suggestion.created_at.asc())
        )
        return list(self.session.scalars(stmt))
