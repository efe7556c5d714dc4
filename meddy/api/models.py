from datetime import datetime
from typing import Any, Literal

from pydantic import BaseModel, EmailStr, Field


class AuthForm(BaseModel):
    email: EmailStr
    password: str = Field(min_length=6)


class ChatRequest(BaseModel):
    id: str
    messages: list[dict[str, Any]]
    modelId: str


class VisibilityUpdate(BaseModel):
    chatId: str
    visibility: Literal["public", "private"]


class DocumentSave(BaseModel):
    title: str
    content: str | None = None
    kind: Literal["text", "code"] = "text"


class DeleteAfter(BaseModel):
    timestamp: datetime


class ModelSelection(BaseModel):
    modelId: str
