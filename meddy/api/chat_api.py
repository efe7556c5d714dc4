"""
FastAPI Router: Chat

- ``POST /api/chat`` streams one assistant turn as server-sent events
- ``DELETE /api/chat`` removes a chat with its messages
- ``PATCH /api/chat/visibility`` switches a chat between private and public
"""

import json

from fastapi import APIRouter, Depends, HTTPException, Request, Response

from meddy.api.ai_models import find_model
from meddy.api.auth import get_current_user, require_user
from meddy.api.data_stream import DataStream, create_data_stream_response
from meddy.api.messages import convert_to_core_messages, generate_uuid, get_most_recent_user_message, is_uuid
from meddy.api.models import ChatRequest, VisibilityUpdate
from meddy.api.prompts import SYSTEM_PROMPT
from meddy.database.core.funcs import (
    delete_chat_by_id,
    get_chat_by_id,
    get_user_by_id,
    save_chat,
    save_messages,
    update_chat_visibility_by_id,
)
from meddy.utils.logger import get_logger

logger = get_logger("chat_api")

router = APIRouter()


def _with_user_info(content: str, profile: dict | None) -> str:
    if not profile or not (profile.get("name") or profile.get("age")):
        return content
    info = "\n\nUser Info:\n"
    if profile.get("name"):
        info += f"Name: {profile['name']}\n"
    if profile.get("age"):
        info += f"Age: {profile['age']}"
    return f"{content}{info}"


@router.post("/chat")
async def chat(data: ChatRequest, request: Request, user: dict = Depends(require_user)):
    """
    Run one chat turn.

    Request Body
    ------------
    ChatRequest {id: str, messages: list[UI message], modelId: str}

    Returns
    -------
    StreamingResponse
        ``data:`` frames: a ``user-message-id`` data part, a ``debug`` data
        part with the prompts, then the streamed turn.

    Raises
    ------
    HTTPException 401
        Without a session.
    HTTPException 404
        If ``modelId`` is not in the catalog.
    HTTPException 400
        If ``id`` is not a UUID, or the conversation holds no user message.
    """
    if not is_uuid(data.id):
        raise HTTPException(status_code=400, detail="Invalid chat id")

    model_spec = find_model(data.modelId)
    if not model_spec:
        raise HTTPException(status_code=404, detail="Model not found")

    core_messages = convert_to_core_messages(data.messages)
    user_message = get_most_recent_user_message(core_messages)
    if not user_message:
        raise HTTPException(status_code=400, detail="No user message found")

    if len(core_messages) == 1:
        user_message["content"] = _with_user_info(user_message["content"], get_user_by_id(user["id"]))

    pipeline = request.app.state.pipeline

    chat_row = get_chat_by_id(data.id)
    if not chat_row:
        title = await pipeline.generate_title_from_user_message(user_message)
        save_chat(id=data.id, user_id=user["id"], title=title)
    elif chat_row["userId"] != user["id"]:
        raise HTTPException(status_code=401, detail="Unauthorized")

    user_message_id = generate_uuid()
    save_messages([{
        "id": user_message_id,
        "chat_id": data.id,
        "role": "user",
        "content": user_message["content"],
    }])

    async def execute(stream: DataStream) -> None:
        await stream.write_data({"type": "user-message-id", "content": user_message_id})
        await stream.write_data({
            "type": "debug",
            "content": json.dumps({"type": "prompts", "system": SYSTEM_PROMPT, "messages": core_messages}),
        })
        await pipeline.run_turn(
            stream=stream,
            model_spec=model_spec,
            core_messages=core_messages,
            user_id=user["id"],
            chat_id=data.id,
        )

    return create_data_stream_response(execute)


@router.delete("/chat")
def delete_chat(id: str | None = None, user: dict | None = Depends(get_current_user)):
    """
    Delete a chat owned by the session user.

    Raises
    ------
    HTTPException 404
        Without ``id`` or for an unknown chat.
    HTTPException 401
        Without a session or when the chat belongs to another user.
    HTTPException 500
        If the deletion fails.
    """
    if not id:
        raise HTTPException(status_code=404, detail="Not Found")
    if not user:
        raise HTTPException(status_code=401, detail="Unauthorized")

    try:
        chat_row = get_chat_by_id(id)
        if not chat_row:
            raise HTTPException(status_code=404, detail="Not Found")
        if chat_row["userId"] != user["id"]:
            raise HTTPException(status_code=401, detail="Unauthorized")
        delete_chat_by_id(id)
    except HTTPException:
        raise
    except Exception:
        logger.exception(f"Failed to delete chat {id}")
        raise HTTPException(status_code=500, detail="An error occurred while processing your request")

    return Response(content="Chat deleted", status_code=200, media_type="text/plain")


@router.patch("/chat/visibility")
def update_visibility(data: VisibilityUpdate, user: dict = Depends(require_user)):
    """Switch an owned chat between ``private`` and ``public``."""
    chat_row = get_chat_by_id(data.chatId)
    if not chat_row:
        raise HTTPException(status_code=404, detail="Not Found")
    if chat_row["userId"] != user["id"]:
        raise HTTPException(status_code=401, detail="Unauthorized")
    return update_chat_visibility_by_id(data.chatId, data.visibility)
