"""
HTML pages: a new chat and an existing chat, rendered from ``templates/chat.html``.
"""

from pathlib import Path

from fastapi import APIRouter, Cookie, Depends, HTTPException, Request
from fastapi.encoders import jsonable_encoder
from fastapi.responses import HTMLResponse
from fastapi.templating import Jinja2Templates

from meddy.api.ai_models import DEFAULT_MODEL_NAME, MODELS, find_model
from meddy.api.auth import get_current_user
from meddy.api.fast_api import MODEL_COOKIE
from meddy.api.messages import convert_to_ui_messages, generate_uuid, sanitize_ui_messages
from meddy.database.core.funcs import get_chat_by_id, get_messages_by_chat_id

templates = Jinja2Templates(directory=str(Path(__file__).resolve().parent.parent / "templates"))

router = APIRouter()


def _selected_model(model_id: str | None) -> str:
    return model_id if find_model(model_id) else DEFAULT_MODEL_NAME


def _render(request: Request, **context) -> HTMLResponse:
    return templates.TemplateResponse(request, "chat.html", {"models": MODELS, **context})


@router.get("/", response_class=HTMLResponse)
async def new_chat(
    request: Request,
    user: dict | None = Depends(get_current_user),
    model_id: str | None = Cookie(None, alias=MODEL_COOKIE),
):
    if not user:
        raise HTTPException(status_code=404, detail="Not Found")

    return _render(
        request,
        chat_id=generate_uuid(),
        messages=[],
        selected_model=_selected_model(model_id),
        read_only=False,
        user=user,
    )


@router.get("/chat/{id}", response_class=HTMLResponse)
async def existing_chat(
    id: str,
    request: Request,
    user: dict | None = Depends(get_current_user),
    model_id: str | None = Cookie(None, alias=MODEL_COOKIE),
):
    """Render a stored chat; private chats are only visible to their owner."""
    if not user:
        raise HTTPException(status_code=404, detail="Not Found")

    chat = get_chat_by_id(id)
    if not chat:
        raise HTTPException(status_code=404, detail="Not Found")

    is_owner = chat["userId"] == user["id"]
    if chat["visibility"] == "private" and not is_owner:
        raise HTTPException(status_code=404, detail="Not Found")

    return _render(
        request,
        chat_id=id,
        messages=jsonable_encoder(sanitize_ui_messages(convert_to_ui_messages(get_messages_by_chat_id(id)))),
        selected_model=_selected_model(model_id),
        read_only=not is_owner,
        user=user,
    )
