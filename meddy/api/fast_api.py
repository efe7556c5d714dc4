"""
FastAPI Router: Authentication, User Profile, History, Documents and Suggestions

This module defines the HTTP API endpoints around the chat itself. It handles:
- User login, registration and logout
- The session user's profile and chat history
- Patient file (document) revisions and their suggestions
- The chat model selection cookie

Error responses carry a plain-text body (see ``meddy.main``).
"""

from fastapi import APIRouter, Body, Depends, HTTPException, Response
from pydantic import ValidationError

from meddy.api.ai_models import find_model
from meddy.api.auth import TOKEN_COOKIE, require_user
from meddy.api.messages import is_uuid
from meddy.api.models import AuthForm, DeleteAfter, DocumentSave, ModelSelection
from meddy.api.utils import create_access_token
from meddy.database.config.config import settings
from meddy.database.core.funcs import (
    authenticate_user,
    create_user,
    delete_documents_by_id_after_timestamp,
    get_chats_by_user_id,
    get_documents_by_id,
    get_suggestions_by_document_id,
    get_user,
    get_user_by_id,
    save_document,
)
from meddy.utils.logger import get_logger

logger = get_logger("fast_api")

MODEL_COOKIE = "model-id"

router = APIRouter()
"""Creates the FastAPI router in which we define its routes"""


def _set_session_cookie(response: Response, user_id: str) -> None:
    access_token = create_access_token({"sub": user_id})
    response.set_cookie(
        key=TOKEN_COOKIE,
        value=access_token,
        httponly=True,
        secure=settings.COOKIE_SECURE,
        samesite="lax",
        max_age=settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60,
    )


@router.post("/auth/login")
async def login(response: Response, data: dict = Body(...)):
    """
    Authenticate a user and set the JWT as cookie.

    Request Body
    ------------
    {email: str, password: str}

    Returns
    -------
    dict
        ``{"status": "success", "userInfo": {"name", "age"}}`` on success,
        ``{"status": "failed"}`` on bad credentials and
        ``{"status": "invalid_data"}`` when the form does not validate.
    """
    try:
        form = AuthForm(**data)
    except ValidationError:
        return {"status": "invalid_data"}

    try:
        user = authenticate_user(form.email, form.password)
    except Exception:
        logger.exception("Login failed")
        return {"status": "failed"}

    if not user:
        return {"status": "failed"}

    _set_session_cookie(response, user["id"])
    return {"status": "success", "userInfo": {"name": user["name"], "age": user["age"]}}


@router.post("/auth/register")
async def register(response: Response, data: dict = Body(...)):
    """
    Register a new account and sign it in.

    Request Body
    ------------
    {email: str, password: str}

    Returns
    -------
    dict
        ``success`` with an empty ``userInfo``, ``user_exists``,
        ``invalid_data`` or ``failed``.
    """
    try:
        form = AuthForm(**data)
    except ValidationError:
        return {"status": "invalid_data"}

    try:
        if get_user(form.email):
            return {"status": "user_exists"}
        user = create_user(form.email, form.password)
    except Exception:
        logger.exception("Registration failed")
        return {"status": "failed"}

    _set_session_cookie(response, user["id"])
    return {"status": "success", "userInfo": {"name": None, "age": None}}


@router.post("/auth/logout")
async def logout(response: Response):
    """Logout user by clearing the JWT cookie."""
    response.delete_cookie(key=TOKEN_COOKIE)
    return True


@router.get("/user/{id}")
def user_profile(id: str, user: dict = Depends(require_user)):
    """
    Return the profile of the session user.

    Raises
    ------
    HTTPException 401
        Without a session or when ``id`` is not the session user.
    HTTPException 404
        If the user no longer exists.
    """
    if user["id"] != id:
        raise HTTPException(status_code=401, detail="Unauthorized")

    try:
        profile = get_user_by_id(id)
    except Exception:
        logger.exception(f"Failed to fetch user {id}")
        raise HTTPException(status_code=500, detail="Internal Server Error")

    if not profile:
        raise HTTPException(status_code=404, detail="User not found")
    return profile


@router.get("/history")
def history(user: dict = Depends(require_user)):
    """The session user's chats, newest first."""
    return get_chats_by_user_id(user["id"])


@router.get("/document")
def get_document(id: str | None = None, user: dict = Depends(require_user)):
    """
    Return every revision of a document, oldest first.

    Raises
    ------
    HTTPException 400
        Without ``id``.
    HTTPException 404
        If the document does not exist.
    HTTPException 401
        If the document belongs to another user.
    """
    if not id:
        raise HTTPException(status_code=400, detail="Missing id")

    documents = get_documents_by_id(id)
    if not documents:
        raise HTTPException(status_code=404, detail="Not Found")
    if documents[0]["userId"] != user["id"]:
        raise HTTPException(status_code=401, detail="Unauthorized")
    return documents


@router.post("/document")
def post_document(data: DocumentSave, id: str | None = None, user: dict = Depends(require_user)):
    """Save a new revision of document ``id``."""
    if not id:
        raise HTTPException(status_code=400, detail="Missing id")
    if not is_uuid(id):
        raise HTTPException(status_code=400, detail="Invalid id")

    documents = get_documents_by_id(id)
    if documents and documents[0]["userId"] != user["id"]:
        raise HTTPException(status_code=401, detail="Unauthorized")

    return save_document(id=id, title=data.title, kind=data.kind, content=data.content, user_id=user["id"])


@router.patch("/document")
def patch_document(data: DeleteAfter, id: str | None = None, user: dict = Depends(require_user)):
    """Delete the revisions of document ``id`` created after ``timestamp``."""
    if not id:
        raise HTTPException(status_code=400, detail="Missing id")

    documents = get_documents_by_id(id)
    if not documents:
        raise HTTPException(status_code=404, detail="Not Found")
    if documents[0]["userId"] != user["id"]:
        raise HTTPException(status_code=401, detail="Unauthorized")

    deleted = delete_documents_by_id_after_timestamp(id, data.timestamp)
    logger.info(f"Deleted {deleted} revision(s) of document {id}")
    return Response(content="Deleted", status_code=200, media_type="text/plain")


@router.get("/suggestions")
def suggestions(documentId: str | None = None, user: dict = Depends(require_user)):
    """
    Return the suggestions made on a document.

    Raises
    ------
    HTTPException 404
        Without ``documentId``.
    HTTPException 401
        If the suggestions belong to another user.
    """
    if not documentId:
        raise HTTPException(status_code=404, detail="Not Found")

    found = get_suggestions_by_document_id(documentId)
    if found and found[0]["userId"] != user["id"]:
        raise HTTPException(status_code=401, detail="Unauthorized")
    return found


@router.post("/model")
def select_model(data: ModelSelection, response: Response):
    """Remember the chosen chat model in the ``model-id`` cookie."""
    if not find_model(data.modelId):
        raise HTTPException(status_code=404, detail="Model not found")
    response.set_cookie(key=MODEL_COOKIE, value=data.modelId)
    return {"modelId": data.modelId}
