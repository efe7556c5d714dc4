from fastapi import Cookie, Depends, Header, HTTPException

from meddy.api.utils import verify_token
from meddy.database.core.funcs import get_user_by_id

TOKEN_COOKIE = "token"


def get_current_user(
    token: str | None = Cookie(None),
    authorization: str | None = Header(None),
) -> dict | None:
    """
    Resolve the session user from the ``token`` cookie, falling back to an
    ``Authorization: Bearer`` header. Returns None when there is no valid session.
    """
    if not token and authorization and authorization.lower().startswith("bearer "):
        token = authorization.split(" ", 1)[1]
    if not token:
        return None
    user_id = verify_token(token)
    if not user_id:
        return None
    return get_user_by_id(user_id)


def require_user(user: dict | None = Depends(get_current_user)) -> dict:
    """Dependency gating handlers on a valid session."""
    if not user:
        raise HTTPException(status_code=401, detail="Unauthorized")
    return user
