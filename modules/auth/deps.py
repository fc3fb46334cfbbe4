"""
Auth Module - Dependencies
===========================
FastAPI dependencies for the stubbed bearer-token check.
These are injected into route handlers via Depends().

Users live in an external identity service; the token's `sub` claim is
trusted as the user id and `is_admin` marks operator tokens.
"""

from dataclasses import dataclass
from typing import Optional

from fastapi import Request, Depends, HTTPException, status

from common.security import decode_token


@dataclass(frozen=True)
class CurrentUser:
    id: int
    is_admin: bool = False


def get_current_user(request: Request) -> Optional[CurrentUser]:
    """
    Identify the current user from the `Authorization: Bearer` header.
    Returns CurrentUser or None.
    """
    header = request.headers.get("Authorization", "")
    scheme, _, token = header.partition(" ")
    if scheme.lower() != "bearer" or not token:
        return None

    payload = decode_token(token)
    if not payload:
        return None

    sub = payload.get("sub")
    if sub is None or not str(sub).isdigit():
        return None

    return CurrentUser(id=int(sub), is_admin=bool(payload.get("is_admin", False)))


def require_user(user=Depends(get_current_user)) -> CurrentUser:
    """Require any authenticated user. Raises 401 if not logged in."""
    if not user:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="login_required")
    return user


def require_admin(user=Depends(get_current_user)) -> CurrentUser:
    """Only allow operator tokens. Raises 403 otherwise."""
    if not user or not user.is_admin:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="admin_required")
    return user
