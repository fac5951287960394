"""Caller identity.

Bearer tokens are `<user_id>.<hex HMAC-SHA256 of user_id keyed with AUTH_SECRET>`,
minted by the storefront's auth gateway. The role comes from the users table.
"""
from dataclasses import dataclass
from typing import Optional
import hashlib
import hmac
import logging

from fastapi import Depends, HTTPException, Request
from sqlalchemy.orm import Session

from . import crud, database
from .models import UserRole

logger = logging.getLogger(__name__)


@dataclass
class Caller:
    user_id: Optional[str] = None
    role: UserRole = UserRole.USER

    @property
    def is_authenticated(self) -> bool:
        return self.user_id is not None

    @property
    def is_admin(self) -> bool:
        return self.user_id is not None and self.role == UserRole.ADMIN


def _signature(user_id: str, secret: str) -> str:
    return hmac.new(secret.encode("utf-8"), user_id.encode("utf-8"), hashlib.sha256).hexdigest()


def sign_token(user_id: str, secret: str) -> str:
    return f"{user_id}.{_signature(user_id, secret)}"


def verify_token(token: str, secret: str) -> Optional[str]:
    """Return the user id carried by a valid token, else None."""
    if not secret or not token:
        return None
    user_id, _, signature = token.rpartition(".")
    if not user_id or not signature:
        return None
    if not hmac.compare_digest(_signature(user_id, secret), signature):
        return None
    return user_id


def get_caller(request: Request) -> Caller:
    """Identify the caller from the bearer token without touching the database.

    A missing or bad token means an anonymous caller.
    """
    header = request.headers.get("Authorization")
    if not header:
        return Caller()
    token = header.split(" ", 1)[1] if header.startswith("Bearer ") else header
    user_id = verify_token(token.strip(), request.app.state.settings.auth_secret)
    if user_id is None:
        # Do not log the token itself
        logger.warning("Auth error: rejected bearer token")
        return Caller()
    return Caller(user_id=user_id)


def require_user(caller: Caller = Depends(get_caller)) -> Caller:
    if not caller.is_authenticated:
        raise HTTPException(status_code=401, detail="Not authenticated")
    return caller


def require_admin(caller: Caller = Depends(get_caller), db: Session = Depends(database.get_db)) -> Caller:
    if caller.is_authenticated:
        caller.role = crud.get_user_role(db, caller.user_id)
    if not caller.is_admin:
        raise HTTPException(status_code=403, detail="Admin access required")
    return caller
