"""
Actor resolution from session tokens and the shared ownership/role checks
"""
from dataclasses import dataclass
from typing import Any, Dict, Optional

import jwt
from fastapi import Depends, Request

from app.config import settings
from app.exceptions import ForbiddenError, UnauthorizedError
from app.models import Role
from app.logging_config import logger


@dataclass(frozen=True)
class Actor:
    """Authenticated identity attached to a request"""

    user_id: str
    role: Role = Role.USER
    email: Optional[str] = None

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN


def decode_token(token: str, secret: Optional[str] = None) -> Actor:
    """
    Verify a session token and build the actor it identifies

    Raises:
        UnauthorizedError: If the token is expired, forged or lacks a user id
    """
    try:
        claims: Dict[str, Any] = jwt.decode(
            token,
            secret or settings.JWT_SECRET,
            algorithms=[settings.JWT_ALGORITHM],
        )
    except jwt.ExpiredSignatureError:
        raise UnauthorizedError("Token expired")
    except jwt.InvalidTokenError:
        raise UnauthorizedError("Access denied. Invalid token. Please login again")

    user_id = claims.get("userId")
    if not user_id:
        raise UnauthorizedError("Access denied. Invalid token. Please login again")

    try:
        role = Role(claims.get("role", Role.USER.value))
    except ValueError:
        logger.warning(f"Unknown role claim {claims.get('role')!r}, treating as user")
        role = Role.USER

    return Actor(user_id=str(user_id), role=role, email=claims.get("email"))


def _extract_token(request: Request) -> Optional[str]:
    token = request.cookies.get("token")
    if token:
        return token
    authorization = request.headers.get("Authorization", "")
    if authorization.startswith("Bearer"):
        parts = authorization.split(" ")
        return parts[1] if len(parts) > 1 and parts[1] else None
    return None


async def get_current_actor(request: Request) -> Actor:
    """Dependency resolving the actor from the ``token`` cookie or a Bearer header"""
    token = _extract_token(request)
    if not token:
        raise UnauthorizedError()
    return decode_token(token)


def ensure_admin(actor: Actor) -> None:
    if not actor.is_admin:
        raise ForbiddenError("Access denied! Admin rights required.")


def ensure_owner(actor: Actor, owner_id: str, message: str = "Not authorized to modify this resource") -> None:
    if str(owner_id) != actor.user_id:
        raise ForbiddenError(message)


async def require_admin(actor: Actor = Depends(get_current_actor)) -> Actor:
    """Dependency for admin-only routes"""
    ensure_admin(actor)
    return actor
