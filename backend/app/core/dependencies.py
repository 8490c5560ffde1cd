"""Dependencies resolving the caller from the bearer token and checking their role."""

from typing import Annotated
from uuid import UUID

import jwt
from fastapi import Depends, Header
from sqlalchemy.orm import Session

from app.core.app_exceptions import forbidden, unauthorized
from app.core.security import verify_access_token
from app.db.session import get_db
from app.models.user import ADMIN_ROLES, User, UserRole


def bearer_token(authorization: str | None) -> str:
    if not authorization:
        raise unauthorized("Missing token")
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        raise unauthorized("Invalid authorization header format. Expected: Bearer <token>")
    return token.strip()


def get_current_user(
    authorization: Annotated[str | None, Header()] = None,
    db: Session = Depends(get_db),
) -> User:
    """The signed-in user. A valid token does not let banned or deactivated accounts through."""
    token = bearer_token(authorization)
    try:
        user_id = UUID(verify_access_token(token)["sub"])
    except (jwt.InvalidTokenError, KeyError, ValueError) as e:
        raise unauthorized("Invalid token") from e

    user = db.get(User, user_id)
    if user is None:
        raise unauthorized("User not found")
    if user.banned:
        raise forbidden("Account is banned")
    if not user.is_active:
        raise forbidden("Account is inactive")
    return user


def require_roles(*allowed_roles: UserRole):
    allowed = frozenset(role.value for role in allowed_roles)

    def role_checker(current_user: User = Depends(get_current_user)) -> User:
        if current_user.role not in allowed:
            raise forbidden("Insufficient permissions", {"required_roles": sorted(allowed)})
        return current_user

    return role_checker


require_admin = require_roles(*ADMIN_ROLES)
