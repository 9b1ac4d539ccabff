import logging
from typing import Optional

from fastapi import Depends, Request
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session
from ..database import get_db
from ..models.user import User
from .exceptions import Forbidden, Unauthenticated
from .security import verify_token

logger = logging.getLogger(__name__)

security = HTTPBearer(auto_error=False)

DEACTIVATED_MESSAGE = "Account is deactivated. Please contact administrator."


def resolve_token_user(token: str, db: Session) -> User:
    """Return the active user a session token was issued for, or raise Unauthenticated."""
    user_id = verify_token(token)
    if user_id is None:
        raise Unauthenticated("Token is not valid.")

    user = db.query(User).filter(User.id == user_id).first()
    if user is None:
        raise Unauthenticated("Token is not valid. User not found.")

    if not user.is_active:
        raise Unauthenticated(DEACTIVATED_MESSAGE)

    return user


def get_current_user(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    db: Session = Depends(get_db)
) -> User:
    """Get current authenticated user from the Authorization header."""
    if not credentials or not credentials.credentials:
        raise Unauthenticated("Access denied. No token provided.")

    user = resolve_token_user(credentials.credentials, db)
    request.state.user = user
    return user


def require_roles(*roles: str):
    """Dependency factory: the caller must hold one of ``roles``"""
    def role_checker(current_user: User = Depends(get_current_user)) -> User:
        if current_user.role not in roles:
            logger.warning("User %s with role %s denied (needs %s)", current_user.id, current_user.role, roles)
            raise Forbidden(f"User role '{current_user.role}' is not authorized to access this route")
        return current_user
    return role_checker


require_admin = require_roles("admin")
require_student = require_roles("student")
require_any_role = require_roles("admin", "student")
