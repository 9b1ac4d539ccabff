"""
Credential store operations and admin user management.

The "at least one active admin" invariant lives here: every path that deletes,
demotes or deactivates a user goes through ``ensure_admin_remains`` inside the
same transaction that performs the change.
"""

import logging
from typing import List, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ..core.exceptions import Conflict, InvalidOperation, NotFound
from ..core.security import get_password_hash
from ..models.user import User
from ..schemas.user import UserCreate, UserResponse, UserUpdate

logger = logging.getLogger(__name__)

DUPLICATE_USER_MESSAGE = "User with this email or username already exists"
LAST_ADMIN_MESSAGE = "Cannot delete the last admin user"


def user_payload(user: User) -> dict:
    return UserResponse.model_validate(user).to_json()


def commit_or_conflict(db: Session, message: str = DUPLICATE_USER_MESSAGE) -> None:
    """Commit, reporting a unique-key race lost to another request as a conflict."""
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise Conflict(message)


def ensure_identity_available(db: Session, username: str, email: str) -> None:
    existing = db.query(User).filter((User.username == username) | (User.email == email)).first()
    if existing:
        raise Conflict(DUPLICATE_USER_MESSAGE)


def ensure_email_available(db: Session, email: str, owner_id: Optional[int] = None,
                           message: str = "Email is already taken") -> None:
    query = db.query(User).filter(User.email == email)
    if owner_id is not None:
        query = query.filter(User.id != owner_id)
    if query.first():
        raise Conflict(message)


def count_admins(db: Session) -> int:
    return db.query(User).filter(User.role == "admin").count()


def ensure_admin_remains(db: Session, user: User, message: str = LAST_ADMIN_MESSAGE) -> None:
    """Refuse a change that would leave no active admin besides ``user``."""
    if user.role != "admin":
        return
    other_admin = (
        db.query(User)
        .filter(User.role == "admin", User.is_active.is_(True), User.id != user.id)
        .with_for_update()
        .first()
    )
    if other_admin is None:
        raise InvalidOperation(message)


def get_user_or_404(db: Session, user_id: int) -> User:
    user = db.query(User).filter(User.id == user_id).first()
    if not user:
        raise NotFound("User not found")
    return user


def new_user(payload: UserCreate, role: Optional[str] = None) -> User:
    return User(
        username=payload.username,
        email=payload.email,
        password_hash=get_password_hash(payload.password),
        first_name=payload.first_name,
        last_name=payload.last_name,
        role=role or payload.role,
        is_active=True,
    )


def list_users(db: Session) -> List[dict]:
    users = db.query(User).order_by(User.created_at.desc(), User.id.desc()).all()
    return [user_payload(u) for u in users]


def create_user(db: Session, payload: UserCreate) -> dict:
    ensure_identity_available(db, payload.username, payload.email)

    user = new_user(payload)
    db.add(user)
    commit_or_conflict(db)
    db.refresh(user)

    logger.info("Admin created user %s (%s)", user.username, user.role)
    return user_payload(user)


def update_user(db: Session, user_id: int, payload: UserUpdate) -> dict:
    user = get_user_or_404(db, user_id)

    if payload.email and payload.email != user.email:
        ensure_email_available(db, payload.email, message="User with this email already exists")

    demoted = payload.role is not None and payload.role != "admin"
    deactivated = payload.is_active is False
    if (demoted or deactivated) and user.is_active:
        ensure_admin_remains(db, user, message="Cannot demote or deactivate the last admin user")

    if payload.first_name:
        user.first_name = payload.first_name
    if payload.last_name:
        user.last_name = payload.last_name
    if payload.email:
        user.email = payload.email
    if payload.role:
        user.role = payload.role
    if payload.is_active is not None:
        user.is_active = payload.is_active

    commit_or_conflict(db, "User with this email already exists")
    db.refresh(user)
    return user_payload(user)


def delete_user(db: Session, user_id: int) -> None:
    user = get_user_or_404(db, user_id)

    # Re-checked right before the delete, inside the deleting transaction
    ensure_admin_remains(db, user)

    # delete-orphan cascade removes the student record along with a student user
    db.delete(user)
    db.commit()
    logger.info("Deleted user %s (%s)", user_id, user.role)
