from typing import Optional

from fastapi import APIRouter, Depends, status
from fastapi.security import HTTPAuthorizationCredentials
from sqlalchemy.orm import Session

from ..core.permissions import require_any_role, security
from ..database import get_db
from ..models.user import User
from ..schemas.auth import RegisterRequest
from ..schemas.base import success
from ..schemas.user import PasswordChange, ProfileUpdate, UserLogin
from ..services import auth as auth_service

router = APIRouter(prefix="/api/auth", tags=["authentication"])


@router.post("/register", status_code=status.HTTP_201_CREATED)
def register(
    payload: RegisterRequest,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    db: Session = Depends(get_db)
):
    """Register a user; admins need an admin caller unless no admin exists yet"""
    token = credentials.credentials if credentials else None
    result = auth_service.register(db, payload, token)
    message = "First admin user registered successfully" if result["isFirstAdmin"] else "User registered successfully"
    return success(result, message)


@router.post("/login")
def login(payload: UserLogin, db: Session = Depends(get_db)):
    result = auth_service.login(db, payload.email, payload.password)
    return success(result, "Login successful")


@router.get("/profile")
def get_profile(current_user: User = Depends(require_any_role)):
    return success({"user": auth_service.get_profile(current_user)})


@router.put("/profile")
def update_profile(
    payload: ProfileUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_any_role)
):
    user = auth_service.update_profile(db, current_user, payload)
    return success({"user": user}, "Profile updated successfully")


@router.post("/change-password")
def change_password(
    payload: PasswordChange,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_any_role)
):
    auth_service.change_password(db, current_user, payload)
    return success(message="Password changed successfully")
