"""
Authentication service: registration, login and own-account maintenance.

Registration normally needs an admin caller for admin accounts. The one named
exception is the bootstrap admin: while no admin exists, the first admin may
register without a token. Student self-registration is public.
"""

import logging
import time
from datetime import date, datetime
from typing import Optional

from sqlalchemy.orm import Session

from ..core.exceptions import Forbidden, InvalidArgument, Unauthenticated
from ..core.patch import apply_patch
from ..core.permissions import DEACTIVATED_MESSAGE, resolve_token_user
from ..core.security import create_session_token, get_password_hash, verify_password
from ..models.student import StudentRecord
from ..models.user import User
from ..schemas.auth import RegisterRequest
from ..schemas.student import (
    AcademicInfo, AcademicPerformance, Address, Documents, EmergencyContact,
    FinancialInfo, GuardianInfo, HostelInfo, PlacementInfo, RegistrationStudentData
)
from ..schemas.user import PasswordChange, ProfileUpdate
from .students import ensure_student_id_available
from .users import (
    commit_or_conflict, count_admins, ensure_email_available,
    ensure_identity_available, new_user, user_payload
)

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = "Invalid credentials"

PLACEHOLDER_PHONE = "0000000000"
DEFAULT_ADDRESS = {
    "street": "N/A",
    "city": "N/A",
    "state": "N/A",
    "zip_code": "000000",
    "country": "India",
}
DEFAULT_ACADEMIC_INFO = {
    "college_name": "N/A",
    "department": "N/A",
    "course": "N/A",
    "year": 1,
    "semester": 1,
    "cgpa": 0,
}
DEFAULT_GUARDIAN_INFO = {
    "name": "N/A",
    "relationship": "N/A",
    "phone": PLACEHOLDER_PHONE,
    "email": "na@example.com",
}
DEFAULT_EMERGENCY_CONTACT = {
    "name": "N/A",
    "relationship": "N/A",
    "phone": PLACEHOLDER_PHONE,
}


def is_bootstrap_admin_registration(db: Session, role: str) -> bool:
    """True when an admin registers while no admin account exists yet."""
    return role == "admin" and count_admins(db) == 0


def authorize_registration(db: Session, role: str, token: Optional[str]) -> bool:
    """Check who may register ``role``; returns whether this is the bootstrap admin."""
    if is_bootstrap_admin_registration(db, role):
        logger.info("No admin exists yet, allowing first admin registration without authentication")
        return True

    if role == "student":
        return False

    if not token:
        raise Unauthenticated("Authentication required to register new users")

    caller = resolve_token_user(token, db)
    if caller.role != "admin":
        raise Forbidden("Only admins can register new users")
    return False


def default_student_record(user: User, data: Optional[RegistrationStudentData]) -> StudentRecord:
    """Companion record for a self-registered student, placeholders filling the gaps."""
    data = data or RegistrationStudentData()
    return StudentRecord(
        user=user,
        student_id=data.student_id or f"STU{int(time.time() * 1000)}",
        date_of_birth=data.date_of_birth or date.today(),
        gender=data.gender or "other",
        phone=data.phone or PLACEHOLDER_PHONE,
        address=apply_patch(Address, DEFAULT_ADDRESS, data.address, field="studentData.address"),
        academic_info=apply_patch(
            AcademicInfo, DEFAULT_ACADEMIC_INFO, data.academic_info, field="studentData.academicInfo"
        ),
        guardian_info=apply_patch(
            GuardianInfo, DEFAULT_GUARDIAN_INFO, data.guardian_info, field="studentData.guardianInfo"
        ),
        emergency_contact=apply_patch(
            EmergencyContact, DEFAULT_EMERGENCY_CONTACT, data.emergency_contact,
            field="studentData.emergencyContact"
        ),
        documents=Documents().model_dump(mode="json"),
        academic_performance=AcademicPerformance().model_dump(mode="json"),
        financial_info=FinancialInfo().model_dump(mode="json"),
        hostel_info=HostelInfo().model_dump(mode="json"),
        placement_info=PlacementInfo().model_dump(mode="json"),
    )


def register(db: Session, payload: RegisterRequest, token: Optional[str] = None) -> dict:
    is_first_admin = authorize_registration(db, payload.role, token)

    ensure_identity_available(db, payload.username, payload.email)

    user = new_user(payload)
    record = None
    if payload.role == "student":
        record = default_student_record(user, payload.student_data)
        ensure_student_id_available(db, record.student_id)

    # User and companion record are committed together
    db.add(user)
    if record is not None:
        db.add(record)

    commit_or_conflict(db)
    db.refresh(user)

    if is_first_admin:
        logger.info("First admin user %s created", user.username)
    logger.info("Registered %s user %s", user.role, user.username)

    return {
        "user": user_payload(user),
        "token": create_session_token(user.id),
        "isFirstAdmin": is_first_admin,
    }


def login(db: Session, email: str, password: str) -> dict:
    user = db.query(User).filter(User.email == email).first()

    # Unknown email and wrong password must be indistinguishable
    if not user or not verify_password(password, user.password_hash):
        logger.warning("Failed login attempt for %s", email)
        raise Unauthenticated(INVALID_CREDENTIALS)

    if not user.is_active:
        logger.warning("Login refused for deactivated user %s", user.username)
        raise Unauthenticated(DEACTIVATED_MESSAGE)

    user.last_login = datetime.utcnow()
    db.commit()
    db.refresh(user)

    logger.info("User %s logged in", user.username)
    return {"user": user_payload(user), "token": create_session_token(user.id)}


def get_profile(user: User) -> dict:
    return user_payload(user)


def update_profile(db: Session, user: User, payload: ProfileUpdate) -> dict:
    if payload.email and payload.email != user.email:
        ensure_email_available(db, payload.email)

    if payload.first_name:
        user.first_name = payload.first_name
    if payload.last_name:
        user.last_name = payload.last_name
    if payload.email:
        user.email = payload.email

    commit_or_conflict(db, "Email is already taken")
    db.refresh(user)
    return user_payload(user)


def change_password(db: Session, user: User, payload: PasswordChange) -> None:
    if not verify_password(payload.current_password, user.password_hash):
        raise InvalidArgument("Current password is incorrect")

    user.password_hash = get_password_hash(payload.new_password)
    db.commit()
    logger.info("User %s changed password", user.username)
