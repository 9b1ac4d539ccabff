"""
Student record lifecycle: admin CRUD, student self-service and the dashboard.

Students only ever reach their own record (looked up by the caller's user id);
admins address records by primary key.
"""

import logging
import math
from typing import Optional

from sqlalchemy import func, or_
from sqlalchemy.orm import Session, joinedload

from ..core.exceptions import Conflict, NotFound
from ..core.patch import apply_patch
from ..models.student import StudentRecord
from ..models.user import User
from ..schemas.student import (
    AcademicInfo, AcademicPerformance, Address, Documents, EmergencyContact,
    FinancialInfo, GuardianInfo, HostelInfo, OwnProfileUpdate, PlacementInfo,
    StudentCreate, StudentDetail, StudentUpdate
)
from .users import commit_or_conflict, ensure_email_available, ensure_identity_available, new_user

logger = logging.getLogger(__name__)

DEFAULT_PAGE_SIZE = 10
MAX_PAGE_SIZE = 100

# stored column -> value type used to validate patches against it
NESTED_VALUE_TYPES = {
    "address": Address,
    "academic_info": AcademicInfo,
    "guardian_info": GuardianInfo,
    "emergency_contact": EmergencyContact,
    "documents": Documents,
    "academic_performance": AcademicPerformance,
    "financial_info": FinancialInfo,
    "hostel_info": HostelInfo,
    "placement_info": PlacementInfo,
}


def student_payload(record: StudentRecord) -> dict:
    return StudentDetail.model_validate(record).to_json()


def _record_query(db: Session):
    return db.query(StudentRecord).options(joinedload(StudentRecord.user))


def get_record_or_404(db: Session, record_id: int) -> StudentRecord:
    record = _record_query(db).filter(StudentRecord.id == record_id).first()
    if not record:
        raise NotFound("Student not found")
    return record


def ensure_student_id_available(db: Session, student_id: str, exclude_id: Optional[int] = None) -> None:
    query = db.query(StudentRecord).filter(StudentRecord.student_id == student_id)
    if exclude_id is not None:
        query = query.filter(StudentRecord.id != exclude_id)
    if query.first():
        raise Conflict("Student with this ID already exists")


def patch_nested(record: StudentRecord, field: str, patch) -> None:
    """Shallow-merge ``patch`` into the nested value stored in ``field``."""
    if patch is None:
        return
    value_type = NESTED_VALUE_TYPES[field]
    setattr(record, field, apply_patch(value_type, getattr(record, field), patch, field=field))


# Student self-service
def get_own_record(db: Session, user: User) -> StudentRecord:
    record = _record_query(db).filter(StudentRecord.user_id == user.id).first()
    if not record:
        raise NotFound("Student profile not found")
    return record


def get_own_profile(db: Session, user: User) -> dict:
    return student_payload(get_own_record(db, user))


def get_own_academic_record(db: Session, user: User) -> dict:
    record = get_own_record(db, user)
    detail = StudentDetail.model_validate(record)
    academic = detail.academic_info
    return {
        "department": academic.department,
        "course": academic.course,
        "year": academic.year,
        "semester": academic.semester,
        "cgpa": academic.cgpa,
        "status": detail.status,
        "enrollmentDate": _iso(detail.enrollment_date),
        "graduationDate": _iso(detail.graduation_date),
    }


def get_own_personal_info(db: Session, user: User) -> dict:
    detail = StudentDetail.model_validate(get_own_record(db, user)).to_json()
    return {
        "name": user.full_name,
        "email": user.email,
        "username": user.username,
        "dateOfBirth": detail["dateOfBirth"],
        "gender": detail["gender"],
        "phone": detail["phone"],
        "address": detail["address"],
        "guardianInfo": detail["guardianInfo"],
        "emergencyContact": detail["emergencyContact"],
    }


def get_own_documents(db: Session, user: User) -> dict:
    record = get_own_record(db, user)
    return Documents.model_validate(record.documents or {}).to_json()


def get_own_status(db: Session, user: User) -> dict:
    detail = StudentDetail.model_validate(get_own_record(db, user))
    return {
        "currentStatus": detail.status,
        "enrollmentDate": _iso(detail.enrollment_date),
        "graduationDate": _iso(detail.graduation_date),
        "department": detail.academic_info.department,
        "course": detail.academic_info.course,
    }


def update_own_profile(db: Session, user: User, payload: OwnProfileUpdate) -> dict:
    record = get_own_record(db, user)

    if payload.phone:
        record.phone = payload.phone
    patch_nested(record, "address", payload.address)
    patch_nested(record, "emergency_contact", payload.emergency_contact)

    db.commit()
    db.refresh(record)
    logger.info("Student %s updated own profile", record.student_id)
    return student_payload(record)


# Admin operations
def list_students(
    db: Session,
    page: int = 1,
    limit: int = DEFAULT_PAGE_SIZE,
    search: Optional[str] = None,
    department: Optional[str] = None,
    status: Optional[str] = None,
    year: Optional[int] = None,
) -> dict:
    page = max(page or 1, 1)
    limit = min(max(limit or DEFAULT_PAGE_SIZE, 1), MAX_PAGE_SIZE)

    query = _record_query(db).join(User, StudentRecord.user_id == User.id)

    if search:
        term = search.lower()
        query = query.filter(or_(
            func.lower(StudentRecord.student_id).contains(term, autoescape=True),
            func.lower(User.first_name).contains(term, autoescape=True),
            func.lower(User.last_name).contains(term, autoescape=True),
            func.lower(User.email).contains(term, autoescape=True),
        ))

    if department:
        query = query.filter(
            func.lower(StudentRecord.academic_info["department"].as_string()).contains(
                department.lower(), autoescape=True
            )
        )

    if status:
        query = query.filter(StudentRecord.status == status)

    if year:
        query = query.filter(StudentRecord.academic_info["year"].as_integer() == year)

    total = query.count()
    records = (
        query.order_by(StudentRecord.created_at.desc(), StudentRecord.id.desc())
        .offset((page - 1) * limit)
        .limit(limit)
        .all()
    )

    total_pages = math.ceil(total / limit)
    return {
        "students": [student_payload(r) for r in records],
        "pagination": {
            "currentPage": page,
            "limit": limit,
            "totalPages": total_pages,
            "totalStudents": total,
            "hasNextPage": page < total_pages,
            "hasPrevPage": page > 1,
        },
    }


def get_student(db: Session, record_id: int) -> dict:
    return student_payload(get_record_or_404(db, record_id))


def create_student(db: Session, payload: StudentCreate) -> dict:
    # Both uniqueness checks run before anything is written
    ensure_identity_available(db, payload.username, payload.email)
    ensure_student_id_available(db, payload.student_id)

    user = new_user(payload, role="student")
    record = StudentRecord(
        user=user,
        student_id=payload.student_id,
        date_of_birth=payload.date_of_birth,
        gender=payload.gender,
        phone=payload.phone,
        address=payload.address.model_dump(mode="json"),
        academic_info=payload.academic_info.model_dump(mode="json"),
        guardian_info=payload.guardian_info.model_dump(mode="json"),
        emergency_contact=payload.emergency_contact.model_dump(mode="json"),
        documents=(payload.documents or Documents()).model_dump(mode="json"),
        academic_performance=(payload.academic_performance or AcademicPerformance()).model_dump(mode="json"),
        financial_info=(payload.financial_info or FinancialInfo()).model_dump(mode="json"),
        hostel_info=(payload.hostel_info or HostelInfo()).model_dump(mode="json"),
        placement_info=(payload.placement_info or PlacementInfo()).model_dump(mode="json"),
        remarks=payload.remarks,
    )

    # User and record are flushed and committed together
    db.add(user)
    db.add(record)
    commit_or_conflict(db, "User or student with these details already exists")
    db.refresh(record)

    logger.info("Created student %s for user %s", record.student_id, user.username)
    return student_payload(record)


def update_student(db: Session, record_id: int, payload: StudentUpdate) -> dict:
    record = get_record_or_404(db, record_id)
    user = record.user

    if payload.email:
        ensure_email_available(db, payload.email, owner_id=user.id,
                               message="Email is already taken by another user")
    if payload.student_id and payload.student_id != record.student_id:
        ensure_student_id_available(db, payload.student_id, exclude_id=record.id)

    if payload.first_name:
        user.first_name = payload.first_name
    if payload.last_name:
        user.last_name = payload.last_name
    if payload.email:
        user.email = payload.email

    if payload.student_id:
        record.student_id = payload.student_id
    if payload.date_of_birth:
        record.date_of_birth = payload.date_of_birth
    if payload.gender:
        record.gender = payload.gender
    if payload.phone:
        record.phone = payload.phone
    if payload.last_attendance_date:
        record.last_attendance_date = payload.last_attendance_date
    if payload.remarks is not None:
        record.remarks = payload.remarks

    for field in NESTED_VALUE_TYPES:
        patch_nested(record, field, getattr(payload, field))

    if payload.status:
        record.set_status(payload.status)

    commit_or_conflict(db, "Email or student ID is already taken")
    db.refresh(record)
    return student_payload(record)


def set_student_status(db: Session, record_id: int, status: str) -> dict:
    record = get_record_or_404(db, record_id)
    record.set_status(status)
    db.commit()
    db.refresh(record)

    return {
        "id": record.id,
        "studentId": record.student_id,
        "name": record.user.full_name,
        "email": record.user.email,
        "status": record.status,
        "graduationDate": _iso(record.graduation_date),
    }


def delete_student(db: Session, record_id: int) -> None:
    """Remove the student record; the owning user account is kept."""
    record = get_record_or_404(db, record_id)
    db.delete(record)
    db.commit()
    logger.info("Deleted student record %s", record_id)


def dashboard(db: Session) -> dict:
    total_students = db.query(StudentRecord).count()
    active_students = db.query(StudentRecord).filter(StudentRecord.status == "active").count()
    total_users = db.query(User).count()

    recent = (
        _record_query(db)
        .order_by(StudentRecord.created_at.desc(), StudentRecord.id.desc())
        .limit(5)
        .all()
    )

    return {
        "statistics": {
            "totalStudents": total_students,
            "activeStudents": active_students,
            "totalUsers": total_users,
            "inactiveStudents": total_students - active_students,
        },
        "recentStudents": [
            {
                "id": r.id,
                "studentId": r.student_id,
                "name": r.user.full_name,
                "email": r.user.email,
                "department": (r.academic_info or {}).get("department"),
                "status": r.status,
                "createdAt": _iso(r.created_at),
            }
            for r in recent
        ],
    }


def _iso(value) -> Optional[str]:
    return value.isoformat() if value else None
