from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ..core.permissions import require_student
from ..database import get_db
from ..models.user import User
from ..schemas.base import success
from ..schemas.student import OwnProfileUpdate
from ..services import students as student_service

# Students only ever see the record linked to their own account
router = APIRouter(prefix="/api/student", tags=["student"])


@router.get("/profile")
def get_profile(db: Session = Depends(get_db), current_user: User = Depends(require_student)):
    return success({"student": student_service.get_own_profile(db, current_user)})


@router.put("/profile")
def update_profile(
    payload: OwnProfileUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_student)
):
    """Update phone, address and emergency contact; nested fields are merged"""
    student = student_service.update_own_profile(db, current_user, payload)
    return success({"student": student}, "Profile updated successfully")


@router.get("/academic-record")
def get_academic_record(db: Session = Depends(get_db), current_user: User = Depends(require_student)):
    return success({"academicRecord": student_service.get_own_academic_record(db, current_user)})


@router.get("/personal-info")
def get_personal_info(db: Session = Depends(get_db), current_user: User = Depends(require_student)):
    return success({"personalInfo": student_service.get_own_personal_info(db, current_user)})


@router.get("/documents")
def get_documents(db: Session = Depends(get_db), current_user: User = Depends(require_student)):
    return success({"documents": student_service.get_own_documents(db, current_user)})


@router.get("/status")
def get_status(db: Session = Depends(get_db), current_user: User = Depends(require_student)):
    return success({"studentStatus": student_service.get_own_status(db, current_user)})
