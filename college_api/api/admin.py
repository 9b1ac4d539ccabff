from typing import Optional

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.orm import Session

from ..core.permissions import require_admin
from ..database import get_db
from ..reports import RenderedDocument, render_fee_structure, render_hall_ticket, render_result
from ..schemas.base import success
from ..schemas.student import StatusUpdate, StudentCreate, StudentStatus, StudentUpdate
from ..schemas.user import UserCreate, UserUpdate
from ..services import students as student_service
from ..services import users as user_service

# Every route here is admin-only
router = APIRouter(prefix="/api/admin", tags=["admin"], dependencies=[Depends(require_admin)])


def document_response(document: RenderedDocument) -> Response:
    return Response(
        content=document.content,
        media_type=document.media_type,
        headers={"Content-Disposition": f'attachment; filename="{document.filename}"'},
    )


@router.get("/dashboard")
def dashboard(db: Session = Depends(get_db)):
    return success(student_service.dashboard(db))


# Students
@router.get("/students")
def list_students(
    page: int = 1,
    limit: int = 10,
    search: Optional[str] = None,
    department: Optional[str] = None,
    status: Optional[StudentStatus] = None,
    year: Optional[int] = Query(None, ge=1, le=5),
    db: Session = Depends(get_db)
):
    """Paginated student list, newest first"""
    return success(student_service.list_students(
        db, page=page, limit=limit, search=search, department=department, status=status, year=year
    ))


@router.get("/students/{student_id}")
def get_student(student_id: int, db: Session = Depends(get_db)):
    return success({"student": student_service.get_student(db, student_id)})


@router.post("/students", status_code=status.HTTP_201_CREATED)
def create_student(payload: StudentCreate, db: Session = Depends(get_db)):
    student = student_service.create_student(db, payload)
    return success({"student": student}, "Student created successfully")


@router.put("/students/{student_id}")
def update_student(student_id: int, payload: StudentUpdate, db: Session = Depends(get_db)):
    student = student_service.update_student(db, student_id, payload)
    return success({"student": student}, "Student updated successfully")


@router.put("/students/{student_id}/status")
def update_student_status(student_id: int, payload: StatusUpdate, db: Session = Depends(get_db)):
    student = student_service.set_student_status(db, student_id, payload.status)
    return success({"student": student}, "Student status updated successfully")


@router.delete("/students/{student_id}")
def delete_student(student_id: int, db: Session = Depends(get_db)):
    student_service.delete_student(db, student_id)
    return success(message="Student deleted successfully")


# Documents
@router.get("/students/{student_id}/hall-ticket")
def hall_ticket(student_id: int, db: Session = Depends(get_db)):
    record = student_service.get_record_or_404(db, student_id)
    return document_response(render_hall_ticket(record))


@router.get("/students/{student_id}/result")
def result(student_id: int, db: Session = Depends(get_db)):
    record = student_service.get_record_or_404(db, student_id)
    return document_response(render_result(record))


@router.get("/students/{student_id}/fee-structure")
def fee_structure(student_id: int, db: Session = Depends(get_db)):
    record = student_service.get_record_or_404(db, student_id)
    return document_response(render_fee_structure(record))


# Users
@router.get("/users")
def list_users(db: Session = Depends(get_db)):
    return success({"users": user_service.list_users(db)})


@router.post("/users", status_code=status.HTTP_201_CREATED)
def create_user(payload: UserCreate, db: Session = Depends(get_db)):
    user = user_service.create_user(db, payload)
    return success({"user": user}, "User created successfully")


@router.put("/users/{user_id}")
def update_user(user_id: int, payload: UserUpdate, db: Session = Depends(get_db)):
    user = user_service.update_user(db, user_id, payload)
    return success({"user": user}, "User updated successfully")


@router.delete("/users/{user_id}")
def delete_user(user_id: int, db: Session = Depends(get_db)):
    user_service.delete_user(db, user_id)
    return success(message="User deleted successfully")
