from datetime import datetime
from sqlalchemy import Column, Integer, String, DateTime, Date, ForeignKey, Text, JSON
from sqlalchemy.orm import relationship
from ..database import Base


STUDENT_STATUSES = ("active", "inactive", "suspended", "graduated", "transferred", "dropped")


class StudentRecord(Base):
    """Academic and personal profile owned by a student-role user.

    Nested groups (address, academic info, ...) are stored as JSON documents
    whose shape is enforced by the value types in ``schemas.student``.
    """
    __tablename__ = "student_records"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), unique=True, nullable=False)
    student_id = Column(String(50), unique=True, index=True, nullable=False)
    date_of_birth = Column(Date, nullable=False)
    gender = Column(String(10), nullable=False)  # male, female, other
    phone = Column(String(20), nullable=False)

    address = Column(JSON, nullable=False)
    academic_info = Column(JSON, nullable=False)
    guardian_info = Column(JSON, nullable=False)
    emergency_contact = Column(JSON, nullable=False)
    documents = Column(JSON, default=dict)
    academic_performance = Column(JSON, default=dict)
    financial_info = Column(JSON, default=dict)
    hostel_info = Column(JSON, default=dict)
    placement_info = Column(JSON, default=dict)

    status = Column(String(20), default="active", index=True, nullable=False)
    enrollment_date = Column(DateTime, default=datetime.utcnow)
    graduation_date = Column(DateTime)
    last_attendance_date = Column(DateTime)
    remarks = Column(Text, default="")
    created_at = Column(DateTime, default=datetime.utcnow, index=True)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    user = relationship("User", back_populates="student_record")

    def set_status(self, new_status: str, now: datetime = None) -> None:
        """Change status, stamping the graduation date on the transition only."""
        if new_status == "graduated" and self.status != "graduated":
            self.graduation_date = now or datetime.utcnow()
        self.status = new_status
