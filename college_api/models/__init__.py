from ..database import Base
from .user import User
from .student import StudentRecord, STUDENT_STATUSES
from .contact import ContactMessage

__all__ = [
    "Base",
    "User",
    "StudentRecord",
    "STUDENT_STATUSES",
    "ContactMessage",
]
