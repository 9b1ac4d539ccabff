from typing import Optional

from .student import RegistrationStudentData
from .user import UserCreate


class RegisterRequest(UserCreate):
    student_data: Optional[RegistrationStudentData] = None
