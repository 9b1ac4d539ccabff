from datetime import date, datetime
from typing import Literal, Optional

from pydantic import EmailStr, Field, field_validator

from .base import CamelModel, NonEmptyStr, PhoneStr
from .user import PasswordStr, UserSummary, UsernameStr


StudentStatus = Literal["active", "inactive", "suspended", "graduated", "transferred", "dropped"]
Gender = Literal["male", "female", "other"]
FeeCategory = Literal["general", "obc", "sc", "st", "ews"]


# Nested value types
class Address(CamelModel):
    street: NonEmptyStr
    city: NonEmptyStr
    state: NonEmptyStr
    zip_code: NonEmptyStr
    country: NonEmptyStr = "India"


class AcademicInfo(CamelModel):
    college_name: NonEmptyStr
    department: NonEmptyStr
    course: NonEmptyStr
    specialization: str = ""
    year: int = Field(..., ge=1, le=5)
    semester: int = Field(..., ge=1, le=8)
    cgpa: float = Field(0, ge=0, le=10)
    total_credits: int = Field(0, ge=0)
    earned_credits: int = Field(0, ge=0)
    attendance_percentage: float = Field(0, ge=0, le=100)


class GuardianInfo(CamelModel):
    name: NonEmptyStr
    relationship: NonEmptyStr
    phone: PhoneStr
    email: EmailStr


class EmergencyContact(CamelModel):
    name: NonEmptyStr
    relationship: NonEmptyStr
    phone: PhoneStr


class Documents(CamelModel):
    profile_picture: Optional[str] = None
    id_proof: Optional[str] = None
    address_proof: Optional[str] = None
    hall_ticket: Optional[str] = None
    mark_sheet: Optional[str] = None
    transfer_certificate: Optional[str] = None
    character_certificate: Optional[str] = None
    caste_certificate: Optional[str] = None
    income_certificate: Optional[str] = None


class AcademicPerformance(CamelModel):
    current_semester_gpa: float = Field(0, ge=0, le=10, alias="currentSemesterGPA")
    previous_semester_gpa: float = Field(0, ge=0, le=10, alias="previousSemesterGPA")
    total_backlogs: int = Field(0, ge=0)
    cleared_backlogs: int = Field(0, ge=0)


class FinancialInfo(CamelModel):
    fee_structure: FeeCategory = "general"
    total_fees: float = Field(0, ge=0)
    paid_fees: float = Field(0, ge=0)
    scholarship_amount: float = Field(0, ge=0)
    last_payment_date: Optional[datetime] = None


class HostelInfo(CamelModel):
    hostel_name: str = ""
    room_number: str = ""
    hostel_fees: float = Field(0, ge=0)
    is_hostelite: bool = False


class PlacementInfo(CamelModel):
    is_placed: bool = False
    company_name: str = ""
    package: float = Field(0, ge=0)
    placement_date: Optional[datetime] = None
    job_role: str = ""


# Partial versions of the value types with required fields. Value types whose
# fields all have defaults double as their own patch.
class AddressPatch(CamelModel):
    street: Optional[NonEmptyStr] = None
    city: Optional[NonEmptyStr] = None
    state: Optional[NonEmptyStr] = None
    zip_code: Optional[NonEmptyStr] = None
    country: Optional[NonEmptyStr] = None


class AcademicInfoPatch(CamelModel):
    college_name: Optional[NonEmptyStr] = None
    department: Optional[NonEmptyStr] = None
    course: Optional[NonEmptyStr] = None
    specialization: Optional[str] = None
    year: Optional[int] = Field(None, ge=1, le=5)
    semester: Optional[int] = Field(None, ge=1, le=8)
    cgpa: Optional[float] = Field(None, ge=0, le=10)
    total_credits: Optional[int] = Field(None, ge=0)
    earned_credits: Optional[int] = Field(None, ge=0)
    attendance_percentage: Optional[float] = Field(None, ge=0, le=100)


class GuardianInfoPatch(CamelModel):
    name: Optional[NonEmptyStr] = None
    relationship: Optional[NonEmptyStr] = None
    phone: Optional[PhoneStr] = None
    email: Optional[EmailStr] = None


class EmergencyContactPatch(CamelModel):
    name: Optional[NonEmptyStr] = None
    relationship: Optional[NonEmptyStr] = None
    phone: Optional[PhoneStr] = None


# Requests
class RegistrationStudentData(CamelModel):
    """Optional profile data sent with a public student registration.

    Anything omitted (or blank) is filled from placeholder defaults.
    """
    student_id: Optional[str] = None
    date_of_birth: Optional[date] = None
    gender: Optional[Gender] = None
    phone: Optional[PhoneStr] = None
    address: Optional[AddressPatch] = None
    academic_info: Optional[AcademicInfoPatch] = None
    guardian_info: Optional[GuardianInfoPatch] = None
    emergency_contact: Optional[EmergencyContactPatch] = None

    @field_validator("student_id", "gender", "phone", mode="before")
    @classmethod
    def blank_means_default(cls, value):
        if value is None or (isinstance(value, str) and not value.strip()):
            return None
        return value


class StudentCreate(CamelModel):
    username: UsernameStr
    email: EmailStr
    password: PasswordStr
    first_name: NonEmptyStr
    last_name: NonEmptyStr
    student_id: NonEmptyStr
    date_of_birth: date
    gender: Gender
    phone: PhoneStr
    address: Address
    academic_info: AcademicInfo
    guardian_info: GuardianInfo
    emergency_contact: EmergencyContact
    documents: Optional[Documents] = None
    academic_performance: Optional[AcademicPerformance] = None
    financial_info: Optional[FinancialInfo] = None
    hostel_info: Optional[HostelInfo] = None
    placement_info: Optional[PlacementInfo] = None
    remarks: str = ""


class StudentUpdate(CamelModel):
    first_name: Optional[NonEmptyStr] = None
    last_name: Optional[NonEmptyStr] = None
    email: Optional[EmailStr] = None
    student_id: Optional[NonEmptyStr] = None
    date_of_birth: Optional[date] = None
    gender: Optional[Gender] = None
    phone: Optional[PhoneStr] = None
    address: Optional[AddressPatch] = None
    academic_info: Optional[AcademicInfoPatch] = None
    guardian_info: Optional[GuardianInfoPatch] = None
    emergency_contact: Optional[EmergencyContactPatch] = None
    documents: Optional[Documents] = None
    academic_performance: Optional[AcademicPerformance] = None
    financial_info: Optional[FinancialInfo] = None
    hostel_info: Optional[HostelInfo] = None
    placement_info: Optional[PlacementInfo] = None
    status: Optional[StudentStatus] = None
    last_attendance_date: Optional[datetime] = None
    remarks: Optional[str] = None


class StatusUpdate(CamelModel):
    status: StudentStatus


class OwnProfileUpdate(CamelModel):
    """The only fields a student may change on their own record"""
    phone: Optional[PhoneStr] = None
    address: Optional[AddressPatch] = None
    emergency_contact: Optional[EmergencyContactPatch] = None


# Responses
class StudentDetail(CamelModel):
    id: int
    student_id: str
    user: Optional[UserSummary] = None
    date_of_birth: Optional[date] = None
    gender: str
    phone: str
    address: Address
    academic_info: AcademicInfo
    guardian_info: GuardianInfo
    emergency_contact: EmergencyContact
    documents: Documents = Field(default_factory=Documents)
    academic_performance: AcademicPerformance = Field(default_factory=AcademicPerformance)
    financial_info: FinancialInfo = Field(default_factory=FinancialInfo)
    hostel_info: HostelInfo = Field(default_factory=HostelInfo)
    placement_info: PlacementInfo = Field(default_factory=PlacementInfo)
    status: str
    enrollment_date: Optional[datetime] = None
    graduation_date: Optional[datetime] = None
    last_attendance_date: Optional[datetime] = None
    remarks: Optional[str] = ""
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @field_validator(
        "documents", "academic_performance", "financial_info", "hostel_info", "placement_info",
        mode="before",
    )
    @classmethod
    def missing_group_is_empty(cls, value):
        return {} if value is None else value
