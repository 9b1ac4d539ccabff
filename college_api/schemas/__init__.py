from .base import CamelModel, success
from .user import (
    UserCreate, UserLogin, UserUpdate, UserResponse, UserSummary,
    ProfileUpdate, PasswordChange
)
from .student import (
    Address, AcademicInfo, GuardianInfo, EmergencyContact, Documents,
    AcademicPerformance, FinancialInfo, HostelInfo, PlacementInfo,
    AddressPatch, AcademicInfoPatch, GuardianInfoPatch, EmergencyContactPatch,
    RegistrationStudentData, StudentCreate, StudentUpdate, StatusUpdate,
    OwnProfileUpdate, StudentDetail
)
from .auth import RegisterRequest
from .contact import ContactMessageCreate

__all__ = [
    "CamelModel", "success",
    # User schemas
    "UserCreate", "UserLogin", "UserUpdate", "UserResponse", "UserSummary",
    "ProfileUpdate", "PasswordChange", "RegisterRequest",
    # Student value types
    "Address", "AcademicInfo", "GuardianInfo", "EmergencyContact", "Documents",
    "AcademicPerformance", "FinancialInfo", "HostelInfo", "PlacementInfo",
    "AddressPatch", "AcademicInfoPatch", "GuardianInfoPatch", "EmergencyContactPatch",
    # Student requests/responses
    "RegistrationStudentData", "StudentCreate", "StudentUpdate", "StatusUpdate",
    "OwnProfileUpdate", "StudentDetail",
    "ContactMessageCreate",
]
