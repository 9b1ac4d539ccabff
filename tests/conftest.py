"""
Test configuration and fixtures
"""
import os

# Set testing environment before the app reads its settings
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["SECRET_KEY"] = "test-secret-key-for-testing-only"
os.environ["PASSWORD_HASH_ITERATIONS"] = "1000"
os.environ["DEBUG"] = "false"

import pytest
from faker import Faker
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from college_api.core.security import create_session_token, get_password_hash
from college_api.database import get_db
from college_api.main import app
from college_api.models import Base, StudentRecord, User
from college_api.schemas.student import StudentCreate
from college_api.services import students as student_service
from college_api.services.mailer import get_mailer

fake = Faker()

# One in-memory database shared by every connection of a test
test_engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=test_engine)


class FakeMailer:
    """Records messages instead of talking to an SMTP server"""

    def __init__(self):
        self.sent = []
        self.fail_with = None
        self.sender = "noreply@college.test"

    async def send(self, to_email, subject, body, reply_to=None):
        if self.fail_with:
            raise self.fail_with
        self.sent.append({"to": to_email, "subject": subject, "body": body, "reply_to": reply_to})


def make_student_data(**overrides) -> dict:
    """Valid admin student-creation payload (camelCase, as sent over the wire)"""
    data = {
        "username": fake.unique.pystr(min_chars=8, max_chars=12),
        "email": fake.unique.email(),
        "password": "studentpass123",
        "firstName": fake.first_name(),
        "lastName": fake.last_name(),
        "studentId": f"STU{fake.unique.random_number(digits=8, fix_len=True)}",
        "dateOfBirth": "2003-04-15",
        "gender": "female",
        "phone": "9876543210",
        "address": {
            "street": "12 MG Road",
            "city": "Bengaluru",
            "state": "Karnataka",
            "zipCode": "560001",
            "country": "India",
        },
        "academicInfo": {
            "collegeName": "Government Engineering College",
            "department": "Computer Science",
            "course": "B.Tech",
            "specialization": "Artificial Intelligence",
            "year": 2,
            "semester": 3,
            "cgpa": 8.4,
            "totalCredits": 80,
            "earnedCredits": 76,
            "attendancePercentage": 91.5,
        },
        "guardianInfo": {
            "name": fake.name(),
            "relationship": "Father",
            "phone": "9123456780",
            "email": fake.unique.email(),
        },
        "emergencyContact": {
            "name": fake.name(),
            "relationship": "Uncle",
            "phone": "9988776655",
        },
    }
    data.update(overrides)
    return data


def auth_header(user: User) -> dict:
    return {"Authorization": f"Bearer {create_session_token(user.id)}"}


@pytest.fixture
def db_session():
    """Fresh schema for each test"""
    Base.metadata.create_all(bind=test_engine)
    session = TestSessionLocal()
    yield session
    session.close()
    Base.metadata.drop_all(bind=test_engine)


@pytest.fixture
def fake_mailer():
    return FakeMailer()


@pytest.fixture
def client(db_session, fake_mailer):
    """Test client with database and mailer overrides"""
    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_mailer] = lambda: fake_mailer

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


def create_user(db_session, role="admin", password="adminpass123", **fields) -> User:
    user = User(
        username=fields.pop("username", fake.unique.pystr(min_chars=8, max_chars=12)),
        email=fields.pop("email", fake.unique.email()),
        password_hash=get_password_hash(password),
        first_name=fields.pop("first_name", fake.first_name()),
        last_name=fields.pop("last_name", fake.last_name()),
        role=role,
        is_active=fields.pop("is_active", True),
    )
    db_session.add(user)
    db_session.commit()
    db_session.refresh(user)
    return user


def create_student(db_session, **overrides) -> StudentRecord:
    payload = StudentCreate.model_validate(make_student_data(**overrides))
    created = student_service.create_student(db_session, payload)
    return db_session.query(StudentRecord).filter(StudentRecord.id == created["id"]).first()


@pytest.fixture
def admin_user(db_session) -> User:
    return create_user(db_session, role="admin")


@pytest.fixture
def admin_headers(admin_user) -> dict:
    return auth_header(admin_user)


@pytest.fixture
def student_record(db_session) -> StudentRecord:
    return create_student(db_session)


@pytest.fixture
def student_user(student_record) -> User:
    return student_record.user


@pytest.fixture
def student_headers(student_user) -> dict:
    return auth_header(student_user)
