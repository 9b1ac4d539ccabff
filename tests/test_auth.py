from conftest import auth_header, create_user, fake

from college_api.core.security import verify_password
from college_api.models import StudentRecord, User


def registration(role="student", **overrides):
    data = {
        "username": fake.unique.pystr(min_chars=8, max_chars=12),
        "email": fake.unique.email(),
        "password": "secret123",
        "firstName": fake.first_name(),
        "lastName": fake.last_name(),
        "role": role,
    }
    data.update(overrides)
    return data


def test_first_admin_registers_without_token(client):
    """With no admin in the system the first admin needs no token"""
    response = client.post("/api/auth/register", json=registration(role="admin"))

    assert response.status_code == 201
    body = response.json()
    assert body["status"] == "success"
    assert body["message"] == "First admin user registered successfully"
    assert body["data"]["isFirstAdmin"] is True
    assert body["data"]["user"]["role"] == "admin"
    assert body["data"]["token"]


def test_second_admin_without_token_is_rejected(client):
    client.post("/api/auth/register", json=registration(role="admin"))

    response = client.post("/api/auth/register", json=registration(role="admin"))

    assert response.status_code == 401
    assert response.json()["message"] == "Authentication required to register new users"


def test_admin_registration_by_student_is_forbidden(client, admin_user, student_headers):
    response = client.post("/api/auth/register", json=registration(role="admin"), headers=student_headers)

    assert response.status_code == 403
    assert response.json()["message"] == "Only admins can register new users"


def test_admin_can_register_another_admin(client, admin_headers):
    response = client.post("/api/auth/register", json=registration(role="admin"), headers=admin_headers)

    assert response.status_code == 201
    assert response.json()["data"]["isFirstAdmin"] is False


def test_student_self_registration_fills_defaults(client, db_session):
    payload = registration(studentData={"address": {"city": "Pune"}, "phone": ""})

    response = client.post("/api/auth/register", json=payload)

    assert response.status_code == 201
    user = db_session.query(User).filter(User.email == payload["email"]).first()
    record = db_session.query(StudentRecord).filter(StudentRecord.user_id == user.id).first()
    assert record.student_id.startswith("STU")
    assert record.phone == "0000000000"
    assert record.gender == "other"
    assert record.address["city"] == "Pune"
    assert record.address["street"] == "N/A"
    assert record.address["zip_code"] == "000000"
    assert record.academic_info["year"] == 1
    assert record.guardian_info["email"] == "na@example.com"


def test_register_duplicate_email_conflicts(client):
    payload = registration()
    assert client.post("/api/auth/register", json=payload).status_code == 201

    duplicate = registration(email=payload["email"])
    response = client.post("/api/auth/register", json=duplicate)

    assert response.status_code == 400
    assert response.json()["message"] == "User with this email or username already exists"


def test_register_duplicate_student_id_creates_nothing(client, db_session, student_record):
    payload = registration(studentData={"studentId": student_record.student_id})

    response = client.post("/api/auth/register", json=payload)

    assert response.status_code == 400
    assert response.json()["message"] == "Student with this ID already exists"
    assert db_session.query(User).filter(User.email == payload["email"]).first() is None


def test_register_validation_errors(client):
    response = client.post("/api/auth/register", json=registration(username="ab", password="123"))

    assert response.status_code == 400
    body = response.json()
    assert body["message"] == "Validation failed"
    fields = {error["field"] for error in body["errors"]}
    assert {"username", "password"} <= fields


def test_login_success_updates_last_login(client, db_session):
    user = create_user(db_session, role="admin", password="adminpass123")
    assert user.last_login is None

    response = client.post("/api/auth/login", json={"email": user.email, "password": "adminpass123"})

    assert response.status_code == 200
    body = response.json()
    assert body["message"] == "Login successful"
    assert body["data"]["token"]
    db_session.refresh(user)
    assert user.last_login is not None


def test_login_errors_do_not_reveal_unknown_email(client, db_session):
    user = create_user(db_session, password="rightpass123")

    wrong_password = client.post("/api/auth/login", json={"email": user.email, "password": "wrongpass123"})
    unknown_email = client.post("/api/auth/login", json={"email": "nobody@example.com", "password": "rightpass123"})

    assert wrong_password.status_code == unknown_email.status_code == 401
    assert wrong_password.json() == unknown_email.json()
    assert wrong_password.json()["message"] == "Invalid credentials"


def test_login_deactivated_account(client, db_session):
    user = create_user(db_session, password="rightpass123", is_active=False)

    response = client.post("/api/auth/login", json={"email": user.email, "password": "rightpass123"})

    assert response.status_code == 401
    assert response.json()["message"] == "Account is deactivated. Please contact administrator."


def test_malformed_password_hash_never_matches(client, db_session):
    assert verify_password("rightpass123", "pbkdf2_sha256$x$salt$hash") is False
    assert verify_password("rightpass123", "not-a-hash") is False

    user = create_user(db_session, password="rightpass123")
    user.password_hash = "pbkdf2_sha256$many$salt$hash"
    db_session.commit()

    response = client.post("/api/auth/login", json={"email": user.email, "password": "rightpass123"})

    assert response.status_code == 401
    assert response.json()["message"] == "Invalid credentials"


def test_profile_read_and_update(client, admin_user, admin_headers):
    response = client.get("/api/auth/profile", headers=admin_headers)
    assert response.status_code == 200
    assert response.json()["data"]["user"]["email"] == admin_user.email

    response = client.put("/api/auth/profile", json={"firstName": "Renamed"}, headers=admin_headers)

    assert response.status_code == 200
    user = response.json()["data"]["user"]
    assert user["firstName"] == "Renamed"
    assert user["lastName"] == admin_user.last_name


def test_profile_email_taken(client, db_session, admin_headers):
    other = create_user(db_session, role="student")

    response = client.put("/api/auth/profile", json={"email": other.email}, headers=admin_headers)

    assert response.status_code == 400
    assert response.json()["message"] == "Email is already taken"


def test_change_password(client, db_session):
    user = create_user(db_session, password="oldpass123")
    headers = auth_header(user)

    wrong = client.post(
        "/api/auth/change-password",
        json={"currentPassword": "notmypass", "newPassword": "newpass123"},
        headers=headers,
    )
    assert wrong.status_code == 400
    assert wrong.json()["message"] == "Current password is incorrect"

    response = client.post(
        "/api/auth/change-password",
        json={"currentPassword": "oldpass123", "newPassword": "newpass123"},
        headers=headers,
    )
    assert response.status_code == 200

    login = client.post("/api/auth/login", json={"email": user.email, "password": "newpass123"})
    assert login.status_code == 200
