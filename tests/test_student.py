from conftest import auth_header, create_user


def test_own_profile(client, student_record, student_headers):
    response = client.get("/api/student/profile", headers=student_headers)

    assert response.status_code == 200
    student = response.json()["data"]["student"]
    assert student["id"] == student_record.id
    assert student["studentId"] == student_record.student_id


def test_student_without_record(client, db_session):
    user = create_user(db_session, role="student")

    response = client.get("/api/student/profile", headers=auth_header(user))

    assert response.status_code == 404
    assert response.json()["message"] == "Student profile not found"


def test_address_update_is_merged(client, db_session, student_record, student_headers):
    before = dict(student_record.address)

    response = client.put("/api/student/profile", json={"address": {"city": "X"}}, headers=student_headers)

    assert response.status_code == 200
    address = response.json()["data"]["student"]["address"]
    assert address["city"] == "X"
    assert address["street"] == before["street"]
    assert address["state"] == before["state"]
    assert address["zipCode"] == before["zip_code"]
    assert address["country"] == before["country"]


def test_own_update_ignores_other_fields(client, student_record, student_headers):
    response = client.put(
        "/api/student/profile",
        json={"phone": "9811122233", "status": "graduated", "studentId": "HACKED"},
        headers=student_headers,
    )

    assert response.status_code == 200
    student = response.json()["data"]["student"]
    assert student["phone"] == "9811122233"
    assert student["status"] == "active"
    assert student["studentId"] == student_record.student_id


def test_own_update_validates_phone(client, student_headers):
    response = client.put("/api/student/profile", json={"phone": "+0abc"}, headers=student_headers)

    assert response.status_code == 400


def test_own_update_rejects_blank_subfield(client, student_headers):
    response = client.put("/api/student/profile", json={"emergencyContact": {"name": "  "}},
                          headers=student_headers)

    assert response.status_code == 400


def test_academic_record(client, student_record, student_headers):
    response = client.get("/api/student/academic-record", headers=student_headers)

    record = response.json()["data"]["academicRecord"]
    assert record["department"] == student_record.academic_info["department"]
    assert record["year"] == student_record.academic_info["year"]
    assert record["status"] == "active"
    assert record["graduationDate"] is None


def test_personal_info(client, student_user, student_headers):
    response = client.get("/api/student/personal-info", headers=student_headers)

    info = response.json()["data"]["personalInfo"]
    assert info["name"] == f"{student_user.first_name} {student_user.last_name}"
    assert info["email"] == student_user.email
    assert set(info) >= {"dateOfBirth", "gender", "phone", "address", "guardianInfo", "emergencyContact"}


def test_documents_and_status(client, student_headers):
    documents = client.get("/api/student/documents", headers=student_headers).json()["data"]["documents"]
    assert documents["hallTicket"] is None

    status = client.get("/api/student/status", headers=student_headers).json()["data"]["studentStatus"]
    assert status["currentStatus"] == "active"
    assert status["department"] == "Computer Science"
