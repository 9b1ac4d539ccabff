from conftest import create_student, make_student_data

from college_api.models import StudentRecord, User


def test_create_then_get_returns_same_academic_info(client, admin_headers):
    payload = make_student_data()

    created = client.post("/api/admin/students", json=payload, headers=admin_headers)
    assert created.status_code == 201
    assert created.json()["message"] == "Student created successfully"
    student_id = created.json()["data"]["student"]["id"]

    response = client.get(f"/api/admin/students/{student_id}", headers=admin_headers)

    assert response.status_code == 200
    student = response.json()["data"]["student"]
    assert student["academicInfo"] == payload["academicInfo"]
    assert student["studentId"] == payload["studentId"]
    assert student["user"]["email"] == payload["email"]
    assert student["status"] == "active"
    assert student["financialInfo"]["feeStructure"] == "general"


def test_create_with_taken_student_id_leaves_no_user(client, db_session, admin_headers, student_record):
    payload = make_student_data(studentId=student_record.student_id)

    response = client.post("/api/admin/students", json=payload, headers=admin_headers)

    assert response.status_code == 400
    assert response.json()["message"] == "Student with this ID already exists"
    assert db_session.query(User).filter(User.email == payload["email"]).first() is None


def test_create_with_taken_email(client, admin_headers, student_user):
    response = client.post("/api/admin/students", json=make_student_data(email=student_user.email),
                           headers=admin_headers)

    assert response.status_code == 400
    assert response.json()["message"] == "User with this email or username already exists"


def test_create_rejects_out_of_range_values(client, admin_headers):
    payload = make_student_data()
    payload["academicInfo"]["semester"] = 9
    payload["phone"] = "0123"

    response = client.post("/api/admin/students", json=payload, headers=admin_headers)

    assert response.status_code == 400
    fields = {error["field"] for error in response.json()["errors"]}
    assert "academicInfo.semester" in fields
    assert "phone" in fields


def test_get_unknown_student(client, admin_headers):
    response = client.get("/api/admin/students/9999", headers=admin_headers)

    assert response.status_code == 404
    assert response.json()["message"] == "Student not found"


def test_list_pagination(client, db_session, admin_headers):
    for _ in range(15):
        create_student(db_session)

    response = client.get("/api/admin/students?page=2&limit=10", headers=admin_headers)

    assert response.status_code == 200
    data = response.json()["data"]
    assert len(data["students"]) == 5
    assert data["pagination"] == {
        "currentPage": 2,
        "limit": 10,
        "totalPages": 2,
        "totalStudents": 15,
        "hasNextPage": False,
        "hasPrevPage": True,
    }


def test_list_limit_is_clamped(client, db_session, admin_headers):
    create_student(db_session)

    response = client.get("/api/admin/students?page=0&limit=500", headers=admin_headers)

    pagination = response.json()["data"]["pagination"]
    assert pagination["currentPage"] == 1
    assert pagination["limit"] == 100


def test_list_newest_first(client, db_session, admin_headers):
    first = create_student(db_session)
    second = create_student(db_session)

    response = client.get("/api/admin/students", headers=admin_headers)

    ids = [student["id"] for student in response.json()["data"]["students"]]
    assert ids == [second.id, first.id]


def test_list_filters(client, db_session, admin_headers):
    physics = make_student_data()["academicInfo"]
    physics.update(department="Physics", year=4)
    target = create_student(db_session, firstName="Zubeida", academicInfo=physics)
    other = create_student(db_session)
    other.status = "suspended"
    db_session.commit()

    def ids(query):
        response = client.get(f"/api/admin/students?{query}", headers=admin_headers)
        return {student["id"] for student in response.json()["data"]["students"]}

    assert ids("search=zubei") == {target.id}
    assert ids(f"search={target.student_id.lower()}") == {target.id}
    assert ids("department=phys") == {target.id}
    assert ids("year=4") == {target.id}
    assert ids("status=suspended") == {other.id}


def test_update_merges_nested_values(client, db_session, admin_headers, student_record):
    original = dict(student_record.academic_info)

    response = client.put(
        f"/api/admin/students/{student_record.id}",
        json={"academicInfo": {"cgpa": 9.1}, "guardianInfo": {"phone": "9000000001"}, "firstName": "Asha"},
        headers=admin_headers,
    )

    assert response.status_code == 200
    student = response.json()["data"]["student"]
    assert student["academicInfo"]["cgpa"] == 9.1
    assert student["academicInfo"]["department"] == original["department"]
    assert student["academicInfo"]["collegeName"] == original["college_name"]
    assert student["guardianInfo"]["phone"] == "9000000001"
    assert student["user"]["firstName"] == "Asha"


def test_update_invalid_merged_value(client, admin_headers, student_record):
    response = client.put(
        f"/api/admin/students/{student_record.id}",
        json={"academicInfo": {"year": 7}},
        headers=admin_headers,
    )

    assert response.status_code == 400


def test_update_email_taken_by_another_user(client, db_session, admin_headers, student_record):
    other = create_student(db_session)

    response = client.put(
        f"/api/admin/students/{student_record.id}",
        json={"email": other.user.email},
        headers=admin_headers,
    )

    assert response.status_code == 400
    assert response.json()["message"] == "Email is already taken by another user"


def test_graduation_date_is_stamped_once(client, admin_headers, student_record):
    url = f"/api/admin/students/{student_record.id}/status"

    first = client.put(url, json={"status": "graduated"}, headers=admin_headers)
    assert first.status_code == 200
    graduated_at = first.json()["data"]["student"]["graduationDate"]
    assert graduated_at is not None

    again = client.put(url, json={"status": "graduated"}, headers=admin_headers)

    assert again.json()["data"]["student"]["graduationDate"] == graduated_at


def test_update_to_graduated_stamps_once(client, admin_headers, student_record):
    url = f"/api/admin/students/{student_record.id}"

    first = client.put(url, json={"status": "graduated"}, headers=admin_headers)
    assert first.status_code == 200
    graduated_at = first.json()["data"]["student"]["graduationDate"]
    assert graduated_at is not None

    again = client.put(url, json={"status": "graduated"}, headers=admin_headers)

    assert again.status_code == 200
    assert again.json()["data"]["student"]["graduationDate"] == graduated_at


def test_status_must_be_known(client, admin_headers, student_record):
    response = client.put(
        f"/api/admin/students/{student_record.id}/status",
        json={"status": "expelled"},
        headers=admin_headers,
    )

    assert response.status_code == 400


def test_delete_student_keeps_user(client, db_session, admin_headers, student_record):
    record_id = student_record.id
    user_id = student_record.user_id

    response = client.delete(f"/api/admin/students/{record_id}", headers=admin_headers)

    assert response.status_code == 200
    assert db_session.query(StudentRecord).filter(StudentRecord.id == record_id).first() is None
    assert db_session.query(User).filter(User.id == user_id).first() is not None


def test_dashboard(client, db_session, admin_headers):
    create_student(db_session)
    inactive = create_student(db_session)
    inactive.status = "inactive"
    db_session.commit()

    response = client.get("/api/admin/dashboard", headers=admin_headers)

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["statistics"] == {
        "totalStudents": 2,
        "activeStudents": 1,
        "totalUsers": 3,
        "inactiveStudents": 1,
    }
    assert len(data["recentStudents"]) == 2
