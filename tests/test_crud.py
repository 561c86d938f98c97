from extensions import db
from models import Student, User

STUDENT = {
    "name": "Maria da Silva",
    "cpf": "529.982.247-25",
    "birthDate": "2000-05-17",
    "phone": "(11) 98765-4321",
    "email": "Maria@Example.com",
    "city": "São Paulo",
    "state": "SP",
}


def test_student_crud(app, client, admin):
    created = client.post("/api/v1/students", json=STUDENT, headers=admin["headers"])
    assert created.status_code == 201
    student = created.get_json()["data"]
    assert student["cpf"] == "52998224725"
    assert student["email"] == "maria@example.com"
    assert student["birthDate"] == "2000-05-17"

    duplicate = client.post("/api/v1/students", json=STUDENT, headers=admin["headers"])
    assert duplicate.status_code == 409
    assert duplicate.get_json()["error"]["code"] == "CONFLICT"

    updated = client.put(
        f"/api/v1/students/{student['id']}", json={"city": "Campinas"}, headers=admin["headers"]
    )
    assert updated.status_code == 200
    assert updated.get_json()["data"]["city"] == "Campinas"
    assert updated.get_json()["data"]["name"] == "Maria da Silva"

    listed = client.get("/api/v1/students?search=Maria", headers=admin["headers"]).get_json()
    assert listed["pagination"] == {"page": 1, "limit": 20, "total": 1, "pages": 1}

    assert client.delete(f"/api/v1/students/{student['id']}", headers=admin["headers"]).status_code == 200
    assert client.get(f"/api/v1/students/{student['id']}", headers=admin["headers"]).status_code == 404
    with app.app_context():
        assert db.session.get(Student, student["id"]).deleted_at is not None


def test_pagination_limits(client, admin):
    response = client.get("/api/v1/students?limit=101", headers=admin["headers"])
    assert response.status_code == 400
    assert response.get_json()["error"]["details"][0]["field"] == "limit"


def test_student_reads_only_own_record(client, make_user, make_student):
    own = make_student()
    other = make_student(name="Outro", cpf="11144477735")
    user = make_user("student", student_id=own)

    assert client.get(f"/api/v1/students/{own}", headers=user["headers"]).status_code == 200
    assert client.get(f"/api/v1/students/{other}", headers=user["headers"]).status_code == 403


def test_enrollment_rules(client, admin, make_student, make_course):
    student_id = make_student()
    course_id = make_course()
    body = {"studentId": student_id, "courseId": course_id}

    created = client.post("/api/v1/enrollments", json=body, headers=admin["headers"])
    assert created.status_code == 201
    enrollment = created.get_json()["data"]
    assert enrollment["status"] == "pending"
    assert enrollment["courseName"] == "Teologia"

    duplicate = client.post("/api/v1/enrollments", json=body, headers=admin["headers"])
    assert duplicate.status_code == 409

    url = f"/api/v1/enrollments/{enrollment['id']}/status"
    cancelled = client.patch(url, json={"status": "cancelled"}, headers=admin["headers"])
    assert cancelled.get_json()["data"]["status"] == "cancelled"

    again = client.patch(url, json={"status": "cancelled"}, headers=admin["headers"])
    assert again.status_code == 422
    assert again.get_json()["error"]["code"] == "ENROLLMENT_ALREADY_CANCELLED"

    # matrícula cancelada não bloqueia uma nova
    assert client.post("/api/v1/enrollments", json=body, headers=admin["headers"]).status_code == 201

    bad_status = client.patch(url, json={"status": "frozen"}, headers=admin["headers"])
    assert bad_status.status_code == 400

    semester = client.patch(
        f"/api/v1/enrollments/{enrollment['id']}/current-semester",
        json={"currentSemester": 4},
        headers=admin["headers"],
    )
    assert semester.get_json()["data"]["currentSemester"] == 4


def test_my_enrollments(client, make_user, make_student, make_course, make_enrollment):
    student_id = make_student()
    enrollment_id = make_enrollment(student_id, make_course())
    user = make_user("student", student_id=student_id)

    response = client.get("/api/v1/enrollments/me", headers=user["headers"])
    assert response.status_code == 200
    assert [e["id"] for e in response.get_json()["data"]] == [enrollment_id]


def test_course_disciplines(client, admin, make_course):
    course_id = make_course()
    discipline = client.post(
        "/api/v1/disciplines", json={"name": "Grego I", "code": "GRE1", "workloadHours": 60}, headers=admin["headers"]
    ).get_json()["data"]

    linked = client.post(
        f"/api/v1/courses/{course_id}/disciplines",
        json={"disciplineId": discipline["id"], "semester": 2},
        headers=admin["headers"],
    )
    assert linked.status_code == 201
    assert linked.get_json()["data"]["disciplines"] == [
        {"disciplineId": discipline["id"], "name": "Grego I", "semester": 2}
    ]

    twice = client.post(
        f"/api/v1/courses/{course_id}/disciplines",
        json={"disciplineId": discipline["id"]},
        headers=admin["headers"],
    )
    assert twice.status_code == 409

    removed = client.delete(f"/api/v1/courses/{course_id}/disciplines/{discipline['id']}", headers=admin["headers"])
    assert removed.status_code == 200


def test_create_login_for_student(app, client, admin, make_student):
    student_id = make_student()

    response = client.post(
        "/api/v1/users",
        json={"login": "maria", "role": "student", "studentId": student_id},
        headers=admin["headers"],
    )

    assert response.status_code == 201
    data = response.get_json()["data"]
    assert data["name"] == "Maria da Silva"
    assert data["cpf"] == "52998224725"
    assert data["mustChangePassword"] is True
    provisional = data["provisionalPassword"]

    login = client.post("/api/v1/auth/login", json={"login": "maria", "password": provisional})
    assert login.status_code == 200

    second = client.post(
        "/api/v1/users",
        json={"login": "maria2", "role": "student", "studentId": student_id},
        headers=admin["headers"],
    )
    assert second.status_code == 409


def test_admin_cannot_delete_self(client, admin):
    response = client.delete(f"/api/v1/users/{admin['id']}", headers=admin["headers"])
    assert response.status_code == 422
    assert response.get_json()["error"]["code"] == "CANNOT_DELETE_SELF"


def test_reset_password(app, client, admin, make_user):
    user = make_user("teacher")

    response = client.post(f"/api/v1/users/{user['id']}/reset-password", headers=admin["headers"])
    assert response.status_code == 200
    provisional = response.get_json()["data"]["provisionalPassword"]

    with app.app_context():
        stored = db.session.get(User, user["id"])
        assert stored.check_password(provisional)
        assert stored.must_change_password is True


def test_unknown_route_uses_error_envelope(client):
    response = client.get("/api/v1/nao-existe")
    assert response.status_code == 404
    assert response.get_json()["success"] is False
    assert response.get_json()["error"]["code"] == "NOT_FOUND"


def test_health(client):
    response = client.get("/api/v1/health")
    assert response.status_code == 200
    assert response.get_json()["success"] is True
