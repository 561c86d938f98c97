from datetime import date

import pytest

from extensions import db
from models import (
    ClassStudent,
    ClassTeacher,
    Discipline,
    Evaluation,
    EvaluationTypeEnum,
    Grade,
    SchoolClass,
    Student,
)


@pytest.fixture
def classroom(app, make_course, make_student, make_teacher, make_user):
    """Duas turmas; o professor leciona só na primeira, onde o aluno está matriculado."""
    course_id = make_course()
    student_id = make_student()
    teacher_id = make_teacher()
    other_teacher_id = make_teacher(name="Ana Lima", cpf="11144477735")

    with app.app_context():
        discipline = Discipline(name="Hermenêutica")
        own = SchoolClass(course_id=course_id, semester=1, year=2026)
        other = SchoolClass(course_id=course_id, semester=2, year=2026)
        db.session.add_all([discipline, own, other])
        db.session.flush()
        db.session.add_all([
            ClassTeacher(class_id=own.id, teacher_id=teacher_id, discipline_id=discipline.id),
            ClassTeacher(class_id=other.id, teacher_id=other_teacher_id, discipline_id=discipline.id),
            ClassStudent(class_id=own.id, student_id=student_id),
            ClassStudent(class_id=other.id, student_id=student_id),
        ])
        own_eval = Evaluation(
            class_id=own.id, teacher_id=teacher_id, discipline_id=discipline.id,
            name="Prova 1", date=date(2026, 4, 10), type=EvaluationTypeEnum.GRADE,
        )
        other_eval = Evaluation(
            class_id=other.id, teacher_id=other_teacher_id, discipline_id=discipline.id,
            name="Prova 1", date=date(2026, 9, 10), type=EvaluationTypeEnum.GRADE,
        )
        db.session.add_all([own_eval, other_eval])
        db.session.commit()
        ids = {
            "own_class": own.id,
            "other_class": other.id,
            "own_eval": own_eval.id,
            "other_eval": other_eval.id,
            "discipline": discipline.id,
        }

    return {
        **ids,
        "student_id": student_id,
        "teacher": make_user("teacher", teacher_id=teacher_id),
        "student": make_user("student", student_id=student_id),
    }


def test_student_cannot_list_students(client, classroom):
    response = client.get("/api/v1/students", headers=classroom["student"]["headers"])
    assert response.status_code == 403
    assert response.get_json()["error"]["code"] == "FORBIDDEN"


def test_teacher_cannot_manage_users(client, classroom):
    response = client.get("/api/v1/users", headers=classroom["teacher"]["headers"])
    assert response.status_code == 403


def test_teacher_sees_only_own_classes(client, classroom):
    response = client.get("/api/v1/classes", headers=classroom["teacher"]["headers"])
    assert response.status_code == 200
    ids = [c["id"] for c in response.get_json()["data"]]
    assert ids == [classroom["own_class"]]


def test_teacher_grades_only_own_class(app, client, classroom):
    headers = classroom["teacher"]["headers"]
    body = {"studentId": classroom["student_id"], "grade": 8.5}

    created = client.post(f"/api/v1/evaluations/{classroom['own_eval']}/grades", json=body, headers=headers)
    assert created.status_code == 201
    assert created.get_json()["data"]["grade"] == 8.5

    updated = client.post(
        f"/api/v1/evaluations/{classroom['own_eval']}/grades",
        json={"studentId": classroom["student_id"], "grade": 9},
        headers=headers,
    )
    assert updated.status_code == 200
    assert updated.get_json()["data"]["id"] == created.get_json()["data"]["id"]

    denied = client.post(f"/api/v1/evaluations/{classroom['other_eval']}/grades", json=body, headers=headers)
    assert denied.status_code == 403

    with app.app_context():
        assert Grade.active().count() == 1


def test_grade_must_match_evaluation_type(client, classroom, admin):
    response = client.post(
        f"/api/v1/evaluations/{classroom['own_eval']}/grades",
        json={"studentId": classroom["student_id"], "concept": "satisfactory"},
        headers=admin["headers"],
    )
    assert response.status_code == 400
    assert response.get_json()["error"]["code"] == "VALIDATION_ERROR"


def test_grade_out_of_range_is_rejected(client, classroom, admin):
    response = client.post(
        f"/api/v1/evaluations/{classroom['own_eval']}/grades",
        json={"studentId": classroom["student_id"], "grade": 10.5},
        headers=admin["headers"],
    )
    assert response.status_code == 400


def test_student_sees_own_grades(client, classroom, admin):
    client.post(
        f"/api/v1/evaluations/{classroom['own_eval']}/grades",
        json={"studentId": classroom["student_id"], "grade": 7},
        headers=admin["headers"],
    )

    response = client.get("/api/v1/grades/me", headers=classroom["student"]["headers"])
    assert response.status_code == 200
    grades = response.get_json()["data"]
    assert [g["grade"] for g in grades] == [7.0]


def test_pending_grades_lists_class_students_without_grade(app, client, classroom, make_student):
    pedro = make_student(name="Pedro Alves", cpf="39053344705")
    removed = make_student(name="Aluno Removido", cpf="11144477735")
    with app.app_context():
        db.session.add_all([
            ClassStudent(class_id=classroom["own_class"], student_id=pedro),
            ClassStudent(class_id=classroom["own_class"], student_id=removed),
        ])
        db.session.get(Student, removed).soft_delete()
        db.session.commit()

    headers = classroom["teacher"]["headers"]
    url = f"/api/v1/evaluations/{classroom['own_eval']}/grades/pending"

    before = client.get(url, headers=headers)
    assert before.status_code == 200
    assert [s["id"] for s in before.get_json()["data"]] == [classroom["student_id"], pedro]

    client.post(
        f"/api/v1/evaluations/{classroom['own_eval']}/grades",
        json={"studentId": classroom["student_id"], "grade": 6},
        headers=headers,
    )
    after = client.get(url, headers=headers).get_json()["data"]
    assert [s["name"] for s in after] == ["Pedro Alves"]


def test_pending_grades_respects_class_permission(client, classroom, admin):
    url = f"/api/v1/evaluations/{classroom['other_eval']}/grades/pending"

    assert client.get(url, headers=classroom["teacher"]["headers"]).status_code == 403
    assert client.get(url, headers=classroom["student"]["headers"]).status_code == 403

    response = client.get(url, headers=admin["headers"])
    assert response.status_code == 200
    assert [s["id"] for s in response.get_json()["data"]] == [classroom["student_id"]]

    missing = client.get("/api/v1/evaluations/9999/grades/pending", headers=admin["headers"])
    assert missing.status_code == 404
