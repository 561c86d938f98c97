import os

os.environ["APP_ENV"] = "test"

from datetime import date

import pytest

from app import create_app
from config import TestingConfig
from extensions import db
from models import (
    ContractTemplate,
    Course,
    DurationTypeEnum,
    Enrollment,
    EnrollmentStatusEnum,
    RoleEnum,
    Student,
    Teacher,
    User,
)
from api.utils.auth import create_access_token

CONTRACT_TEMPLATE = (
    "<h2>Contrato</h2>"
    "<p>Aluno: <b>{{studentName}}</b>, CPF {{studentCPF}}.</p>"
    "<p>Curso: {{courseName}} ({{duration}}), semestre {{semester}}/{{year}}.</p>"
    "<p>Emitido em {{currentDate}} por {{institutionName}}.</p>"
)


@pytest.fixture
def app_factory(tmp_path):
    created = []

    def _factory(**overrides):
        config = {"UPLOAD_DIR": str(tmp_path / "uploads")}
        config.update(overrides)
        app = create_app(TestingConfig, config)
        with app.app_context():
            db.create_all()
        created.append(app)
        return app

    yield _factory

    for app in created:
        with app.app_context():
            db.session.remove()
            db.drop_all()


@pytest.fixture
def app(app_factory):
    return app_factory()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def make_user(app):
    """Cria um usuário e devolve id, senha e headers com o Bearer token."""
    counter = {"n": 0}

    def _make(role="admin", password="Senha123", student_id=None, teacher_id=None, login=None, name=None):
        counter["n"] += 1
        login = login or f"{role}{counter['n']}"
        with app.app_context():
            user = User(
                login=login,
                role=RoleEnum(role),
                name=name or login.title(),
                student_id=student_id,
                teacher_id=teacher_id,
            )
            user.set_password(password)
            db.session.add(user)
            db.session.commit()
            token = create_access_token(user)
            return {
                "id": user.id,
                "login": login,
                "password": password,
                "token": token,
                "headers": {"Authorization": f"Bearer {token}"},
            }

    return _make


@pytest.fixture
def admin(make_user):
    return make_user("admin")


@pytest.fixture
def make_student(app):
    def _make(name="Maria da Silva", cpf="52998224725", **fields):
        with app.app_context():
            student = Student(name=name, cpf=cpf, **fields)
            db.session.add(student)
            db.session.commit()
            return student.id

    return _make


@pytest.fixture
def make_teacher(app):
    def _make(name="João Souza", cpf="39053344705"):
        with app.app_context():
            teacher = Teacher(name=name, cpf=cpf)
            db.session.add(teacher)
            db.session.commit()
            return teacher.id

    return _make


@pytest.fixture
def make_course(app):
    def _make(name="Teologia", duration=8):
        with app.app_context():
            course = Course(name=name, duration=duration, duration_type=DurationTypeEnum.SEMESTERS)
            db.session.add(course)
            db.session.commit()
            return course.id

    return _make


@pytest.fixture
def make_enrollment(app):
    def _make(student_id, course_id, status=EnrollmentStatusEnum.ACTIVE, **fields):
        with app.app_context():
            enrollment = Enrollment(
                student_id=student_id,
                course_id=course_id,
                status=status,
                enrollment_date=date(2025, 2, 1),
                **fields,
            )
            db.session.add(enrollment)
            db.session.commit()
            return enrollment.id

    return _make


@pytest.fixture
def make_template(app):
    def _make(content=CONTRACT_TEMPLATE, is_active=True, name="Contrato padrão"):
        with app.app_context():
            template = ContractTemplate(name=name, content=content, is_active=is_active)
            db.session.add(template)
            db.session.commit()
            return template.id

    return _make


@pytest.fixture
def pending_reenrollment(make_student, make_course, make_enrollment, make_template, make_user):
    """Aluno com login, template ativo e matrícula pendente de rematrícula."""
    student_id = make_student(
        phone="11987654321",
        email="maria@example.com",
        birth_date=date(2000, 5, 17),
        city="São Paulo",
        state="SP",
    )
    course_id = make_course()
    enrollment_id = make_enrollment(
        student_id,
        course_id,
        status=EnrollmentStatusEnum.PENDING,
        reenrollment_semester=1,
        reenrollment_year=2026,
        current_semester=3,
    )
    template_id = make_template()
    user = make_user("student", student_id=student_id)
    return {
        "student_id": student_id,
        "course_id": course_id,
        "enrollment_id": enrollment_id,
        "template_id": template_id,
        "user": user,
    }
