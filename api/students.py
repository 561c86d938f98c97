# api/students.py

from flask import request
from flask_login import current_user, login_required

from . import api_bp
from errors import forbidden
from models import RoleEnum
from api.services import EnrollmentService, GradeService, StudentService
from api.utils.permissions import require_roles
from api.utils.responses import paginated, success
from api.utils.serializers import serialize_enrollment, serialize_grade, serialize_student
from api.utils.validation import person_rules, validate_json


def _student_rules(v):
    person_rules(v)
    v.string("mother_name", max_length=200)
    v.string("father_name", max_length=200)
    v.string("registration_number", max_length=30)


def _ensure_can_view(student_id: int) -> None:
    if current_user.role == RoleEnum.STUDENT and current_user.student_id != student_id:
        raise forbidden("Você só pode consultar os próprios dados")


@api_bp.get("/students")
@login_required
@require_roles("admin", "teacher")
def list_students():
    return paginated(StudentService.query(request.args.get("search")), serialize_student)


@api_bp.get("/students/<int:student_id>")
@login_required
def get_student(student_id):
    _ensure_can_view(student_id)
    return success(serialize_student(StudentService.get(student_id)))


@api_bp.post("/students")
@login_required
@require_roles("admin")
@validate_json(_student_rules)
def create_student(payload):
    student = StudentService.create(payload)
    return success(serialize_student(student), status=201, message="Aluno cadastrado com sucesso")


@api_bp.put("/students/<int:student_id>")
@login_required
@require_roles("admin")
@validate_json(_student_rules, partial=True)
def update_student(student_id, payload):
    student = StudentService.update(student_id, payload)
    return success(serialize_student(student), message="Aluno atualizado com sucesso")


@api_bp.delete("/students/<int:student_id>")
@login_required
@require_roles("admin")
def delete_student(student_id):
    StudentService.delete(student_id)
    return success(None, message="Aluno removido com sucesso")


@api_bp.get("/students/<int:student_id>/enrollments")
@login_required
def list_student_enrollments(student_id):
    _ensure_can_view(student_id)
    StudentService.get(student_id)
    query = EnrollmentService.query_filtered(student_id=student_id)
    return success([serialize_enrollment(e) for e in query.all()])


@api_bp.get("/students/<int:student_id>/grades")
@login_required
def list_student_grades(student_id):
    _ensure_can_view(student_id)
    StudentService.get(student_id)
    return success([serialize_grade(g) for g in GradeService.list_for_student(student_id).all()])
