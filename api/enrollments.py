# api/enrollments.py

from flask import request
from flask_login import current_user, login_required

from . import api_bp
from errors import forbidden, validation_error
from models import EnrollmentStatusEnum, RoleEnum
from api.services import EnrollmentService
from api.utils.permissions import require_roles
from api.utils.responses import paginated, success
from api.utils.serializers import serialize_enrollment
from api.utils.validation import validate_json


def _enrollment_rules(v):
    v.integer("student_id", required=True, min_value=1)
    v.integer("course_id", required=True, min_value=1)
    v.date("enrollment_date")
    v.integer("current_semester", min_value=0, max_value=12)


def _status_rules(v):
    v.choice("status", EnrollmentStatusEnum, required=True)


def _semester_rules(v):
    v.integer("current_semester", required=True, min_value=0, max_value=12)


def _int_arg(name: str):
    raw = request.args.get(name)
    if raw in (None, ""):
        return None
    try:
        return int(raw)
    except ValueError:
        raise validation_error([{"field": name, "message": "Deve ser um número inteiro"}])


@api_bp.get("/enrollments")
@login_required
@require_roles("admin")
def list_enrollments():
    status = request.args.get("status")
    if status:
        try:
            status = EnrollmentStatusEnum(status)
        except ValueError:
            raise validation_error([{"field": "status", "message": "Status inválido"}])

    query = EnrollmentService.query_filtered(
        student_id=_int_arg("studentId"),
        course_id=_int_arg("courseId"),
        status=status or None,
    )
    return paginated(query, serialize_enrollment)


@api_bp.get("/enrollments/me")
@login_required
@require_roles("student")
def my_enrollments():
    if current_user.student_id is None:
        return success([])
    query = EnrollmentService.query_filtered(student_id=current_user.student_id)
    return success([serialize_enrollment(e) for e in query.all()])


@api_bp.get("/enrollments/<int:enrollment_id>")
@login_required
def get_enrollment(enrollment_id):
    enrollment = EnrollmentService.get(enrollment_id)
    if current_user.role == RoleEnum.STUDENT and current_user.student_id != enrollment.student_id:
        raise forbidden("Esta matrícula não pertence ao usuário autenticado")
    if current_user.role == RoleEnum.TEACHER:
        raise forbidden()
    return success(serialize_enrollment(enrollment))


@api_bp.post("/enrollments")
@login_required
@require_roles("admin")
@validate_json(_enrollment_rules)
def create_enrollment(payload):
    enrollment = EnrollmentService.create(payload)
    return success(serialize_enrollment(enrollment), status=201, message="Matrícula criada com sucesso")


@api_bp.put("/enrollments/<int:enrollment_id>")
@login_required
@require_roles("admin")
@validate_json(_enrollment_rules, partial=True)
def update_enrollment(enrollment_id, payload):
    enrollment = EnrollmentService.update(enrollment_id, payload)
    return success(serialize_enrollment(enrollment), message="Matrícula atualizada com sucesso")


@api_bp.patch("/enrollments/<int:enrollment_id>/status")
@login_required
@require_roles("admin")
@validate_json(_status_rules)
def update_enrollment_status(enrollment_id, payload):
    enrollment = EnrollmentService.update_status(enrollment_id, payload["status"])
    return success(serialize_enrollment(enrollment), message="Status da matrícula atualizado")


@api_bp.patch("/enrollments/<int:enrollment_id>/current-semester")
@login_required
@require_roles("admin")
@validate_json(_semester_rules)
def update_enrollment_semester(enrollment_id, payload):
    enrollment = EnrollmentService.update_current_semester(enrollment_id, payload["current_semester"])
    return success(serialize_enrollment(enrollment), message="Semestre atual atualizado")


@api_bp.delete("/enrollments/<int:enrollment_id>")
@login_required
@require_roles("admin")
def delete_enrollment(enrollment_id):
    EnrollmentService.delete(enrollment_id)
    return success(None, message="Matrícula removida com sucesso")
