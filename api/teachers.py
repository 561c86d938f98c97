# api/teachers.py

from flask import request
from flask_login import current_user, login_required

from . import api_bp
from errors import forbidden
from models import RoleEnum
from api.services import TeacherService
from api.utils.permissions import require_roles
from api.utils.responses import paginated, success
from api.utils.serializers import serialize_teacher
from api.utils.validation import person_rules, validate_json


@api_bp.get("/teachers")
@login_required
@require_roles("admin")
def list_teachers():
    return paginated(TeacherService.query(request.args.get("search")), serialize_teacher)


@api_bp.get("/teachers/<int:teacher_id>")
@login_required
@require_roles("admin", "teacher")
def get_teacher(teacher_id):
    if current_user.role == RoleEnum.TEACHER and current_user.teacher_id != teacher_id:
        raise forbidden("Você só pode consultar os próprios dados")
    return success(serialize_teacher(TeacherService.get(teacher_id)))


@api_bp.post("/teachers")
@login_required
@require_roles("admin")
@validate_json(person_rules)
def create_teacher(payload):
    teacher = TeacherService.create(payload)
    return success(serialize_teacher(teacher), status=201, message="Professor cadastrado com sucesso")


@api_bp.put("/teachers/<int:teacher_id>")
@login_required
@require_roles("admin")
@validate_json(person_rules, partial=True)
def update_teacher(teacher_id, payload):
    teacher = TeacherService.update(teacher_id, payload)
    return success(serialize_teacher(teacher), message="Professor atualizado com sucesso")


@api_bp.delete("/teachers/<int:teacher_id>")
@login_required
@require_roles("admin")
def delete_teacher(teacher_id):
    TeacherService.delete(teacher_id)
    return success(None, message="Professor removido com sucesso")
