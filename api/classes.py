# api/classes.py

from flask_login import current_user, login_required

from . import api_bp
from api.services import ClassService
from api.utils.permissions import ensure_can_manage_class, require_roles
from api.utils.responses import paginated, success
from api.utils.serializers import serialize_class
from api.utils.validation import validate_json


def _class_rules(v):
    v.integer("course_id", required=True, min_value=1)
    v.semester("semester", required=True)
    v.integer("year", required=True, min_value=1900, max_value=9999)


def _class_teacher_rules(v):
    v.integer("teacher_id", required=True, min_value=1)
    v.integer("discipline_id", required=True, min_value=1)


def _class_student_rules(v):
    v.integer("student_id", required=True, min_value=1)


@api_bp.get("/classes")
@login_required
@require_roles("admin", "teacher")
def list_classes():
    return paginated(ClassService.query_for_user(current_user), serialize_class)


@api_bp.get("/classes/<int:class_id>")
@login_required
@require_roles("admin", "teacher")
def get_class(class_id):
    school_class = ClassService.get(class_id)
    ensure_can_manage_class(current_user, school_class.id)
    return success(serialize_class(school_class, detailed=True))


@api_bp.post("/classes")
@login_required
@require_roles("admin")
@validate_json(_class_rules)
def create_class(payload):
    school_class = ClassService.create(payload)
    return success(serialize_class(school_class), status=201, message="Turma criada com sucesso")


@api_bp.put("/classes/<int:class_id>")
@login_required
@require_roles("admin")
@validate_json(_class_rules, partial=True)
def update_class(class_id, payload):
    school_class = ClassService.update(class_id, payload)
    return success(serialize_class(school_class), message="Turma atualizada com sucesso")


@api_bp.delete("/classes/<int:class_id>")
@login_required
@require_roles("admin")
def delete_class(class_id):
    ClassService.delete(class_id)
    return success(None, message="Turma removida com sucesso")


@api_bp.post("/classes/<int:class_id>/teachers")
@login_required
@require_roles("admin")
@validate_json(_class_teacher_rules)
def assign_class_teacher(class_id, payload):
    ClassService.assign_teacher(class_id, payload["teacher_id"], payload["discipline_id"])
    return success(serialize_class(ClassService.get(class_id), detailed=True), status=201)


@api_bp.delete("/classes/<int:class_id>/teachers/<int:teacher_id>/disciplines/<int:discipline_id>")
@login_required
@require_roles("admin")
def remove_class_teacher(class_id, teacher_id, discipline_id):
    ClassService.remove_teacher(class_id, teacher_id, discipline_id)
    return success(None, message="Professor desvinculado da turma")


@api_bp.post("/classes/<int:class_id>/students")
@login_required
@require_roles("admin")
@validate_json(_class_student_rules)
def add_class_student(class_id, payload):
    ClassService.add_student(class_id, payload["student_id"])
    return success(serialize_class(ClassService.get(class_id), detailed=True), status=201)


@api_bp.delete("/classes/<int:class_id>/students/<int:student_id>")
@login_required
@require_roles("admin")
def remove_class_student(class_id, student_id):
    ClassService.remove_student(class_id, student_id)
    return success(None, message="Aluno removido da turma")
