# api/courses.py

from flask import request
from flask_login import login_required

from . import api_bp
from models import DurationTypeEnum
from api.services import CourseService, DisciplineService
from api.utils.permissions import require_roles
from api.utils.responses import paginated, success
from api.utils.serializers import serialize_course, serialize_discipline
from api.utils.validation import validate_json


def _course_rules(v):
    v.string("name", required=True, max_length=200)
    v.string("description")
    v.integer("duration", min_value=1)
    v.choice("duration_type", DurationTypeEnum)
    v.string("course_type", max_length=100)


def _discipline_rules(v):
    v.string("name", required=True, max_length=200)
    v.string("code", max_length=50)
    v.integer("workload_hours", min_value=1)


def _course_discipline_rules(v):
    v.integer("discipline_id", required=True, min_value=1)
    v.semester("semester")


# ---- cursos ----

@api_bp.get("/courses")
@login_required
def list_courses():
    return paginated(CourseService.query(request.args.get("search")), serialize_course)


@api_bp.get("/courses/<int:course_id>")
@login_required
def get_course(course_id):
    return success(serialize_course(CourseService.get(course_id), with_disciplines=True))


@api_bp.post("/courses")
@login_required
@require_roles("admin")
@validate_json(_course_rules)
def create_course(payload):
    course = CourseService.create(payload)
    return success(serialize_course(course), status=201, message="Curso criado com sucesso")


@api_bp.put("/courses/<int:course_id>")
@login_required
@require_roles("admin")
@validate_json(_course_rules, partial=True)
def update_course(course_id, payload):
    course = CourseService.update(course_id, payload)
    return success(serialize_course(course), message="Curso atualizado com sucesso")


@api_bp.delete("/courses/<int:course_id>")
@login_required
@require_roles("admin")
def delete_course(course_id):
    CourseService.delete(course_id)
    return success(None, message="Curso removido com sucesso")


@api_bp.post("/courses/<int:course_id>/disciplines")
@login_required
@require_roles("admin")
@validate_json(_course_discipline_rules)
def add_course_discipline(course_id, payload):
    CourseService.add_discipline(course_id, payload["discipline_id"], payload.get("semester"))
    course = CourseService.get(course_id)
    return success(serialize_course(course, with_disciplines=True), status=201)


@api_bp.delete("/courses/<int:course_id>/disciplines/<int:discipline_id>")
@login_required
@require_roles("admin")
def remove_course_discipline(course_id, discipline_id):
    CourseService.remove_discipline(course_id, discipline_id)
    return success(None, message="Disciplina desvinculada do curso")


# ---- disciplinas ----

@api_bp.get("/disciplines")
@login_required
def list_disciplines():
    return paginated(DisciplineService.query(request.args.get("search")), serialize_discipline)


@api_bp.get("/disciplines/<int:discipline_id>")
@login_required
def get_discipline(discipline_id):
    return success(serialize_discipline(DisciplineService.get(discipline_id)))


@api_bp.post("/disciplines")
@login_required
@require_roles("admin")
@validate_json(_discipline_rules)
def create_discipline(payload):
    discipline = DisciplineService.create(payload)
    return success(serialize_discipline(discipline), status=201, message="Disciplina criada com sucesso")


@api_bp.put("/disciplines/<int:discipline_id>")
@login_required
@require_roles("admin")
@validate_json(_discipline_rules, partial=True)
def update_discipline(discipline_id, payload):
    discipline = DisciplineService.update(discipline_id, payload)
    return success(serialize_discipline(discipline), message="Disciplina atualizada com sucesso")


@api_bp.delete("/disciplines/<int:discipline_id>")
@login_required
@require_roles("admin")
def delete_discipline(discipline_id):
    DisciplineService.delete(discipline_id)
    return success(None, message="Disciplina removida com sucesso")
