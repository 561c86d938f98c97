# api/evaluations.py

from flask_login import current_user, login_required

from . import api_bp
from models import ConceptEnum, EvaluationTypeEnum
from api.services import EvaluationService, GradeService
from api.utils.permissions import ensure_can_manage_class, require_roles
from api.utils.responses import success
from api.utils.serializers import serialize_evaluation, serialize_grade, serialize_student
from api.utils.validation import validate_json


def _evaluation_rules(v):
    v.integer("class_id", required=True, min_value=1)
    v.integer("discipline_id", required=True, min_value=1)
    v.integer("teacher_id", min_value=1)
    v.string("name", required=True, max_length=100)
    v.date("date", required=True)
    v.choice("type", EvaluationTypeEnum, required=True)


def _grade_rules(v):
    v.integer("student_id", required=True, min_value=1)
    v.grade("grade")
    v.choice("concept", ConceptEnum)


@api_bp.get("/classes/<int:class_id>/evaluations")
@login_required
@require_roles("admin", "teacher")
def list_class_evaluations(class_id):
    ensure_can_manage_class(current_user, class_id)
    evaluations = EvaluationService.query_for_class(class_id).all()
    return success([serialize_evaluation(e) for e in evaluations])


@api_bp.get("/evaluations/<int:evaluation_id>")
@login_required
@require_roles("admin", "teacher")
def get_evaluation(evaluation_id):
    evaluation = EvaluationService.get(evaluation_id)
    ensure_can_manage_class(current_user, evaluation.class_id)
    return success(serialize_evaluation(evaluation))


@api_bp.post("/evaluations")
@login_required
@require_roles("admin", "teacher")
@validate_json(_evaluation_rules)
def create_evaluation(payload):
    evaluation = EvaluationService.create_for_user(current_user, payload)
    return success(serialize_evaluation(evaluation), status=201, message="Avaliação criada com sucesso")


@api_bp.put("/evaluations/<int:evaluation_id>")
@login_required
@require_roles("admin", "teacher")
@validate_json(_evaluation_rules, partial=True)
def update_evaluation(evaluation_id, payload):
    evaluation = EvaluationService.update_for_user(current_user, evaluation_id, payload)
    return success(serialize_evaluation(evaluation), message="Avaliação atualizada com sucesso")


@api_bp.delete("/evaluations/<int:evaluation_id>")
@login_required
@require_roles("admin", "teacher")
def delete_evaluation(evaluation_id):
    EvaluationService.delete_for_user(current_user, evaluation_id)
    return success(None, message="Avaliação removida com sucesso")


# ---- notas ----

@api_bp.get("/evaluations/<int:evaluation_id>/grades")
@login_required
@require_roles("admin", "teacher")
def list_evaluation_grades(evaluation_id):
    evaluation = EvaluationService.get(evaluation_id)
    ensure_can_manage_class(current_user, evaluation.class_id)
    grades = GradeService.list_for_evaluation(evaluation.id).all()
    return success([serialize_grade(g) for g in grades])


@api_bp.get("/evaluations/<int:evaluation_id>/grades/pending")
@login_required
@require_roles("admin", "teacher")
def list_pending_grades(evaluation_id):
    evaluation = EvaluationService.get(evaluation_id)
    ensure_can_manage_class(current_user, evaluation.class_id)
    students = GradeService.pending_students(evaluation).all()
    return success([serialize_student(s) for s in students])


@api_bp.post("/evaluations/<int:evaluation_id>/grades")
@login_required
@require_roles("admin", "teacher")
@validate_json(_grade_rules)
def upsert_grade(evaluation_id, payload):
    """
    Lança a nota de um aluno. Reenviar para o mesmo aluno atualiza a nota.
    Body JSON: {"studentId": 1, "grade": 8.5}  ou  {"studentId": 1, "concept": "satisfactory"}
    """
    grade, created = GradeService.upsert(current_user, evaluation_id, payload)
    return success(
        serialize_grade(grade),
        status=201 if created else 200,
        message="Nota lançada com sucesso" if created else "Nota atualizada com sucesso",
    )


@api_bp.get("/grades/me")
@login_required
@require_roles("student")
def my_grades():
    if current_user.student_id is None:
        return success([])
    grades = GradeService.list_for_student(current_user.student_id).all()
    return success([serialize_grade(g) for g in grades])


@api_bp.delete("/grades/<int:grade_id>")
@login_required
@require_roles("admin", "teacher")
def delete_grade(grade_id):
    GradeService.delete(current_user, grade_id)
    return success(None, message="Nota removida com sucesso")
