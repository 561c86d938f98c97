# api/reenrollments.py

from flask_login import current_user, login_required

from . import api_bp
from api.utils.permissions import require_roles
from api.utils.responses import success
from api.utils.serializers import serialize_contract, serialize_enrollment
from api.utils.validation import validate_json
from services import ReenrollmentService


def _process_all_rules(v):
    v.integer("semester", required=True, min_value=1, max_value=2)
    v.integer("year", required=True, min_value=1000, max_value=9999)
    v.string("admin_password", required=True)


@api_bp.post("/reenrollments/process-all")
@login_required
@require_roles("admin")
@validate_json(_process_all_rules)
def process_global_reenrollment(payload):
    """
    Rematrícula global: todas as matrículas ativas passam para pending.
    Body JSON:
    {
        "semester": 1,
        "year": 2026,
        "adminPassword": "Senha123"
    }
    """
    ReenrollmentService.validate_admin_password(current_user.id, payload["admin_password"])
    result = ReenrollmentService.process_global_reenrollment(
        payload["semester"], payload["year"], current_user.id
    )
    return success(
        result,
        message=f"Rematrícula global processada com sucesso. {result['total_students']} estudantes rematriculados.",
    )


@api_bp.get("/reenrollments/contract-preview/<int:enrollment_id>")
@login_required
@require_roles("student")
def preview_reenrollment_contract(enrollment_id):
    return success(ReenrollmentService.get_contract_preview(enrollment_id, current_user))


@api_bp.post("/reenrollments/accept/<int:enrollment_id>")
@login_required
@require_roles("student")
def accept_reenrollment(enrollment_id):
    result = ReenrollmentService.accept_reenrollment(enrollment_id, current_user)
    return success(
        {
            "enrollment": serialize_enrollment(result["enrollment"]),
            "contract": serialize_contract(result["contract"]),
        },
        message="Rematrícula aceita com sucesso",
    )
