# api/contracts.py

from flask import request, send_file
from flask_login import current_user, login_required

from . import api_bp
from errors import validation_error
from api.services import ContractTemplateService
from api.utils.permissions import require_roles
from api.utils.responses import paginated, success
from api.utils.serializers import serialize_contract, serialize_contract_template
from api.utils.validation import validate_json
from services import ContractService


def _template_rules(v):
    v.string("name", required=True, max_length=100)
    v.string("content", required=True)
    v.boolean("is_active")


def _generate_rules(v):
    v.integer("user_id", required=True, min_value=1)
    v.integer("semester", min_value=1, max_value=2)
    v.integer("year", min_value=1000, max_value=9999)
    v.integer("template_id", min_value=1)
    v.integer("enrollment_id", min_value=1)


def _template_payload(template) -> dict:
    data = serialize_contract_template(template)
    data["unknown_placeholders"] = ContractTemplateService.unknown_placeholders(template.content)
    return data


# ---- templates ----

@api_bp.get("/contract-templates")
@login_required
@require_roles("admin")
def list_contract_templates():
    query = ContractTemplateService.query(request.args.get("search"))
    return paginated(query, serialize_contract_template)


@api_bp.get("/contract-templates/placeholders")
@login_required
@require_roles("admin")
def list_contract_placeholders():
    return success(ContractTemplateService.available_placeholders())


@api_bp.get("/contract-templates/<int:template_id>")
@login_required
@require_roles("admin")
def get_contract_template(template_id):
    return success(_template_payload(ContractTemplateService.get(template_id)))


@api_bp.post("/contract-templates")
@login_required
@require_roles("admin")
@validate_json(_template_rules)
def create_contract_template(payload):
    template = ContractTemplateService.create(payload)
    return success(_template_payload(template), status=201, message="Template criado com sucesso")


@api_bp.put("/contract-templates/<int:template_id>")
@login_required
@require_roles("admin")
@validate_json(_template_rules, partial=True)
def update_contract_template(template_id, payload):
    template = ContractTemplateService.update(template_id, payload)
    return success(_template_payload(template), message="Template atualizado com sucesso")


@api_bp.delete("/contract-templates/<int:template_id>")
@login_required
@require_roles("admin")
def delete_contract_template(template_id):
    ContractTemplateService.delete(template_id)
    return success(None, message="Template removido com sucesso")


# ---- contratos ----

@api_bp.get("/contracts")
@login_required
def list_contracts():
    status = request.args.get("status")
    if status and status not in ("pending", "accepted"):
        raise validation_error([{"field": "status", "message": "Use pending ou accepted"}])
    return paginated(ContractService.list_contracts(current_user, status), serialize_contract)


@api_bp.get("/contracts/<int:contract_id>")
@login_required
def get_contract(contract_id):
    return success(serialize_contract(ContractService.get_contract(contract_id, current_user)))


@api_bp.get("/contracts/<int:contract_id>/pdf")
@login_required
def download_contract_pdf(contract_id):
    contract, path = ContractService.get_pdf_path(contract_id, current_user)
    return send_file(path, mimetype="application/pdf", as_attachment=True, download_name=contract.file_name)


@api_bp.post("/contracts/<int:contract_id>/accept")
@login_required
def accept_contract(contract_id):
    contract = ContractService.accept_contract(contract_id, current_user)
    return success(serialize_contract(contract), message="Contrato aceito com sucesso")


@api_bp.post("/contracts/generate")
@login_required
@require_roles("admin")
@validate_json(_generate_rules)
def generate_contract(payload):
    contract = ContractService.generate_contract(**payload)
    return success(serialize_contract(contract), status=201, message="Contrato gerado com sucesso")


@api_bp.delete("/contracts/<int:contract_id>")
@login_required
@require_roles("admin")
def delete_contract(contract_id):
    ContractService.delete_contract(contract_id)
    return success(None, message="Contrato removido com sucesso")
