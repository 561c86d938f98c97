# api/documents.py

from flask import request, send_file
from flask_login import current_user, login_required

from . import api_bp
from errors import validation_error
from models import DocumentStatusEnum, DocumentUserTypeEnum, RoleEnum
from api.services import DocumentService, DocumentTypeService
from api.utils.permissions import require_roles
from api.utils.responses import paginated, success
from api.utils.serializers import serialize_document, serialize_document_type
from api.utils.uploads import handle_upload
from api.utils.validation import Validator, validate_json


def _document_type_rules(v):
    v.string("name", required=True, max_length=100)
    v.string("description")
    v.choice("user_type", DocumentUserTypeEnum, required=True)
    v.boolean("is_required")


def _review_rules(v):
    v.string("observations")


# ---- tipos de documento ----

@api_bp.get("/document-types")
@login_required
def list_document_types():
    role = None if current_user.role == RoleEnum.ADMIN else current_user.role
    query = DocumentTypeService.query_for_role(role)
    return success([serialize_document_type(t) for t in query.all()])


@api_bp.post("/document-types")
@login_required
@require_roles("admin")
@validate_json(_document_type_rules)
def create_document_type(payload):
    document_type = DocumentTypeService.create(payload)
    return success(serialize_document_type(document_type), status=201)


@api_bp.put("/document-types/<int:document_type_id>")
@login_required
@require_roles("admin")
@validate_json(_document_type_rules, partial=True)
def update_document_type(document_type_id, payload):
    document_type = DocumentTypeService.update(document_type_id, payload)
    return success(serialize_document_type(document_type))


@api_bp.delete("/document-types/<int:document_type_id>")
@login_required
@require_roles("admin")
def delete_document_type(document_type_id):
    DocumentTypeService.delete(document_type_id)
    return success(None, message="Tipo de documento removido")


# ---- documentos ----

@api_bp.post("/documents")
@login_required
@handle_upload("file")
def upload_document(upload):
    """
    multipart/form-data:
        file: arquivo (PDF, JPG, PNG)
        documentTypeId: id do tipo de documento
    """
    v = Validator({"document_type_id": request.form.get("documentTypeId")})
    v.integer("document_type_id", required=True, min_value=1)
    v.raise_if_errors()

    document = DocumentService.create_from_upload(current_user, v.cleaned["document_type_id"], upload)
    return success(serialize_document(document), status=201, message="Documento enviado com sucesso")


@api_bp.get("/documents")
@login_required
def list_documents():
    status = request.args.get("status")
    if status:
        try:
            status = DocumentStatusEnum(status)
        except ValueError:
            raise validation_error([{"field": "status", "message": "Status inválido"}])

    user_id = request.args.get("userId", type=int)
    query = DocumentService.query_for_user(current_user, status=status or None, user_id=user_id)
    return paginated(query, serialize_document)


@api_bp.get("/documents/required-status")
@login_required
@require_roles("student", "teacher")
def required_documents_status():
    return success(DocumentService.required_status_for_user(current_user))


@api_bp.get("/documents/<int:document_id>")
@login_required
def get_document(document_id):
    return success(serialize_document(DocumentService.get_for_user(document_id, current_user)))


@api_bp.get("/documents/<int:document_id>/download")
@login_required
def download_document(document_id):
    document, path = DocumentService.get_file_path(document_id, current_user)
    return send_file(path, mimetype=document.mime_type, as_attachment=True, download_name=document.file_name)


@api_bp.patch("/documents/<int:document_id>/approve")
@login_required
@require_roles("admin")
@validate_json(_review_rules)
def approve_document(document_id, payload):
    document = DocumentService.approve(document_id, current_user, payload.get("observations"))
    return success(serialize_document(document), message="Documento aprovado")


@api_bp.patch("/documents/<int:document_id>/reject")
@login_required
@require_roles("admin")
@validate_json(_review_rules)
def reject_document(document_id, payload):
    document = DocumentService.reject(document_id, current_user, payload.get("observations"))
    return success(serialize_document(document), message="Documento rejeitado")


@api_bp.delete("/documents/<int:document_id>")
@login_required
def delete_document(document_id):
    DocumentService.delete(document_id, current_user)
    return success(None, message="Documento removido com sucesso")
