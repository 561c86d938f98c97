# api/services/document_service.py

from __future__ import annotations

import logging
from datetime import datetime

from flask import current_app

from extensions import db
from errors import AppError, forbidden, not_found, validation_error
from models import Document, DocumentStatusEnum, DocumentType, DocumentUserTypeEnum, RoleEnum
from api.services.crud_service import CrudService
from services.storage_service import delete_file_quietly, resolve_upload_path

logger = logging.getLogger(__name__)


class DocumentTypeService(CrudService):
    model = DocumentType
    resource_name = "Tipo de documento"
    search_fields = ("name",)
    default_order = "name"

    @staticmethod
    def query_for_role(role: RoleEnum | None):
        query = DocumentTypeService.query()
        if role in (RoleEnum.STUDENT, RoleEnum.TEACHER):
            query = query.filter(
                DocumentType.user_type.in_([DocumentUserTypeEnum(role.value), DocumentUserTypeEnum.BOTH])
            )
        return query


class DocumentService:
    """
    Documentos enviados por alunos e professores e revisados pelo admin.
    O arquivo já chega gravado pelo decorator handle_upload.
    """

    @staticmethod
    def query_for_user(user, *, status: DocumentStatusEnum | None = None, user_id: int | None = None):
        query = Document.active()
        if not user.is_admin:
            query = query.filter(Document.user_id == user.id)
        elif user_id is not None:
            query = query.filter(Document.user_id == user_id)
        if status is not None:
            query = query.filter(Document.status == status)
        return query.order_by(Document.created_at.desc(), Document.id.desc())

    @staticmethod
    def get_for_user(document_id: int, user) -> Document:
        document = Document.get_active(document_id)
        if not document:
            raise not_found("Documento")
        if not user.is_admin and document.user_id != user.id:
            raise forbidden("Você não tem permissão para acessar este documento")
        return document

    @staticmethod
    def create_from_upload(user, document_type_id: int, upload) -> Document:
        document_type = DocumentType.get_active(document_type_id)
        if not document_type:
            raise not_found("Tipo de documento")

        allowed = {DocumentUserTypeEnum.BOTH}
        if user.role in (RoleEnum.STUDENT, RoleEnum.TEACHER):
            allowed.add(DocumentUserTypeEnum(user.role.value))
        if not user.is_admin and document_type.user_type not in allowed:
            raise AppError(
                "Este tipo de documento não se aplica ao seu perfil",
                422,
                "DOCUMENT_TYPE_NOT_ALLOWED",
            )

        document = Document(
            user_id=user.id,
            document_type_id=document_type.id,
            file_path=upload.relative_path,
            file_name=upload.original_name,
            file_size=upload.size,
            mime_type=upload.mime_type,
            status=DocumentStatusEnum.PENDING,
        )
        db.session.add(document)
        db.session.commit()
        logger.info("Documento %s enviado pelo usuário %s", document.id, user.id)
        return document

    @staticmethod
    def _review(document_id: int, reviewer, status: DocumentStatusEnum, observations: str | None) -> Document:
        document = Document.get_active(document_id)
        if not document:
            raise not_found("Documento")

        document.status = status
        document.reviewed_by = reviewer.id
        document.reviewed_at = datetime.utcnow()
        document.observations = observations
        db.session.commit()
        return document

    @staticmethod
    def approve(document_id: int, reviewer, observations: str | None = None) -> Document:
        return DocumentService._review(document_id, reviewer, DocumentStatusEnum.APPROVED, observations)

    @staticmethod
    def reject(document_id: int, reviewer, observations: str | None) -> Document:
        if not observations:
            raise validation_error(
                [{"field": "observations", "message": "Informe o motivo da rejeição"}]
            )
        return DocumentService._review(document_id, reviewer, DocumentStatusEnum.REJECTED, observations)

    @staticmethod
    def get_file_path(document_id: int, user):
        document = DocumentService.get_for_user(document_id, user)
        path = resolve_upload_path(current_app.config["UPLOAD_DIR"], document.file_path)
        if path is None or not path.is_file():
            raise not_found("Arquivo do documento")
        return document, path

    @staticmethod
    def delete(document_id: int, user) -> None:
        document = DocumentService.get_for_user(document_id, user)
        if not user.is_admin and document.status == DocumentStatusEnum.APPROVED:
            raise AppError("Documentos aprovados não podem ser removidos", 422, "DOCUMENT_ALREADY_APPROVED")

        document.soft_delete()
        db.session.commit()
        path = resolve_upload_path(current_app.config["UPLOAD_DIR"], document.file_path)
        delete_file_quietly(path)

    @staticmethod
    def required_status_for_user(user) -> list[dict]:
        """Tipos obrigatórios do perfil e a situação do último envio de cada um."""
        types = DocumentTypeService.query_for_role(user.role).filter(DocumentType.is_required.is_(True)).all()
        result = []
        for document_type in types:
            latest = (
                Document.active()
                .filter(Document.user_id == user.id, Document.document_type_id == document_type.id)
                .order_by(Document.created_at.desc(), Document.id.desc())
                .first()
            )
            result.append(
                {
                    "document_type_id": document_type.id,
                    "name": document_type.name,
                    "status": latest.status.value if latest else "not_submitted",
                    "document_id": latest.id if latest else None,
                }
            )
        return result
