# services/contract_service.py

from __future__ import annotations

import logging
import os
from datetime import date, datetime

from flask import current_app

from errors import AppError, forbidden, not_found, unprocessable
from extensions import db
from models import Contract, ContractTemplate, Enrollment, EnrollmentStatusEnum, User
from services.pdf_service import PDFService
from services.placeholders import build_placeholder_data, render_template_text
from services.storage_service import (
    contracts_dir,
    delete_file_quietly,
    relative_to_upload_dir,
    resolve_upload_path,
    timestamp_ms,
)

logger = logging.getLogger(__name__)


class ContractService:
    """
    Geração, aceite e consulta de contratos.

    A linha do contrato e o PDF são produzidos na mesma transação: se o PDF
    falhar, nada é persistido e o arquivo parcial é removido.
    """

    @staticmethod
    def current_period(today: date | None = None) -> tuple[int, int]:
        today = today or date.today()
        return (1 if today.month < 7 else 2), today.year

    @staticmethod
    def resolve_template(template_id: int | None = None) -> ContractTemplate:
        if template_id is not None:
            template = ContractTemplate.get_active(template_id)
            if not template:
                raise not_found("Template de contrato")
            return template

        template = ContractTemplate.first_available()
        if not template:
            raise unprocessable("Nenhum template de contrato ativo disponível", "NO_ACTIVE_TEMPLATE")
        return template

    @staticmethod
    def build_data(
        *,
        user: User,
        semester: int,
        year: int,
        enrollment: Enrollment | None = None,
        contract_created_at: datetime | None = None,
    ) -> dict:
        student = enrollment.student if enrollment is not None else None
        course = enrollment.course if enrollment is not None else None
        return build_placeholder_data(
            user=user,
            student=student,
            enrollment=enrollment,
            course=course,
            semester=semester,
            year=year,
            contract_created_at=contract_created_at,
            institution_name=current_app.config.get("INSTITUTION_NAME", "Secretaria Online"),
        )

    @staticmethod
    def render_content(template: ContractTemplate, data: dict) -> str:
        return render_template_text(template.content, data)

    @staticmethod
    def _write_pdf(contract: Contract, content: str) -> str:
        """
        Gera o PDF do contrato e preenche file_path (relativo a UPLOAD_DIR)
        e file_name. Retorna o caminho absoluto gerado.
        """
        upload_dir = current_app.config["UPLOAD_DIR"]
        output_dir = contracts_dir(upload_dir)

        owner_id = None
        if contract.enrollment is not None:
            owner_id = contract.enrollment.student_id
        if owner_id is None and contract.user is not None:
            owner_id = contract.user.student_id or contract.user.id

        file_name = PDFService.build_contract_file_name(
            owner_id, contract.semester, contract.year, timestamp_ms()
        )
        absolute_path = os.path.join(output_dir, file_name)

        try:
            PDFService.generate_contract_pdf(
                content=content,
                output_dir=output_dir,
                file_name=file_name,
                institution_name=current_app.config.get("INSTITUTION_NAME", "Secretaria Online"),
            )
            if not PDFService.is_valid_pdf(absolute_path):
                raise RuntimeError(f"PDF inválido gerado em {absolute_path}")
        except Exception:
            delete_file_quietly(absolute_path)
            raise

        contract.file_path = relative_to_upload_dir(upload_dir, absolute_path)
        contract.file_name = file_name
        return absolute_path

    @staticmethod
    def create_contract_with_pdf(
        *,
        user: User,
        template: ContractTemplate,
        semester: int,
        year: int,
        enrollment: Enrollment | None = None,
    ) -> Contract:
        """
        Cria o contrato, gera o PDF e faz commit. Alterações pendentes na
        sessão (ex.: status da matrícula) entram no mesmo commit ou no mesmo
        rollback.
        """
        pdf_path = None
        try:
            contract = Contract(
                user_id=user.id,
                template_id=template.id,
                enrollment_id=enrollment.id if enrollment is not None else None,
                semester=semester,
                year=year,
            )
            db.session.add(contract)
            db.session.flush()

            data = ContractService.build_data(
                user=user,
                semester=semester,
                year=year,
                enrollment=enrollment,
                contract_created_at=contract.created_at,
            )
            content = ContractService.render_content(template, data)
            pdf_path = ContractService._write_pdf(contract, content)

            db.session.commit()
        except Exception:
            db.session.rollback()
            delete_file_quietly(pdf_path)
            logger.exception(
                "Falha ao gerar contrato (user_id=%s, enrollment_id=%s, %s/%s)",
                user.id,
                enrollment.id if enrollment is not None else None,
                semester,
                year,
            )
            raise AppError("Erro ao gerar o contrato", 500, "CONTRACT_GENERATION_FAILED")

        logger.info("Contrato %s gerado para o usuário %s", contract.id, user.id)
        return contract

    @staticmethod
    def generate_contract(
        *,
        user_id: int,
        semester: int | None = None,
        year: int | None = None,
        template_id: int | None = None,
        enrollment_id: int | None = None,
    ) -> Contract:
        user = User.get_active(user_id)
        if not user:
            raise not_found("Usuário")

        template = ContractService.resolve_template(template_id)

        enrollment = None
        if enrollment_id is not None:
            enrollment = Enrollment.get_active(enrollment_id)
            if not enrollment:
                raise not_found("Matrícula")
        elif user.student_id:
            enrollment = (
                Enrollment.active()
                .filter(
                    Enrollment.student_id == user.student_id,
                    Enrollment.status != EnrollmentStatusEnum.CANCELLED,
                )
                .order_by(Enrollment.created_at.desc(), Enrollment.id.desc())
                .first()
            )

        default_semester, default_year = ContractService.current_period()
        return ContractService.create_contract_with_pdf(
            user=user,
            template=template,
            semester=semester or default_semester,
            year=year or default_year,
            enrollment=enrollment,
        )

    @staticmethod
    def list_contracts(user: User, status: str | None = None):
        query = Contract.active()
        if not user.is_admin:
            query = query.filter(Contract.user_id == user.id)

        if status == "accepted":
            query = query.filter(Contract.accepted_at.isnot(None))
        elif status == "pending":
            query = query.filter(Contract.accepted_at.is_(None))

        return query.order_by(Contract.created_at.desc(), Contract.id.desc())

    @staticmethod
    def get_contract(contract_id: int, user: User) -> Contract:
        contract = Contract.get_active(contract_id)
        if not contract:
            raise not_found("Contrato")
        if not user.is_admin and contract.user_id != user.id:
            raise forbidden("Você não tem permissão para acessar este contrato")
        return contract

    @staticmethod
    def get_pdf_path(contract_id: int, user: User):
        contract = ContractService.get_contract(contract_id, user)
        if not contract.has_pdf:
            raise not_found("PDF do contrato")

        path = resolve_upload_path(current_app.config["UPLOAD_DIR"], contract.file_path)
        if path is None or not path.is_file():
            raise not_found("PDF do contrato")
        return contract, path

    @staticmethod
    def accept_contract(contract_id: int, user: User) -> Contract:
        contract = Contract.get_active(contract_id)
        if not contract:
            raise not_found("Contrato")
        if contract.user_id != user.id:
            raise forbidden("Apenas o titular pode aceitar o contrato")
        if contract.accepted_at is not None:
            raise unprocessable("Contrato já foi aceito", "CONTRACT_ALREADY_ACCEPTED")

        contract.accepted_at = datetime.utcnow()
        db.session.commit()
        return contract

    @staticmethod
    def delete_contract(contract_id: int) -> None:
        contract = Contract.get_active(contract_id)
        if not contract:
            raise not_found("Contrato")
        contract.soft_delete()
        db.session.commit()

    @staticmethod
    def regenerate_missing_pdfs() -> dict:
        """
        Regenera o PDF dos contratos sem file_path/file_name. Uma falha em um
        contrato é registrada no relatório e não interrompe os demais.
        """
        pending = (
            Contract.active()
            .filter(db.or_(Contract.file_path.is_(None), Contract.file_name.is_(None)))
            .order_by(Contract.id.asc())
            .all()
        )

        report = {"total": len(pending), "regenerated": [], "failed": []}
        for contract in pending:
            pdf_path = None
            try:
                template = contract.template
                if template is None or template.is_deleted:
                    template = ContractService.resolve_template()

                data = ContractService.build_data(
                    user=contract.user,
                    semester=contract.semester,
                    year=contract.year,
                    enrollment=contract.enrollment,
                    contract_created_at=contract.created_at,
                )
                content = ContractService.render_content(template, data)
                pdf_path = ContractService._write_pdf(contract, content)
                db.session.commit()
                report["regenerated"].append(contract.id)
            except Exception as exc:
                db.session.rollback()
                delete_file_quietly(pdf_path)
                logger.exception("Falha ao regenerar PDF do contrato %s", contract.id)
                report["failed"].append({"contract_id": contract.id, "error": str(exc)})

        return report
