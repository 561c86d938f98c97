# services/reenrollment_service.py

from __future__ import annotations

import logging

from errors import AppError, forbidden, not_found, unauthorized, unprocessable, validation_error
from extensions import db
from models import Enrollment, EnrollmentStatusEnum, RoleEnum, User
from services.contract_service import ContractService

logger = logging.getLogger(__name__)


class ReenrollmentService:
    """
    Rematrícula global e aceite da rematrícula pelo aluno.

    process_global_reenrollment() leva TODAS as matrículas ativas para
    pending numa única transação; o aceite (accept_reenrollment) volta a
    matrícula para active e gera o contrato em PDF.
    """

    @staticmethod
    def validate_admin_password(user_id: int, password: str | None) -> User:
        user = User.get_active(user_id)
        if not user:
            raise not_found("Usuário")
        if user.role != RoleEnum.ADMIN:
            raise forbidden("Apenas administradores podem executar a rematrícula")
        if not password or not user.check_password(password):
            raise unauthorized("Senha do administrador incorreta", "INVALID_PASSWORD")
        return user

    @staticmethod
    def validate_period(semester, year) -> None:
        details = []
        if not isinstance(semester, int) or isinstance(semester, bool) or semester not in (1, 2):
            details.append({"field": "semester", "message": "Semestre deve ser 1 ou 2"})
        if not isinstance(year, int) or isinstance(year, bool) or not 1000 <= year <= 9999:
            details.append({"field": "year", "message": "Ano deve ter quatro dígitos"})
        if details:
            raise validation_error(details)

    @staticmethod
    def _mark_pending(enrollment: Enrollment, semester: int, year: int) -> None:
        enrollment.status = EnrollmentStatusEnum.PENDING
        enrollment.reenrollment_semester = semester
        enrollment.reenrollment_year = year

    @staticmethod
    def process_global_reenrollment(semester: int, year: int, admin_user_id: int) -> dict:
        ReenrollmentService.validate_period(semester, year)

        logger.info(
            "Iniciando rematrícula global (semestre=%s, ano=%s, admin=%s)",
            semester,
            year,
            admin_user_id,
        )

        active_enrollments = (
            Enrollment.active()
            .filter(Enrollment.status == EnrollmentStatusEnum.ACTIVE)
            .order_by(Enrollment.id.asc())
            .all()
        )

        if not active_enrollments:
            logger.warning("Nenhuma matrícula ativa encontrada; rematrícula não executada")
            return {"total_students": 0, "affected_enrollment_ids": []}

        affected_ids = [enrollment.id for enrollment in active_enrollments]
        try:
            for enrollment in active_enrollments:
                ReenrollmentService._mark_pending(enrollment, semester, year)
            db.session.flush()
            db.session.commit()
        except Exception:
            db.session.rollback()
            logger.error(
                "Rematrícula global revertida (semestre=%s, ano=%s, admin=%s)",
                semester,
                year,
                admin_user_id,
                exc_info=True,
            )
            raise AppError("Erro ao processar rematrícula global", 500, "REENROLLMENT_FAILED")

        logger.info(
            "Rematrícula global concluída: %s matrículas (semestre=%s, ano=%s, admin=%s)",
            len(affected_ids),
            semester,
            year,
            admin_user_id,
        )
        return {"total_students": len(affected_ids), "affected_enrollment_ids": affected_ids}

    @staticmethod
    def _get_owned_pending_enrollment(enrollment_id: int, user: User) -> Enrollment:
        enrollment = Enrollment.get_active(enrollment_id)
        if not enrollment:
            raise not_found("Matrícula")
        if user.student_id is None or user.student_id != enrollment.student_id:
            raise forbidden("Esta matrícula não pertence ao usuário autenticado")
        if enrollment.status != EnrollmentStatusEnum.PENDING:
            raise unprocessable("A matrícula não está pendente de rematrícula", "ENROLLMENT_NOT_PENDING")
        return enrollment

    @staticmethod
    def _enrollment_period(enrollment: Enrollment) -> tuple[int, int]:
        default_semester, default_year = ContractService.current_period()
        return (
            enrollment.reenrollment_semester or default_semester,
            enrollment.reenrollment_year or default_year,
        )

    @staticmethod
    def get_contract_preview(enrollment_id: int, user: User) -> dict:
        """Renderiza o contrato que será gerado no aceite, sem gravar nada."""
        enrollment = ReenrollmentService._get_owned_pending_enrollment(enrollment_id, user)
        template = ContractService.resolve_template()
        semester, year = ReenrollmentService._enrollment_period(enrollment)

        data = ContractService.build_data(
            user=user,
            semester=semester,
            year=year,
            enrollment=enrollment,
        )
        return {
            "content": ContractService.render_content(template, data),
            "template_id": template.id,
            "enrollment_id": enrollment.id,
            "semester": semester,
            "year": year,
        }

    @staticmethod
    def accept_reenrollment(enrollment_id: int, user: User) -> dict:
        enrollment = ReenrollmentService._get_owned_pending_enrollment(enrollment_id, user)
        template = ContractService.resolve_template()
        semester, year = ReenrollmentService._enrollment_period(enrollment)

        enrollment.status = EnrollmentStatusEnum.ACTIVE
        contract = ContractService.create_contract_with_pdf(
            user=user,
            template=template,
            semester=semester,
            year=year,
            enrollment=enrollment,
        )

        logger.info(
            "Rematrícula aceita: matrícula %s, contrato %s (usuário %s)",
            enrollment.id,
            contract.id,
            user.id,
        )
        return {"enrollment": enrollment, "contract": contract}
