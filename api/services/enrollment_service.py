# api/services/enrollment_service.py

from __future__ import annotations

import logging
from typing import Mapping

from extensions import db
from errors import conflict, unprocessable
from models import Enrollment, EnrollmentStatusEnum
from api.services.crud_service import CrudService
from api.services.course_service import CourseService
from api.services.person_service import StudentService

logger = logging.getLogger(__name__)


class EnrollmentService(CrudService):
    """
    Matrículas. Uma matrícula nova nasce pending e só fica active depois do
    aceite do contrato (ReenrollmentService.accept_reenrollment) ou por ação
    do admin.
    """

    model = Enrollment
    resource_name = "Matrícula"

    @staticmethod
    def query_filtered(*, student_id=None, course_id=None, status=None):
        query = EnrollmentService.query()
        if student_id is not None:
            query = query.filter(Enrollment.student_id == student_id)
        if course_id is not None:
            query = query.filter(Enrollment.course_id == course_id)
        if status is not None:
            query = query.filter(Enrollment.status == status)
        return query

    @staticmethod
    def _ensure_no_open_enrollment(student_id: int, course_id: int, exclude_id: int | None = None) -> None:
        query = Enrollment.active().filter(
            Enrollment.student_id == student_id,
            Enrollment.course_id == course_id,
            Enrollment.status != EnrollmentStatusEnum.CANCELLED,
        )
        if exclude_id is not None:
            query = query.filter(Enrollment.id != exclude_id)
        if query.first():
            raise conflict("O aluno já possui matrícula neste curso")

    @classmethod
    def validate_create(cls, data: Mapping) -> None:
        StudentService.get(data.get("student_id"))
        CourseService.get(data.get("course_id"))
        cls._ensure_no_open_enrollment(data["student_id"], data["course_id"])

    @classmethod
    def validate_update(cls, record, data: Mapping) -> None:
        student_id = data.get("student_id", record.student_id)
        course_id = data.get("course_id", record.course_id)
        if "student_id" in data:
            StudentService.get(student_id)
        if "course_id" in data:
            CourseService.get(course_id)
        if "student_id" in data or "course_id" in data:
            cls._ensure_no_open_enrollment(student_id, course_id, exclude_id=record.id)

    @classmethod
    def create(cls, data: Mapping) -> Enrollment:
        data = dict(data)
        data.setdefault("status", EnrollmentStatusEnum.PENDING)
        enrollment = super().create(data)
        logger.info(
            "Matrícula %s criada (aluno %s, curso %s)",
            enrollment.id,
            enrollment.student_id,
            enrollment.course_id,
        )
        return enrollment

    @staticmethod
    def update_status(enrollment_id: int, status: EnrollmentStatusEnum) -> Enrollment:
        enrollment = EnrollmentService.get(enrollment_id)

        if status == EnrollmentStatusEnum.CANCELLED and enrollment.status == EnrollmentStatusEnum.CANCELLED:
            raise unprocessable("Matrícula já está cancelada", "ENROLLMENT_ALREADY_CANCELLED")
        if enrollment.status == EnrollmentStatusEnum.CANCELLED and status != EnrollmentStatusEnum.CANCELLED:
            EnrollmentService._ensure_no_open_enrollment(
                enrollment.student_id, enrollment.course_id, exclude_id=enrollment.id
            )

        enrollment.status = status
        db.session.commit()
        logger.info("Matrícula %s agora está %s", enrollment.id, status.value)
        return enrollment

    @staticmethod
    def update_current_semester(enrollment_id: int, semester: int) -> Enrollment:
        enrollment = EnrollmentService.get(enrollment_id)
        enrollment.current_semester = semester
        db.session.commit()
        return enrollment
