# api/services/dashboard_service.py

from models import (
    Document,
    DocumentStatusEnum,
    Enrollment,
    EnrollmentStatusEnum,
    Student,
    Teacher,
)


class DashboardService:
    @staticmethod
    def admin_counts() -> dict:
        """Totais do painel administrativo; registros com soft delete ficam de fora."""
        return {
            "students": Student.active().count(),
            "teachers": Teacher.active().count(),
            "pending_documents": Document.active()
            .filter(Document.status == DocumentStatusEnum.PENDING)
            .count(),
            "active_enrollments": Enrollment.active()
            .filter(Enrollment.status == EnrollmentStatusEnum.ACTIVE)
            .count(),
        }
