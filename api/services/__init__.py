# api/services/__init__.py

from .crud_service import CrudService
from .auth_service import AuthService
from .user_service import UserService
from .person_service import StudentService, TeacherService
from .course_service import CourseService, DisciplineService
from .class_service import ClassService
from .enrollment_service import EnrollmentService
from .evaluation_service import EvaluationService, GradeService
from .document_service import DocumentService, DocumentTypeService
from .contract_template_service import ContractTemplateService
from .dashboard_service import DashboardService

__all__ = [
    "CrudService",
    "AuthService",
    "UserService",
    "StudentService",
    "TeacherService",
    "CourseService",
    "DisciplineService",
    "ClassService",
    "EnrollmentService",
    "EvaluationService",
    "GradeService",
    "DocumentService",
    "DocumentTypeService",
    "ContractTemplateService",
    "DashboardService",
]
