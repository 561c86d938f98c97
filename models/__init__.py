# models/__init__.py
from .roles import RoleEnum
from .mixins import TimestampMixin, SoftDeleteMixin
from .user import User
from .student import Student
from .teacher import Teacher
from .course import Course, Discipline, CourseDiscipline, DurationTypeEnum
from .school_class import SchoolClass, ClassTeacher, ClassStudent
from .enrollment import Enrollment, EnrollmentStatusEnum
from .evaluation import Evaluation, Grade, EvaluationTypeEnum, ConceptEnum
from .document import DocumentType, Document, DocumentUserTypeEnum, DocumentStatusEnum
from .contract import ContractTemplate, Contract
from .data_migration import DataMigrationRun

__all__ = [
    "RoleEnum",
    "TimestampMixin",
    "SoftDeleteMixin",
    "User",
    "Student",
    "Teacher",
    "Course",
    "Discipline",
    "CourseDiscipline",
    "DurationTypeEnum",
    "SchoolClass",
    "ClassTeacher",
    "ClassStudent",
    "Enrollment",
    "EnrollmentStatusEnum",
    "Evaluation",
    "Grade",
    "EvaluationTypeEnum",
    "ConceptEnum",
    "DocumentType",
    "Document",
    "DocumentUserTypeEnum",
    "DocumentStatusEnum",
    "ContractTemplate",
    "Contract",
    "DataMigrationRun",
]
