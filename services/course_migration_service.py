# services/course_migration_service.py
"""
Migração do curso em texto livre (Student.legacy_course_name) para
matrículas reais. O casamento é por igualdade da chave normalizada
(normalize_course_name); nomes parciais ou abreviados não casam. Em
dry-run nada é gravado: enrollments_created conta o que seria criado.
"""

from __future__ import annotations

import logging
from datetime import date

from extensions import db
from models import Course, Enrollment, EnrollmentStatusEnum, Student
from services.formatters import normalize_course_name

logger = logging.getLogger(__name__)


class CourseMigrationService:
    @staticmethod
    def build_course_index() -> dict[str, Course]:
        index: dict[str, Course] = {}
        for course in Course.active().order_by(Course.id.asc()).all():
            key = normalize_course_name(course.name)
            if key in index:
                logger.warning(
                    "Cursos %s e %s têm o mesmo nome normalizado '%s'; usando %s",
                    index[key].id,
                    course.id,
                    key,
                    index[key].id,
                )
                continue
            index[key] = course
        return index

    @staticmethod
    def migrate_student_courses(dry_run: bool = False) -> dict:
        stats = {
            "total_students": 0,
            "students_with_course": 0,
            "courses_found": 0,
            "courses_not_found": 0,
            "enrollments_created": 0,
            "enrollments_skipped": 0,
            "errors": 0,
            "students_without_course": [],
        }

        index = CourseMigrationService.build_course_index()
        students = Student.active().order_by(Student.id.asc()).all()
        stats["total_students"] = len(students)

        for student in students:
            legacy_name = (student.legacy_course_name or "").strip()
            if not legacy_name:
                continue
            stats["students_with_course"] += 1

            course = index.get(normalize_course_name(legacy_name))
            if course is None:
                stats["courses_not_found"] += 1
                stats["students_without_course"].append(
                    {"student_id": student.id, "student_name": student.name, "course_name": legacy_name}
                )
                continue
            stats["courses_found"] += 1

            if Enrollment.active().filter(Enrollment.student_id == student.id).first():
                stats["enrollments_skipped"] += 1
                continue

            if dry_run:
                stats["enrollments_created"] += 1
                continue

            try:
                with db.session.begin_nested():
                    db.session.add(
                        Enrollment(
                            student_id=student.id,
                            course_id=course.id,
                            status=EnrollmentStatusEnum.ACTIVE,
                            enrollment_date=date.today(),
                        )
                    )
                stats["enrollments_created"] += 1
            except Exception:
                logger.exception("Erro ao migrar o curso do aluno %s", student.id)
                stats["errors"] += 1

        if not dry_run:
            db.session.commit()

        logger.info(
            "Migração de cursos: %s matrículas criadas, %s cursos não encontrados",
            stats["enrollments_created"],
            stats["courses_not_found"],
        )
        return stats
