# api/services/class_service.py

from __future__ import annotations

from typing import Mapping

from extensions import db
from errors import conflict, not_found
from models import ClassStudent, ClassTeacher, RoleEnum, SchoolClass
from api.services.crud_service import CrudService
from api.services.course_service import CourseService, DisciplineService
from api.services.person_service import StudentService, TeacherService


class ClassService(CrudService):
    model = SchoolClass
    resource_name = "Turma"

    @classmethod
    def query_for_user(cls, user):
        """Professor enxerga só as turmas em que leciona."""
        query = cls.query()
        if user.role == RoleEnum.TEACHER:
            query = query.filter(
                SchoolClass.id.in_(
                    db.session.query(ClassTeacher.class_id).filter(ClassTeacher.teacher_id == user.teacher_id)
                )
            )
        return query

    @classmethod
    def validate_create(cls, data: Mapping) -> None:
        CourseService.get(data.get("course_id"))

    @classmethod
    def validate_update(cls, record, data: Mapping) -> None:
        if "course_id" in data:
            CourseService.get(data["course_id"])

    @staticmethod
    def assign_teacher(class_id: int, teacher_id: int, discipline_id: int) -> ClassTeacher:
        school_class = ClassService.get(class_id)
        teacher = TeacherService.get(teacher_id)
        discipline = DisciplineService.get(discipline_id)

        existing = ClassTeacher.query.filter_by(
            class_id=school_class.id, teacher_id=teacher.id, discipline_id=discipline.id
        ).first()
        if existing:
            raise conflict("Professor já vinculado a esta turma nesta disciplina")

        link = ClassTeacher(class_id=school_class.id, teacher_id=teacher.id, discipline_id=discipline.id)
        db.session.add(link)
        db.session.commit()
        return link

    @staticmethod
    def remove_teacher(class_id: int, teacher_id: int, discipline_id: int) -> None:
        link = ClassTeacher.query.filter_by(
            class_id=class_id, teacher_id=teacher_id, discipline_id=discipline_id
        ).first()
        if not link:
            raise not_found("Vínculo turma/professor")
        db.session.delete(link)
        db.session.commit()

    @staticmethod
    def add_student(class_id: int, student_id: int) -> ClassStudent:
        school_class = ClassService.get(class_id)
        student = StudentService.get(student_id)

        if ClassStudent.query.filter_by(class_id=school_class.id, student_id=student.id).first():
            raise conflict("Aluno já está nesta turma")

        link = ClassStudent(class_id=school_class.id, student_id=student.id)
        db.session.add(link)
        db.session.commit()
        return link

    @staticmethod
    def remove_student(class_id: int, student_id: int) -> None:
        link = ClassStudent.query.filter_by(class_id=class_id, student_id=student_id).first()
        if not link:
            raise not_found("Aluno na turma")
        db.session.delete(link)
        db.session.commit()

    @staticmethod
    def has_student(class_id: int, student_id: int) -> bool:
        return ClassStudent.query.filter_by(class_id=class_id, student_id=student_id).first() is not None
