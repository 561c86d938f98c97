# api/services/course_service.py

from __future__ import annotations

from extensions import db
from errors import conflict, not_found
from models import Course, CourseDiscipline, Discipline
from api.services.crud_service import CrudService


class DisciplineService(CrudService):
    model = Discipline
    resource_name = "Disciplina"
    search_fields = ("name", "code")
    default_order = "name"


class CourseService(CrudService):
    model = Course
    resource_name = "Curso"
    search_fields = ("name",)
    default_order = "name"

    @staticmethod
    def add_discipline(course_id: int, discipline_id: int, semester: int | None = None) -> CourseDiscipline:
        course = CourseService.get(course_id)
        discipline = DisciplineService.get(discipline_id)

        existing = CourseDiscipline.query.filter_by(course_id=course.id, discipline_id=discipline.id).first()
        if existing:
            raise conflict("Disciplina já vinculada a este curso")

        link = CourseDiscipline(course_id=course.id, discipline_id=discipline.id, semester=semester)
        db.session.add(link)
        db.session.commit()
        return link

    @staticmethod
    def remove_discipline(course_id: int, discipline_id: int) -> None:
        link = CourseDiscipline.query.filter_by(course_id=course_id, discipline_id=discipline_id).first()
        if not link:
            raise not_found("Vínculo curso/disciplina")
        db.session.delete(link)
        db.session.commit()
