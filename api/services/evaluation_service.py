# api/services/evaluation_service.py

from __future__ import annotations

from typing import Mapping

from sqlalchemy import select

from extensions import db
from errors import AppError, not_found, validation_error
from models import ClassStudent, EvaluationTypeEnum, Evaluation, Grade, RoleEnum, Student
from api.services.crud_service import CrudService
from api.services.class_service import ClassService
from api.services.course_service import DisciplineService
from api.services.person_service import StudentService, TeacherService
from api.utils.permissions import ensure_can_manage_class


class EvaluationService(CrudService):
    model = Evaluation
    resource_name = "Avaliação"
    search_fields = ("name",)

    @staticmethod
    def query_for_class(class_id: int):
        return EvaluationService.query().filter(Evaluation.class_id == class_id)

    @staticmethod
    def create_for_user(user, data: Mapping) -> Evaluation:
        """
        Professor cria avaliações apenas nas turmas em que leciona; o
        teacher_id é o dele. Admin informa teacher_id.
        """
        data = dict(data)
        school_class = ClassService.get(data.get("class_id"))
        ensure_can_manage_class(user, school_class.id)
        DisciplineService.get(data.get("discipline_id"))

        if user.role == RoleEnum.TEACHER:
            data["teacher_id"] = user.teacher_id
        elif not data.get("teacher_id"):
            raise validation_error([{"field": "teacherId", "message": "Campo obrigatório"}])
        TeacherService.get(data["teacher_id"])

        return EvaluationService.create(data)

    @staticmethod
    def update_for_user(user, evaluation_id: int, data: Mapping) -> Evaluation:
        evaluation = EvaluationService.get(evaluation_id)
        ensure_can_manage_class(user, evaluation.class_id)

        data = dict(data)
        if "class_id" in data:
            ClassService.get(data["class_id"])
            ensure_can_manage_class(user, data["class_id"])
        if "discipline_id" in data:
            DisciplineService.get(data["discipline_id"])
        if user.role == RoleEnum.TEACHER:
            data.pop("teacher_id", None)
        elif "teacher_id" in data:
            TeacherService.get(data["teacher_id"])
        if "type" in data and data["type"] != evaluation.type and Grade.active().filter_by(evaluation_id=evaluation.id).first():
            raise AppError(
                "Não é possível alterar o tipo de uma avaliação que já possui notas",
                422,
                "EVALUATION_HAS_GRADES",
            )

        return EvaluationService.update(evaluation.id, data)

    @staticmethod
    def delete_for_user(user, evaluation_id: int) -> None:
        evaluation = EvaluationService.get(evaluation_id)
        ensure_can_manage_class(user, evaluation.class_id)
        EvaluationService.delete(evaluation.id)


class GradeService:
    @staticmethod
    def list_for_evaluation(evaluation_id: int):
        evaluation = EvaluationService.get(evaluation_id)
        return Grade.active().filter(Grade.evaluation_id == evaluation.id).order_by(Grade.student_id.asc())

    @staticmethod
    def pending_students(evaluation: Evaluation):
        """Alunos da turma da avaliação que ainda não têm nota lançada."""
        graded = select(Grade.student_id).where(
            Grade.evaluation_id == evaluation.id, Grade.deleted_at.is_(None)
        )
        return (
            Student.active()
            .join(ClassStudent, ClassStudent.student_id == Student.id)
            .filter(ClassStudent.class_id == evaluation.class_id, Student.id.not_in(graded))
            .order_by(Student.name.asc(), Student.id.asc())
        )

    @staticmethod
    def list_for_student(student_id: int):
        return Grade.active().filter(Grade.student_id == student_id).order_by(Grade.id.asc())

    @staticmethod
    def upsert(user, evaluation_id: int, data: Mapping) -> tuple[Grade, bool]:
        """
        Lança (ou atualiza) a nota de um aluno numa avaliação. O valor tem
        que bater com o tipo da avaliação: nota numérica OU conceito.
        Retorna (grade, created).
        """
        evaluation = EvaluationService.get(evaluation_id)
        ensure_can_manage_class(user, evaluation.class_id)

        student = StudentService.get(data.get("student_id"))
        if not ClassService.has_student(evaluation.class_id, student.id):
            raise AppError("Aluno não pertence à turma da avaliação", 422, "STUDENT_NOT_IN_CLASS")

        grade_value = data.get("grade")
        concept = data.get("concept")
        if evaluation.type == EvaluationTypeEnum.GRADE:
            if grade_value is None or concept is not None:
                raise validation_error(
                    [{"field": "grade", "message": "Avaliação por nota exige o campo grade (0 a 10)"}]
                )
        else:
            if concept is None or grade_value is not None:
                raise validation_error(
                    [{"field": "concept", "message": "Avaliação por conceito exige o campo concept"}]
                )

        grade = Grade.active().filter_by(evaluation_id=evaluation.id, student_id=student.id).first()
        created = grade is None
        if created:
            grade = Grade(evaluation_id=evaluation.id, student_id=student.id)
            db.session.add(grade)

        grade.grade = grade_value
        grade.concept = concept
        db.session.commit()
        return grade, created

    @staticmethod
    def delete(user, grade_id: int) -> None:
        grade = Grade.get_active(grade_id)
        if not grade:
            raise not_found("Nota")
        ensure_can_manage_class(user, grade.evaluation.class_id)
        grade.soft_delete()
        db.session.commit()
