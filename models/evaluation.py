import enum

from extensions import db
from .mixins import TimestampMixin, SoftDeleteMixin


class EvaluationTypeEnum(str, enum.Enum):
    GRADE = "grade"
    CONCEPT = "concept"


class ConceptEnum(str, enum.Enum):
    SATISFACTORY = "satisfactory"
    UNSATISFACTORY = "unsatisfactory"


class Evaluation(TimestampMixin, SoftDeleteMixin, db.Model):
    __tablename__ = "evaluation"

    id = db.Column(db.Integer, primary_key=True)
    class_id = db.Column(db.Integer, db.ForeignKey("school_class.id"), nullable=False, index=True)
    teacher_id = db.Column(db.Integer, db.ForeignKey("teacher.id"), nullable=False)
    discipline_id = db.Column(db.Integer, db.ForeignKey("discipline.id"), nullable=False)
    name = db.Column(db.String(100), nullable=False)
    date = db.Column(db.Date, nullable=False)
    type = db.Column(db.Enum(EvaluationTypeEnum), nullable=False, default=EvaluationTypeEnum.GRADE)

    school_class = db.relationship("SchoolClass")
    teacher = db.relationship("Teacher")
    discipline = db.relationship("Discipline")
    grades = db.relationship("Grade", back_populates="evaluation")


class Grade(TimestampMixin, SoftDeleteMixin, db.Model):
    __tablename__ = "grade"

    id = db.Column(db.Integer, primary_key=True)
    evaluation_id = db.Column(db.Integer, db.ForeignKey("evaluation.id"), nullable=False, index=True)
    student_id = db.Column(db.Integer, db.ForeignKey("student.id"), nullable=False, index=True)
    grade = db.Column(db.Numeric(4, 2), nullable=True)
    concept = db.Column(db.Enum(ConceptEnum), nullable=True)

    evaluation = db.relationship("Evaluation", back_populates="grades")
    student = db.relationship("Student")
