import enum

from extensions import db
from .mixins import TimestampMixin, SoftDeleteMixin


class DurationTypeEnum(str, enum.Enum):
    SEMESTERS = "semesters"
    YEARS = "years"
    MONTHS = "months"


DURATION_LABELS = {
    DurationTypeEnum.SEMESTERS: "semestres",
    DurationTypeEnum.YEARS: "anos",
    DurationTypeEnum.MONTHS: "meses",
}


class Course(TimestampMixin, SoftDeleteMixin, db.Model):
    __tablename__ = "course"

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(200), nullable=False)
    description = db.Column(db.Text, nullable=True)
    duration = db.Column(db.Integer, nullable=True)
    duration_type = db.Column(db.Enum(DurationTypeEnum), nullable=False, default=DurationTypeEnum.SEMESTERS)
    course_type = db.Column(db.String(100), nullable=True)

    disciplines = db.relationship("CourseDiscipline", back_populates="course", cascade="all, delete-orphan")
    enrollments = db.relationship("Enrollment", back_populates="course")

    def duration_label(self) -> str | None:
        if not self.duration:
            return None
        return f"{self.duration} {DURATION_LABELS.get(self.duration_type, 'semestres')}"


class Discipline(TimestampMixin, SoftDeleteMixin, db.Model):
    __tablename__ = "discipline"

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(200), nullable=False)
    code = db.Column(db.String(50), nullable=True)
    workload_hours = db.Column(db.Integer, nullable=True)


class CourseDiscipline(db.Model):
    __tablename__ = "course_discipline"

    id = db.Column(db.Integer, primary_key=True)
    course_id = db.Column(db.Integer, db.ForeignKey("course.id"), nullable=False)
    discipline_id = db.Column(db.Integer, db.ForeignKey("discipline.id"), nullable=False)
    semester = db.Column(db.Integer, nullable=True)

    course = db.relationship("Course", back_populates="disciplines")
    discipline = db.relationship("Discipline")

    __table_args__ = (
        db.UniqueConstraint("course_id", "discipline_id", name="uq_course_discipline"),
    )
