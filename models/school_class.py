from extensions import db
from .mixins import TimestampMixin, SoftDeleteMixin


class SchoolClass(TimestampMixin, SoftDeleteMixin, db.Model):
    """Turma: um curso ofertado num semestre/ano, com professores e alunos."""

    __tablename__ = "school_class"

    id = db.Column(db.Integer, primary_key=True)
    course_id = db.Column(db.Integer, db.ForeignKey("course.id"), nullable=False)
    semester = db.Column(db.Integer, nullable=False)
    year = db.Column(db.Integer, nullable=False)

    course = db.relationship("Course")
    teachers = db.relationship("ClassTeacher", back_populates="school_class", cascade="all, delete-orphan")
    students = db.relationship("ClassStudent", back_populates="school_class", cascade="all, delete-orphan")


class ClassTeacher(db.Model):
    __tablename__ = "class_teacher"

    id = db.Column(db.Integer, primary_key=True)
    class_id = db.Column(db.Integer, db.ForeignKey("school_class.id"), nullable=False)
    teacher_id = db.Column(db.Integer, db.ForeignKey("teacher.id"), nullable=False)
    discipline_id = db.Column(db.Integer, db.ForeignKey("discipline.id"), nullable=False)

    school_class = db.relationship("SchoolClass", back_populates="teachers")
    teacher = db.relationship("Teacher")
    discipline = db.relationship("Discipline")

    __table_args__ = (
        db.UniqueConstraint("class_id", "teacher_id", "discipline_id", name="uq_class_teacher_discipline"),
    )


class ClassStudent(db.Model):
    __tablename__ = "class_student"

    id = db.Column(db.Integer, primary_key=True)
    class_id = db.Column(db.Integer, db.ForeignKey("school_class.id"), nullable=False)
    student_id = db.Column(db.Integer, db.ForeignKey("student.id"), nullable=False)

    school_class = db.relationship("SchoolClass", back_populates="students")
    student = db.relationship("Student")

    __table_args__ = (
        db.UniqueConstraint("class_id", "student_id", name="uq_class_student"),
    )
