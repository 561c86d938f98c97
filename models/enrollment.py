import enum
from datetime import date

from extensions import db
from .mixins import TimestampMixin, SoftDeleteMixin


class EnrollmentStatusEnum(str, enum.Enum):
    PENDING = "pending"
    ACTIVE = "active"
    CANCELLED = "cancelled"
    REENROLLED = "reenrolled"


class Enrollment(TimestampMixin, SoftDeleteMixin, db.Model):
    __tablename__ = "enrollment"

    id = db.Column(db.Integer, primary_key=True)
    student_id = db.Column(db.Integer, db.ForeignKey("student.id"), nullable=False, index=True)
    course_id = db.Column(db.Integer, db.ForeignKey("course.id"), nullable=False, index=True)
    status = db.Column(
        db.Enum(EnrollmentStatusEnum),
        nullable=False,
        default=EnrollmentStatusEnum.PENDING,
        index=True,
    )
    enrollment_date = db.Column(db.Date, nullable=False, default=date.today)
    current_semester = db.Column(db.Integer, nullable=False, default=0)

    # Período da última rematrícula global que colocou a matrícula em pending
    reenrollment_semester = db.Column(db.Integer, nullable=True)
    reenrollment_year = db.Column(db.Integer, nullable=True)

    student = db.relationship("Student", back_populates="enrollments")
    course = db.relationship("Course", back_populates="enrollments")
    contracts = db.relationship("Contract", back_populates="enrollment")
