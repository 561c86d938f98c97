from extensions import db
from .mixins import TimestampMixin, SoftDeleteMixin


class AddressMixin:
    street = db.Column(db.String(300), nullable=True)
    number = db.Column(db.String(20), nullable=True)
    complement = db.Column(db.String(200), nullable=True)
    district = db.Column(db.String(200), nullable=True)
    city = db.Column(db.String(200), nullable=True)
    state = db.Column(db.String(2), nullable=True)
    zip_code = db.Column(db.String(8), nullable=True)

    def full_address(self) -> str | None:
        parts = [self.street, self.number, self.complement, self.district]
        head = ", ".join(p for p in parts if p)
        tail = " - ".join(p for p in (self.city, self.state) if p)
        address = " - ".join(p for p in (head, tail) if p)
        return address or None


class Student(AddressMixin, TimestampMixin, SoftDeleteMixin, db.Model):
    __tablename__ = "student"

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(200), nullable=False)
    cpf = db.Column(db.String(11), nullable=True, index=True)
    rg = db.Column(db.String(20), nullable=True)
    birth_date = db.Column(db.Date, nullable=True)
    phone = db.Column(db.String(20), nullable=True)
    email = db.Column(db.String(200), nullable=True)
    mother_name = db.Column(db.String(200), nullable=True)
    father_name = db.Column(db.String(200), nullable=True)
    registration_number = db.Column(db.String(30), nullable=True)

    # Curso em texto livre herdado do sistema antigo (ver flask migrate-student-courses)
    legacy_course_name = db.Column(db.String(100), nullable=True)

    user = db.relationship("User", back_populates="student", uselist=False)
    enrollments = db.relationship("Enrollment", back_populates="student")
