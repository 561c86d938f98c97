from extensions import db
from .mixins import TimestampMixin, SoftDeleteMixin
from .student import AddressMixin


class Teacher(AddressMixin, TimestampMixin, SoftDeleteMixin, db.Model):
    __tablename__ = "teacher"

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(200), nullable=False)
    cpf = db.Column(db.String(11), nullable=True, index=True)
    rg = db.Column(db.String(20), nullable=True)
    birth_date = db.Column(db.Date, nullable=True)
    phone = db.Column(db.String(20), nullable=True)
    email = db.Column(db.String(200), nullable=True)

    user = db.relationship("User", back_populates="teacher", uselist=False)
