from werkzeug.security import generate_password_hash, check_password_hash
from flask_login import UserMixin

from extensions import db
from .mixins import TimestampMixin, SoftDeleteMixin
from .roles import RoleEnum


class User(UserMixin, TimestampMixin, SoftDeleteMixin, db.Model):
    """
    Registro de autenticação. Pessoas (Student / Teacher) existem sem login;
    o vínculo é feito por student_id / teacher_id.
    """

    __tablename__ = "user"

    id = db.Column(db.Integer, primary_key=True)
    login = db.Column(db.String(100), nullable=False, index=True)
    password_hash = db.Column(db.String(255), nullable=True)
    role = db.Column(db.Enum(RoleEnum), nullable=False)
    name = db.Column(db.String(255), nullable=False)
    email = db.Column(db.String(255), nullable=True)
    cpf = db.Column(db.String(11), nullable=True)
    rg = db.Column(db.String(20), nullable=True)
    must_change_password = db.Column(db.Boolean, default=False, nullable=False)

    student_id = db.Column(db.Integer, db.ForeignKey("student.id"), nullable=True)
    teacher_id = db.Column(db.Integer, db.ForeignKey("teacher.id"), nullable=True)

    student = db.relationship("Student", back_populates="user")
    teacher = db.relationship("Teacher", back_populates="user")

    def set_password(self, password: str):
        self.password_hash = generate_password_hash(password)

    def check_password(self, password: str) -> bool:
        if not self.password_hash:
            return False
        return check_password_hash(self.password_hash, password)

    @property
    def is_admin(self) -> bool:
        return self.role == RoleEnum.ADMIN

    def __repr__(self) -> str:  # pragma: no cover - helper
        return f"<User {self.id} {self.login} {self.role.value if self.role else None}>"
