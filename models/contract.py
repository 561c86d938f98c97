from extensions import db
from .mixins import TimestampMixin, SoftDeleteMixin


class ContractTemplate(TimestampMixin, SoftDeleteMixin, db.Model):
    """
    Template HTML de contrato com placeholders no formato {{chave}}.
    A substituição é feita em services.placeholders.
    """

    __tablename__ = "contract_template"

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(100), nullable=False)
    content = db.Column(db.Text, nullable=False)
    is_active = db.Column(db.Boolean, nullable=False, default=True)

    @classmethod
    def first_available(cls):
        return (
            cls.active()
            .filter(cls.is_active.is_(True))
            .order_by(cls.created_at.desc(), cls.id.desc())
            .first()
        )


class Contract(TimestampMixin, SoftDeleteMixin, db.Model):
    __tablename__ = "contract"

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey("user.id"), nullable=False, index=True)
    template_id = db.Column(db.Integer, db.ForeignKey("contract_template.id"), nullable=False)
    enrollment_id = db.Column(db.Integer, db.ForeignKey("enrollment.id"), nullable=True, index=True)

    # Nulos até o PDF ser gerado com sucesso
    file_path = db.Column(db.String(255), nullable=True)
    file_name = db.Column(db.String(255), nullable=True)

    semester = db.Column(db.Integer, nullable=False)
    year = db.Column(db.Integer, nullable=False)
    accepted_at = db.Column(db.DateTime, nullable=True)

    user = db.relationship("User")
    template = db.relationship("ContractTemplate")
    enrollment = db.relationship("Enrollment", back_populates="contracts")

    @property
    def status(self) -> str:
        return "accepted" if self.accepted_at else "pending"

    @property
    def has_pdf(self) -> bool:
        return bool(self.file_path and self.file_name)
