import enum

from extensions import db
from .mixins import TimestampMixin, SoftDeleteMixin


class DocumentUserTypeEnum(str, enum.Enum):
    STUDENT = "student"
    TEACHER = "teacher"
    BOTH = "both"


class DocumentStatusEnum(str, enum.Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class DocumentType(TimestampMixin, SoftDeleteMixin, db.Model):
    __tablename__ = "document_type"

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(100), nullable=False)
    description = db.Column(db.Text, nullable=True)
    user_type = db.Column(db.Enum(DocumentUserTypeEnum), nullable=False, default=DocumentUserTypeEnum.BOTH)
    is_required = db.Column(db.Boolean, nullable=False, default=True)


class Document(TimestampMixin, SoftDeleteMixin, db.Model):
    __tablename__ = "document"

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey("user.id"), nullable=False, index=True)
    document_type_id = db.Column(db.Integer, db.ForeignKey("document_type.id"), nullable=False)

    # Caminho relativo a UPLOAD_DIR
    file_path = db.Column(db.String(500), nullable=False)
    file_name = db.Column(db.String(255), nullable=False)
    file_size = db.Column(db.Integer, nullable=False)
    mime_type = db.Column(db.String(100), nullable=False)

    status = db.Column(db.Enum(DocumentStatusEnum), nullable=False, default=DocumentStatusEnum.PENDING)
    reviewed_by = db.Column(db.Integer, db.ForeignKey("user.id"), nullable=True)
    reviewed_at = db.Column(db.DateTime, nullable=True)
    observations = db.Column(db.Text, nullable=True)

    user = db.relationship("User", foreign_keys=[user_id])
    reviewer = db.relationship("User", foreign_keys=[reviewed_by])
    document_type = db.relationship("DocumentType")
