from datetime import datetime

from extensions import db


class TimestampMixin:
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)


class SoftDeleteMixin:
    """
    Exclusão lógica: registros com deleted_at preenchido nunca aparecem em active().
    Services devem partir sempre de active() / get_active() em vez de Model.query.
    """

    deleted_at = db.Column(db.DateTime, nullable=True, index=True)

    @classmethod
    def active(cls):
        return cls.query.filter(cls.deleted_at.is_(None))

    @classmethod
    def get_active(cls, record_id):
        if record_id is None:
            return None
        return cls.active().filter(cls.id == record_id).first()

    @property
    def is_deleted(self) -> bool:
        return self.deleted_at is not None

    def soft_delete(self) -> None:
        self.deleted_at = datetime.utcnow()
