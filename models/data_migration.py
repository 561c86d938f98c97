from datetime import datetime

from extensions import db


class DataMigrationRun(db.Model):
    """Registro de execução dos comandos de operador (flask migrate-student-courses, ...)."""

    __tablename__ = "data_migration_run"

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(100), nullable=False, index=True)
    status = db.Column(db.String(20), nullable=False, default="running")
    started_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)
    finished_at = db.Column(db.DateTime, nullable=True)
    stats = db.Column(db.JSON, nullable=True)
