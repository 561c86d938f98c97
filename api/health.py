# api/health.py

from datetime import datetime

from sqlalchemy import text

from . import api_bp
from extensions import db
from api.utils.responses import success


@api_bp.get("/health")
def health():
    db.session.execute(text("SELECT 1"))
    return success({"status": "ok", "timestamp": datetime.utcnow()})
