# api/admin.py

from flask_login import login_required

from . import api_bp
from api.services import DashboardService
from api.utils.permissions import require_roles
from api.utils.responses import success


@api_bp.get("/admin/dashboard")
@login_required
@require_roles("admin")
def admin_dashboard():
    return success(DashboardService.admin_counts())
