from datetime import date

from flask import Blueprint, g, request

from services import dashboards as dashboard_service
from utils.auth_context import login_required
from utils.errors import ValidationError
from utils.partial_update import as_date
from utils.responses import success

dashboards_bp = Blueprint("dashboards", __name__)


@dashboards_bp.get("/admin/dashboard")
@login_required
def admin_dashboard():
    return success(**dashboard_service.admin_dashboard(g.user))


@dashboards_bp.get("/manager/dashboard")
@login_required
def manager_dashboard():
    raw = request.args.get("date_from")
    try:
        date_from = as_date(raw) if raw else date.today()
    except ValueError as exc:
        raise ValidationError(f"Invalid date_from: {exc}")
    return success(**dashboard_service.manager_dashboard(g.user, date_from=date_from))
