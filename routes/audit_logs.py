from flask import Blueprint, g, request

from models.audit_log import AuditLog
from security.capabilities import VIEW_AUDIT_LOG
from security.rbac import authorize
from utils.auth_context import login_required
from utils.responses import listing

audit_bp = Blueprint("audit", __name__, url_prefix="/audit-logs")


@audit_bp.get("")
@login_required
def list_audit_logs():
    authorize(g.user, VIEW_AUDIT_LOG)

    limit = request.args.get("limit", type=int) or 200
    limit = max(1, min(limit, 500))

    action = request.args.get("action")
    user_id = request.args.get("user_id", type=int)
    entity = request.args.get("entity")

    q = AuditLog.query
    if action:
        q = q.filter(AuditLog.action == action)
    if user_id is not None:
        q = q.filter(AuditLog.user_id == user_id)
    if entity:
        q = q.filter(AuditLog.entity == entity)

    rows = q.order_by(AuditLog.timestamp.desc(), AuditLog.id.desc()).limit(limit).all()
    return listing("audit_logs", [r.to_dict() for r in rows])
