from flask import Blueprint, g, request

from models import db
from models.additional_service import AdditionalService
from security.capabilities import MANAGE_ADDITIONAL_SERVICES
from security.rbac import authorize
from utils.auth_context import login_required
from utils.errors import NotFound, ValidationError
from utils.partial_update import apply_changes, as_bool, as_money, as_str, build_changes
from utils.responses import listing, no_content, success

additional_service_bp = Blueprint("additional_services", __name__, url_prefix="/additional-services")

SERVICE_SCHEMA = {
    "service_name": as_str(120),
    "description": as_str(required=False),
    "price": as_money,
    "is_active": as_bool,
}


def _get_service(service_id):
    service = db.session.get(AdditionalService, service_id)
    if not service:
        raise NotFound("Additional service not found")
    return service


@additional_service_bp.get("")
def list_services():
    rows = (
        AdditionalService.query
        .filter_by(is_active=True)
        .order_by(AdditionalService.service_name.asc())
        .all()
    )
    return listing("additional_services", [s.to_dict() for s in rows])


@additional_service_bp.get("/<int:service_id>")
def get_service(service_id: int):
    return success(additional_service=_get_service(service_id).to_dict())


@additional_service_bp.post("")
@login_required
def create_service():
    authorize(g.user, MANAGE_ADDITIONAL_SERVICES)
    data = request.get_json(silent=True) or {}
    if not data.get("service_name") or data.get("price") is None:
        raise ValidationError("service_name and price are required")

    service = AdditionalService(**build_changes(data, SERVICE_SCHEMA))
    db.session.add(service)
    db.session.commit()
    return success(201, additional_service=service.to_dict())


@additional_service_bp.patch("/<int:service_id>")
@login_required
def update_service(service_id: int):
    authorize(g.user, MANAGE_ADDITIONAL_SERVICES)
    service = _get_service(service_id)
    apply_changes(service, build_changes(request.get_json(silent=True), SERVICE_SCHEMA))
    db.session.commit()
    return success(additional_service=service.to_dict())


@additional_service_bp.delete("/<int:service_id>")
@login_required
def delete_service(service_id: int):
    authorize(g.user, MANAGE_ADDITIONAL_SERVICES)
    db.session.delete(_get_service(service_id))
    db.session.commit()
    return no_content()
