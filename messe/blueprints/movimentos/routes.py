from flask import jsonify
from flask_login import current_user, login_required

from messe.blueprints import json_body
from messe.services import movements as movement_service
from . import movimentos_bp


@movimentos_bp.get("")
@login_required
def movimentos_lista():
    return jsonify([m.to_dict() for m in movement_service.list_movements()])


@movimentos_bp.get("/item/<int:item_id>")
@login_required
def movimentos_item(item_id):
    return jsonify([m.to_dict() for m in movement_service.list_movements(item_id=item_id)])


@movimentos_bp.post("")
@login_required
def movimento_novo():
    data = json_body()
    mov = movement_service.record_movement(
        item_id=data.get("itemId"),
        quantity=data.get("quantity"),
        user=current_user,
        movement_type=data.get("type") or "IN",
        date=data.get("date"),
        reason=data.get("reason"),
    )
    return jsonify(mov.to_dict()), 201
