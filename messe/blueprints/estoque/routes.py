from flask import jsonify, request
from flask_login import current_user, login_required

from messe.blueprints import json_body
from messe.exceptions import Duplicate, ValidationError
from messe.extensions import db
from messe.models import Sector
from messe.permissions import admin_required
from messe.services import stock as stock_service
from . import estoque_bp


# ------------------------- stock -------------------------
@estoque_bp.get("/stock")
@login_required
def stock_lista():
    q = (request.args.get("q") or "").strip()
    return jsonify([i.to_dict() for i in stock_service.list_items(q)])


@estoque_bp.post("/stock")
@login_required
def stock_novo():
    item = stock_service.create_item(json_body(), user=current_user)
    return jsonify(item.to_dict()), 201


@estoque_bp.get("/stock/<int:item_id>")
@login_required
def stock_detalhe(item_id):
    return jsonify(stock_service.get_item(item_id).to_dict())


# ------------------------- dashboard -------------------------
@estoque_bp.get("/stats")
@login_required
def stats():
    return jsonify(stock_service.stats())


# ------------------------- setores -------------------------
@estoque_bp.get("/sectors")
@login_required
def setores_lista():
    setores = Sector.query.order_by(Sector.name.asc()).all()
    return jsonify([s.to_dict() for s in setores])


@estoque_bp.post("/sectors")
@admin_required
def setor_novo():
    nome = (json_body().get("name") or "").strip()
    if len(nome) < 2:
        raise ValidationError("Informe o nome do setor.", field="name")
    if Sector.query.filter_by(name=nome).first():
        raise Duplicate("Setor já existe.", name=nome)

    s = Sector(name=nome)
    db.session.add(s)
    db.session.commit()
    return jsonify(s.to_dict()), 201
