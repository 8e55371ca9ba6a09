from flask import jsonify
from flask_login import current_user, login_required

from messe.blueprints import json_body
from messe.services import requisitions as requisition_service
from . import requisicoes_bp


@requisicoes_bp.get("")
@login_required
def requisicoes_lista():
    return jsonify([r.to_dict() for r in requisition_service.list_requisitions()])


@requisicoes_bp.get("/<int:requisition_id>")
@login_required
def requisicao_detalhe(requisition_id):
    return jsonify(requisition_service.get_requisition(requisition_id).to_dict())


@requisicoes_bp.post("")
@login_required
def requisicao_nova():
    data = json_body()
    req = requisition_service.submit_requisition(
        sector_id=data.get("sectorId"),
        nome_requisitante=data.get("nomeRequisitante"),
        lines=data.get("items"),
        user=current_user,
    )
    return jsonify(req.to_dict()), 201
