from flask import jsonify
from flask_login import current_user

from messe.blueprints import json_body
from messe.exceptions import ValidationError
from messe.permissions import admin_required
from messe.services import users as user_service
from . import admin_bp


# LISTA DE UTILIZADORES
@admin_bp.get("")
@admin_required
def usuarios_lista():
    return jsonify([u.to_dict() for u in user_service.list_users()])


# NOVO UTILIZADOR
@admin_bp.post("")
@admin_required
def usuario_novo():
    u = user_service.create_user(json_body())
    return jsonify(u.to_dict()), 201


# EDITAR UTILIZADOR (id no corpo, como o frontend envia)
@admin_bp.put("")
@admin_required
def usuario_editar_corpo():
    data = json_body()
    if data.get("id") is None:
        raise ValidationError("Informe o id do utilizador.", field="id")
    u = user_service.update_user(data["id"], data)
    return jsonify(u.to_dict())


@admin_bp.put("/<int:user_id>")
@admin_required
def usuario_editar(user_id):
    u = user_service.update_user(user_id, json_body())
    return jsonify(u.to_dict())


# EXCLUIR
@admin_bp.delete("/<int:user_id>")
@admin_required
def usuario_excluir(user_id):
    user_service.delete_user(user_id, acting_user=current_user)
    return jsonify({"ok": True})


# RESETAR SENHA
@admin_bp.post("/<int:user_id>/reset-password")
@admin_required
def usuario_reset_senha(user_id):
    u = user_service.reset_password(user_id)
    return jsonify(u.to_dict())
