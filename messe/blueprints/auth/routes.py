from flask import jsonify
from flask_login import current_user, login_required, login_user, logout_user

from messe.blueprints import json_body
from messe.services import users as user_service
from . import auth_bp


@auth_bp.get("/health")
def health():
    return jsonify({"status": "ok"})


@auth_bp.post("/login")
def login_post():
    data = json_body()
    email = (data.get("email") or "").strip()
    senha = data.get("password") or ""

    u = user_service.authenticate(email, senha)
    login_user(u)
    return jsonify(u.to_dict())


@auth_bp.post("/logout")
def logout():
    logout_user()
    return jsonify({"ok": True})


@auth_bp.get("/me")
@login_required
def me():
    return jsonify(current_user.to_dict())


@auth_bp.post("/me/password")
@login_required
def trocar_senha():
    data = json_body()
    user_service.change_password(
        current_user,
        data.get("currentPassword"),
        data.get("newPassword"),
        data.get("confirmPassword"),
    )
    return jsonify({"ok": True})
