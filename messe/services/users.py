import logging
import re

from flask import current_app

from messe.exceptions import Duplicate, Forbidden, InvalidCredentials, NotFound, ValidationError
from messe.extensions import db
from messe.models import Requisition, StockMovement, User, UserRole
from messe.services.stock import _to_int

logger = logging.getLogger(__name__)

EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


def _clean_email(email) -> str:
    return (email or "").strip().lower()


def _validate(name, email, role):
    if len((name or "").strip()) < 3:
        raise ValidationError("O nome deve ter pelo menos 3 caracteres.", field="name")
    if not EMAIL_RE.match(email):
        raise ValidationError("Email inválido.", field="email")
    if role not in {r.value for r in UserRole}:
        raise ValidationError("Perfil inválido.", field="role", role=role)


def authenticate(email, password) -> User:
    u = User.query.filter_by(email=_clean_email(email)).first()
    if not u or not password or not u.check_password(password):
        logger.warning("auth.failed", extra={"email": _clean_email(email)})
        raise InvalidCredentials()
    return u


def get_user(user_id) -> User:
    u = db.session.get(User, _to_int(user_id, 0))
    if not u:
        raise NotFound("Utilizador não encontrado.", user_id=user_id)
    return u


def list_users():
    return User.query.order_by(User.name.asc()).all()


def create_user(data: dict) -> User:
    name = (data.get("name") or "").strip()
    email = _clean_email(data.get("email"))
    role = (data.get("role") or UserRole.OPERATOR.value).strip().upper()
    _validate(name, email, role)

    if User.query.filter_by(email=email).first():
        raise Duplicate("Email já existe.", email=email)

    senha = data.get("password") or current_app.config["DEFAULT_USER_PASSWORD"]

    u = User(name=name, email=email, role=role, avatar=data.get("avatar"))
    u.set_password(senha)
    db.session.add(u)
    db.session.commit()

    logger.info("user.created", extra={"user_id": u.id, "role": role})
    return u


def update_user(user_id, data: dict) -> User:
    u = get_user(user_id)

    name = (data.get("name", u.name) or "").strip()
    email = _clean_email(data.get("email", u.email))
    role = (data.get("role", u.role) or "").strip().upper()
    _validate(name, email, role)

    if User.query.filter(User.email == email, User.id != u.id).first():
        raise Duplicate("Já existe outro utilizador com esse email.", email=email)

    u.name = name
    u.email = email
    u.role = role
    if "avatar" in data:
        u.avatar = data.get("avatar") or None
    if data.get("password"):
        u.set_password(data["password"])

    db.session.commit()
    logger.info("user.updated", extra={"user_id": u.id})
    return u


def delete_user(user_id, acting_user) -> None:
    u = get_user(user_id)
    if u.id == acting_user.id:
        raise Forbidden(code="SELF_DELETE")

    # SQLite ignores ON DELETE SET NULL unless foreign keys are switched on
    StockMovement.query.filter_by(user_id=u.id).update(
        {StockMovement.user_id: None}, synchronize_session=False
    )
    Requisition.query.filter_by(created_by_user_id=u.id).update(
        {Requisition.created_by_user_id: None}, synchronize_session=False
    )
    db.session.delete(u)
    db.session.commit()
    logger.info("user.deleted", extra={"user_id": u.id, "by": acting_user.id})


# RESETAR SENHA
def reset_password(user_id) -> User:
    u = get_user(user_id)
    u.set_password(current_app.config["DEFAULT_USER_PASSWORD"])
    db.session.commit()
    logger.info("user.password_reset", extra={"user_id": u.id})
    return u


def change_password(user, senha_atual, nova_senha, confirmar=None) -> None:
    if not senha_atual or not user.check_password(senha_atual):
        raise ValidationError("Senha atual incorreta.", field="currentPassword")

    if not nova_senha or (confirmar is not None and nova_senha != confirmar):
        raise ValidationError("As senhas não coincidem.", field="newPassword")

    user.set_password(nova_senha)
    db.session.commit()
