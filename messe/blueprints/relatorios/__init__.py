from flask import Blueprint

relatorios_bp = Blueprint("relatorios", __name__)

from . import routes  # noqa: E402,F401
