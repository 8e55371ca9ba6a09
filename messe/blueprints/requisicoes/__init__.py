from flask import Blueprint

requisicoes_bp = Blueprint("requisicoes", __name__)

from . import routes  # noqa: E402,F401
