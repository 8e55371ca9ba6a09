from flask import Blueprint

movimentos_bp = Blueprint("movimentos", __name__)

from . import routes  # noqa: E402,F401
