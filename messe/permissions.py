from functools import wraps

from flask import jsonify
from flask_login import current_user


# -------------------------------
# Verificação por papel (role)
# -------------------------------
def roles_required(*roles):
    def decorator(fn):
        @wraps(fn)
        def wrapper(*args, **kwargs):
            if not current_user.is_authenticated:
                return jsonify({"error": "Autenticação necessária"}), 401

            if current_user.role not in roles:
                return jsonify({"error": "Você não tem permissão para aceder a este recurso."}), 403

            return fn(*args, **kwargs)
        return wrapper
    return decorator


def admin_required(fn):
    return roles_required("ADMIN")(fn)
