from flask import request

from messe.exceptions import ValidationError


def json_body() -> dict:
    data = request.get_json(silent=True)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValidationError("Corpo JSON inválido.")
    return data
