"""
Exceptions for Messe.

Every error raised by a service is a MesseError with a structured code, a
human-readable message and an HTTP status used by the API error handler.
"""

from typing import Any


class MesseError(Exception):
    """
    Structured exception for stock, requisition and user operations.

    Usage:
        try:
            submit_requisition(...)
        except InsufficientStock as e:
            print(f"Só há {e.data['available']} disponível")

    Attributes:
        code: Error code for programmatic handling
        message: Human-readable message (Portuguese, shown to the user)
        data: Additional context data
    """

    status_code = 400

    _default_messages = {
        'VALIDATION': 'Dados inválidos',
        'NOT_FOUND': 'Registo não encontrado',
        'INSUFFICIENT_STOCK': 'Quantidade insuficiente em stock',
        'INVALID_CREDENTIALS': 'Credenciais inválidas',
        'FORBIDDEN': 'Sem permissão para esta operação',
        'SELF_DELETE': 'Você não pode excluir a si mesmo.',
        'DUPLICATE': 'Registo já existe',
    }

    def __init__(self, code: str, message: str | None = None, **data: Any):
        self.code = code
        self.message = message or self._default_messages.get(code, code)
        self.data = data
        super().__init__(self.message)

    def as_dict(self) -> dict[str, Any]:
        """Serialize to dict (the API error body)."""
        return {
            'error': self.message,
            'code': self.code,
            'data': self.data,
        }


class ValidationError(MesseError):
    status_code = 400

    def __init__(self, message: str, **data: Any):
        super().__init__('VALIDATION', message, **data)


class NotFound(MesseError):
    status_code = 404

    def __init__(self, message: str, **data: Any):
        super().__init__('NOT_FOUND', message, **data)


class InsufficientStock(MesseError):
    """Requested quantity is above what the item has in stock."""

    status_code = 409

    def __init__(self, item_id: int, item_name: str, available: int, requested: int, unit: str = ''):
        message = f'Quantidade insuficiente para "{item_name}". Disponível: {available}'
        if unit:
            message += f' {unit}'
        super().__init__(
            'INSUFFICIENT_STOCK',
            message + '.',
            item_id=item_id,
            item_name=item_name,
            available=available,
            requested=requested,
        )

    @property
    def available(self) -> int:
        return self.data['available']


class InvalidCredentials(MesseError):
    status_code = 401

    def __init__(self):
        super().__init__('INVALID_CREDENTIALS')


class Forbidden(MesseError):
    status_code = 403

    def __init__(self, message: str | None = None, code: str = 'FORBIDDEN'):
        super().__init__(code, message)


class Duplicate(MesseError):
    status_code = 409

    def __init__(self, message: str, **data: Any):
        super().__init__('DUPLICATE', message, **data)
