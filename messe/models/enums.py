"""
Enums for Messe models.
"""

from enum import Enum


class UserRole(str, Enum):
    ADMIN = "ADMIN"
    OPERATOR = "OPERATOR"


class RequisitionStatus(str, Enum):
    """Requisition status. Only CONCLUIDO is assigned today (stock leaves on submission)."""
    PENDING = "PENDENTE"
    APPROVED = "APROVADO"
    REJECTED = "REJEITADO"
    COMPLETED = "CONCLUIDO"


class MovementType(str, Enum):
    """Ledger direction. ENTRADA/SAIDA are the labels used by the old frontend."""
    IN = "IN"
    OUT = "OUT"

    @classmethod
    def parse(cls, value):
        v = (value or "").strip().upper()
        aliases = {"ENTRADA": cls.IN, "SAIDA": cls.OUT, "SAÍDA": cls.OUT}
        if v in aliases:
            return aliases[v]
        return cls(v)


# rótulos de nível de stock (só para apresentação)
LEVEL_CRITICAL = "Crítico"
LEVEL_LOW = "Baixo"
LEVEL_NORMAL = "Normal"
