"""
In-memory stand-in for ApiClient, for working without a backend.

Same methods and return shapes as ApiClient. Requisitions follow the server
rule: all lines are checked before any stock changes.
"""

import itertools
from datetime import datetime

from messe.client.api import ApiError

MOCK_ADMIN = {"id": 1, "name": "Admin Mock", "email": "admin@messe.com", "role": "ADMIN"}
MOCK_PASSWORD = "123456"


def _to_int(v):
    try:
        return int(v)
    except (TypeError, ValueError):
        return None


def _invalid(message):
    return ApiError(message, status=400, code="VALIDATION")


def _level(item):
    if item["quantity"] <= item["minLevel"]:
        return "Crítico"
    if item["quantity"] <= item["minLevel"] * 2:
        return "Baixo"
    return "Normal"


class MockApi:

    def __init__(self, stock=None, sectors=None):
        self._ids = itertools.count(100)
        self.current_user = None
        self.users = [dict(MOCK_ADMIN)]
        self.passwords = {MOCK_ADMIN["email"]: MOCK_PASSWORD}
        self.sectors = sectors if sectors is not None else [{"id": 1, "name": "Bar"}, {"id": 2, "name": "Cozinha"}]
        self.stock = []
        self.movements = []
        self.requisitions = []
        for item in stock or []:
            self.create_stock_item(item)

    def _now(self):
        return datetime.utcnow().isoformat()

    def _item(self, item_id):
        for item in self.stock:
            if item["id"] == item_id:
                return item
        raise ApiError("Item de stock não encontrado.", status=404, code="NOT_FOUND")

    # ------------------------- sessão -------------------------
    def health(self):
        return True

    def login(self, email, password=None):
        email = (email or "").strip().lower()
        if self.passwords.get(email) != password:
            return None
        self.current_user = next(u for u in self.users if u["email"] == email)
        return dict(self.current_user)

    def logout(self):
        self.current_user = None

    # ------------------------- stock -------------------------
    def get_stats(self):
        return {
            "totalItems": len(self.stock),
            "lowStockItems": sum(1 for i in self.stock if i["quantity"] <= i["minLevel"]),
            "pendingRequisitions": sum(1 for r in self.requisitions if r["status"] == "PENDENTE"),
            "completedRequisitions": sum(1 for r in self.requisitions if r["status"] == "CONCLUIDO"),
        }

    def get_stock(self):
        return [dict(i, status=_level(i)) for i in sorted(self.stock, key=lambda i: i["name"])]

    def create_stock_item(self, item):
        new = {
            "id": next(self._ids),
            "name": item["name"],
            "category": item.get("category", ""),
            "quantity": int(item.get("quantity", 0)),
            "unit": item.get("unit", "un"),
            "minLevel": int(item.get("minLevel", 0)),
        }
        self.stock.append(new)
        return dict(new, status=_level(new))

    def get_sectors(self):
        return list(self.sectors)

    # ------------------------- movimentos -------------------------
    def get_item_movements(self, item_id):
        return [m for m in self.movements if m["itemId"] == item_id]

    def get_all_movements(self):
        return list(self.movements)

    def create_movement(self, data):
        qty = _to_int(data.get("quantity"))
        if qty is None or qty <= 0:
            raise _invalid("A quantidade deve ser maior que 0.")
        item_id = _to_int(data.get("itemId"))
        if item_id is None:
            raise _invalid("Selecione um item.")
        item = self._item(item_id)
        mtype = data.get("type") or "IN"
        if mtype in ("OUT", "SAIDA"):
            if item["quantity"] < qty:
                raise ApiError("Quantidade insuficiente em stock", status=409, code="INSUFFICIENT_STOCK")
            item["quantity"] -= qty
            mtype = "OUT"
        else:
            item["quantity"] += qty
            mtype = "IN"
        mov = {
            "id": next(self._ids),
            "itemId": item["id"],
            "itemName": item["name"],
            "type": mtype,
            "quantity": qty,
            "date": data.get("date") or self._now(),
            "userId": (self.current_user or {}).get("id"),
            "reason": data.get("reason") or "Entrada Manual de Stock",
        }
        self.movements.insert(0, mov)
        return mov

    # ------------------------- requisições -------------------------
    def get_requisitions(self):
        return list(self.requisitions)

    def create_requisition(self, data):
        sector_id = _to_int(data.get("sectorId"))
        if sector_id is None:
            raise _invalid("Selecione um setor.")
        nome = (data.get("nomeRequisitante") or "").strip()
        if len(nome) < 3:
            raise _invalid("Nome do requisitante é obrigatório e deve ter 3+ caracteres.")

        raw_lines = data.get("items")
        if not isinstance(raw_lines, list) or not raw_lines:
            raise _invalid("Adicione pelo menos um item.")
        lines = []
        for n, raw in enumerate(raw_lines, start=1):
            if not isinstance(raw, dict):
                raise _invalid(f"Linha {n} inválida.")
            item_id = _to_int(raw.get("itemId"))
            qty = _to_int(raw.get("quantity"))
            if item_id is None:
                raise _invalid(f"Selecione um item (linha {n}).")
            if qty is None or qty < 1:
                raise _invalid(f"Qtd mínima 1 (linha {n}).")
            lines.append((item_id, qty))

        if not any(s["id"] == sector_id for s in self.sectors):
            raise ApiError("Setor não encontrado.", status=404, code="NOT_FOUND")

        wanted = {}
        for item_id, qty in lines:
            wanted[item_id] = wanted.get(item_id, 0) + qty

        for item_id, qty in wanted.items():
            item = self._item(item_id)
            if qty > item["quantity"]:
                raise ApiError(
                    f'Quantidade insuficiente para "{item["name"]}". Disponível: {item["quantity"]} {item["unit"]}.',
                    status=409,
                    code="INSUFFICIENT_STOCK",
                    details={"item_id": item["id"], "available": item["quantity"]},
                )

        for item_id, qty in lines:
            self._item(item_id)["quantity"] -= qty

        req = {
            "id": next(self._ids),
            "sectorId": sector_id,
            "nomeRequisitante": nome,
            "date": self._now(),
            "status": "CONCLUIDO",
            "items": [{"itemId": item_id, "quantity": qty} for item_id, qty in lines],
            "createdByUserId": (self.current_user or {}).get("id"),
        }
        self.requisitions.insert(0, req)
        return req

    # ------------------------- utilizadores -------------------------
    def get_users(self):
        return list(self.users)

    def create_user(self, user):
        new = {
            "id": next(self._ids),
            "name": user["name"],
            "email": user["email"].strip().lower(),
            "role": user.get("role", "OPERATOR"),
        }
        self.users.append(new)
        self.passwords[new["email"]] = user.get("password") or MOCK_PASSWORD
        return new

    def update_user(self, user):
        for u in self.users:
            if u["id"] == user["id"]:
                u.update({k: user[k] for k in ("name", "email", "role") if k in user})
                return dict(u)
        raise ApiError("Utilizador não encontrado.", status=404, code="NOT_FOUND")

    def delete_user(self, user_id):
        if self.current_user and self.current_user["id"] == user_id:
            raise ApiError("Você não pode excluir a si mesmo.", status=403, code="SELF_DELETE")
        self.users = [u for u in self.users if u["id"] != user_id]
