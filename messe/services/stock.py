"""
Stock items: listing, creation, dashboard counters and the two primitives
every stock change goes through (increment / guarded decrement).

quantity is never written from Python values: both primitives are single
UPDATE statements evaluated by the database, so concurrent writers from other
processes cannot push an item below zero.
"""

import logging
from datetime import date, datetime

from sqlalchemy import func, or_, update

from messe.exceptions import InsufficientStock, MesseError, NotFound, ValidationError
from messe.extensions import db
from messe.models import MovementType, Requisition, RequisitionStatus, StockItem, StockMovement

logger = logging.getLogger(__name__)


# ------------------------- helpers -------------------------
def _to_int(v, default=None):
    if isinstance(v, bool):
        return default
    if isinstance(v, int):
        return v
    if isinstance(v, float):
        return int(v) if v.is_integer() else default
    try:
        return int(str(v).strip())
    except (TypeError, ValueError):
        return default


def _parse_datetime(v):
    """Accepts None, datetime/date objects, 'YYYY-MM-DD' or ISO 8601 strings."""
    if v is None or v == "":
        return datetime.utcnow()
    if isinstance(v, datetime):
        return v
    if isinstance(v, date):
        return datetime(v.year, v.month, v.day)
    s = str(v).strip()
    if s.endswith("Z"):
        s = s[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(s)
    except ValueError:
        raise ValidationError("Data inválida.", date=str(v))
    if parsed.tzinfo is not None:
        parsed = parsed.replace(tzinfo=None) - parsed.utcoffset()
    return parsed


def get_item(item_id) -> StockItem:
    item_id = _to_int(item_id)
    item = db.session.get(StockItem, item_id) if item_id is not None else None
    if not item:
        raise NotFound("Item de stock não encontrado.", item_id=item_id)
    return item


# ------------------------- primitives -------------------------
def increment(item_id: int, quantity: int) -> None:
    db.session.execute(
        update(StockItem)
        .where(StockItem.id == item_id)
        .values(quantity=StockItem.quantity + quantity)
        .execution_options(synchronize_session=False)
    )


def guarded_decrement(item_id: int, quantity: int) -> bool:
    """
    Decrement only if enough stock is left, in one statement.

    Returns False when the guard matched no row (item missing or
    quantity < requested). The caller owns the transaction and must roll
    back on False.
    """
    result = db.session.execute(
        update(StockItem)
        .where(StockItem.id == item_id, StockItem.quantity >= quantity)
        .values(quantity=StockItem.quantity - quantity)
        .execution_options(synchronize_session=False)
    )
    return result.rowcount == 1


def insufficient_after_rollback(item_id: int, requested: int) -> MesseError:
    """Build the error from the committed quantity. Call after rollback()."""
    item = db.session.get(StockItem, item_id, populate_existing=True)
    if not item:
        return NotFound("Item de stock não encontrado.", item_id=item_id)
    return InsufficientStock(item.id, item.name, item.quantity, requested, item.unit)


# ------------------------- itens -------------------------
def list_items(q: str | None = None):
    query = StockItem.query
    if q:
        like = f"%{q.strip()}%"
        query = query.filter(or_(StockItem.name.ilike(like), StockItem.category.ilike(like)))
    return query.order_by(StockItem.name.asc()).all()


def create_item(data: dict, user=None) -> StockItem:
    name = (data.get("name") or "").strip()
    category = (data.get("category") or "").strip()
    unit = (data.get("unit") or "").strip()
    quantity = _to_int(data.get("quantity", 0))
    min_level = _to_int(data.get("minLevel", data.get("min_level", 0)))

    if len(name) < 2:
        raise ValidationError("O nome deve ter pelo menos 2 caracteres.", field="name")
    if len(category) < 2:
        raise ValidationError("Categoria obrigatória.", field="category")
    if not unit:
        raise ValidationError("Unidade obrigatória (ex: kg, un).", field="unit")
    if quantity is None or quantity < 0:
        raise ValidationError("A quantidade inicial não pode ser negativa.", field="quantity")
    if min_level is None or min_level < 0:
        raise ValidationError("Nível mínimo deve ser positivo.", field="minLevel")

    item = StockItem(name=name, category=category, unit=unit, quantity=quantity, min_level=min_level)
    db.session.add(item)
    db.session.flush()

    if quantity > 0:
        db.session.add(StockMovement(
            item_id=item.id,
            type=MovementType.IN.value,
            quantity=quantity,
            user_id=getattr(user, "id", None),
            reason="Stock inicial",
        ))

    db.session.commit()
    logger.info("stock.item_created", extra={"item_id": item.id, "item": name, "qty": quantity})
    return item


# ------------------------- dashboard -------------------------
def stats() -> dict:
    total = db.session.query(func.count(StockItem.id)).scalar() or 0
    low = (
        db.session.query(func.count(StockItem.id))
        .filter(StockItem.quantity <= StockItem.min_level)
        .scalar()
    ) or 0
    pending = Requisition.query.filter_by(status=RequisitionStatus.PENDING.value).count()
    done = Requisition.query.filter_by(status=RequisitionStatus.COMPLETED.value).count()

    return {
        "totalItems": total,
        "lowStockItems": low,
        "pendingRequisitions": pending,
        "completedRequisitions": done,
    }
