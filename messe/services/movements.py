"""
Stock movements: manual ledger entries.

IN adds to the item, OUT withdraws through the same guarded decrement used by
requisitions. Both write one StockMovement row in the same transaction.
"""

import logging

from sqlalchemy.orm import joinedload

from messe.exceptions import ValidationError
from messe.extensions import db
from messe.models import MovementType, StockMovement
from messe.services.stock import (
    _parse_datetime,
    _to_int,
    get_item,
    guarded_decrement,
    increment,
    insufficient_after_rollback,
)

logger = logging.getLogger(__name__)

DEFAULT_REASON_IN = "Entrada Manual de Stock"
DEFAULT_REASON_OUT = "Saída Manual de Stock"


def list_movements(item_id=None):
    q = StockMovement.query.options(
        joinedload(StockMovement.item),
        joinedload(StockMovement.user),
    )
    if item_id is not None:
        item = get_item(item_id)
        q = q.filter(StockMovement.item_id == item.id)
    return q.order_by(StockMovement.date.desc(), StockMovement.id.desc()).all()


def record_movement(item_id, quantity, user, movement_type=MovementType.IN.value, date=None, reason=None) -> StockMovement:
    """
    Record a stock movement and apply it to the item.

    Raises:
        ValidationError: quantity not a positive integer, unknown type, bad date
        NotFound: unknown item
        InsufficientStock: OUT above the quantity in stock
    """
    try:
        mtype = MovementType.parse(movement_type)
    except ValueError:
        raise ValidationError("Tipo de movimento inválido.", field="type", type=movement_type)

    qty = _to_int(quantity)
    if qty is None or qty <= 0:
        raise ValidationError("A quantidade deve ser maior que 0.", field="quantity")

    item = get_item(item_id)
    when = _parse_datetime(date)
    reason = (reason or "").strip() or (DEFAULT_REASON_IN if mtype is MovementType.IN else DEFAULT_REASON_OUT)

    try:
        if mtype is MovementType.IN:
            increment(item.id, qty)
        elif not guarded_decrement(item.id, qty):
            db.session.rollback()
            raise insufficient_after_rollback(item.id, qty)

        mov = StockMovement(
            item_id=item.id,
            type=mtype.value,
            quantity=qty,
            date=when,
            user_id=getattr(user, "id", None),
            reason=reason,
        )
        db.session.add(mov)
        db.session.commit()
    except Exception:
        db.session.rollback()
        raise

    logger.info(
        "stock.movement",
        extra={"item_id": item.id, "type": mtype.value, "qty": qty, "movement_id": mov.id},
    )
    return mov
