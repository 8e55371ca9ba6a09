"""
Requisitions: a sector withdraws items from stock.

Submission is all-or-nothing: every line is checked and decremented by
guarded_decrement() inside one transaction. The first line that cannot be
served rolls the whole transaction back, so no stock changes and no
requisition row survives.
"""

import logging

from sqlalchemy.orm import joinedload

from messe.exceptions import NotFound, ValidationError
from messe.extensions import db
from messe.models import (
    MovementType,
    Requisition,
    RequisitionItem,
    RequisitionStatus,
    Sector,
    StockItem,
    StockMovement,
)
from messe.services.stock import _to_int, guarded_decrement, insufficient_after_rollback

logger = logging.getLogger(__name__)

MIN_REQUESTER_NAME = 3


def _parse_lines(raw_lines) -> list[tuple[int, int]]:
    if not isinstance(raw_lines, list) or not raw_lines:
        raise ValidationError("Adicione pelo menos um item.", field="items")

    lines = []
    for n, raw in enumerate(raw_lines, start=1):
        if not isinstance(raw, dict):
            raise ValidationError(f"Linha {n} inválida.", field="items", line=n)
        item_id = _to_int(raw.get("itemId", raw.get("item_id")))
        qty = _to_int(raw.get("quantity", raw.get("quantidade")))
        if item_id is None:
            raise ValidationError(f"Selecione um item (linha {n}).", field="items", line=n)
        if qty is None or qty < 1:
            raise ValidationError(f"Qtd mínima 1 (linha {n}).", field="items", line=n)
        lines.append((item_id, qty))
    return lines


def _load_items(item_ids) -> dict[int, StockItem]:
    items = StockItem.query.filter(StockItem.id.in_(set(item_ids))).all()
    return {it.id: it for it in items}


def list_requisitions():
    return (
        Requisition.query
        .options(joinedload(Requisition.items).joinedload(RequisitionItem.item))
        .order_by(Requisition.date.desc(), Requisition.id.desc())
        .all()
    )


def get_requisition(requisition_id) -> Requisition:
    req = db.session.get(Requisition, _to_int(requisition_id, 0))
    if not req:
        raise NotFound("Requisição não encontrada.", requisition_id=requisition_id)
    return req


def submit_requisition(sector_id, nome_requisitante, lines, user) -> Requisition:
    """
    Create a requisition and withdraw its items from stock.

    Raises:
        ValidationError: missing sector, short requester name, no lines,
            line quantity below 1
        NotFound: unknown sector or item
        InsufficientStock: a line asks for more than is in stock (names the
            item and the amount available)
    """
    sector_id = _to_int(sector_id)
    if sector_id is None:
        raise ValidationError("Selecione um setor.", field="sectorId")

    nome = (nome_requisitante or "").strip()
    if len(nome) < MIN_REQUESTER_NAME:
        raise ValidationError(
            "Nome do requisitante é obrigatório e deve ter 3+ caracteres.",
            field="nomeRequisitante",
        )

    parsed = _parse_lines(lines)

    sector = db.session.get(Sector, sector_id)
    if not sector:
        raise NotFound("Setor não encontrado.", sector_id=sector_id)

    items = _load_items(item_id for item_id, _ in parsed)
    for item_id, _ in parsed:
        if item_id not in items:
            raise NotFound("Item de stock não encontrado.", item_id=item_id)

    req = Requisition(
        sector_id=sector.id,
        nome_requisitante=nome,
        status=RequisitionStatus.COMPLETED.value,
        created_by_user_id=user.id,
    )
    db.session.add(req)

    try:
        for item_id, qty in parsed:
            if not guarded_decrement(item_id, qty):
                db.session.rollback()
                err = insufficient_after_rollback(item_id, qty)
                logger.warning(
                    "requisition.rejected",
                    extra={"item_id": item_id, "qty": qty, "sector_id": sector_id},
                )
                raise err

        db.session.flush()

        for item_id, qty in parsed:
            req.items.append(RequisitionItem(item_id=item_id, quantity=qty))
            db.session.add(StockMovement(
                item_id=item_id,
                type=MovementType.OUT.value,
                quantity=qty,
                user_id=user.id,
                reason=f"Requisição #{req.id}",
                requisition_id=req.id,
            ))

        db.session.commit()
    except Exception:
        db.session.rollback()
        raise

    logger.info(
        "requisition.created",
        extra={"requisition_id": req.id, "sector_id": sector_id, "lines": len(parsed)},
    )
    return req
