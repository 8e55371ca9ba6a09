from messe.extensions import db
from messe.models.enums import LEVEL_CRITICAL, LEVEL_LOW, LEVEL_NORMAL


class StockItem(db.Model):
    __tablename__ = "stock_items"
    __table_args__ = (
        db.CheckConstraint("quantity >= 0", name="ck_stock_items_quantity_non_negative"),
        db.CheckConstraint("min_level >= 0", name="ck_stock_items_min_level_non_negative"),
    )

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(200), nullable=False)
    category = db.Column(db.String(120), nullable=False)
    unit = db.Column(db.String(20), nullable=False)

    # só movimentos e requisições alteram quantity
    quantity = db.Column(db.Integer, nullable=False, default=0)
    min_level = db.Column(db.Integer, nullable=False, default=0)

    movements = db.relationship("StockMovement", back_populates="item", order_by="StockMovement.date.desc()")
    requisition_items = db.relationship("RequisitionItem", back_populates="item")

    @property
    def level(self) -> str:
        if self.quantity <= self.min_level:
            return LEVEL_CRITICAL
        if self.quantity <= self.min_level * 2:
            return LEVEL_LOW
        return LEVEL_NORMAL

    @property
    def is_low(self) -> bool:
        return self.quantity <= self.min_level

    def to_dict(self):
        return {
            "id": self.id,
            "name": self.name,
            "category": self.category,
            "quantity": self.quantity,
            "unit": self.unit,
            "minLevel": self.min_level,
            "status": self.level,
        }

    def __repr__(self):
        return f"<StockItem {self.name} {self.quantity}{self.unit}>"
