from datetime import datetime
from messe.extensions import db


class StockMovement(db.Model):
    __tablename__ = "stock_movements"

    id = db.Column(db.Integer, primary_key=True)
    item_id = db.Column(db.Integer, db.ForeignKey("stock_items.id"), nullable=False, index=True)
    type = db.Column(db.String(10), nullable=False)  # IN | OUT
    quantity = db.Column(db.Integer, nullable=False)
    date = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)
    user_id = db.Column(db.Integer, db.ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    reason = db.Column(db.String(255))

    requisition_id = db.Column(db.Integer, db.ForeignKey("requisitions.id"), nullable=True)

    item = db.relationship("StockItem", back_populates="movements")
    user = db.relationship("User")

    def to_dict(self):
        d = {
            "id": self.id,
            "itemId": self.item_id,
            "itemName": self.item.name if self.item else None,
            "type": self.type,
            "quantity": self.quantity,
            "date": self.date.isoformat() if self.date else None,
            "userId": self.user_id,
            "userName": self.user.name if self.user else None,
        }
        if self.reason:
            d["reason"] = self.reason
        return d

    def __repr__(self):
        return f"<StockMovement {self.type} {self.quantity} item={self.item_id}>"
