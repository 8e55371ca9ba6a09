from messe.extensions import db


class RequisitionItem(db.Model):
    __tablename__ = "requisition_items"

    id = db.Column(db.Integer, primary_key=True)
    requisition_id = db.Column(db.Integer, db.ForeignKey("requisitions.id"), nullable=False)
    item_id = db.Column(db.Integer, db.ForeignKey("stock_items.id"), nullable=False)
    quantity = db.Column(db.Integer, nullable=False)

    requisition = db.relationship("Requisition", back_populates="items")
    item = db.relationship("StockItem", back_populates="requisition_items")

    def to_dict(self):
        return {
            "itemId": self.item_id,
            "itemName": self.item.name if self.item else None,
            "quantity": self.quantity,
        }

    def __repr__(self):
        return f"<RequisitionItem {self.id}>"
