from datetime import datetime
from messe.extensions import db


class Requisition(db.Model):
    __tablename__ = "requisitions"

    id = db.Column(db.Integer, primary_key=True)
    sector_id = db.Column(db.Integer, db.ForeignKey("sectors.id"), nullable=False)
    nome_requisitante = db.Column(db.String(160), nullable=False)
    date = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)
    status = db.Column(db.String(20), nullable=False, default="CONCLUIDO")  # PENDENTE | APROVADO | REJEITADO | CONCLUIDO
    created_by_user_id = db.Column(db.Integer, db.ForeignKey("users.id", ondelete="SET NULL"), nullable=True)

    sector = db.relationship("Sector")
    created_by = db.relationship("User")

    items = db.relationship("RequisitionItem", back_populates="requisition", cascade="all, delete-orphan")

    def to_dict(self):
        return {
            "id": self.id,
            "sectorId": self.sector_id,
            "sectorName": self.sector.name if self.sector else None,
            "nomeRequisitante": self.nome_requisitante,
            "date": self.date.isoformat() if self.date else None,
            "status": self.status,
            "items": [it.to_dict() for it in self.items],
            "createdByUserId": self.created_by_user_id,
            "createdByName": self.created_by.name if self.created_by else None,
        }

    def __repr__(self):
        return f"<Requisition {self.id} {self.status}>"
