from .enums import UserRole, RequisitionStatus, MovementType
from .user import User
from .sector import Sector
from .stock_item import StockItem
from .movement import StockMovement
from .requisition import Requisition
from .requisition_item import RequisitionItem

__all__ = [
    "UserRole", "RequisitionStatus", "MovementType",
    "User", "Sector", "StockItem", "StockMovement",
    "Requisition", "RequisitionItem",
]
