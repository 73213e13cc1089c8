import uuid
from datetime import datetime
from typing import Any, Literal, Optional
from pydantic import BaseModel, Field


class RawRecord(BaseModel):
    """
    One data line of an uploaded file, keyed by the header strings exactly as
    they appeared (trimmed). Nothing is coerced yet; every value is a string.
    """

    row_number: int = Field(..., ge=1)
    values: dict[str, str] = Field(default_factory=dict)

    def get(self, header: str) -> Optional[str]:
        return self.values.get(header)


class InventoryItem(BaseModel):
    """
    Defines the data contract for a single, normalized stock item.
    Numeric fields are always resolved numbers and never negative.
    """

    id: str
    name: str
    category: str
    current_stock: int = Field(default=0, ge=0, alias="currentStock")
    minimum_stock: int = Field(default=0, ge=0, alias="minimumStock")
    unit_price: float = Field(default=0.0, ge=0, alias="unitPrice")
    expiry_date: Optional[str] = Field(default=None, alias="expiryDate")
    supplier: Optional[str] = None
    location: Optional[str] = None

    class Config:
        # Build from camelCase dicts or keyword names alike; dump with aliases
        # when talking to the dashboard.
        populate_by_name = True

    def to_db_row(self, user_id: str) -> dict[str, Any]:
        """Row shape of the hosted inventory table, scoped to one owner."""
        return {
            "user_id": user_id,
            "name": self.name,
            "category": self.category,
            "current_stock": self.current_stock,
            "minimum_stock": self.minimum_stock,
            "expiry_date": self.expiry_date or None,
            "unit_price": self.unit_price,
            "supplier": self.supplier,
            "location": self.location,
        }

    @classmethod
    def from_db_row(cls, row: dict[str, Any]) -> "InventoryItem":
        return cls(
            id=str(row["id"]),
            name=row.get("name") or "",
            category=row.get("category") or "",
            current_stock=row.get("current_stock") or 0,
            minimum_stock=row.get("minimum_stock") or 0,
            unit_price=row.get("unit_price") or 0,
            expiry_date=row.get("expiry_date") or None,
            supplier=row.get("supplier"),
            location=row.get("location"),
        )


NotificationType = Literal["low-stock", "expiring", "reorder", "critical", "info"]


class Notification(BaseModel):
    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    title: str
    message: str
    type: NotificationType = "info"
    read: bool = False
    created_at: datetime = Field(default_factory=datetime.now)
    link: Optional[str] = None


class ChatMessage(BaseModel):
    query: str
    response: str
    user_id: Optional[str] = None

    def to_db_row(self) -> dict[str, Any]:
        return self.model_dump(include={"user_id", "query", "response"})
