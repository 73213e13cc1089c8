import logging
import math
import re
from datetime import date
from typing import Optional

from . import settings
from .schemas import InventoryItem, RawRecord

logger = logging.getLogger(__name__)

# Accepted header spellings per canonical field, probed in order.
# Matching is exact: 'CurrentStock' or 'CURRENT_STOCK' are not aliases.
FIELD_ALIASES: dict[str, list[str]] = {
    "id": ["id", "ID", "Id"],
    "name": ["name", "Name", "itemName", "item_name", "Item Name"],
    "category": ["category", "Category"],
    "currentStock": ["currentStock", "current_stock", "Current Stock"],
    "minimumStock": ["minimumStock", "minimum_stock", "Minimum Stock"],
    "unitPrice": ["unitPrice", "unit_price", "Unit Price"],
    "expiryDate": ["expiryDate", "expiry_date", "Expiry Date"],
    "supplier": ["supplier", "Supplier"],
    "location": ["location", "Location"],
}

# (pattern, group order as year/month/day indexes). First match wins.
DATE_PATTERNS = [
    (re.compile(r"^(\d{4})-(\d{1,2})-(\d{1,2})$"), (1, 2, 3)),  # YYYY-MM-DD
    (re.compile(r"^(\d{1,2})-(\d{1,2})-(\d{4})$"), (3, 2, 1)),  # DD-MM-YYYY
    (re.compile(r"^(\d{1,2})/(\d{1,2})/(\d{4})$"), (3, 1, 2)),  # MM/DD/YYYY
]


def resolve_field(raw: RawRecord, field: str) -> Optional[str]:
    """Returns the first present, non-empty value among the field's aliases."""
    for alias in FIELD_ALIASES[field]:
        value = raw.get(alias)
        if value:
            return value
    return None


def _to_number(value: Optional[str]) -> float:
    if value is None:
        return 0.0
    try:
        number = float(value)
    except ValueError:
        return 0.0
    if not math.isfinite(number) or number <= 0:
        return 0.0
    return number


def coerce_int(value: Optional[str]) -> int:
    """Lenient integer parse: decimals truncate, garbage and negatives become 0."""
    return int(_to_number(value))


def coerce_price(value: Optional[str]) -> float:
    """Lenient decimal parse: garbage, NaN and negatives become 0."""
    return _to_number(value)


def normalize_date(value: Optional[str]) -> Optional[str]:
    """
    Converts 'YYYY-MM-DD', 'DD-MM-YYYY' or 'MM/DD/YYYY' to an ISO date string.
    Unrecognized text and impossible dates (e.g. 31-02-2024) give None.
    """
    if not value:
        return None

    text = value.strip()
    for pattern, (y, m, d) in DATE_PATTERNS:
        match = pattern.match(text)
        if not match:
            continue
        try:
            parsed = date(int(match.group(y)), int(match.group(m)), int(match.group(d)))
        except ValueError:
            return None
        return parsed.isoformat()
    return None


def normalize_record(raw: RawRecord) -> InventoryItem:
    """Total conversion from a raw row to a normalized inventory item."""
    expiry_text = resolve_field(raw, "expiryDate")

    expiry_date = normalize_date(expiry_text)
    if expiry_text and expiry_date is None:
        logger.debug(f"Row {raw.row_number}: unrecognized expiry date '{expiry_text}' dropped.")

    return InventoryItem(
        id=resolve_field(raw, "id") or f"ITEM-{raw.row_number:04d}",
        name=resolve_field(raw, "name") or settings.DEFAULT_ITEM_NAME,
        category=resolve_field(raw, "category") or settings.DEFAULT_CATEGORY,
        current_stock=coerce_int(resolve_field(raw, "currentStock")),
        minimum_stock=coerce_int(resolve_field(raw, "minimumStock")),
        unit_price=coerce_price(resolve_field(raw, "unitPrice")),
        expiry_date=expiry_date,
        supplier=resolve_field(raw, "supplier"),
        location=resolve_field(raw, "location"),
    )


def normalize_records(raws: list[RawRecord]) -> list[InventoryItem]:
    """Normalizes a batch, keeping the order of the source rows."""
    return [normalize_record(raw) for raw in raws]
