"""
Derived statistics over the in-memory inventory.

All functions are pure: the result depends only on the items passed in and,
for expiry checks, on the reference date.
"""

from datetime import date
from typing import Optional

import pandas as pd

from . import settings
from .schemas import InventoryItem

STOCK_LEVELS = ["low", "medium", "high"]
EXPIRY_UNITS = settings.EXPIRY_UNITS


def is_low_stock(item: InventoryItem) -> bool:
    return item.current_stock <= item.minimum_stock


def stock_level(item: InventoryItem) -> str:
    if is_low_stock(item):
        return "low"
    if item.current_stock < item.minimum_stock * 2:
        return "medium"
    return "high"


def _expiry(item: InventoryItem) -> Optional[date]:
    if not item.expiry_date:
        return None
    try:
        return date.fromisoformat(item.expiry_date)
    except ValueError:
        return None


def months_until_expiry(item: InventoryItem, today: date) -> Optional[int]:
    """Whole calendar months between today and expiry (day of month ignored)."""
    expiry = _expiry(item)
    if expiry is None:
        return None
    return (expiry.year * 12 + expiry.month) - (today.year * 12 + today.month)


def days_until_expiry(item: InventoryItem, today: date) -> Optional[int]:
    expiry = _expiry(item)
    if expiry is None:
        return None
    return (expiry - today).days


def is_expiring(
    item: InventoryItem, window: int, unit: str = "days", today: date = None
) -> bool:
    """
    True when the item expires within `window` days or months of today.
    Items already past expiry count as expiring; items without a date never do.
    """
    if unit not in EXPIRY_UNITS:
        raise ValueError(f"Unknown expiry unit '{unit}'. Expected one of {EXPIRY_UNITS}.")

    today = today or date.today()
    if unit == "months":
        remaining = months_until_expiry(item, today)
    else:
        remaining = days_until_expiry(item, today)
    return remaining is not None and remaining <= window


def expiring_items(
    items: list[InventoryItem], window: int, unit: str = "days", today: date = None
) -> list[InventoryItem]:
    return [item for item in items if is_expiring(item, window, unit, today)]


def to_frame(items: list[InventoryItem]) -> pd.DataFrame:
    """One row per item with the numeric columns needed for aggregation."""
    columns = ["id", "name", "category", "current_stock", "minimum_stock", "unit_price"]
    if not items:
        return pd.DataFrame(columns=columns)
    df = pd.DataFrame([item.model_dump(include=set(columns)) for item in items])
    return df[columns]


def category_distribution(items: list[InventoryItem]) -> list[tuple[str, int]]:
    """Item count per category, largest first (ties keep first-seen order)."""
    df = to_frame(items)
    if df.empty:
        return []
    counts = df.groupby("category", sort=False).size()
    counts = counts.sort_values(ascending=False, kind="stable")
    return [(str(category), int(count)) for category, count in counts.items()]


def value_by_category(items: list[InventoryItem]) -> list[tuple[str, float]]:
    """Sum of current_stock * unit_price per category, rounded to cents."""
    df = to_frame(items)
    if df.empty:
        return []
    df["value"] = df["current_stock"] * df["unit_price"]
    values = df.groupby("category", sort=False)["value"].sum()
    values = values.sort_values(ascending=False, kind="stable")
    return [(str(category), round(float(value), 2)) for category, value in values.items()]


def total_value(items: list[InventoryItem]) -> float:
    return round(sum(item.current_stock * item.unit_price for item in items), 2)


def stock_level_distribution(items: list[InventoryItem]) -> dict[str, int]:
    counts = {level: 0 for level in STOCK_LEVELS}
    for item in items:
        counts[stock_level(item)] += 1
    return counts


def _stock_ratio(item: InventoryItem) -> float:
    # A zero minimum with zero stock is as urgent as it gets.
    if item.minimum_stock == 0:
        return 0.0
    return item.current_stock / item.minimum_stock


def low_stock_alerts(
    items: list[InventoryItem], limit: int = settings.LOW_STOCK_ALERT_LIMIT
) -> list[InventoryItem]:
    """Low-stock items, most depleted relative to their minimum first."""
    low = [item for item in items if is_low_stock(item)]
    return sorted(low, key=_stock_ratio)[:limit]


def categories(items: list[InventoryItem]) -> list[str]:
    return sorted({item.category for item in items})


def filter_inventory(
    items: list[InventoryItem],
    query: str = "",
    category: str = "",
    level: str = "",
) -> list[InventoryItem]:
    """
    Inventory table filters. `query` matches name or id case-insensitively,
    `category` must match exactly and `level` is one of STOCK_LEVELS.
    Empty arguments do not filter.
    """
    if level and level not in STOCK_LEVELS:
        raise ValueError(f"Unknown stock level '{level}'. Expected one of {STOCK_LEVELS}.")

    results = items
    if query:
        needle = query.lower()
        results = [
            item
            for item in results
            if needle in item.name.lower() or needle in item.id.lower()
        ]
    if category:
        results = [item for item in results if item.category == category]
    if level:
        results = [item for item in results if stock_level(item) == level]
    return results


def summary(items: list[InventoryItem], today: date = None) -> dict:
    """Headline numbers for the dashboard cards."""
    today = today or date.today()
    low_count = sum(1 for item in items if is_low_stock(item))
    return {
        "total_items": len(items),
        "total_value": total_value(items),
        "low_stock_count": low_count,
        "low_stock_percentage": round(low_count / len(items) * 100) if items else 0,
        "expiring_count": len(
            expiring_items(items, settings.DASHBOARD_EXPIRY_MONTHS, "months", today)
        ),
        "top_categories": category_distribution(items)[: settings.TOP_CATEGORY_LIMIT],
        "stock_levels": stock_level_distribution(items),
    }
