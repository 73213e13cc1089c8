"""
Application state for the dashboard.

State is an immutable AppState value. Every transition is a pure reducer
function `reducer(state, *args) -> AppState`; AppStore is the only holder of
the current value and is passed explicitly to whatever needs it.
"""

import logging
from dataclasses import dataclass, field, replace
from typing import Callable

from .schemas import InventoryItem, Notification

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class NotificationPreferences:
    low_stock: bool = True
    expiring: bool = True
    reorder: bool = False


@dataclass(frozen=True)
class AppState:
    inventory: tuple[InventoryItem, ...] = ()
    search_results: tuple[InventoryItem, ...] = ()
    notifications: tuple[Notification, ...] = ()
    preferences: NotificationPreferences = field(default_factory=NotificationPreferences)


# Shown until the first upload or load from storage.
SAMPLE_INVENTORY = [
    InventoryItem(
        id="MED001",
        name="Paracetamol 500mg",
        category="Pain Relief",
        current_stock=120,
        minimum_stock=50,
        expiry_date="2024-12-31",
        unit_price=0.15,
        supplier="PharmaCorp",
        location="Shelf A1",
    ),
    InventoryItem(
        id="MED002",
        name="Amoxicillin 250mg",
        category="Antibiotics",
        current_stock=45,
        minimum_stock=60,
        expiry_date="2024-10-15",
        unit_price=0.45,
        supplier="MediSource",
        location="Shelf B2",
    ),
    InventoryItem(
        id="MED003",
        name="Ibuprofen 200mg",
        category="Anti-inflammatory",
        current_stock=85,
        minimum_stock=40,
        expiry_date="2025-01-20",
        unit_price=0.20,
        supplier="PharmaCorp",
        location="Shelf A2",
    ),
    InventoryItem(
        id="MED004",
        name="Loratadine 10mg",
        category="Antihistamine",
        current_stock=65,
        minimum_stock=30,
        expiry_date="2024-11-05",
        unit_price=0.30,
        supplier="AllergyCare",
        location="Shelf C1",
    ),
    InventoryItem(
        id="MED005",
        name="Omeprazole 20mg",
        category="Gastric",
        current_stock=95,
        minimum_stock=40,
        expiry_date="2024-09-30",
        unit_price=0.40,
        supplier="DigestHealth",
        location="Shelf D2",
    ),
]


def initial_state(sample: bool = True) -> AppState:
    return AppState(inventory=tuple(SAMPLE_INVENTORY) if sample else ())


# --- Inventory reducers ---


def set_inventory(state: AppState, items: list[InventoryItem]) -> AppState:
    return replace(state, inventory=tuple(items))


def add_item(state: AppState, item: InventoryItem) -> AppState:
    return replace(state, inventory=state.inventory + (item,))


def update_item(state: AppState, item_id: str, changes: dict) -> AppState:
    """Merges `changes` (field names or camelCase aliases) into the matching item."""
    updated = []
    for item in state.inventory:
        if item.id == item_id:
            merged = {**item.model_dump(), **changes}
            item = InventoryItem.model_validate(merged)
        updated.append(item)
    return replace(state, inventory=tuple(updated))


def remove_item(state: AppState, item_id: str) -> AppState:
    return replace(
        state, inventory=tuple(item for item in state.inventory if item.id != item_id)
    )


def set_search_results(state: AppState, items: list[InventoryItem]) -> AppState:
    return replace(state, search_results=tuple(items))


# --- Notification reducers ---


def add_notification(state: AppState, notification: Notification) -> AppState:
    """Newest notifications come first."""
    return replace(state, notifications=(notification,) + state.notifications)


def mark_as_read(state: AppState, notification_id: str) -> AppState:
    return replace(
        state,
        notifications=tuple(
            n.model_copy(update={"read": True}) if n.id == notification_id else n
            for n in state.notifications
        ),
    )


def mark_all_as_read(state: AppState) -> AppState:
    return replace(
        state,
        notifications=tuple(
            n.model_copy(update={"read": True}) for n in state.notifications
        ),
    )


def remove_notification(state: AppState, notification_id: str) -> AppState:
    return replace(
        state,
        notifications=tuple(n for n in state.notifications if n.id != notification_id),
    )


def clear_notifications(state: AppState) -> AppState:
    return replace(state, notifications=())


def set_preferences(state: AppState, preferences: NotificationPreferences) -> AppState:
    return replace(state, preferences=preferences)


def unread_count(state: AppState) -> int:
    return sum(1 for n in state.notifications if not n.read)


class AppStore:
    """Holds the current AppState and applies reducers to it."""

    def __init__(self, state: AppState = None):
        self.state = state if state is not None else initial_state()

    def dispatch(self, reducer: Callable[..., AppState], *args) -> AppState:
        self.state = reducer(self.state, *args)
        logger.debug(f"Applied {reducer.__name__}.")
        return self.state

    @property
    def inventory(self) -> list[InventoryItem]:
        return list(self.state.inventory)
