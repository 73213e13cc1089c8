import logging
import re
from datetime import date
from typing import Optional

from . import settings, stats
from .data_handler import ChatHistoryRepository
from .schemas import ChatMessage, InventoryItem
from .state import AppStore

logger = logging.getLogger(__name__)


class InventoryAssistant:
    """
    Canned chat assistant. Answers a handful of question types from the
    current inventory and falls back to a placeholder reply otherwise.
    """

    def __init__(
        self,
        store: AppStore,
        history: Optional[ChatHistoryRepository] = None,
        user_id: str = settings.USER_ID,
        today: date = None,
    ):
        self.store = store
        self.history = history
        self.user_id = user_id
        self.today = today
        self.messages: list[ChatMessage] = []

    def ask(self, query: str) -> ChatMessage:
        if not query or not query.strip():
            raise ValueError("Query must not be blank.")

        query = query.strip()
        message = ChatMessage(query=query, response=self.answer(query), user_id=self.user_id)
        self.messages.append(message)
        logger.debug(f"Answered query #{len(self.messages)}: {query!r}")

        if self.history is not None:
            # A failed save is logged by the repository; the reply still stands.
            self.history.append(self.user_id, message)
        return message

    def answer(self, query: str) -> str:
        items = self.store.inventory
        text = query.lower()

        item = self._find_item(items, text)
        if item is not None:
            return self._describe(item)
        if "low stock" in text or "reorder" in text:
            return self._low_stock(items)
        if "expir" in text:
            return self._expiring(items)
        if "value" in text or "worth" in text:
            return self._value(items)
        if "categor" in text:
            return self._categories(items)
        if "how many" in text or "count" in text:
            return f"There are {len(items)} items in your inventory."

        return (
            f'This is a placeholder response to your query: "{query}". '
            "In the future, this will connect to an AI service."
        )

    @staticmethod
    def _find_item(items: list[InventoryItem], text: str) -> Optional[InventoryItem]:
        words = set(re.findall(r"[\w-]+", text))
        for item in items:
            name = item.name.lower()
            if name in text or item.id.lower() in words:
                return item
            # "paracetamol" finds "Paracetamol 500mg"
            first_word = name.split()[0] if name.split() else ""
            if len(first_word) > 3 and first_word in words:
                return item
        return None

    @staticmethod
    def _describe(item: InventoryItem) -> str:
        level = stats.stock_level(item)
        parts = [
            f"{item.name} ({item.id}): {item.current_stock} in stock, "
            f"minimum {item.minimum_stock} ({level} stock)."
        ]
        if item.expiry_date:
            parts.append(f"Expires {item.expiry_date}.")
        if item.location:
            parts.append(f"Location: {item.location}.")
        return " ".join(parts)

    @staticmethod
    def _low_stock(items: list[InventoryItem]) -> str:
        alerts = stats.low_stock_alerts(items)
        if not alerts:
            return "No items are at or below their minimum stock."
        lines = [f"- {item.name}: {item.current_stock} / {item.minimum_stock}" for item in alerts]
        total = sum(1 for item in items if stats.is_low_stock(item))
        return f"{total} items need reordering. Most urgent:\n" + "\n".join(lines)

    def _expiring(self, items: list[InventoryItem]) -> str:
        expiring = stats.expiring_items(
            items, settings.EXPIRY_WINDOW, settings.EXPIRY_UNIT, self.today
        )
        if not expiring:
            return f"Nothing expires within {settings.EXPIRY_WINDOW} {settings.EXPIRY_UNIT}."
        lines = [f"- {item.name}: {item.expiry_date}" for item in expiring]
        return (
            f"{len(expiring)} items expire within {settings.EXPIRY_WINDOW} "
            f"{settings.EXPIRY_UNIT}:\n" + "\n".join(lines)
        )

    @staticmethod
    def _value(items: list[InventoryItem]) -> str:
        by_category = stats.value_by_category(items)
        reply = f"Total inventory value is ${stats.total_value(items):,.2f}."
        if by_category:
            category, value = by_category[0]
            reply += f" The most valuable category is {category} (${value:,.2f})."
        return reply

    @staticmethod
    def _categories(items: list[InventoryItem]) -> str:
        distribution = stats.category_distribution(items)
        if not distribution:
            return "Your inventory is empty."
        return "Items per category: " + ", ".join(
            f"{category} ({count})" for category, count in distribution
        )
