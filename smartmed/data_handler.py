import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional

import requests
from pydantic import ValidationError

from . import settings, utils
from .errors import PersistenceError
from .schemas import ChatMessage, InventoryItem

logger = logging.getLogger(__name__)


@dataclass
class Result:
    """Outcome of a persistence call. Failures carry a message, never raise."""

    ok: bool
    data: Any = None
    error: Optional[str] = None

    @classmethod
    def success(cls, data: Any = None) -> "Result":
        return cls(ok=True, data=data)

    @classmethod
    def failure(cls, error: str) -> "Result":
        return cls(ok=False, error=error)


class TableAdapter:
    """
    Thin pass-through to one table of the hosted database's REST interface.
    Every filter is an equality match, e.g. {"user_id": "abc"}.
    """

    def __init__(
        self,
        table: str,
        base_url: str,
        api_key: str,
        session: Optional[requests.Session] = None,
        timeout: float = settings.REQUEST_TIMEOUT,
    ):
        self.table = table
        self.url = f"{base_url.rstrip('/')}/rest/v1/{table}"
        self.timeout = timeout
        self.session = session or requests.Session()
        self.headers = {
            "apikey": api_key,
            "Authorization": f"Bearer {api_key}",
            "Content-Type": "application/json",
        }

    @staticmethod
    def _filters(match: dict[str, Any]) -> dict[str, str]:
        return {key: f"eq.{value}" for key, value in match.items()}

    def _request(
        self, method: str, extra_headers: dict[str, str] = None, **kwargs
    ) -> requests.Response:
        headers = {**self.headers, **(extra_headers or {})}
        try:
            response = self.session.request(
                method, self.url, headers=headers, timeout=self.timeout, **kwargs
            )
            response.raise_for_status()
        except requests.exceptions.RequestException as e:
            raise PersistenceError(
                f"{method} {self.table} failed: {e}", details={"table": self.table}
            ) from e
        return response

    def select(self, match: dict[str, Any]) -> list[dict[str, Any]]:
        params = {"select": "*", **self._filters(match)}
        response = self._request("GET", params=params)
        try:
            return response.json()
        except ValueError as e:
            raise PersistenceError(
                f"GET {self.table} returned a non-JSON body: {e}",
                details={"table": self.table},
            ) from e

    def insert(self, rows: list[dict[str, Any]]) -> None:
        self._request("POST", extra_headers={"Prefer": "return=minimal"}, json=rows)

    def update(self, values: dict[str, Any], match: dict[str, Any]) -> None:
        self._request("PATCH", json=values, params=self._filters(match))

    def delete(self, match: dict[str, Any]) -> None:
        if not match:
            raise PersistenceError(f"Refusing to delete every row of {self.table}.")
        self._request("DELETE", params=self._filters(match))


class InventoryRepository:
    """Stores each user's inventory as one replaceable snapshot."""

    def __init__(self, adapter: TableAdapter):
        self.adapter = adapter

    def replace_all(self, user_id: str, items: list[InventoryItem]) -> Result:
        """
        Deletes every row owned by user_id, then inserts the batch.
        The two calls are not wrapped in a transaction: if the insert fails
        the owner is left with no rows until the next successful upload.
        """
        try:
            self.adapter.delete({"user_id": user_id})
            if items:
                self.adapter.insert([item.to_db_row(user_id) for item in items])
        except PersistenceError as e:
            logger.error(f"❌ Failed to save inventory for {user_id}: {e}")
            return Result.failure(str(e))

        logger.info(f"✅ Saved {len(items)} items for {user_id}.")
        return Result.success()

    def list_all(self, user_id: str) -> Result:
        try:
            rows = self.adapter.select({"user_id": user_id})
        except PersistenceError as e:
            logger.error(f"❌ Failed to load inventory for {user_id}: {e}")
            return Result.failure(str(e))

        try:
            items = [InventoryItem.from_db_row(row) for row in rows]
        except (ValidationError, KeyError, TypeError) as e:
            logger.error(f"❌ Stored inventory for {user_id} has an invalid row: {e}")
            return Result.failure(f"Invalid inventory row: {e}")
        return Result.success(items)


class ChatHistoryRepository:
    def __init__(self, adapter: TableAdapter):
        self.adapter = adapter

    def append(self, user_id: str, message: ChatMessage) -> Result:
        row = message.model_copy(update={"user_id": user_id}).to_db_row()
        try:
            self.adapter.insert([row])
        except PersistenceError as e:
            logger.warning(f"⚠️ Chat message not saved: {e}")
            return Result.failure(str(e))
        return Result.success()

    def list_all(self, user_id: str) -> Result:
        try:
            rows = self.adapter.select({"user_id": user_id})
        except PersistenceError as e:
            return Result.failure(str(e))

        try:
            messages = [
                ChatMessage(query=row["query"], response=row["response"], user_id=user_id)
                for row in rows
            ]
        except (ValidationError, KeyError, TypeError) as e:
            logger.error(f"❌ Stored chat history for {user_id} has an invalid row: {e}")
            return Result.failure(f"Invalid chat row: {e}")
        return Result.success(messages)


def _build_adapter(table: str) -> Optional[TableAdapter]:
    if not settings.SUPABASE_URL or not settings.SUPABASE_KEY:
        logger.warning("⚠️ SUPABASE_URL or SUPABASE_KEY not set. Persistence disabled.")
        return None
    return TableAdapter(table, settings.SUPABASE_URL, settings.SUPABASE_KEY)


def build_inventory_repository() -> Optional[InventoryRepository]:
    adapter = _build_adapter(settings.INVENTORY_TABLE)
    return InventoryRepository(adapter) if adapter else None


def build_chat_repository() -> Optional[ChatHistoryRepository]:
    adapter = _build_adapter(settings.CHAT_TABLE)
    return ChatHistoryRepository(adapter) if adapter else None


# --- CSV Export ---


# Export column (alias) -> model attribute name
EXPORT_FIELDS = {
    field.alias or name: name for name, field in InventoryItem.model_fields.items()
}


def _export_value(item: InventoryItem, column: str) -> str:
    value = getattr(item, EXPORT_FIELDS[column])
    return "" if value is None else str(value)


def export_csv(items: list[InventoryItem]) -> str:
    """
    Renders the collection with the fixed export header. Values are joined
    with ',' as-is, so a value containing a comma will not re-import cleanly.
    """
    rows = [",".join(settings.EXPORT_COLUMNS)]
    for item in items:
        rows.append(",".join(_export_value(item, col) for col in settings.EXPORT_COLUMNS))
    return "\n".join(rows)


def save_export(items: list[InventoryItem], output_dir: Path = None) -> Path:
    """Writes the export to a dated file and returns its path."""
    output_dir = output_dir or settings.OUTPUT_DIR
    output_dir.mkdir(parents=True, exist_ok=True)
    csv_path = (
        output_dir / f"{settings.EXPORT_FILENAME_BASE}_{utils.get_date_suffix_for_filename()}.csv"
    )
    csv_path.write_text(export_csv(items) + "\n", encoding="utf-8")
    logger.info(f"✅ Inventory export saved to: {csv_path}")
    return csv_path
