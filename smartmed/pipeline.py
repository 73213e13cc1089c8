import logging
from dataclasses import dataclass
from datetime import date
from enum import Enum
from pathlib import Path
from typing import Optional

from . import parsers, settings, stats
from .data_handler import InventoryRepository
from .errors import CsvParseError, MalformedFileError
from .normalizer import normalize_records
from .schemas import InventoryItem, Notification, RawRecord
from .state import AppStore, add_notification, set_inventory

logger = logging.getLogger(__name__)


class UploadStatus(str, Enum):
    UPLOADED = "uploaded"
    SAVED_LOCALLY = "saved_locally"
    FAILED = "failed"


@dataclass
class UploadOutcome:
    status: UploadStatus
    item_count: int = 0
    message: str = ""


class UploadPipeline:
    """
    Turns one uploaded CSV into the current inventory.
    Follows an Extract -> Transform -> Load pattern: read and split the file,
    normalize every row, then replace the in-memory collection followed by
    the owner's persisted rows.
    """

    def __init__(
        self,
        store: AppStore,
        repository: Optional[InventoryRepository],
        user_id: str = settings.USER_ID,
        expiry_window: int = settings.EXPIRY_WINDOW,
        expiry_unit: str = settings.EXPIRY_UNIT,
        today: date = None,
    ):
        self.store = store
        self.repository = repository
        self.user_id = user_id
        self.expiry_window = expiry_window
        self.expiry_unit = settings.parse_expiry_unit(expiry_unit)
        self.today = today

    def run(self, file_path: Path) -> UploadOutcome:
        logger.info(f"🚀 STEP: UPLOAD {Path(file_path).name}")
        logger.info("-" * 30)

        # --- 1. EXTRACT ---
        try:
            raw_records = self.extract(file_path)
        except (MalformedFileError, CsvParseError) as e:
            logger.error(f"❌ Failed to process CSV file: {e.message}")
            return UploadOutcome(UploadStatus.FAILED, message=e.message)

        # --- 2. TRANSFORM ---
        items = self.transform(raw_records)

        # --- 3. LOAD ---
        outcome = self.load(items)
        logger.info(f"✅ Upload finished: {outcome.status.value} ({outcome.item_count} items).")
        logger.info("=" * 60)
        return outcome

    def extract(self, file_path: Path) -> list[RawRecord]:
        text = parsers.read_upload(Path(file_path))
        return parsers.parse_csv(text)

    def transform(self, raw_records: list[RawRecord]) -> list[InventoryItem]:
        logger.info("Normalizing rows...")
        return normalize_records(raw_records)

    def load(self, items: list[InventoryItem]) -> UploadOutcome:
        """
        Replaces the in-memory inventory first, then the persisted copy.
        A storage failure leaves the new in-memory inventory in place.
        """
        self.store.dispatch(set_inventory, items)
        self.notify(items)

        if self.repository is None:
            message = "Data loaded locally; persistence is not configured."
            logger.warning(f"⚠️ {message}")
            return UploadOutcome(UploadStatus.SAVED_LOCALLY, len(items), message)

        result = self.repository.replace_all(self.user_id, items)
        if not result.ok:
            message = f"Data loaded locally but not saved to your account: {result.error}"
            logger.warning(f"⚠️ {message}")
            return UploadOutcome(UploadStatus.SAVED_LOCALLY, len(items), message)

        return UploadOutcome(
            UploadStatus.UPLOADED,
            len(items),
            f"{len(items)} items imported and saved to your account.",
        )

    def notify(self, items: list[InventoryItem]) -> None:
        """Raises alerts for the fresh inventory, as allowed by the user's preferences."""
        preferences = self.store.state.preferences

        if preferences.low_stock:
            low = [item for item in items if stats.is_low_stock(item)]
            if low:
                self._alert(
                    "Low stock alert",
                    f"{len(low)} items at or below minimum stock: "
                    + ", ".join(item.name for item in low[:5]),
                    "low-stock",
                )

        if preferences.expiring:
            expiring = stats.expiring_items(
                items, self.expiry_window, self.expiry_unit, self.today
            )
            if expiring:
                self._alert(
                    "Items expiring soon",
                    f"{len(expiring)} items expire within {self.expiry_window} {self.expiry_unit}.",
                    "expiring",
                )

        if preferences.reorder:
            empty = [item for item in items if item.current_stock == 0]
            if empty:
                self._alert(
                    "Reorder required",
                    f"{len(empty)} items are out of stock.",
                    "reorder",
                )

    def _alert(self, title: str, message: str, kind: str) -> None:
        logger.info(f"🔔 {title}: {message}")
        self.store.dispatch(
            add_notification, Notification(title=title, message=message, type=kind)
        )
