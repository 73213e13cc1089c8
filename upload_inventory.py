import argparse
import logging
import sys
from pathlib import Path

from smartmed import data_handler, settings
from smartmed.logger import setup_logger
from smartmed.pipeline import UploadPipeline, UploadStatus
from smartmed.state import AppStore, initial_state, unread_count

logger = logging.getLogger(__name__)


def run_upload(file_path: Path, user_id: str = settings.USER_ID) -> int:
    """Uploads one CSV for a user. Exit code 0 only if it was also persisted."""
    store = AppStore(initial_state(sample=False))
    pipeline = UploadPipeline(
        store, data_handler.build_inventory_repository(), user_id=user_id
    )
    outcome = pipeline.run(file_path)

    for notification in store.state.notifications:
        logger.info(f"[{notification.type}] {notification.title}: {notification.message}")
    logger.info(f"{unread_count(store.state)} unread notifications.")

    if outcome.status is UploadStatus.FAILED:
        return 1
    logger.info(outcome.message)
    return 0 if outcome.status is UploadStatus.UPLOADED else 2


if __name__ == "__main__":
    setup_logger()
    parser = argparse.ArgumentParser(description="Upload an inventory CSV.")
    parser.add_argument("file", type=Path, help="CSV file to upload")
    parser.add_argument("--user", default=settings.USER_ID, help="owner of the inventory")
    args = parser.parse_args()
    sys.exit(run_upload(args.file, args.user))
