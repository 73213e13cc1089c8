import logging
import sys

from smartmed import data_handler, settings
from smartmed.logger import setup_logger

logger = logging.getLogger(__name__)


def run_export(user_id: str = settings.USER_ID) -> int:
    """Writes the user's persisted inventory to a dated CSV in OUTPUT_DIR."""
    repository = data_handler.build_inventory_repository()
    if repository is None:
        return 1

    result = repository.list_all(user_id)
    if not result.ok:
        logger.error(f"❌ Export aborted: {result.error}")
        return 1

    data_handler.save_export(result.data)
    return 0


if __name__ == "__main__":
    setup_logger()
    sys.exit(run_export(*sys.argv[1:2]))
