import logging
import sys

from smartmed import data_handler, settings, stats
from smartmed.logger import setup_logger

logger = logging.getLogger(__name__)


def run_dashboard(user_id: str = settings.USER_ID) -> int:
    """Loads the user's persisted inventory and prints the dashboard numbers."""
    logger.info("--- SmartMed Inventory Dashboard ---")

    repository = data_handler.build_inventory_repository()
    if repository is None:
        logger.error("❌ Cannot load inventory without database credentials.")
        return 1

    result = repository.list_all(user_id)
    if not result.ok:
        logger.error(f"❌ Could not load inventory: {result.error}")
        return 1

    items = result.data
    overview = stats.summary(items)
    logger.info(f"Total items:       {overview['total_items']}")
    logger.info(f"Inventory value:   ${overview['total_value']:,.2f}")
    logger.info(
        f"Low stock:         {overview['low_stock_count']} "
        f"({overview['low_stock_percentage']}%)"
    )
    logger.info(
        f"Expiring soon:     {overview['expiring_count']} "
        f"(next {settings.DASHBOARD_EXPIRY_MONTHS} months)"
    )

    logger.info("\n--- Top Categories ---")
    for category, count in overview["top_categories"]:
        logger.info(f"{category}: {count}")

    logger.info("\n--- Low Stock Alerts ---")
    alerts = stats.low_stock_alerts(items)
    if not alerts:
        logger.info("All items are above their minimum stock.")
    for item in alerts:
        logger.info(f"{item.name}: {item.current_stock} / {item.minimum_stock}")

    return 0


if __name__ == "__main__":
    setup_logger()
    sys.exit(run_dashboard(*sys.argv[1:2]))
