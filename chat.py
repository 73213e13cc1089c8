import logging
import sys

from smartmed import data_handler, settings
from smartmed.assistant import InventoryAssistant
from smartmed.logger import setup_logger
from smartmed.state import AppStore, initial_state, set_inventory

logger = logging.getLogger(__name__)


def run_chat(user_id: str = settings.USER_ID) -> None:
    """Interactive assistant over the user's inventory. Empty line or Ctrl-D quits."""
    store = AppStore(initial_state())

    repository = data_handler.build_inventory_repository()
    if repository is not None:
        result = repository.list_all(user_id)
        if result.ok:
            store.dispatch(set_inventory, result.data)
        else:
            logger.warning(f"⚠️ Using sample inventory: {result.error}")

    assistant = InventoryAssistant(
        store, history=data_handler.build_chat_repository(), user_id=user_id
    )
    logger.info("Ask about your inventory (empty line to quit).")
    while True:
        try:
            query = input("> ")
        except EOFError:
            break
        if not query.strip():
            break
        logger.info(assistant.ask(query).response)


if __name__ == "__main__":
    setup_logger()
    run_chat(*sys.argv[1:2])
