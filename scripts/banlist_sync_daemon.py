import logging
import os
import threading

from src.banlist.service import BanlistService

CONFIG_FILE = os.getenv("BANLIST_CONFIG_FILE", "config.yml")
DATA_DIR = os.getenv("BANLIST_DATA_DIR", "data")

logger = logging.getLogger(__name__)


def run_daemon(
    stop_event: threading.Event | None = None, service: BanlistService | None = None
) -> None:
    """Keep the ban-list updated until ``stop_event`` is set."""
    if stop_event is None:
        stop_event = threading.Event()
    if service is None:
        service = BanlistService(DATA_DIR, config_path=CONFIG_FILE)
    service.enable()
    try:
        # wake up periodically so KeyboardInterrupt is delivered promptly
        while not stop_event.wait(1.0):
            continue
    finally:
        service.disable()


if __name__ == "__main__":
    logging.basicConfig(
        level=logging.INFO, format="%(asctime)s - %(levelname)s - %(message)s"
    )
    try:
        run_daemon()
    except KeyboardInterrupt:
        logger.info("Ban-list sync daemon stopped")
