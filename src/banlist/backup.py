import logging
import os

logger = logging.getLogger(__name__)

BACKUP_FILE_NAME = "ubl.backup"


class BackupStore:
    """Keeps the last processed ban-list payload on local disk.

    Both operations are whole-file and never raise: a missing or unreadable
    backup loads as an empty payload and a failed save is only logged.
    """

    def __init__(self, data_dir: str, file_name: str = BACKUP_FILE_NAME):
        self.data_dir = data_dir
        self.path = os.path.join(data_dir, file_name)

    def load(self) -> str:
        """Return the raw ban-list from the backup file, or ``""``."""
        if not os.path.exists(self.path):
            logger.critical(
                "The backup file could not be located. "
                "You are running without UBL protection!"
            )
            return ""
        try:
            # newline="" keeps \r\n intact so the payload round-trips exactly
            with open(self.path, "r", encoding="utf-8", newline="") as f:
                data = f.read()
        except (OSError, UnicodeDecodeError):
            logger.critical(
                "Could not load UBL backup. You are running without UBL protection!",
                exc_info=True,
            )
            return ""
        logger.info("UBL loaded from local backup")
        return data

    def save(self, data: str) -> None:
        """Overwrite the backup file with ``data``.

        This should not be called from the serialized apply context.
        """
        try:
            os.makedirs(self.data_dir, exist_ok=True)
            with open(self.path, "w", encoding="utf-8", newline="") as f:
                f.write(data)
        except OSError:
            logger.error("Failed to save UBL backup to %s", self.path, exc_info=True)
