from .backup import BACKUP_FILE_NAME, BackupStore  # noqa: F401
from .consumer import BanListConsumer, InMemoryBanList  # noqa: F401
from .errors import (  # noqa: F401
    ConfigError,
    ConnectError,
    FetchError,
    ReadError,
    ReadTimeoutError,
)
from .fetcher import fetch_banlist, open_banlist, read_banlist  # noqa: F401
from .parser import ParsedList, parse_banlist  # noqa: F401
from .scheduler import UpdateScheduler  # noqa: F401
from .service import BanlistService  # noqa: F401
from .updater import BanlistUpdater, RefreshOutcome  # noqa: F401
