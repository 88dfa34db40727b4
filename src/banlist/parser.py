import logging
import re
from dataclasses import dataclass
from typing import Optional

logger = logging.getLogger(__name__)

_EOL = re.compile(r"\r?\n")


@dataclass(frozen=True)
class ParsedList:
    """A ban-list split into its header line and entry lines."""

    header: str
    entries: tuple[str, ...]


def split_lines(data: str) -> list[str]:
    """Split on ``\\n`` or ``\\r\\n``, dropping trailing empty lines."""
    lines = _EOL.split(data)
    while lines and not lines[-1]:
        lines.pop()
    return lines


def parse_banlist(data: str) -> Optional[ParsedList]:
    """Parse a raw payload, returning ``None`` if it holds no entries."""
    lines = split_lines(data)
    if len(lines) < 2:
        logger.warning("Banlist is empty!")
        return None
    return ParsedList(header=lines[0], entries=tuple(lines[1:]))
