"""Resolved run parameters — frozen once the matcher table is finalized."""

import re
from dataclasses import dataclass
from enum import Enum

from regexfilter.destinations import Destination, Source, Discard


class RemainderMode(Enum):
    FILE = "file"
    DISCARD = "discard"


@dataclass(frozen=True)
class FilterEntry:
    position: int  # 1-based, diagnostics only
    pattern: re.Pattern
    destination: Destination


@dataclass(frozen=True)
class Configuration:
    filters: tuple[FilterEntry, ...]
    source: Source
    remainder: Destination | Discard

    def destinations(self) -> list[Destination]:
        """Distinct concrete destinations, in first-use order."""
        seen = []
        for entry in self.filters:
            if entry.destination not in seen:
                seen.append(entry.destination)
        if isinstance(self.remainder, Destination) and self.remainder not in seen:
            seen.append(self.remainder)
        return seen


class OptionKind(Enum):
    MATCH = ("match", "m")
    INFILE = ("infile", "i")
    REMAINDER = ("remainder", "r")

    @property
    def option_name(self) -> str:
        return self.value[0]
