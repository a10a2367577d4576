"""Record I/O primitives — sources, destinations, and the discard sentinel.

Records travel as raw bytes so output reproduces input byte-for-byte; only
the terminator is removed on read and a single ``\\n`` appended on write.
"""

import logging
from dataclasses import dataclass
from typing import BinaryIO, Generator

logger = logging.getLogger(__name__)

STANDARD_STREAM = "-"

RECORD_TERMINATOR = b"\n"


@dataclass(frozen=True)
class Source:
    name: str
    stream: BinaryIO


@dataclass(frozen=True)
class Destination:
    name: str
    stream: BinaryIO

    def write_record(self, content: bytes) -> None:
        self.stream.write(content + RECORD_TERMINATOR)

    def flush(self) -> None:
        self.stream.flush()


class Discard:
    name = "<discard>"

    def __repr__(self) -> str:
        return "DISCARD"


DISCARD = Discard()


def binary_stream(stream) -> BinaryIO:
    """Return the byte-level stream behind a text stream such as sys.stdout."""
    return getattr(stream, "buffer", stream)


def open_sink(target: str) -> BinaryIO:
    """Open *target* for writing, creating it or truncating existing content."""
    return open(target, "wb")


def open_source(target: str) -> BinaryIO:
    return open(target, "rb")


def strip_terminator(line: bytes) -> bytes:
    """Remove a trailing ``\\n`` or ``\\r\\n``; a bare final line is returned as is."""
    if line.endswith(b"\n"):
        line = line[:-1]
        if line.endswith(b"\r"):
            line = line[:-1]
    return line


def read_records(source: Source) -> Generator[bytes, None, None]:
    """Yield each record of *source* without its terminator.

    A read fault mid-stream ends the stream; records already yielded stand.
    """
    while True:
        try:
            line = source.stream.readline()
        except OSError as exc:
            logger.warning("Read error on %s, treating as end of input: %s", source.name, exc)
            return
        if not line:
            return
        yield strip_terminator(line)
