"""ConfigBuilder: validates filters and opens every resource before dispatch starts.

Files opened here are registered with an ExitStack, so leaving the builder's
``with`` block releases them on every exit path. Standard streams are never
closed.
"""

import logging
import os
import re
import sys
from contextlib import ExitStack
from typing import BinaryIO

from regexfilter.destinations import (
    DISCARD,
    STANDARD_STREAM,
    Destination,
    Source,
    binary_stream,
    open_sink,
    open_source,
)
from regexfilter.errors import (
    DestinationOpenError,
    DuplicateOptionError,
    NoFiltersError,
    PatternCompileError,
    SourceOpenError,
)
from regexfilter.models import Configuration, FilterEntry, OptionKind, RemainderMode

logger = logging.getLogger(__name__)

STDIN_NAME = "<stdin>"
STDOUT_NAME = "<stdout>"


def compile_pattern(position: int, pattern_source: str) -> re.Pattern:
    try:
        return re.compile(pattern_source)
    except re.error as exc:
        raise PatternCompileError(position, pattern_source, str(exc)) from exc


class ConfigBuilder:
    def __init__(self, stdin: BinaryIO | None = None, stdout: BinaryIO | None = None):
        self._stdin = stdin
        self._stdout = stdout
        self._resources = ExitStack()
        self._filters: list[FilterEntry] = []
        self._sinks: dict[str, Destination] = {}
        self._source: Source | None = None
        self._remainder = None

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()
        return False

    def close(self) -> None:
        """Flush and release every file this builder opened."""
        self._resources.close()

    def _standard_output(self) -> Destination:
        if STANDARD_STREAM not in self._sinks:
            stream = self._stdout if self._stdout is not None else binary_stream(sys.stdout)
            self._sinks[STANDARD_STREAM] = Destination(STDOUT_NAME, stream)
        return self._sinks[STANDARD_STREAM]

    def _standard_input(self) -> Source:
        stream = self._stdin if self._stdin is not None else binary_stream(sys.stdin)
        return Source(STDIN_NAME, stream)

    def _open_destination(self, position: int | None, target: str) -> Destination:
        """Open *target* once per run; later references share the same handle."""
        if target == STANDARD_STREAM:
            return self._standard_output()

        key = os.path.realpath(target)
        if key in self._sinks:
            logger.debug("Reusing open destination %s", target)
            return self._sinks[key]

        try:
            stream = open_sink(target)
        except OSError as exc:
            raise DestinationOpenError(position, target, exc.strerror or str(exc)) from exc
        self._resources.enter_context(stream)
        logger.debug("Opened destination %s", target)

        destination = Destination(target, stream)
        self._sinks[key] = destination
        return destination

    def add_filter(self, pattern_source: str, target: str) -> FilterEntry:
        """Compile a pattern, open its destination and append the filter entry."""
        position = len(self._filters) + 1
        pattern = compile_pattern(position, pattern_source)
        destination = self._open_destination(position, target)
        entry = FilterEntry(position=position, pattern=pattern, destination=destination)
        self._filters.append(entry)
        return entry

    def set_input(self, target: str) -> Source:
        if self._source is not None:
            raise DuplicateOptionError(OptionKind.INFILE.option_name)

        if target == STANDARD_STREAM:
            self._source = self._standard_input()
            return self._source

        try:
            stream = open_source(target)
        except OSError as exc:
            raise SourceOpenError(target, exc.strerror or str(exc)) from exc
        self._resources.enter_context(stream)
        logger.debug("Opened input %s", target)

        self._source = Source(target, stream)
        return self._source

    def set_remainder(self, mode: RemainderMode, target: str | None = None):
        if self._remainder is not None:
            raise DuplicateOptionError(OptionKind.REMAINDER.option_name)

        if mode is RemainderMode.DISCARD:
            self._remainder = DISCARD
        else:
            if target is None:
                raise ValueError("remainder mode FILE requires a target")
            self._remainder = self._open_destination(None, target)
        return self._remainder

    def finalize(self) -> Configuration:
        """Apply defaults and return the immutable Configuration.

        Builder state is left untouched, so repeated calls resolve identically.
        """
        if not self._filters:
            raise NoFiltersError()

        source = self._source if self._source is not None else self._standard_input()
        remainder = self._remainder if self._remainder is not None else self._standard_output()
        return Configuration(
            filters=tuple(self._filters),
            source=source,
            remainder=remainder,
        )
