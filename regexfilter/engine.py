"""Dispatch loop — routes each record to the first matching filter's destination."""

import logging
from typing import Sequence

from regexfilter.destinations import DISCARD, read_records
from regexfilter.models import Configuration, FilterEntry
from regexfilter.stats import DispatchStats

logger = logging.getLogger(__name__)


def record_text(record: bytes) -> str:
    """Decode a record for matching; undecodable bytes survive as surrogates."""
    return record.decode("utf-8", "surrogateescape")


def first_match(filters: Sequence[FilterEntry], record: bytes) -> FilterEntry | None:
    """Return the lowest-positioned filter whose pattern occurs anywhere in *record*.

    Later filters are never consulted once one matches.
    """
    text = record_text(record)
    for entry in filters:
        if entry.pattern.search(text):
            return entry
    return None


def dispatch(config: Configuration, flush_each_record: bool = False) -> DispatchStats:
    """Read records until end of input, writing each to exactly one destination."""
    stats = DispatchStats()

    for record in read_records(config.source):
        stats.records_read += 1

        entry = first_match(config.filters, record)
        if entry is not None:
            destination = entry.destination
            stats.record_match(entry.position)
        elif config.remainder is DISCARD:
            stats.discarded += 1
            continue
        else:
            destination = config.remainder
            stats.remainder_writes += 1

        destination.write_record(record)
        if flush_each_record:
            destination.flush()

    for destination in config.destinations():
        destination.flush()

    logger.info(
        "Dispatched %d record(s): %d written, %d discarded",
        stats.records_read, stats.records_written, stats.discarded,
    )
    return stats
