"""Dispatch statistics — per-filter match counts, remainder writes, discards."""

from dataclasses import dataclass, field


@dataclass
class DispatchStats:
    records_read: int = 0
    filter_matches: dict[int, int] = field(default_factory=dict)
    remainder_writes: int = 0
    discarded: int = 0

    def record_match(self, position: int) -> None:
        self.filter_matches[position] = self.filter_matches.get(position, 0) + 1

    @property
    def records_written(self) -> int:
        return sum(self.filter_matches.values()) + self.remainder_writes


def format_stats_text(stats: DispatchStats) -> str:
    """Human-readable dispatch summary."""
    lines = [f"Records read: {stats.records_read}"]
    for position in sorted(stats.filter_matches):
        lines.append(f"  filter #{position:<3d} {stats.filter_matches[position]}")
    lines.append(f"  remainder    {stats.remainder_writes}")
    lines.append(f"  discarded    {stats.discarded}")
    return "\n".join(lines)
