"""Aggregate statistics entities."""

from dataclasses import dataclass, field


@dataclass(frozen=True)
class ModeStatsEntity:
    """Statistics for a single generation mode."""

    count: int = 0
    hits: int = 0
    cost_saved: float = 0.0


@dataclass(frozen=True)
class CacheStatsEntity:
    """Aggregate cache statistics.

    ``hit_rate`` is a percentage: ``100 * total_hits / (total_hits + total_entries)``.
    Every entry counts as the one generation that filled it, so an entry
    that was never read contributes a miss and no hits.
    """

    total_entries: int = 0
    total_hits: int = 0
    total_cost_saved: float = 0.0
    by_mode: dict[str, ModeStatsEntity] = field(default_factory=dict)

    @property
    def hit_rate(self) -> float:
        lookups = self.total_hits + self.total_entries
        if lookups == 0:
            return 0.0
        return round(100 * self.total_hits / lookups, 2)
