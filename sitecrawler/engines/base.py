from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Dict, FrozenSet, Optional


class CrawlState(str, enum.Enum):
    IDLE = "idle"
    SEEDED = "seeded"
    RUNNING = "running"
    DRAINING = "draining"
    TERMINATED = "terminated"


@dataclass
class CrawlReport:
    seed_url: str
    state: CrawlState = CrawlState.IDLE
    visited: FrozenSet[str] = frozenset()
    pages_dequeued: int = 0
    # Frontier insertions, including repeats dropped on dequeue
    pages_enqueued: int = 0
    fetch_failures: Dict[str, str] = field(default_factory=dict)  # url -> reason
    dropped_candidates: Dict[str, int] = field(default_factory=dict)  # reason -> count
    budget_exhausted: bool = False
    timed_out: bool = False
    duration: Optional[float] = None

    @property
    def visited_count(self) -> int:
        return len(self.visited)
