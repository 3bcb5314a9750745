"""Processing metrics for KDL build and emit operations."""

import time
from dataclasses import dataclass, field
from typing import Any, Dict


@dataclass
class ProcessingMetrics:
    """Counters collected while building or emitting a single document."""

    events_processed: int = 0
    nodes_processed: int = 0
    max_depth: int = 0
    processing_time_ms: float = 0.0
    started_at: float = field(default_factory=time.time)

    @property
    def events_per_second(self) -> float:
        """Calculate events handled per second."""
        if self.processing_time_ms <= 0:
            return 0.0
        return (self.events_processed * 1000.0) / self.processing_time_ms

    def record_depth(self, depth: int) -> None:
        """Track the deepest nesting level seen."""
        if depth > self.max_depth:
            self.max_depth = depth

    def finish(self) -> None:
        """Stamp the elapsed time since ``started_at``."""
        self.processing_time_ms = (time.time() - self.started_at) * 1000

    def to_dict(self) -> Dict[str, Any]:
        """Convert metrics to a dictionary suitable for log ``extra`` data."""
        return {
            "events_processed": self.events_processed,
            "nodes_processed": self.nodes_processed,
            "max_depth": self.max_depth,
            "processing_time_ms": self.processing_time_ms,
        }
