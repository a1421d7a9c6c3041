# -----------------------------------------------------------------------------
# Synthetic metrics
# Purpose: Produce the fabricated execution-time / memory numbers attached to
# a TraceResult. Nothing is measured; the default source draws from a random
# generator, tests inject FixedMetrics for deterministic output.
# -----------------------------------------------------------------------------

from __future__ import annotations
import math
import random
from typing import Any, List, Protocol, Tuple
from .types import Category, TraceStep


class MetricsSource(Protocol):
    def measure(self, category: Category, steps: List[TraceStep], final_state: Any) -> Tuple[float, float]:
        """Return (execution_time_ms, memory_bytes)."""
        ...


def _size(final_state: Any) -> int:
    if isinstance(final_state, list):
        return len(final_state)
    return 0


class RandomMetrics:
    def __init__(self, rng: random.Random | None = None):
        self.rng = rng or random.Random()

    def measure(self, category: Category, steps: List[TraceStep], final_state: Any) -> Tuple[float, float]:
        n = _size(final_state)
        if category is Category.SORTING:
            return self.rng.random() * 100 + 50, 1024 + n * 4
        if category is Category.SEARCHING:
            first = steps[0].structure("searchArray") if steps else None
            length = len(first.data) if first else 1
            return math.log2(max(length, 1)) * 10, 256 + length * 4
        if category is Category.QUEUE:
            return max(len(steps) - 1, 0) * 10, 512 + n * 4
        return self.rng.random() * 100 + 10, self.rng.random() * 1000 + 500


class FixedMetrics:
    def __init__(self, execution_time: float = 0.0, memory_usage: float = 0.0):
        self.execution_time = execution_time
        self.memory_usage = memory_usage

    def measure(self, category: Category, steps: List[TraceStep], final_state: Any) -> Tuple[float, float]:
        return self.execution_time, self.memory_usage
