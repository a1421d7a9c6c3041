# -----------------------------------------------------------------------------
# Literal extraction helpers
# Purpose: Best-effort regex scraping of literals from arbitrary source text
# (an integer array, a search target, queue operations, a pivot idiom).
# Every helper returns None when nothing usable is found; none of them raise.
# -----------------------------------------------------------------------------

from __future__ import annotations
import re
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional

# First bracketed list of non-negative integers, e.g. [19, 7, 15]
_INT_ARRAY = re.compile(r"\[(\d+(?:\s*,\s*\d+)*)\]")
_TARGET = re.compile(r"target\s*=\s*(\d+)|find\s*\(\s*(\d+)\s*\)")
_ENQUEUE = re.compile(r"enqueue\s*\(\s*(\d+)\s*\)")
# Midpoint idioms across JS/Java/C++/Python
_MIDDLE_PIVOT = re.compile(r"length\s*/\s*2|size\(\s*\)\s*/\s*2|len\([^)]*\)\s*//?\s*2")


class PivotStrategy(str, Enum):
    FIRST = "first"
    MIDDLE = "middle"
    LAST = "last"

    def index_for(self, n: int) -> int:
        if n <= 0:
            return 0
        if self is PivotStrategy.FIRST:
            return 0
        if self is PivotStrategy.MIDDLE:
            return n // 2
        return n - 1


@dataclass
class QueueOp:
    kind: str                   # "enqueue" | "dequeue"
    value: Optional[int] = None

    @staticmethod
    def enqueue(value: int) -> "QueueOp": return QueueOp("enqueue", value)

    @staticmethod
    def dequeue() -> "QueueOp": return QueueOp("dequeue")


def extract_int_array(code: str) -> Optional[List[int]]:
    m = _INT_ARRAY.search(code or "")
    if not m:
        return None
    return [int(n.strip()) for n in m.group(1).split(",")]


def extract_target(code: str) -> Optional[int]:
    m = _TARGET.search(code or "")
    if not m:
        return None
    return int(m.group(1) or m.group(2))


def extract_queue_operations(code: str) -> Optional[List[QueueOp]]:
    """
    Line scan for enqueue(n) / dequeue() calls.
    An `enqueue` line without an integer literal is skipped.
    """
    ops: List[QueueOp] = []
    for line in (code or "").splitlines():
        if "enqueue" in line:
            m = _ENQUEUE.search(line)
            if m:
                ops.append(QueueOp.enqueue(int(m.group(1))))
        elif "dequeue" in line:
            ops.append(QueueOp.dequeue())
    return ops or None


def detect_pivot_strategy(code: str) -> PivotStrategy:
    text = code or ""
    if _MIDDLE_PIVOT.search(text):
        return PivotStrategy.MIDDLE
    if "[0]" in text:
        return PivotStrategy.FIRST
    return PivotStrategy.LAST
