# -----------------------------------------------------------------------------
# Tracing utility
# Purpose:
#   Append-only step collector used by the trace generator. Holds the current
#   variables and named data-structure snapshots, and freezes a copy of them
#   into every recorded TraceStep.
# -----------------------------------------------------------------------------

from __future__ import annotations
import copy
import time
from typing import Any, Callable, Dict, List, Optional
from .types import Action, DataStructureState, MemoryState, StackFrame, TraceStep

Clock = Callable[[], int]

def wall_clock_ms() -> int:
    return int(time.time() * 1000)

class Tracer:
    def __init__(self, clock: Optional[Clock] = None, function: str = "main"):
        self._clock = clock or wall_clock_ms
        self._function = function
        self._steps: List[TraceStep] = []
        self._structures: Dict[str, DataStructureState] = {}
        self.variables: Dict[str, Any] = {}
        self.line = 0

    def set_structure(self, state: DataStructureState) -> None:
        self._structures[state.name] = state.with_update()

    def update_structure(self, name: str, data: Any = None, **highlights: Any) -> None:
        # Replace payload and highlight fields; fields not named are cleared
        existing = self._structures.get(name)
        if existing is None:
            return
        changes: Dict[str, Any] = {
            "highlight": [], "pivot": None, "left": None, "right": None, "current": None,
        }
        changes.update(highlights)
        if data is not None:
            changes["data"] = list(data) if isinstance(data, (list, tuple)) else data
        self._structures[name] = existing.with_update(**changes)

    def add(self, line_content: str, description: str, action: Action,
            line_number: Optional[int] = None, **variables: Any) -> TraceStep:
        """Record one step; `line_number` defaults to an auto-incrementing counter."""
        self.variables.update(variables)
        if line_number is None:
            line_number = self.line
            self.line += 1
        snapshot = copy.deepcopy(self.variables)
        step = TraceStep(
            line_number=line_number,
            line_content=line_content,
            variables=snapshot,
            data_structures=[s.with_update() for s in self._structures.values()],
            description=description,
            action=action,
            timestamp=self._clock(),
            memory_state=MemoryState(
                heap=copy.deepcopy(snapshot),
                stack=[StackFrame(self._function, copy.deepcopy(snapshot), line_number)],
            ),
        )
        self._steps.append(step)
        return step

    def steps(self) -> List[TraceStep]:
        return list(self._steps)
