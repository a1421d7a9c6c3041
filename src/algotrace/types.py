# -----------------------------------------------------------------------------
# Types module: Shared dataclasses for the trace pipeline
# Purpose:
#   Define structured representations for detection results, trace steps,
#   data-structure snapshots and the final trace result used across the
#   classifier, generator, renderer and API layers.
#   `to_dict()` methods produce the camelCase wire format consumed by the UI.
# -----------------------------------------------------------------------------

from __future__ import annotations
import copy
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import List, Dict, Any, Optional


class Category(str, Enum):
    SORTING = "sorting"
    SEARCHING = "searching"
    GRAPH = "graph"
    TREE = "tree"
    RECURSION = "recursion"
    DYNAMIC_PROGRAMMING = "dynamic-programming"
    QUEUE = "queue"
    STACK = "stack"
    UNKNOWN = "unknown"


class StructureKind(str, Enum):
    ARRAY = "array"
    QUEUE = "queue"
    STACK = "stack"
    TREE = "tree"
    GRAPH = "graph"
    LINKED_LIST = "linkedlist"


class Action(str, Enum):
    INIT = "INIT"
    INIT_ARRAY = "INIT_ARRAY"
    CHOOSE_PIVOT = "CHOOSE_PIVOT"
    PARTITION = "PARTITION"
    RECURSE_LEFT = "RECURSE_LEFT"
    RECURSE_RIGHT = "RECURSE_RIGHT"
    SORTED = "SORTED"
    COMPARE = "COMPARE"
    FOUND = "FOUND"
    NOT_FOUND = "NOT_FOUND"
    ENQUEUE = "ENQUEUE"
    DEQUEUE = "DEQUEUE"
    VISIT = "VISIT"
    DONE = "DONE"
    EXECUTE = "EXECUTE"


@dataclass
class DataStructureState:
    """
    Renderer-facing snapshot of one named variable.
    - kind: tag selecting the renderer (array, queue, stack, ...)
    - data: payload whose shape depends on kind (list for array/queue/stack,
      dict for graph/tree)
    - pivot/left/right: only meaningful for array snapshots
    """
    kind: StructureKind
    name: str
    data: Any
    highlight: List[int] = field(default_factory=list)
    pivot: Optional[int] = None
    left: Optional[int] = None
    right: Optional[int] = None
    current: Optional[int] = None
    metadata: Dict[str, Any] = field(default_factory=dict)

    def with_update(self, **changes: Any) -> "DataStructureState":
        # Deep copy payloads so earlier snapshots never see later mutations
        return copy.deepcopy(replace(self, **changes))

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {
            "type": self.kind.value,
            "name": self.name,
            "data": copy.deepcopy(self.data),
            "highlight": list(self.highlight),
            "metadata": dict(self.metadata),
        }
        for key in ("pivot", "left", "right", "current"):
            value = getattr(self, key)
            if value is not None:
                out[key] = value
        return out

    @staticmethod
    def from_dict(d: Dict[str, Any]) -> "DataStructureState":
        return DataStructureState(
            kind=StructureKind(d["type"]),
            name=str(d.get("name", "")),
            data=d.get("data"),
            highlight=list(d.get("highlight") or []),
            pivot=d.get("pivot"),
            left=d.get("left"),
            right=d.get("right"),
            current=d.get("current"),
            metadata=dict(d.get("metadata") or {}),
        )


@dataclass
class StackFrame:
    function: str
    variables: Dict[str, Any]
    line_number: int

    def to_dict(self) -> Dict[str, Any]:
        return {"function": self.function, "variables": dict(self.variables), "lineNumber": self.line_number}


@dataclass
class MemoryState:
    heap: Dict[str, Any] = field(default_factory=dict)
    stack: List[StackFrame] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {"heap": dict(self.heap), "stack": [f.to_dict() for f in self.stack]}


@dataclass
class TraceStep:
    """
    One fabricated frame of a simulated execution.
    Line numbers and line text are illustrative, not tied to the submitted source.
    """
    line_number: int
    line_content: str
    variables: Dict[str, Any]
    data_structures: List[DataStructureState]
    description: str
    action: Action
    timestamp: int
    memory_state: MemoryState = field(default_factory=MemoryState)

    def structure(self, name: str) -> Optional[DataStructureState]:
        return next((ds for ds in self.data_structures if ds.name == name), None)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "lineNumber": self.line_number,
            "lineContent": self.line_content,
            "variables": dict(self.variables),
            "dataStructures": [ds.to_dict() for ds in self.data_structures],
            "description": self.description,
            "action": self.action.value,
            "timestamp": self.timestamp,
            "memoryState": self.memory_state.to_dict(),
        }

    @staticmethod
    def from_dict(d: Dict[str, Any]) -> "TraceStep":
        # Inverse of to_dict for steps posted back by the UI (renderer endpoint)
        mem = d.get("memoryState") or {}
        return TraceStep(
            line_number=int(d.get("lineNumber", 0)),
            line_content=str(d.get("lineContent", "")),
            variables=dict(d.get("variables") or {}),
            data_structures=[DataStructureState.from_dict(x) for x in d.get("dataStructures") or []],
            description=str(d.get("description", "")),
            action=Action(d.get("action", Action.EXECUTE.value)),
            timestamp=int(d.get("timestamp", 0)),
            memory_state=MemoryState(
                heap=dict(mem.get("heap") or {}),
                stack=[StackFrame(f.get("function", "main"), dict(f.get("variables") or {}), int(f.get("lineNumber", 0)))
                       for f in mem.get("stack") or []],
            ),
        )


@dataclass
class DetectionResult:
    # confidence is a heuristic score in [0, 1], not a calibrated probability
    category: Category
    confidence: float
    details: str
    matches: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "algorithmType": self.category.value,
            "confidence": self.confidence,
            "details": self.details,
            "matches": list(self.matches),
        }


@dataclass
class ComplexityAnalysis:
    time_complexity: str
    space_complexity: str
    operations: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "timeComplexity": self.time_complexity,
            "spaceComplexity": self.space_complexity,
            "operations": self.operations,
        }


@dataclass
class TraceResult:
    # execution_time / memory_usage are synthetic, never measured
    success: bool
    algorithm_type: Category
    language: str
    execution_time: float
    memory_usage: float
    steps: List[TraceStep]
    final_state: Any
    complexity_analysis: ComplexityAnalysis

    def to_dict(self) -> Dict[str, Any]:
        return {
            "success": self.success,
            "algorithmType": self.algorithm_type.value,
            "language": self.language,
            "executionTime": self.execution_time,
            "memoryUsage": self.memory_usage,
            "steps": [s.to_dict() for s in self.steps],
            "finalState": copy.deepcopy(self.final_state),
            "complexityAnalysis": self.complexity_analysis.to_dict(),
        }
