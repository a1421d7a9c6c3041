# -----------------------------------------------------------------------------
# Synthetic Trace Generator
# Purpose: Fabricate a fixed-shape sequence of TraceSteps for a classified
# category. Nothing here evaluates the submitted program:
#   • sorting   – one quicksort partition around a heuristically chosen pivot
#   • searching – a real binary search over an extracted/default sorted array
#   • queue     – FIFO replay of enqueue/dequeue calls scraped from the source
#   • graph     – DFS over caller-supplied nodes/edges (generic walk otherwise)
#   • others    – generic per-line walk with no state tracking
# Malformed literals or input fall back to hard-coded defaults.
# -----------------------------------------------------------------------------

from __future__ import annotations
import logging
from collections import deque
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple

from .extract import (
    PivotStrategy, QueueOp, detect_pivot_strategy, extract_int_array,
    extract_queue_operations, extract_target,
)
from .tracer import Clock, Tracer
from .types import Action, Category, DataStructureState, StructureKind, TraceStep

logger = logging.getLogger(__name__)

DEFAULT_SORT_ARRAY = [19, 7, 15, 12, 16, 18, 4, 11, 13]
DEFAULT_SEARCH_ARRAY = [1, 3, 5, 7, 9, 11, 13, 15]
DEFAULT_SEARCH_TARGET = 7
DEFAULT_QUEUE_OPS = [QueueOp.enqueue(10), QueueOp.enqueue(20), QueueOp.dequeue(), QueueOp.enqueue(30)]
MIN_SEARCH_ITERATIONS = 5
DEFAULT_MAX_GRAPH_NODES = 200
DEFAULT_MAX_GRAPH_EDGES = 1000
NOT_FOUND_INDEX = -1


@dataclass
class GeneratedTrace:
    steps: List[TraceStep]
    final_state: Any = None


def _fmt(values: List[int]) -> str:
    return "[" + ", ".join(str(v) for v in values) + "]"


def _int_list(value: Any) -> Optional[List[int]]:
    # bool is an int subclass; reject it so `[True, 3]` is treated as malformed
    if not isinstance(value, (list, tuple)) or not value:
        return None
    if not all(isinstance(v, int) and not isinstance(v, bool) for v in value):
        return None
    return list(value)


def _int_value(value: Any) -> Optional[int]:
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    return None


def _queue_ops(value: Any) -> Optional[List[QueueOp]]:
    if isinstance(value, dict):
        value = value.get("operations")
    if not isinstance(value, (list, tuple)) or not value:
        return None
    ops: List[QueueOp] = []
    for item in value:
        if not isinstance(item, dict):
            return None
        kind = str(item.get("type", "")).lower()
        if kind == "enqueue" and _int_value(item.get("value")) is not None:
            ops.append(QueueOp.enqueue(item["value"]))
        elif kind == "dequeue":
            ops.append(QueueOp.dequeue())
        else:
            return None
    return ops


def _graph_input(value: Any, max_nodes: int, max_edges: int) -> Optional[Tuple[int, List[List[int]]]]:
    # Every step snapshots the whole graph, so oversize input is treated as malformed
    if not isinstance(value, dict):
        return None
    nodes = _int_value(value.get("nodes"))
    edges = value.get("edges")
    if nodes is None or not 0 < nodes <= max_nodes or not isinstance(edges, (list, tuple)):
        return None
    if len(edges) > max_edges:
        return None
    out: List[List[int]] = []
    for e in edges:
        pair = _int_list(e)
        if pair is None or len(pair) != 2 or not all(0 <= n < nodes for n in pair):
            return None
        out.append(pair)
    return nodes, out


class TraceGenerator:
    def __init__(self, clock: Optional[Clock] = None, generic_step_limit: int = 0,
                 max_graph_nodes: int = DEFAULT_MAX_GRAPH_NODES,
                 max_graph_edges: int = DEFAULT_MAX_GRAPH_EDGES):
        self.clock = clock
        # generic_step_limit caps the per-line walk; 0 means one step per non-blank line
        self.generic_step_limit = generic_step_limit
        self.max_graph_nodes = max_graph_nodes
        self.max_graph_edges = max_graph_edges

    def generate(self, source_text: str, category: Category | str, input: Any = None) -> GeneratedTrace:
        code = source_text or ""
        try:
            category = Category(category)
        except ValueError:
            category = Category.UNKNOWN

        if category is Category.SORTING:
            return self._sorting(code, input)
        if category is Category.SEARCHING:
            return self._searching(code, input)
        if category is Category.QUEUE:
            return self._queue(code, input)
        if category is Category.GRAPH:
            graph = _graph_input(input, self.max_graph_nodes, self.max_graph_edges)
            if graph is not None:
                return self._graph(*graph)
            if input is not None:
                logger.info("Graph input rejected (malformed or over %d nodes / %d edges)",
                            self.max_graph_nodes, self.max_graph_edges)
        return self._generic(code)

    # ---------------- sorting ----------------

    def _sorting(self, code: str, input: Any) -> GeneratedTrace:
        if isinstance(input, dict):
            input = input.get("array")
        arr = _int_list(input) or extract_int_array(code) or list(DEFAULT_SORT_ARRAY)
        strategy = detect_pivot_strategy(code)
        tr = Tracer(self.clock)

        tr.set_structure(DataStructureState(StructureKind.ARRAY, "array", list(arr), metadata={"size": len(arr)}))
        tr.add("let array = [...]", f"Initial Array: {_fmt(arr)}", Action.INIT_ARRAY, array=list(arr))

        # The strategy only picks which index is narrated as pivot
        pivot_index = strategy.index_for(len(arr))
        pivot = arr[pivot_index]
        tr.update_structure("array", arr, pivot=pivot_index, highlight=[pivot_index])
        tr.add(
            f"pivot = arr[{pivot_index}] = {pivot}",
            f"Choose Pivot = {pivot} ({strategy.value} element, index {pivot_index})",
            Action.CHOOSE_PIVOT, pivot=pivot, pivot_index=pivot_index,
        )

        # Values equal to the pivot are kept in neither partition
        left = [x for x in arr if x < pivot]
        right = [x for x in arr if x > pivot]
        dropped = len(arr) - len(left) - len(right) - 1
        partitioned = left + [pivot] + right
        description = (
            f"Partition the array into two sub-arrays:\n\n"
            f"Left (<{pivot}): {_fmt(left)}\nPivot: {pivot}\nRight (>{pivot}): {_fmt(right)}\n\n"
            f"Result:\n{_fmt(left)} | {pivot} | {_fmt(right)}"
        )
        if dropped:
            description += f"\n\n{dropped} duplicate(s) of the pivot are not kept in either partition."
        tr.update_structure(
            "array", partitioned, pivot=len(left), left=0, right=len(partitioned) - 1,
            metadata={"size": len(partitioned), "dropped": dropped},
        )
        tr.add("partition(arr, low, high)", description, Action.PARTITION, left=list(left), right=list(right))

        if len(left) > 1:
            tr.update_structure(
                "array", partitioned, pivot=len(left), left=0, right=len(left) - 1,
                highlight=list(range(len(left))), metadata={"size": len(partitioned), "dropped": dropped},
            )
            tr.add("quickSort(left)", f"Recursively sort left part {_fmt(left)} -> {_fmt(sorted(left))}",
                   Action.RECURSE_LEFT)
        if len(right) > 1:
            start = len(left) + 1
            tr.update_structure(
                "array", partitioned, pivot=len(left), left=start, right=len(partitioned) - 1,
                highlight=list(range(start, len(partitioned))), metadata={"size": len(partitioned), "dropped": dropped},
            )
            tr.add("quickSort(right)", f"Recursively sort right part {_fmt(right)} -> {_fmt(sorted(right))}",
                   Action.RECURSE_RIGHT)

        final = sorted(left) + [pivot] + sorted(right)
        tr.update_structure("array", final, highlight=list(range(len(final))),
                            metadata={"size": len(final), "dropped": dropped})
        tr.add("return [...quickSort(left), pivot, ...quickSort(right)]", f"Sorted array: {_fmt(final)}",
               Action.SORTED, array=list(final))
        return GeneratedTrace(tr.steps(), final)

    # ---------------- searching ----------------

    def _searching(self, code: str, input: Any) -> GeneratedTrace:
        given = input if isinstance(input, dict) else {}
        arr = sorted(_int_list(given.get("array")) or extract_int_array(code) or DEFAULT_SEARCH_ARRAY)
        target = _int_value(given.get("target"))
        if target is None:
            target = extract_target(code)
        if target is None:
            target = DEFAULT_SEARCH_TARGET
        tr = Tracer(self.clock)

        left, right = 0, len(arr) - 1
        found, found_index = False, NOT_FOUND_INDEX
        tr.set_structure(DataStructureState(StructureKind.ARRAY, "searchArray", list(arr)))
        tr.add(f"binarySearch(arr, {target})", f"Binary Search for {target} in {_fmt(arr)}", Action.INIT,
               line_number=0, left=left, right=right, target=target)

        max_iterations = max(MIN_SEARCH_ITERATIONS, len(arr).bit_length() + 1)
        iterations = 0
        while left <= right and not found and iterations < max_iterations:
            iterations += 1
            mid = (left + right) // 2
            value = arr[mid]
            tr.update_structure("searchArray", arr, left=left, right=right, current=mid, highlight=[mid])
            if value == target:
                found, found_index, branch = True, mid, "found"
                description = f"arr[{mid}] = {value} equals target {target}"
                next_left, next_right = left, right
            elif value < target:
                branch = "right"
                description = f"{value} < {target}, search right half"
                next_left, next_right = mid + 1, right
            else:
                branch = "left"
                description = f"{value} > {target}, search left half"
                next_left, next_right = left, mid - 1
            tr.add(f"mid = ({left} + {right}) // 2 = {mid}", description, Action.COMPARE,
                   left=left, right=right, mid=mid, branch=branch)
            left, right = next_left, next_right

        if found:
            tr.update_structure("searchArray", arr, current=found_index, highlight=[found_index])
            tr.add(f"return {found_index}", f"Found target {target} at index {found_index}!", Action.FOUND,
                   found=True, found_index=found_index)
        else:
            tr.update_structure("searchArray", arr)
            tr.add(f"return {NOT_FOUND_INDEX}", f"Target {target} not found", Action.NOT_FOUND,
                   found=False, found_index=NOT_FOUND_INDEX)
        return GeneratedTrace(tr.steps(), {"found": found, "index": found_index, "target": target})

    # ---------------- queue ----------------

    def _queue(self, code: str, input: Any) -> GeneratedTrace:
        ops = _queue_ops(input) or extract_queue_operations(code) or list(DEFAULT_QUEUE_OPS)
        tr = Tracer(self.clock)
        queue: deque[int] = deque()

        tr.set_structure(DataStructureState(StructureKind.QUEUE, "queue", [], metadata={"front": 0, "rear": 0}))
        tr.add("const queue = []", "Initialize an empty queue", Action.INIT, queue=[])

        for op in ops:
            if op.kind == "enqueue":
                queue.append(op.value)
                tr.update_structure("queue", list(queue), highlight=[len(queue) - 1],
                                    metadata={"front": 0, "rear": len(queue) - 1})
                tr.add(f"queue.enqueue({op.value})", f"Enqueue {op.value} to rear of queue", Action.ENQUEUE,
                       queue=list(queue))
            else:
                if queue:
                    removed = queue.popleft()
                    description = f"Dequeue {removed} from front of queue"
                else:
                    removed = None
                    description = "Dequeue on empty queue: nothing to remove"
                tr.update_structure("queue", list(queue), highlight=[0] if queue else [],
                                    metadata={"front": 0, "rear": max(len(queue) - 1, 0)})
                tr.add("queue.dequeue()", description, Action.DEQUEUE, queue=list(queue), dequeued=removed)
        return GeneratedTrace(tr.steps(), list(queue))

    # ---------------- graph ----------------

    def _graph(self, nodes: int, edges: List[List[int]]) -> GeneratedTrace:
        adjacency: Dict[int, List[int]] = {n: [] for n in range(nodes)}
        for a, b in edges:
            adjacency[a].append(b)
            adjacency[b].append(a)
        visited = [False] * nodes
        order: List[int] = []
        tr = Tracer(self.clock)

        def snapshot(current: Optional[int]) -> None:
            tr.update_structure("graph", {"nodes": nodes, "edges": edges, "visited": list(visited),
                                          "visitOrder": list(order)}, current=current)

        tr.set_structure(DataStructureState(StructureKind.GRAPH, "graph", {}))
        snapshot(0)
        tr.add("dfs(graph, 0)", "Starting DFS traversal from node 0", Action.INIT, visit_order=[])

        def visit(node: int) -> None:
            visited[node] = True
            order.append(node)
            snapshot(node)
            tr.add(f"visit({node})", f"Visiting node {node}", Action.VISIT, current=node, visit_order=list(order))

        # Iterative form of recursive DFS: neighbours in edge-list order
        visit(0)
        stack = [iter(adjacency[0])]
        while stack:
            nxt = next((n for n in stack[-1] if not visited[n]), None)
            if nxt is None:
                stack.pop()
                continue
            visit(nxt)
            stack.append(iter(adjacency[nxt]))

        snapshot(None)
        tr.add("return visited", "DFS traversal completed", Action.DONE, visit_order=list(order))
        return GeneratedTrace(tr.steps(), {"visit_order": order})

    # ---------------- generic ----------------

    def _generic(self, code: str) -> GeneratedTrace:
        tr = Tracer(self.clock)
        for i, line in enumerate(code.splitlines()):
            if not line.strip():
                continue
            if self.generic_step_limit and len(tr.steps()) >= self.generic_step_limit:
                logger.debug("Generic walk truncated at %d steps", self.generic_step_limit)
                break
            tr.add(line, f"Executing line {i + 1}", Action.EXECUTE, line_number=i)
        return GeneratedTrace(tr.steps(), None)
