# -----------------------------------------------------------------------------
# SVG renderer
# Purpose: Draw one TraceStep as a static SVG frame. Pure function of the
# step's declared fields; the step is never mutated.
# Dispatch is a table keyed by StructureKind. Tree and graph snapshots use an
# explicit "not implemented" renderer that only draws a label.
# -----------------------------------------------------------------------------

from __future__ import annotations
import textwrap
import xml.etree.ElementTree as ET
from typing import Callable, Dict

from .types import DataStructureState, StructureKind, TraceStep

SVG_NS = "http://www.w3.org/2000/svg"
BLOCK_HEIGHT = 150
HEADER_HEIGHT = 60
CELL_HEIGHT = 40
MAX_CELL_WIDTH = 60

COLORS = {
    "text": "#1f2937",
    "muted": "#6b7280",
    "cell": "#f9fafb",
    "border": "#d1d5db",
    "pivot": "hsl(38 92% 50%)",
    "highlight": "hsl(120 60% 50%)",
    "current": "hsl(207 90% 54%)",
    "excluded": "#e5e7eb",
}

Renderer = Callable[[ET.Element, DataStructureState, int], None]


def _text(parent: ET.Element, x: float, y: float, value: str, size: int = 12,
          fill: str = COLORS["text"], bold: bool = False, anchor: str = "start") -> ET.Element:
    el = ET.SubElement(parent, "text", {
        "x": f"{x:g}", "y": f"{y:g}", "fill": fill, "font-size": str(size), "text-anchor": anchor,
    })
    if bold:
        el.set("font-weight", "bold")
    el.text = value
    return el


def _rect(parent: ET.Element, x: float, y: float, w: float, h: float, fill: str, stroke: str) -> ET.Element:
    return ET.SubElement(parent, "rect", {
        "x": f"{x:g}", "y": f"{y:g}", "width": f"{w:g}", "height": f"{h:g}",
        "fill": fill, "stroke": stroke, "stroke-width": "2", "rx": "4",
    })


def _cell_width(count: int, width: int) -> float:
    return min(MAX_CELL_WIDTH, (width - 40) / max(count, 1))


def _array_fill(ds: DataStructureState, index: int) -> str:
    if ds.pivot is not None and index == ds.pivot:
        return COLORS["pivot"]
    if index in ds.highlight:
        return COLORS["highlight"]
    if ds.current is not None and index == ds.current:
        return COLORS["current"]
    if ds.left is not None and ds.right is not None and not (ds.left <= index <= ds.right):
        return COLORS["excluded"]
    return COLORS["cell"]


def render_array(group: ET.Element, ds: DataStructureState, width: int) -> None:
    values = list(ds.data or [])
    cw = _cell_width(len(values), width)
    _text(group, 20, 15, ds.name or "Array", size=14, bold=True)
    for i, v in enumerate(values):
        x = 20 + i * (cw + 2)
        _rect(group, x, 25, cw, CELL_HEIGHT, _array_fill(ds, i), COLORS["border"])
        _text(group, x + cw / 2, 50, str(v), size=14, anchor="middle")
        _text(group, x + cw / 2, 80, str(i), size=10, fill=COLORS["muted"], anchor="middle")
    if ds.left is not None and ds.right is not None and values:
        x1 = 20 + ds.left * (cw + 2)
        x2 = 20 + ds.right * (cw + 2) + cw
        ET.SubElement(group, "line", {"x1": f"{x1:g}", "y1": "95", "x2": f"{x2:g}", "y2": "95",
                                      "stroke": COLORS["muted"], "stroke-width": "2"})
        _text(group, x1, 110, f"L={ds.left}", size=10, fill=COLORS["muted"])
        _text(group, x2, 110, f"R={ds.right}", size=10, fill=COLORS["muted"], anchor="end")


def render_queue(group: ET.Element, ds: DataStructureState, width: int) -> None:
    values = list(ds.data or [])
    cw = _cell_width(max(len(values), 1), width)
    _text(group, 20, 15, f"{ds.name or 'Queue'} (front → rear)", size=14, bold=True)
    if not values:
        _text(group, 20, 50, "empty", fill=COLORS["muted"])
        return
    for i, v in enumerate(values):
        x = 20 + i * (cw + 2)
        fill = COLORS["highlight"] if i in ds.highlight else COLORS["cell"]
        _rect(group, x, 25, cw, CELL_HEIGHT, fill, COLORS["border"])
        _text(group, x + cw / 2, 50, str(v), size=14, anchor="middle")
    _text(group, 20, 85, "front", size=10, fill=COLORS["muted"])
    _text(group, 20 + (len(values) - 1) * (cw + 2) + cw, 85, "rear", size=10, fill=COLORS["muted"], anchor="end")


def render_stack(group: ET.Element, ds: DataStructureState, width: int) -> None:
    values = list(ds.data or [])
    _text(group, 20, 15, f"{ds.name or 'Stack'} (top ↑)", size=14, bold=True)
    cell_h = min(CELL_HEIGHT, (BLOCK_HEIGHT - 30) / max(len(values), 1))
    for depth, v in enumerate(reversed(values)):
        index = len(values) - 1 - depth
        fill = COLORS["highlight"] if index in ds.highlight else COLORS["cell"]
        y = 25 + depth * cell_h
        _rect(group, 20, y, 80, cell_h - 2, fill, COLORS["border"])
        _text(group, 60, y + cell_h / 2 + 4, str(v), size=12, anchor="middle")


def render_linked_list(group: ET.Element, ds: DataStructureState, width: int) -> None:
    values = list(ds.data or [])
    _text(group, 20, 15, ds.name or "Linked list", size=14, bold=True)
    for i, v in enumerate(values):
        x = 20 + i * 90
        fill = COLORS["highlight"] if i in ds.highlight else COLORS["cell"]
        _rect(group, x, 25, 60, CELL_HEIGHT, fill, COLORS["border"])
        _text(group, x + 30, 50, str(v), size=14, anchor="middle")
        if i < len(values) - 1:
            ET.SubElement(group, "line", {"x1": f"{x + 60:g}", "y1": "45", "x2": f"{x + 88:g}", "y2": "45",
                                          "stroke": COLORS["muted"], "stroke-width": "2"})


class NotImplementedRenderer:
    """Label-only renderer for structure kinds that have no drawing yet."""

    def __init__(self, label: str):
        self.label = label

    def __call__(self, group: ET.Element, ds: DataStructureState, width: int) -> None:
        _text(group, 20, 15, f"{self.label}: {ds.name}", size=14, bold=True)
        _text(group, 20, 40, "Visualization not implemented", fill=COLORS["muted"])


RENDERERS: Dict[StructureKind, Renderer] = {
    StructureKind.ARRAY: render_array,
    StructureKind.QUEUE: render_queue,
    StructureKind.STACK: render_stack,
    StructureKind.LINKED_LIST: render_linked_list,
    StructureKind.TREE: NotImplementedRenderer("Tree"),
    StructureKind.GRAPH: NotImplementedRenderer("Graph"),
}


def is_implemented(kind: StructureKind) -> bool:
    renderer = RENDERERS.get(kind)
    return renderer is not None and not isinstance(renderer, NotImplementedRenderer)


def render_step(step: TraceStep, width: int = 800, height: int | None = None) -> str:
    """Return SVG markup for one step; placeholder frame when nothing is drawable."""
    blocks = max(len(step.data_structures), 1)
    height = height or HEADER_HEIGHT + blocks * BLOCK_HEIGHT
    svg = ET.Element("svg", {"xmlns": SVG_NS, "width": str(width), "height": str(height),
                             "viewBox": f"0 0 {width} {height}"})
    root = ET.SubElement(svg, "g")

    _text(root, 20, 25, f"Line {step.line_number + 1}: {step.action.value}", size=16, bold=True)
    for i, line in enumerate(textwrap.wrap(step.description.replace("\n", " "), 80)[:2]):
        _text(root, 20, 45 + i * 16, line, fill=COLORS["muted"])

    if not step.data_structures:
        _text(root, width / 2, HEADER_HEIGHT + BLOCK_HEIGHT / 2, "No data structures to display",
              fill=COLORS["muted"], anchor="middle")
    for i, ds in enumerate(step.data_structures):
        group = ET.SubElement(root, "g", {"transform": f"translate(0, {HEADER_HEIGHT + i * BLOCK_HEIGHT})"})
        renderer = RENDERERS.get(ds.kind)
        if renderer is None:
            _text(group, 20, 15, f"{ds.kind.value}: {ds.name}", size=14, bold=True)
        else:
            renderer(group, ds, width)

    return ET.tostring(svg, encoding="unicode")
