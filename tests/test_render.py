import copy
import xml.etree.ElementTree as ET
from algotrace.generator import TraceGenerator
from algotrace.render import is_implemented, render_step
from algotrace.types import Action, DataStructureState, StructureKind, TraceStep

def _step(*structures, description="demo"):
    return TraceStep(line_number=2, line_content="x", variables={}, data_structures=list(structures),
                     description=description, action=Action.EXECUTE, timestamp=0)

def _texts(svg):
    root = ET.fromstring(svg)
    return [el.text for el in root.iter() if el.tag.endswith("text")]

def test_placeholder_when_no_structures():
    svg = render_step(_step())
    texts = _texts(svg)
    assert "No data structures to display" in texts
    assert "Line 3: EXECUTE" in texts

def test_array_cells_and_bounds():
    ds = DataStructureState(StructureKind.ARRAY, "arr", [4, 8, 15], pivot=1, left=0, right=2)
    texts = _texts(render_step(_step(ds)))
    assert {"4", "8", "15"} <= set(texts)
    assert "L=0" in texts and "R=2" in texts

def test_queue_and_stack_rendering():
    empty = DataStructureState(StructureKind.QUEUE, "queue", [])
    assert "empty" in _texts(render_step(_step(empty)))
    stack = DataStructureState(StructureKind.STACK, "stack", [1, 2])
    assert {"1", "2"} <= set(_texts(render_step(_step(stack))))

def test_tree_and_graph_are_not_implemented():
    assert not is_implemented(StructureKind.TREE)
    assert not is_implemented(StructureKind.GRAPH)
    assert is_implemented(StructureKind.ARRAY)
    graph = DataStructureState(StructureKind.GRAPH, "g", {"nodes": 2})
    assert "Visualization not implemented" in _texts(render_step(_step(graph)))

def test_render_does_not_mutate_step():
    steps = TraceGenerator(clock=lambda: 0).generate("quickSort(a)", "sorting").steps
    before = copy.deepcopy(steps)
    for s in steps:
        render_step(s)
    assert steps == before

def test_height_grows_with_structures():
    a = DataStructureState(StructureKind.ARRAY, "a", [1])
    b = DataStructureState(StructureKind.LINKED_LIST, "b", [1, 2])
    one = ET.fromstring(render_step(_step(a)))
    two = ET.fromstring(render_step(_step(a, b), width=640))
    assert int(two.get("height")) > int(one.get("height"))
    assert two.get("width") == "640"
