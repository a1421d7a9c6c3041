import math
import random
from algotrace.catalog import Catalog
from algotrace.config import DEFAULT_CATALOG_PATH
from algotrace.generator import TraceGenerator
from algotrace.metrics import FixedMetrics, RandomMetrics
from algotrace.pipeline import TracePipeline
from algotrace.types import Action, Category

QUICKSORT_JS = "function quickSort(arr) { const pivot = arr[arr.length - 1]; }"

def _pipeline():
    return TracePipeline(Catalog.from_file(DEFAULT_CATALOG_PATH),
                         generator=TraceGenerator(clock=lambda: 0),
                         metrics=FixedMetrics(1.5, 2048))

def test_trace_sorting_end_to_end():
    res = _pipeline().trace(QUICKSORT_JS, "javascript")
    assert res.success
    assert res.algorithm_type is Category.SORTING
    assert (res.execution_time, res.memory_usage) == (1.5, 2048)
    assert res.final_state == [4, 7, 11, 12, 13, 15, 16, 18, 19]
    assert res.complexity_analysis.time_complexity == "O(n log n) average, O(n²) worst"
    assert res.complexity_analysis.operations == len(res.steps)

def test_trace_unknown_uses_generic_walk():
    res = _pipeline().trace("x = 1", "python")
    assert res.algorithm_type is Category.UNKNOWN
    assert [s.action for s in res.steps] == [Action.EXECUTE]
    assert res.complexity_analysis.time_complexity == "Unknown"
    assert res.final_state is None

def test_trace_result_wire_format():
    out = _pipeline().trace("binarySearch(arr)", "javascript").to_dict()
    assert out["algorithmType"] == "searching"
    assert set(out) == {"success", "algorithmType", "language", "executionTime", "memoryUsage",
                        "steps", "finalState", "complexityAnalysis"}
    step = out["steps"][1]
    assert step["action"] == "COMPARE"
    assert step["dataStructures"][0]["type"] == "array"
    assert step["memoryState"]["stack"][0]["function"] == "main"
    assert out["complexityAnalysis"]["operations"] == len(out["steps"])

def test_detect_delegates_to_classifier():
    det = _pipeline().detect(QUICKSORT_JS, "javascript")
    assert det.to_dict()["algorithmType"] == "sorting"

def test_random_metrics_formulas():
    pipe = _pipeline()
    metrics = RandomMetrics(random.Random(7))
    search = pipe.generator.generate("", Category.SEARCHING)
    t, m = metrics.measure(Category.SEARCHING, search.steps, search.final_state)
    assert t == math.log2(8) * 10
    assert m == 256 + 8 * 4
    queue = pipe.generator.generate("", Category.QUEUE)
    t, m = metrics.measure(Category.QUEUE, queue.steps, queue.final_state)
    assert (t, m) == (40, 512 + 2 * 4)
    sort = pipe.generator.generate("", Category.SORTING)
    t, m = metrics.measure(Category.SORTING, sort.steps, sort.final_state)
    assert 50 <= t < 150 and m == 1024 + 9 * 4
