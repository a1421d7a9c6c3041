import pytest
from algotrace.catalog import Catalog
from algotrace.classifier import Classifier, UNKNOWN_CONFIDENCE
from algotrace.config import DEFAULT_CATALOG_PATH
from algotrace.types import Category

QUICKSORT_JS = "function quickSort(arr) { const pivot = arr[arr.length - 1]; }"

def _classifier(scale=0.2):
    return Classifier(Catalog.from_file(DEFAULT_CATALOG_PATH), scale)

def test_single_keyword_sorting():
    res = _classifier().classify("sort the values")
    assert res.category is Category.SORTING
    assert res.confidence == pytest.approx(0.2)
    assert res.details == "Sorting algorithm"
    assert res.matches == ["sort"]

def test_keywords_are_case_insensitive():
    res = _classifier().classify("QuickSort")
    assert res.category is Category.SORTING
    # "sort" and "quicksort" both hit
    assert res.confidence == pytest.approx(0.4)

def test_patterns_weigh_double():
    clf = _classifier()
    scored = {s.category: s for s in clf.score_all(QUICKSORT_JS)}
    sorting = scored[Category.SORTING]
    assert sorting.keyword_hits == 2
    assert sorting.pattern_hits == 2
    assert sorting.total == 6
    assert "pattern: pivot" in sorting.matches

def test_confidence_is_clamped():
    res = _classifier(scale=1.0).classify(QUICKSORT_JS)
    assert res.category is Category.SORTING
    assert res.confidence == 1.0

def test_no_signal_is_unknown():
    res = _classifier().classify("x = 1")
    assert res.category is Category.UNKNOWN
    assert res.confidence == UNKNOWN_CONFIDENCE == 0.1
    assert res.details == "Unknown algorithm type"
    assert res.matches == []

def test_empty_source_is_unknown():
    assert _classifier().classify("").category is Category.UNKNOWN

def test_language_does_not_change_result():
    clf = _classifier()
    a = clf.classify(QUICKSORT_JS, "javascript")
    b = clf.classify(QUICKSORT_JS, "python")
    assert a == b

def test_ties_keep_first_declared_category():
    yaml_text = """
categories:
  - {id: %s, description: first, keywords: [foo]}
  - {id: %s, description: second, keywords: [foo]}
"""
    first = Classifier(Catalog.from_yaml_text(yaml_text % ("queue", "stack"))).classify("foo")
    second = Classifier(Catalog.from_yaml_text(yaml_text % ("stack", "queue"))).classify("foo")
    assert first.category is Category.QUEUE
    assert second.category is Category.STACK

def test_binary_search_source():
    code = """
def binary_search(arr, target):
    left, right = 0, len(arr) - 1
    while left <= right:
        mid = (left + right) // 2
"""
    res = _classifier().classify(code, "python")
    assert res.category is Category.SEARCHING
    assert 0 < res.confidence <= 1
