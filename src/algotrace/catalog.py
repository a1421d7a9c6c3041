# -----------------------------------------------------------------------------
# Catalog loader & accessor
# Purpose: Parse the YAML algorithm catalog (ordered category signatures and
# reference implementations) into strongly-typed objects used by the
# classifier, the pipeline and the storage seeding.
# -----------------------------------------------------------------------------

from __future__ import annotations
import re
import yaml
from dataclasses import dataclass, field
from typing import Dict, List, Any, Pattern
from .types import Category

# Domain-specific error to signal malformed catalog inputs, missing fields, etc.
class CatalogError(Exception): pass

UNKNOWN_COMPLEXITY = ("Unknown", "Unknown")

@dataclass
class CategorySpec:
    """
    Heuristic signature of one algorithm category.
    - keywords: literal substrings, +1 each when present in lower-cased source
    - patterns: compiled regexes, +2 each when they match
    - description: human-readable label reported as detection details
    """
    category: Category
    description: str
    keywords: List[str]
    patterns: List[Pattern[str]]
    time_complexity: str = UNKNOWN_COMPLEXITY[0]
    space_complexity: str = UNKNOWN_COMPLEXITY[1]

@dataclass
class AlgorithmSpec:
    # Reference algorithm shipped with the catalog (code per language)
    key: str
    name: str
    category: Category
    time_complexity: str
    space_complexity: str
    description: str
    implementations: Dict[str, str] = field(default_factory=dict)

def _category(value: Any) -> Category:
    try:
        return Category(str(value))
    except ValueError:
        raise CatalogError(f"Unknown category: {value!r}")

def _compile(pattern: str, owner: str) -> Pattern[str]:
    try:
        return re.compile(pattern, re.IGNORECASE)
    except re.error as e:
        raise CatalogError(f"Invalid pattern {pattern!r} for {owner}: {e}")

@dataclass
class Catalog:
    # Ordered category signatures; order decides classifier ties
    categories: List[CategorySpec]
    # Reference algorithms across categories/languages
    algorithms: List[AlgorithmSpec]

    @staticmethod
    def from_yaml_dict(d: Dict[str, Any]) -> "Catalog":
        """
        Validate a parsed catalog document. Category order is kept as declared.
        Shape:
          categories:
            - id: sorting
              description: "Sorting algorithm"
              complexity: { time: "O(n log n)", space: "O(log n)" }
              keywords: [sort, quicksort]
              patterns: ['def\\s+(\\w*sort\\w*)']
          algorithms:
            - key: quicksort
              name: Quick Sort
              category: sorting
              time_complexity: ...
              space_complexity: ...
              description: ...
              implementations: { python: "...", javascript: "..." }
        """
        if not isinstance(d, dict):
            raise CatalogError("Catalog root must be a mapping.")
        cats: List[CategorySpec] = []
        seen = set()
        # ---- Parse category signatures (order preserved) ----------------------
        for cd in d.get("categories") or []:
            try:
                cat = _category(cd["id"])
                if cat in seen:
                    raise CatalogError(f"Duplicate category: {cat.value}")
                seen.add(cat)
                cx = cd.get("complexity") or {}
                cats.append(CategorySpec(
                    category=cat,
                    description=str(cd["description"]),
                    keywords=[str(k).lower() for k in cd.get("keywords", [])],
                    patterns=[_compile(str(p), cat.value) for p in cd.get("patterns", [])],
                    time_complexity=str(cx.get("time", UNKNOWN_COMPLEXITY[0])),
                    space_complexity=str(cx.get("space", UNKNOWN_COMPLEXITY[1])),
                ))
            except (KeyError, TypeError, AttributeError) as e:
                raise CatalogError(f"Malformed category entry: {e}")
        algs: List[AlgorithmSpec] = []
        # ---- Parse reference algorithms ----------------------------------------
        for ad in d.get("algorithms") or []:
            try:
                algs.append(AlgorithmSpec(
                    key=str(ad["key"]), name=str(ad["name"]),
                    category=_category(ad["category"]),
                    time_complexity=str(ad["time_complexity"]),
                    space_complexity=str(ad["space_complexity"]),
                    description=str(ad.get("description", "")),
                    implementations={str(k): str(v) for k, v in (ad.get("implementations") or {}).items()},
                ))
            except (KeyError, TypeError, AttributeError) as e:
                raise CatalogError(f"Malformed algorithm entry: {e}")
        return Catalog(categories=cats, algorithms=algs)

    @staticmethod
    def from_yaml_text(text: str) -> "Catalog":
        # safe_load: plain mappings and lists only
        try:
            return Catalog.from_yaml_dict(yaml.safe_load(text))
        except yaml.YAMLError as e:
            raise CatalogError(f"Invalid YAML: {e}")

    @staticmethod
    def from_file(path: str) -> "Catalog":
        with open(path, "r", encoding="utf-8") as f:
            return Catalog.from_yaml_text(f.read())

    def spec_for(self, category: Category) -> CategorySpec | None:
        return next((c for c in self.categories if c.category == category), None)

    def complexity_for(self, category: Category) -> tuple[str, str]:
        spec = self.spec_for(category)
        if spec is None:
            return UNKNOWN_COMPLEXITY
        return spec.time_complexity, spec.space_complexity

    def list_algorithms(self) -> List[Dict[str, Any]]:
        # One row per reference algorithm, languages sorted
        return [{
            "key": a.key, "name": a.name, "category": a.category.value,
            "time_complexity": a.time_complexity, "space_complexity": a.space_complexity,
            "languages": sorted(a.implementations.keys()),
        } for a in self.algorithms]
