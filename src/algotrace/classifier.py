# -----------------------------------------------------------------------------
# Algorithm Classifier
# Purpose: Score every catalog category against submitted source text using
# keyword hits and regex signatures, and report the best match.
# -----------------------------------------------------------------------------

from __future__ import annotations
from dataclasses import dataclass
from typing import List
from .catalog import Catalog, CategorySpec
from .types import Category, DetectionResult

KEYWORD_WEIGHT = 1
PATTERN_WEIGHT = 2          # regex signatures count double
UNKNOWN_CONFIDENCE = 0.1
DEFAULT_CONFIDENCE_SCALE = 0.2

@dataclass
class Scored:
    # Scoring breakdown for one category (used for audit/explain).
    category: Category
    total: int
    keyword_hits: int
    pattern_hits: int
    matches: List[str]

class Classifier:
    def __init__(self, catalog: Catalog, confidence_scale: float = DEFAULT_CONFIDENCE_SCALE):
        self.catalog = catalog
        self.confidence_scale = confidence_scale

    def _score(self, spec: CategorySpec, code: str, lowered: str) -> Scored:
        matches: List[str] = []

        # ---- Keyword hits: literal substring of the lower-cased source
        kw_hits = 0
        for kw in spec.keywords:
            if kw in lowered:
                kw_hits += 1
                matches.append(kw)

        # ---- Pattern hits: compiled case-insensitive regexes on raw source
        pat_hits = 0
        for rx in spec.patterns:
            m = rx.search(code)
            if m:
                pat_hits += 1
                matches.append(f"pattern: {m.group(0)}")

        total = KEYWORD_WEIGHT * kw_hits + PATTERN_WEIGHT * pat_hits
        return Scored(spec.category, total, kw_hits, pat_hits, matches)

    def score_all(self, source_text: str) -> List[Scored]:
        code = source_text or ""
        lowered = code.lower()
        return [self._score(spec, code, lowered) for spec in self.catalog.categories]

    def classify(self, source_text: str, language: str | None = None) -> DetectionResult:
        """
        Pick the category with the strictly highest score.
        Ties keep the first-declared category; zero everywhere yields unknown.
        `language` is informational only and never changes the scoring.
        """
        best: Scored | None = None
        for s in self.score_all(source_text):
            if s.total > (best.total if best else 0):
                best = s

        if best is None:
            return DetectionResult(Category.UNKNOWN, UNKNOWN_CONFIDENCE, "Unknown algorithm type", [])

        spec = self.catalog.spec_for(best.category)
        confidence = min(best.total * self.confidence_scale, 1.0)
        return DetectionResult(best.category, confidence, spec.description, best.matches)
