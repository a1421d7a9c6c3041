# -----------------------------------------------------------------------------
# Trace pipeline: classify → generate → assemble
# Responsibilities:
#   • Classify the submitted source (keyword/regex heuristics)
#   • Fabricate the step list for the detected category
#   • Attach synthetic metrics and the catalog's complexity record
# The pipeline is pure given its inputs (modulo the metrics source) and does
# not raise for malformed code.
# -----------------------------------------------------------------------------

from __future__ import annotations
import logging
from typing import Any, Optional

from .catalog import Catalog
from .classifier import Classifier, DEFAULT_CONFIDENCE_SCALE
from .generator import TraceGenerator
from .metrics import MetricsSource, RandomMetrics
from .types import ComplexityAnalysis, DetectionResult, TraceResult

logger = logging.getLogger(__name__)


class TracePipeline:
    def __init__(self, catalog: Catalog,
                 classifier: Optional[Classifier] = None,
                 generator: Optional[TraceGenerator] = None,
                 metrics: Optional[MetricsSource] = None):
        self.catalog = catalog
        self.classifier = classifier or Classifier(catalog, DEFAULT_CONFIDENCE_SCALE)
        self.generator = generator or TraceGenerator()
        self.metrics = metrics or RandomMetrics()

    def detect(self, code: str, language: str | None = None) -> DetectionResult:
        return self.classifier.classify(code, language)

    def trace(self, code: str, language: str, input: Any = None) -> TraceResult:
        detection = self.classifier.classify(code, language)
        generated = self.generator.generate(code, detection.category, input)
        execution_time, memory_usage = self.metrics.measure(detection.category, generated.steps, generated.final_state)
        time_c, space_c = self.catalog.complexity_for(detection.category)
        logger.info("Traced %s code as %s (confidence=%.2f, steps=%d)",
                    language, detection.category.value, detection.confidence, len(generated.steps))
        return TraceResult(
            success=True,
            algorithm_type=detection.category,
            language=language,
            execution_time=execution_time,
            memory_usage=memory_usage,
            steps=generated.steps,
            final_state=generated.final_state,
            complexity_analysis=ComplexityAnalysis(time_c, space_c, len(generated.steps)),
        )
