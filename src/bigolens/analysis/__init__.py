"""bigolens Analysis — Sanitizer, loop scanner, classifier, call detector and estimator."""

from bigolens.analysis.calls import count_significant_calls
from bigolens.analysis.classifier import IterationFactor, classify_for, classify_while, statement_rescales
from bigolens.analysis.estimator import AnalysisResult, analyze
from bigolens.analysis.expression import build_expression
from bigolens.analysis.sanitizer import sanitize
from bigolens.analysis.scanner import LoopMetrics, scan_loops

__all__ = [
    "analyze",
    "AnalysisResult",
    "sanitize",
    "scan_loops",
    "LoopMetrics",
    "IterationFactor",
    "classify_for",
    "classify_while",
    "statement_rescales",
    "count_significant_calls",
    "build_expression",
]
