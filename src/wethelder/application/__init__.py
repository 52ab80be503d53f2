"""Application layer - search orchestration and prompt assembly."""

from .aggregator import VerifiedSourceAggregator, calculate_metrics, dedupe_by_link
from .formatter import NO_RESULTS_MESSAGE, OUTDATED_NOTICE_HEADER, EvidenceFormatter
from .workflow import VerifiedSearchWorkflow, build_answer_prompt, build_workflow

__all__ = [
    "EvidenceFormatter",
    "NO_RESULTS_MESSAGE",
    "OUTDATED_NOTICE_HEADER",
    "VerifiedSearchWorkflow",
    "VerifiedSourceAggregator",
    "build_answer_prompt",
    "build_workflow",
    "calculate_metrics",
    "dedupe_by_link",
]
