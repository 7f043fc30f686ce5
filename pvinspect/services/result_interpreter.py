import logging
from typing import List, Sequence

from pvinspect.config import DEFAULT_CONFIDENCE_THRESHOLD
from pvinspect.models import (
    AnalysisReport,
    AnalysisSummary,
    ClassificationSample,
    PanelCondition,
    Recommendation,
    Severity,
)
from pvinspect.panel_data import PREVENTIVE_MAINTENANCE, RECOMMENDATION_RULES

logger = logging.getLogger(__name__)


class ResultInterpreter:
    """
    Turns the detections for one panel image into something a user can act on.

    Responsibilities:
    1. Drop detections below the confidence threshold.
    2. Count issues (anything that is not NORMAL) and derive an overall status
       from the most severe detection.
    3. Produce maintenance recommendations per problem category.
    """

    def interpret(self, samples: Sequence[ClassificationSample],
                  confidence_threshold: float = DEFAULT_CONFIDENCE_THRESHOLD,
                  processing_time: float = 0) -> AnalysisReport:
        """Interprets a list of detections."""
        kept = self.filter_by_confidence(samples, confidence_threshold)
        if len(kept) < len(samples):
            logger.debug(f"Discarded {len(samples) - len(kept)} detections below {confidence_threshold}")

        summary = self.summarize(kept, processing_time)
        return AnalysisReport(
            results=kept,
            summary=summary,
            recommendations=self.recommend(kept)
        )

    def filter_by_confidence(self, samples: Sequence[ClassificationSample], threshold: float) -> List[ClassificationSample]:
        return [s for s in samples if s.confidence >= threshold]

    def summarize(self, samples: Sequence[ClassificationSample], processing_time: float = 0) -> AnalysisSummary:
        """
        Status rules:
        - no issues -> healthy
        - highest severity HIGH -> critical
        - highest severity MEDIUM -> warning
        - otherwise healthy
        """
        total_issues = sum(1 for s in samples if s.category != PanelCondition.NORMAL)
        confidence = sum(s.confidence for s in samples) / len(samples) if samples else 0.0

        status = "healthy"
        if total_issues:
            worst = max(s.severity for s in samples)
            if worst == Severity.HIGH:
                status = "critical"
            elif worst == Severity.MEDIUM:
                status = "warning"

        return AnalysisSummary(
            overall_status=status,
            total_issues=total_issues,
            processing_time=processing_time,
            confidence=confidence
        )

    def recommend(self, samples: Sequence[ClassificationSample]) -> List[Recommendation]:
        present = {s.category for s in samples}
        recommendations = [
            Recommendation(**rule)
            for category, rule in RECOMMENDATION_RULES.items()
            if category in present
        ]
        if not recommendations:
            recommendations.append(Recommendation(**PREVENTIVE_MAINTENANCE))
        return recommendations

# Global singleton instance
result_interpreter = ResultInterpreter()
