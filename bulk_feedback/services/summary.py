from __future__ import annotations
from collections import Counter
from typing import List, Sequence

from bulk_feedback.models.report import (
    BatchStatistics,
    BatchSummary,
    LabelCount,
    MetricStats,
    ScoreDistribution,
    SubmissionResult,
)

TOP_LABELS = 5


def _stats(values: List[float]) -> MetricStats:
    if not values:
        return MetricStats()
    return MetricStats(
        average=round(sum(values) / len(values), 2),
        min=min(values),
        max=max(values),
    )


def _top(counter: Counter) -> List[LabelCount]:
    return [LabelCount(label=label, count=n) for label, n in counter.most_common(TOP_LABELS)]


def summarize_batch(results: Sequence[SubmissionResult]) -> BatchSummary:
    """Class-level roll-up of a processed batch."""
    analyses = [r.analysis for r in results if r.status == "success" and r.analysis is not None]
    scores = [a.overall_quality for a in analyses]

    distribution = ScoreDistribution()
    for s in scores:
        if s >= 0.8:
            distribution.high += 1
        elif s >= 0.6:
            distribution.medium += 1
        else:
            distribution.low += 1

    strengths = Counter(s.dimension for a in analyses for s in a.strengths)
    improvements = Counter(i.dimension for a in analyses for i in a.improvement_areas)

    return BatchSummary(
        total_students=len(results),
        processed_students=len(analyses),
        error_count=len(results) - len(analyses),
        average_score=round(sum(scores) / len(scores), 2) if scores else 0.0,
        score_distribution=distribution,
        common_strengths=_top(strengths),
        common_improvements=_top(improvements),
        statistics=BatchStatistics(
            word_count=_stats([float(a.word_count) for a in analyses]),
            readability=_stats([a.readability_score for a in analyses]),
            overall_score=_stats(scores),
        ),
    )
