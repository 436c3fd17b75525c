from __future__ import annotations
from typing import Dict, List
import logging

from bulk_feedback.core.config import (
    AREA_MEDIUM_BELOW,
    GRAMMAR_DENSITY_CEILING,
    HIGH_PRIORITY_BELOW,
    HIGH_STRENGTH_THRESHOLD,
    LENGTH_STRENGTH_WORDS,
    READABILITY_STRENGTH,
    SUGGESTION_THRESHOLD,
    VOCABULARY_STRONG_DIVERSITY,
    VOCABULARY_WEAK_DIVERSITY,
)
from bulk_feedback.models.report import (
    EvaluationReport,
    ImprovementArea,
    Strength,
    Suggestion,
    SynthesizedFeedback,
    TextMetrics,
    TypeAnalysis,
)
from bulk_feedback.services.dimensions import dimension_label

log = logging.getLogger("synthesis")

_PRIORITY_ORDER = {"high": 0, "medium": 1, "low": 2}
_LEVEL_ORDER = {"high": 0, "medium": 1}

REMEDIATION: Dict[str, Dict[str, str]] = {
    "structure": {
        "high": "The structure needs significant work. Organize the piece into a clear introduction, body and conclusion.",
        "medium": "The structure is reasonable but paragraph organization and transitions could be stronger.",
        "specific": "Open each paragraph with a topic sentence and use transition words between ideas.",
    },
    "creativity": {
        "high": "Bring in more original ideas and perspectives of your own.",
        "medium": "There are creative moments here; push further beyond the obvious.",
        "specific": "Vary your vocabulary and reach for less predictable examples.",
    },
    "accuracy": {
        "high": "Check your facts carefully and support claims with cited sources.",
        "medium": "Most claims look supported, but some details need verification.",
        "specific": "Double-check sources and make sure every citation matches its claim.",
    },
    "presentation": {
        "high": "Formatting and mechanics need close attention throughout.",
        "medium": "Presentation is mostly clean with a few areas to polish.",
        "specific": "Proofread for capitalization, spacing and punctuation consistency.",
    },
    "critical_thinking": {
        "high": "Develop your analysis by examining the issue from more than one perspective.",
        "medium": "The analysis is sound; engage more directly with counterarguments.",
        "specific": "Consider alternative viewpoints and what follows from them.",
    },
    "originality": {
        "high": "Let more of your own voice and interpretation come through.",
        "medium": "Your perspective shows in places; develop it more consistently.",
        "specific": "State your own position and explain how you reached it.",
    },
    "clarity": {
        "high": "Work on making the writing clearer and more concise.",
        "medium": "The writing is generally clear but could be more direct in places.",
        "specific": "Split long sentences and define technical terms when they first appear.",
    },
    "depth": {
        "high": "Ideas need more depth and detail to be fully developed.",
        "medium": "Some points could be explored more thoroughly.",
        "specific": "Add examples and evidence that support each main point.",
    },
}

STRENGTH_TEXT: Dict[str, Dict[str, str]] = {
    "structure": {"high": "Excellent organization and logical flow", "medium": "Good structure with a clear progression of ideas"},
    "creativity": {"high": "Highly original and creative thinking", "medium": "Shows good creative elements"},
    "accuracy": {"high": "Well supported and carefully researched", "medium": "Good attention to factual support"},
    "presentation": {"high": "Outstanding presentation and mechanics", "medium": "Clean presentation with minor areas to polish"},
    "critical_thinking": {"high": "Exceptional analytical thinking", "medium": "Thoughtful analysis"},
    "originality": {"high": "A distinctive personal perspective", "medium": "Your own voice comes through"},
    "clarity": {"high": "Exceptionally clear writing", "medium": "Ideas are communicated clearly"},
    "depth": {"high": "Thorough and detailed exploration", "medium": "Good depth of analysis"},
}


def _remediation(dimension: str) -> Dict[str, str]:
    label = dimension_label(dimension).lower()
    return REMEDIATION.get(dimension) or {
        "high": f"Your {label} needs significant improvement.",
        "medium": f"Your {label} is developing but could be stronger.",
        "specific": f"Review the feedback on {label} and revise accordingly.",
    }


def _strength_text(dimension: str, level: str) -> str:
    label = dimension_label(dimension).lower()
    fallback = {"high": f"Strong {label}", "medium": f"Good {label}"}
    return STRENGTH_TEXT.get(dimension, fallback)[level]


def grammar_score(metrics: TextMetrics) -> float:
    """1.0 for clean text, falling to 0 at GRAMMAR_DENSITY_CEILING issues per 100 words."""
    density = len(metrics.grammar_issues) / max(1, metrics.word_count) * 100
    return max(0.0, 1 - density / GRAMMAR_DENSITY_CEILING)


class FeedbackSynthesizer:
    """Turns metrics, type analysis and dimension scores into ranked feedback."""

    def synthesize(
        self,
        metrics: TextMetrics,
        type_analysis: TypeAnalysis,
        evaluation: EvaluationReport,
    ) -> SynthesizedFeedback:
        return SynthesizedFeedback(
            suggestions=self.suggestions(metrics, evaluation),
            improvement_areas=self.improvement_areas(metrics, evaluation),
            strengths=self.strengths(metrics, evaluation),
            assignment_focus=list(type_analysis.improvements),
        )

    def suggestions(self, metrics: TextMetrics, evaluation: EvaluationReport) -> List[Suggestion]:
        out: List[Suggestion] = []
        for name, result in evaluation.dimensions.items():
            if result.score >= SUGGESTION_THRESHOLD:
                continue
            priority = "high" if result.score < HIGH_PRIORITY_BELOW else "medium"
            canned = _remediation(name)
            out.append(Suggestion(
                category=dimension_label(name),
                priority=priority,
                score=round(result.score, 2),
                feedback=result.feedback or canned[priority],
                specific_suggestions=canned["specific"],
                details=dict(result.details),
            ))

        if metrics.grammar_issues:
            score = grammar_score(metrics)
            severe = score < 0.6
            out.append(Suggestion(
                category="Grammar & Style",
                priority="high" if severe else "medium",
                score=round(score, 2),
                feedback=(
                    "Several grammar and style issues affect readability."
                    if severe else "Some grammar and style issues could be improved."
                ),
                specific_suggestions="Review your work for grammar, punctuation and style consistency.",
                details={
                    "issues": [i.model_dump(by_alias=True) for i in metrics.grammar_issues[:5]],
                    "totalIssues": len(metrics.grammar_issues),
                },
            ))

        out.sort(key=lambda s: (_PRIORITY_ORDER[s.priority], s.score))
        return out

    def improvement_areas(self, metrics: TextMetrics, evaluation: EvaluationReport) -> List[ImprovementArea]:
        areas: List[ImprovementArea] = []
        for name, result in evaluation.dimensions.items():
            if result.score >= SUGGESTION_THRESHOLD:
                continue
            if result.score < HIGH_PRIORITY_BELOW:
                priority = "high"
            elif result.score < AREA_MEDIUM_BELOW:
                priority = "medium"
            else:
                priority = "low"
            areas.append(ImprovementArea(
                dimension=dimension_label(name),
                current_score=round(result.score, 2),
                description=result.feedback or f"Needs improvement in {dimension_label(name).lower()}",
                priority=priority,
                details=dict(result.details),
            ))

        if metrics.grammar_issues:
            score = grammar_score(metrics)
            areas.append(ImprovementArea(
                dimension="Grammar & Style",
                current_score=round(score, 2),
                description=(
                    "Several grammar and style issues affect readability"
                    if score < 0.6 else "Some grammar and style issues need attention"
                ),
                priority="high" if score < 0.5 else "medium",
                details={
                    "issueCount": len(metrics.grammar_issues),
                    "sampleIssues": [i.model_dump(by_alias=True) for i in metrics.grammar_issues[:3]],
                },
            ))

        vocabulary = metrics.vocabulary
        if vocabulary.total_word_count and vocabulary.diversity < VOCABULARY_WEAK_DIVERSITY:
            areas.append(ImprovementArea(
                dimension="Vocabulary",
                current_score=vocabulary.diversity,
                description="Limited vocabulary variety",
                priority="medium",
                details={
                    "suggestion": "Use more varied vocabulary and synonyms",
                    "uniqueWordRatio": vocabulary.diversity,
                },
            ))
        if vocabulary.overused_words:
            areas.append(ImprovementArea(
                dimension="Word Choice",
                current_score=0.6,
                description="Some words may be overused",
                priority="medium",
                details={
                    "suggestion": "Use synonyms or rephrase to vary your word choice",
                    "overusedWords": [w.model_dump() for w in vocabulary.overused_words],
                },
            ))

        areas.sort(key=lambda a: (_PRIORITY_ORDER[a.priority], a.current_score))
        return areas

    def strengths(self, metrics: TextMetrics, evaluation: EvaluationReport) -> List[Strength]:
        out: List[Strength] = []
        for name, result in evaluation.dimensions.items():
            if result.score < SUGGESTION_THRESHOLD:
                continue
            level = "high" if result.score >= HIGH_STRENGTH_THRESHOLD else "medium"
            out.append(Strength(
                dimension=dimension_label(name),
                score=round(result.score, 2),
                strength_level=level,
                description=result.feedback or _strength_text(name, level),
                details=dict(result.details),
            ))

        if metrics.word_count > LENGTH_STRENGTH_WORDS:
            length_score = min(1.0, (metrics.word_count - 100) / 400)
            thorough = length_score > 0.8
            out.append(Strength(
                dimension="Length & Detail",
                score=round(length_score, 2),
                strength_level="high" if thorough else "medium",
                description=(
                    "Excellent level of detail and thorough coverage"
                    if thorough else "Good level of detail in your response"
                ),
                details={"wordCount": metrics.word_count},
            ))

        if metrics.readability_score > READABILITY_STRENGTH:
            easy = metrics.readability_score > 80
            out.append(Strength(
                dimension="Readability",
                score=round(min(1.0, metrics.readability_score / 100), 2),
                strength_level="high" if easy else "medium",
                description="Exceptional clarity and readability" if easy else "Clear and readable writing style",
                details={
                    "score": metrics.readability_score,
                    "level": "Very Easy" if easy else "Standard",
                },
            ))

        diversity = metrics.vocabulary.diversity
        if diversity > VOCABULARY_STRONG_DIVERSITY:
            out.append(Strength(
                dimension="Vocabulary",
                score=diversity,
                strength_level="high" if diversity > 0.75 else "medium",
                description=(
                    "Excellent vocabulary range and word choice"
                    if diversity > 0.75 else "Good use of varied vocabulary"
                ),
                details={"uniqueWordRatio": diversity},
            ))

        out.sort(key=lambda s: (_LEVEL_ORDER[s.strength_level], -s.score))
        log.debug("Synthesized %d strengths", len(out))
        return out
