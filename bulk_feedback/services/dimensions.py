from __future__ import annotations
from enum import Enum
from statistics import mean, pstdev
from typing import Callable, Dict, Iterable, List, Optional, Sequence
import re

import textstat

from bulk_feedback.core.config import (
    DIMENSION_WEIGHTS,
    EXCELLENT_TIER,
    GOOD_TIER,
    IMPROVEMENT_THRESHOLD,
    LENGTH_PENALTY_WORDS,
    LONG_SUBMISSION_WORDS,
    MAX_GRADE_LEVEL,
    STRENGTH_THRESHOLD,
)
from bulk_feedback.core.errors import UnknownDimensionError
from bulk_feedback.models.report import DimensionHighlight, DimensionResult, EvaluationReport
from bulk_feedback.services.features import (
    count_syllables,
    split_paragraphs,
    split_sentences,
    split_words,
)


class Dimension(str, Enum):
    STRUCTURE = "structure"
    CREATIVITY = "creativity"
    ACCURACY = "accuracy"
    PRESENTATION = "presentation"
    CRITICAL_THINKING = "critical_thinking"
    ORIGINALITY = "originality"
    CLARITY = "clarity"
    DEPTH = "depth"

    @classmethod
    def parse(cls, name: str) -> "Dimension":
        try:
            return cls(name)
        except ValueError:
            raise UnknownDimensionError(str(name)) from None


def resolve_dimensions(names: Optional[Sequence[str]] = None) -> List[Dimension]:
    """Empty/None means every dimension. Raises UnknownDimensionError on bad names."""
    if not names:
        return list(Dimension)
    resolved: List[Dimension] = []
    for name in names:
        dim = Dimension.parse(name)
        if dim not in resolved:
            resolved.append(dim)
    return resolved


def dimension_label(name: str) -> str:
    return name.replace("_", " ").title()


def _clamp(value: float) -> float:
    return max(0.0, min(1.0, value))


def _count(pattern: re.Pattern, text: str) -> int:
    return len(pattern.findall(text))


def _clean_words(text: str) -> List[str]:
    return [w for w in (re.sub(r"[^a-z']", "", t.lower()) for t in split_words(text)) if w]


def normalized_readability(text: str) -> float:
    """Flesch-Kincaid grade mapped onto [0, 1]; grade 0 -> 1.0, grade 16+ -> 0.0."""
    if not split_words(text):
        return 0.0
    grade = textstat.flesch_kincaid_grade(text)
    return round(_clamp(1 - grade / MAX_GRADE_LEVEL), 2)


def overall_score(results: Iterable[DimensionResult], word_count: int) -> float:
    """Weighted mean of the scorable dimensions present, scaled by the length penalty."""
    weighted = 0.0
    total_weight = 0.0
    for result in results:
        weight = DIMENSION_WEIGHTS.get(result.dimension)
        if weight is None:
            continue
        weighted += result.score * weight
        total_weight += weight
    if total_weight == 0:
        return 0.0
    penalty = min(1.0, word_count / LENGTH_PENALTY_WORDS)
    return _clamp(weighted / total_weight * penalty)


_TRANSITIONS = re.compile(
    r"\b(?:first(?:ly)?|second(?:ly)?|third(?:ly)?|next|finally|furthermore|moreover|"
    r"in addition|however|therefore|consequently|for example|for instance|"
    r"as a result|on the other hand|in conclusion)\b",
    re.IGNORECASE,
)
_INTRO_MARKERS = re.compile(r"\b(?:this (?:essay|paper|report)|introduction|overview|purpose|will (?:discuss|explore|argue))\b", re.IGNORECASE)
_CONCLUSION_MARKERS = re.compile(r"\b(?:in conclusion|to conclude|in summary|overall|finally|to sum up)\b", re.IGNORECASE)
_NUMBERED_ITEM = re.compile(r"(?m)^\s*\d+[.)]")
_FIGURATIVE = re.compile(r"\b(?:like an?|as if|as though|as \w+ as|imagine[ds]?|metaphor|symboli[sz]e[sd]?)\b", re.IGNORECASE)
_CITATION = re.compile(r"\[\d+\]|\([A-Z][A-Za-z]+(?: et al\.)?,? \d{4}\)|\bet al\.|\b[Aa]ccording to\b")
_NUMERIC = re.compile(r"\b\d+(?:[.,]\d+)?%?")
_HEDGES = re.compile(r"\b(?:may|might|suggests?|likely|appears?|approximately|roughly)\b", re.IGNORECASE)
_ABSOLUTES = re.compile(r"\b(?:always|never|everyone|everybody|nobody|obviously|undeniably)\b", re.IGNORECASE)
_LOWERCASE_I = re.compile(r"(?<![\w'])i(?![\w'])")
_SPACING = re.compile(r"[ \t]{2,}|[ \t]+[,.;:!?]")
_REPEATED_PUNCT = re.compile(r"[!?]{2,}|,{2,}")
_REASONING = re.compile(
    r"\b(?:because|therefore|thus|hence|consequently|as a result|suggests?|implies|"
    r"indicates?|demonstrates?|however|although|whereas)\b",
    re.IGNORECASE,
)
_COUNTER = re.compile(
    r"\b(?:on the other hand|however|although|critics|some (?:may |might )?argue|opponents|nevertheless|despite)\b",
    re.IGNORECASE,
)
_EVALUATIVE = re.compile(
    r"\b(?:analy[sz]e[sd]?|evaluate[sd]?|assess(?:es|ed)?|compare[sd]?|contrast(?:s|ed)?|"
    r"significan(?:t|ce)|weakness(?:es)?|limitations?)\b",
    re.IGNORECASE,
)
_PERSPECTIVE = re.compile(
    r"\b(?:i (?:believe|think|argue|propose|suggest|wonder)|in my (?:view|opinion|experience)|"
    r"from my perspective|personally)\b",
    re.IGNORECASE,
)
_FIRST_PERSON = {"i", "me", "my", "mine", "we", "our", "ours", "us"}
_PASSIVE = re.compile(r"\b(?:is|are|was|were|be|been|being)\s+[a-z]+ed\b", re.IGNORECASE)
_DEPTH_INDICATORS = re.compile(r"because|therefore|suggests|indicates|demonstrates|implies", re.IGNORECASE)


class DimensionEvaluator:
    """Scores text along the fixed set of dimensions.

    Every analyzer is a pure function of (text, assignment_type) returning a
    DimensionResult whose `details` holds the raw measurements behind the
    score. Required detail keys are listed on each analyzer.
    """

    def __init__(self):
        self._analyzers: Dict[Dimension, Callable[[str, str], DimensionResult]] = {
            Dimension.STRUCTURE: self.analyze_structure,
            Dimension.CREATIVITY: self.analyze_creativity,
            Dimension.ACCURACY: self.analyze_accuracy,
            Dimension.PRESENTATION: self.analyze_presentation,
            Dimension.CRITICAL_THINKING: self.analyze_critical_thinking,
            Dimension.ORIGINALITY: self.analyze_originality,
            Dimension.CLARITY: self.analyze_clarity,
            Dimension.DEPTH: self.analyze_depth,
        }

    def evaluate_one(self, text: str, dimension: str, assignment_type: str = "general") -> DimensionResult:
        dim = Dimension.parse(dimension)
        result = self._analyzers[dim](text, assignment_type)
        if not split_words(text):
            return result.model_copy(update={"score": 0.0, "feedback": "No text to evaluate"})
        return result

    def evaluate_all(
        self,
        text: str,
        assignment_type: str = "general",
        dimensions: Optional[Sequence[str]] = None,
    ) -> EvaluationReport:
        results: Dict[str, DimensionResult] = {}
        for dim in resolve_dimensions(dimensions):
            results[dim.value] = self.evaluate_one(text, dim, assignment_type)

        word_count = len(split_words(text))
        overall = overall_score(results.values(), word_count)
        strengths = [
            DimensionHighlight(dimension=name, score=r.score, feedback=r.feedback)
            for name, r in results.items() if r.score >= STRENGTH_THRESHOLD
        ]
        improvements = [
            DimensionHighlight(dimension=name, score=r.score, feedback=r.feedback)
            for name, r in results.items() if r.score < IMPROVEMENT_THRESHOLD
        ]
        return EvaluationReport(
            dimensions=results,
            overall_score=overall,
            strengths=strengths,
            improvements=improvements,
            word_count=word_count,
            sentence_count=len(split_sentences(text)),
            paragraph_count=len(split_paragraphs(text)),
            readability_score=normalized_readability(text),
            narrative_feedback=narrative_feedback(overall, strengths, improvements, word_count),
        )

    # ------------------------------------------------------------------ #
    #  Dimension analyzers
    # ------------------------------------------------------------------ #

    def analyze_structure(self, text: str, assignment_type: str) -> DimensionResult:
        """details: paragraphCount, transitionCount, transitionDensity, hasIntroduction, hasConclusion"""
        paragraphs = split_paragraphs(text)
        sentences = split_sentences(text)
        units = len(paragraphs)
        if assignment_type == "worksheet":
            units = max(units, _count(_NUMBERED_ITEM, text))

        transitions = _count(_TRANSITIONS, text)
        density = transitions / max(1, len(sentences))
        has_intro = bool(paragraphs) and (
            len(split_sentences(paragraphs[0])) >= 2 or bool(_INTRO_MARKERS.search(paragraphs[0]))
        )
        has_conclusion = len(paragraphs) > 1 and bool(_CONCLUSION_MARKERS.search(paragraphs[-1]))

        score = (
            0.4 * min(1, units / 5)
            + 0.3 * min(1, density / 0.2)
            + (0.15 if has_intro else 0)
            + (0.15 if has_conclusion else 0)
        )
        if score > 0.8:
            feedback = ["Well organized with a clear progression of ideas"]
        elif score > 0.6:
            feedback = ["Solid structure; stronger transitions between sections would help the flow"]
        else:
            feedback = ["Organize the work into clear paragraphs with an introduction and a conclusion"]
        if units < 3:
            feedback.append("Break the text into more paragraphs")
        if not has_conclusion:
            feedback.append("Add a concluding paragraph")

        return DimensionResult(
            dimension=Dimension.STRUCTURE.value,
            score=_clamp(score),
            feedback="; ".join(feedback),
            details={
                "paragraphCount": len(paragraphs),
                "transitionCount": transitions,
                "transitionDensity": round(density, 2),
                "hasIntroduction": has_intro,
                "hasConclusion": has_conclusion,
            },
        )

    def analyze_creativity(self, text: str, assignment_type: str) -> DimensionResult:
        """details: vocabularyDiversity, figurativeCount, sentenceVariation"""
        words = _clean_words(text)
        diversity = len(set(words)) / len(words) if words else 0.0
        figurative = _count(_FIGURATIVE, text)
        lengths = [len(s.split()) for s in split_sentences(text)]
        variation = pstdev(lengths) / mean(lengths) if len(lengths) >= 2 else 0.0

        figurative_weight = 0.4 if assignment_type == "creative" else 0.3
        score = (
            (0.7 - figurative_weight) * min(1, diversity / 0.6)
            + figurative_weight * min(1, figurative / 3)
            + 0.3 * min(1, variation / 0.5)
        )
        if score > 0.8:
            feedback = "Highly original expression with vivid, varied language"
        elif score > 0.6:
            feedback = "Shows creative elements; push the imagery and word choice further"
        else:
            feedback = "Try more varied vocabulary, figurative language, and sentence rhythm"

        return DimensionResult(
            dimension=Dimension.CREATIVITY.value,
            score=_clamp(score),
            feedback=feedback,
            details={
                "vocabularyDiversity": round(diversity, 2),
                "figurativeCount": figurative,
                "sentenceVariation": round(variation, 2),
            },
        )

    def analyze_accuracy(self, text: str, assignment_type: str) -> DimensionResult:
        """details: citationCount, numericDetailCount, hedgeCount, absoluteClaimCount"""
        citations = _count(_CITATION, text)
        numeric = _count(_NUMERIC, text)
        hedges = _count(_HEDGES, text)
        absolutes = _count(_ABSOLUTES, text)

        score = (
            0.5
            + 0.25 * min(1, citations / 3)
            + 0.15 * min(1, numeric / 3)
            + 0.1 * min(1, hedges / 3)
            - 0.1 * min(3, absolutes)
        )
        if score > 0.8:
            feedback = ["Claims are well supported with sources and specific details"]
        elif score > 0.6:
            feedback = ["Mostly well supported; cite sources for the key claims"]
        else:
            feedback = ["Support claims with sources, data, or specific examples"]
        if absolutes > 2:
            feedback.append("Avoid sweeping absolute statements")

        return DimensionResult(
            dimension=Dimension.ACCURACY.value,
            score=_clamp(score),
            feedback="; ".join(feedback),
            details={
                "citationCount": citations,
                "numericDetailCount": numeric,
                "hedgeCount": hedges,
                "absoluteClaimCount": absolutes,
            },
        )

    def analyze_presentation(self, text: str, assignment_type: str) -> DimensionResult:
        """details: capitalizationErrors, lowercasePronounCount, spacingIssues, repeatedPunctuation"""
        sentences = split_sentences(text)
        cap_errors = sum(1 for s in sentences if s[0] != s[0].upper())
        cap_ratio = cap_errors / len(sentences) if sentences else 0.0
        lowercase_i = _count(_LOWERCASE_I, text)
        spacing = _count(_SPACING, text)
        repeated = _count(_REPEATED_PUNCT, text)

        score = (
            1.0
            - 0.4 * min(1, cap_ratio * 2)
            - 0.2 * min(1, lowercase_i / 3)
            - 0.2 * min(1, spacing / 5)
            - 0.2 * min(1, repeated / 3)
        )
        feedback = []
        if cap_errors:
            feedback.append("Start every sentence with a capital letter")
        if lowercase_i:
            feedback.append("Capitalize the pronoun 'I'")
        if spacing:
            feedback.append("Fix stray spaces around punctuation")
        if repeated:
            feedback.append("Avoid repeated punctuation marks")
        feedback.insert(0, "Clean, polished presentation" if score > 0.8 else "Presentation needs polishing")

        return DimensionResult(
            dimension=Dimension.PRESENTATION.value,
            score=_clamp(score),
            feedback="; ".join(feedback),
            details={
                "capitalizationErrors": cap_errors,
                "lowercasePronounCount": lowercase_i,
                "spacingIssues": spacing,
                "repeatedPunctuation": repeated,
            },
        )

    def analyze_critical_thinking(self, text: str, assignment_type: str) -> DimensionResult:
        """details: reasoningIndicators, indicatorDensity, counterArgumentCount, evaluativeTermCount, questionCount"""
        sentences = split_sentences(text)
        reasoning = _count(_REASONING, text)
        density = reasoning / max(1, len(sentences))
        counter = _count(_COUNTER, text)
        evaluative = _count(_EVALUATIVE, text)
        questions = text.count("?")

        score = (
            0.2
            + 0.35 * min(1, density / 0.3)
            + 0.25 * min(1, counter / 2)
            + 0.15 * min(1, evaluative / 3)
            + (0.05 if questions else 0)
        )
        if score > 0.8:
            feedback = "Strong reasoning that weighs evidence and alternative viewpoints"
        elif score > 0.6:
            feedback = "Good analysis; explore counterarguments more thoroughly"
        else:
            feedback = "Explain why and how your points hold, and consider other perspectives"

        return DimensionResult(
            dimension=Dimension.CRITICAL_THINKING.value,
            score=_clamp(score),
            feedback=feedback,
            details={
                "reasoningIndicators": reasoning,
                "indicatorDensity": round(density, 2),
                "counterArgumentCount": counter,
                "evaluativeTermCount": evaluative,
                "questionCount": questions,
            },
        )

    def analyze_originality(self, text: str, assignment_type: str) -> DimensionResult:
        """details: originalIdeas, personalVoice, perspectiveMarkers"""
        words = _clean_words(text)
        perspectives = _count(_PERSPECTIVE, text)
        long_ratio = sum(1 for w in words if len(w) >= 8) / len(words) if words else 0.0
        original_ideas = 0.5 * min(1, perspectives / 2) + 0.5 * min(1, long_ratio / 0.15)
        first_person = sum(1 for w in words if w in _FIRST_PERSON)
        personal_voice = min(1, first_person / len(words) * 20) if words else 0.0

        feedback = [
            "Shows original thinking and ideas" if original_ideas > 0.7 else "Try to develop more original ideas",
            "Good personal voice and style" if personal_voice > 0.6 else "Develop your personal voice more",
        ]
        return DimensionResult(
            dimension=Dimension.ORIGINALITY.value,
            score=_clamp(0.2 + 0.4 * original_ideas + 0.4 * personal_voice),
            feedback="; ".join(feedback),
            details={
                "originalIdeas": round(original_ideas, 2),
                "personalVoice": round(personal_voice, 2),
                "perspectiveMarkers": perspectives,
            },
        )

    def analyze_clarity(self, text: str, assignment_type: str) -> DimensionResult:
        """details: avgSentenceLength, complexityRatio, passiveVoiceCount, gradeLevel"""
        sentences = split_sentences(text)
        words = _clean_words(text)
        avg_sentence = sum(len(s.split()) for s in sentences) / max(1, len(sentences))
        complex_words = sum(1 for w in words if count_syllables(w) >= 3)
        complexity = complex_words / max(1, len(words))
        passive = _count(_PASSIVE, text)
        grade = textstat.flesch_kincaid_grade(text) if words else 0.0

        score = 1.0
        feedback = []
        if avg_sentence > 25:
            score -= 0.2
            feedback.append("Consider breaking up long sentences for better clarity")
        if complexity > 0.15:
            score -= 0.2
            feedback.append("Some complex words could be simplified for better understanding")
        if passive > 3:
            score -= 0.1
            feedback.append("Try to use more active voice for clearer writing")
        if grade > 12:
            score -= 0.1
            feedback.append("The reading level is high for the audience; simplify where you can")
        score = _clamp(score)

        if score > 0.8:
            feedback.insert(0, "Clear and easy to understand")
        elif score > 0.6:
            feedback.insert(0, "Generally clear, but could be improved")
        else:
            feedback.insert(0, "Work on improving clarity and readability")

        return DimensionResult(
            dimension=Dimension.CLARITY.value,
            score=score,
            feedback="; ".join(feedback),
            details={
                "avgSentenceLength": round(avg_sentence, 2),
                "complexityRatio": round(complexity, 2),
                "passiveVoiceCount": passive,
                "gradeLevel": grade,
            },
        )

    def analyze_depth(self, text: str, assignment_type: str) -> DimensionResult:
        """details: avgSentenceLength, analysisIndicators, indicatorDensity"""
        sentences = split_sentences(text)
        avg_sentence = sum(len(s.split()) for s in sentences) / max(1, len(sentences))
        indicators = _count(_DEPTH_INDICATORS, text)
        density = indicators / max(1, len(sentences))

        score = 0.5
        if avg_sentence > 15:
            score += 0.2
        if density > 0.3:
            score += 0.3
        elif density > 0.1:
            score += 0.15

        if score > 0.8:
            feedback = "Excellent depth of analysis with thorough exploration of ideas"
        elif score > 0.6:
            feedback = "Good analysis, consider exploring some points in more depth"
        else:
            feedback = "Try to provide more in-depth analysis and explanation of key points"

        return DimensionResult(
            dimension=Dimension.DEPTH.value,
            score=_clamp(score),
            feedback=feedback,
            details={
                "avgSentenceLength": round(avg_sentence, 2),
                "analysisIndicators": indicators,
                "indicatorDensity": round(density, 2),
            },
        )


def narrative_feedback(
    overall: float,
    strengths: List[DimensionHighlight],
    improvements: List[DimensionHighlight],
    word_count: int,
) -> str:
    if overall >= EXCELLENT_TIER:
        lines = ["Excellent work overall. This submission is strong across the evaluated dimensions."]
    elif overall >= GOOD_TIER:
        lines = ["Good work overall, with some room to grow."]
    else:
        lines = ["This submission needs improvement in several areas."]

    if strengths:
        lines.append("")
        lines.append("Strengths:")
        lines.extend(
            f"{i}. {dimension_label(s.dimension)}: {s.feedback}" for i, s in enumerate(strengths, start=1)
        )
    if improvements:
        lines.append("")
        lines.append("Areas for improvement:")
        lines.extend(
            f"{i}. {dimension_label(s.dimension)}: {s.feedback}" for i, s in enumerate(improvements, start=1)
        )

    if word_count < LENGTH_PENALTY_WORDS:
        lines.append("")
        lines.append(
            f"Note: at {word_count} words this response is shorter than the recommended "
            f"{LENGTH_PENALTY_WORDS}; developing it further would strengthen it."
        )
    elif word_count > LONG_SUBMISSION_WORDS:
        lines.append("")
        lines.append(
            f"Note: at {word_count} words this response is long; tightening it would sharpen the key points."
        )
    return "\n".join(lines)
