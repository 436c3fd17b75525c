import pytest

from bulk_feedback.models.report import (
    DimensionResult,
    EvaluationReport,
    GrammarIssue,
    TextMetrics,
    TypeAnalysis,
    VocabularyStats,
    WordCount,
)
from bulk_feedback.services.synthesis import FeedbackSynthesizer, grammar_score


def _evaluation(**scores) -> EvaluationReport:
    dims = {
        name: DimensionResult(dimension=name, score=score, feedback=f"{name} feedback")
        for name, score in scores.items()
    }
    return EvaluationReport(dimensions=dims, overall_score=0.5)


def _issues(n):
    return [
        GrammarIssue(kind="capitalization", sentence_index=i + 1, description="d", suggestion="s")
        for i in range(n)
    ]


def _metrics(word_count=100, issues=0, readability=50.0, diversity=0.5, overused=None):
    return TextMetrics(
        word_count=word_count,
        readability_score=readability,
        grammar_issues=_issues(issues),
        vocabulary=VocabularyStats(
            unique_word_count=int(word_count * diversity),
            total_word_count=word_count,
            diversity=diversity,
            overused_words=overused or [],
        ),
    )


GENERAL = TypeAnalysis(type="general", checks={}, overall_score=0.7, improvements=["Continue developing your ideas"])


def test_grammar_score_density():
    assert grammar_score(_metrics(word_count=100, issues=0)) == 1.0
    assert grammar_score(_metrics(word_count=400, issues=1)) == pytest.approx(0.75)
    assert grammar_score(_metrics(word_count=200, issues=1)) == pytest.approx(0.5)
    assert grammar_score(_metrics(word_count=100, issues=1)) == 0.0
    assert grammar_score(_metrics(word_count=0, issues=1)) == 0.0


def test_one_issue_in_a_short_text_is_high_priority():
    s = FeedbackSynthesizer().suggestions(_metrics(word_count=76, issues=1), _evaluation(depth=0.9))
    assert [(x.category, x.priority, x.score) for x in s] == [("Grammar & Style", "high", 0.0)]
    areas = FeedbackSynthesizer().improvement_areas(_metrics(word_count=76, issues=1), _evaluation(depth=0.9))
    assert [(a.dimension, a.priority) for a in areas] == [("Grammar & Style", "high")]


def test_suggestions_priorities_and_order():
    s = FeedbackSynthesizer().suggestions(
        _metrics(word_count=400, issues=1), _evaluation(structure=0.3, clarity=0.65, depth=0.9)
    )
    assert [(x.category, x.priority) for x in s] == [
        ("Structure", "high"),
        ("Clarity", "medium"),
        ("Grammar & Style", "medium"),
    ]
    assert s[0].feedback == "structure feedback"
    assert s[0].specific_suggestions
    assert s[2].details["totalIssues"] == 1


def test_heavy_grammar_issues_rank_first():
    s = FeedbackSynthesizer().suggestions(_metrics(issues=10), _evaluation(structure=0.3))
    assert s[0].category == "Grammar & Style"
    assert s[0].priority == "high"
    assert len(s[0].details["issues"]) == 5
    assert s[0].details["issues"][0]["sentenceIndex"] == 1


def test_unknown_dimension_gets_generic_remediation():
    ev = EvaluationReport(
        dimensions={"tone": DimensionResult(dimension="tone", score=0.5, feedback="")},
        overall_score=0.5,
    )
    s = FeedbackSynthesizer().suggestions(_metrics(), ev)
    assert s[0].category == "Tone"
    assert "tone" in s[0].feedback


def test_improvement_areas_bands():
    areas = FeedbackSynthesizer().improvement_areas(
        _metrics(word_count=400, issues=1), _evaluation(structure=0.3, clarity=0.65, depth=0.55, accuracy=0.9)
    )
    assert [(a.dimension, a.priority) for a in areas] == [
        ("Structure", "high"),
        ("Depth", "medium"),
        ("Grammar & Style", "medium"),
        ("Clarity", "low"),
    ]


def test_vocabulary_and_word_choice_areas():
    metrics = _metrics(diversity=0.3, overused=[WordCount(word="really", count=9)])
    areas = FeedbackSynthesizer().improvement_areas(metrics, _evaluation())
    by_name = {a.dimension: a for a in areas}
    assert by_name["Vocabulary"].priority == "medium"
    assert by_name["Vocabulary"].current_score == 0.3
    assert by_name["Word Choice"].current_score == 0.6
    assert by_name["Word Choice"].details["overusedWords"] == [{"word": "really", "count": 9}]


def test_strengths_from_dimensions_and_metrics():
    strengths = FeedbackSynthesizer().strengths(
        _metrics(word_count=500, readability=85.0, diversity=0.7),
        _evaluation(depth=0.9, structure=0.72, clarity=0.4),
    )
    assert [(s.dimension, s.strength_level) for s in strengths] == [
        ("Length & Detail", "high"),
        ("Depth", "high"),
        ("Readability", "high"),
        ("Structure", "medium"),
        ("Vocabulary", "medium"),
    ]


def test_short_plain_text_has_no_metric_strengths():
    strengths = FeedbackSynthesizer().strengths(_metrics(word_count=80, readability=40.0), _evaluation())
    assert strengths == []


def test_synthesize_carries_assignment_focus():
    fb = FeedbackSynthesizer().synthesize(_metrics(), GENERAL, _evaluation(structure=0.3))
    assert fb.assignment_focus == ["Continue developing your ideas"]
    assert fb.suggestions and fb.improvement_areas


def test_repeated_common_word_gives_word_choice_area():
    from bulk_feedback.services.features import TextFeatureExtractor

    text = "The cat saw the dog. The dog saw the bird. The bird saw the fish in the pond."
    metrics = TextFeatureExtractor().extract(text)
    assert metrics.vocabulary.overused_words[0].word == "the"
    areas = FeedbackSynthesizer().improvement_areas(metrics, _evaluation())
    assert "Word Choice" in [a.dimension for a in areas]
