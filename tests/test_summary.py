from bulk_feedback.models.report import SubmissionResult
from bulk_feedback.services.processor import SubmissionProcessor
from bulk_feedback.services.summary import summarize_batch


def test_summary_counts_and_stats(essay_text):
    results = SubmissionProcessor(max_workers=1).process_batch([
        {"name": "a.txt", "content": essay_text},
        {"name": "b.txt", "content": ""},
        {"name": "c.txt", "content": "A short answer with few words."},
    ])
    s = summarize_batch(results)
    assert s.total_students == 3
    assert s.processed_students == 2
    assert s.error_count == 1

    scores = [r.analysis.overall_quality for r in results if r.analysis]
    dist = s.score_distribution
    assert dist.high + dist.medium + dist.low == 2
    assert s.average_score == round(sum(scores) / 2, 2)
    assert s.statistics.overall_score.min == min(scores)
    assert s.statistics.overall_score.max == max(scores)
    assert s.statistics.word_count.max == len(essay_text.split())
    assert len(s.common_improvements) <= 5
    assert all(c.count >= 1 for c in s.common_strengths)


def test_all_error_batch_is_zeroed():
    results = [
        SubmissionResult(file_name="x.txt", student_name="x", status="error", error_message="File appears to be empty"),
    ]
    s = summarize_batch(results)
    assert s.total_students == 1
    assert s.processed_students == 0
    assert s.average_score == 0.0
    assert s.common_strengths == []
    assert s.statistics.word_count.average == 0.0


def test_empty_batch_summary():
    assert summarize_batch([]).total_students == 0
