import pytest
from pydantic import ValidationError

from bulk_feedback.core.errors import (
    EmptyContentError,
    ExtractionError,
    InvalidBatchInputError,
    UnknownDimensionError,
)
from bulk_feedback.models.report import ProcessingOptions, SubmissionFile, SubmissionResult
from bulk_feedback.services.processor import SubmissionProcessor, student_name


@pytest.fixture(scope="module")
def processor():
    return SubmissionProcessor(max_workers=4)


def test_batch_isolates_empty_file(processor, essay_text):
    files = [
        {"name": "alice.txt", "content": essay_text},
        {"name": "bob.txt", "content": "   \n  "},
        {"name": "carol.txt", "content": essay_text},
    ]
    results = processor.process_batch(files, ProcessingOptions(assignment_type="essay"))
    assert [r.file_name for r in results] == ["alice.txt", "bob.txt", "carol.txt"]
    assert [r.status for r in results] == ["success", "error", "success"]
    assert "empty" in results[1].error_message.lower()
    assert results[1].analysis is None
    assert results[0].error_message is None


def test_batch_preserves_order_on_pool(processor, essay_text):
    files = [SubmissionFile(name=f"student{i}.txt", content=essay_text * (i % 3 + 1)) for i in range(8)]
    results = processor.process_batch(files)
    assert [r.file_name for r in results] == [f.name for f in files]
    assert all(r.status == "success" for r in results)


def test_sequential_and_pooled_agree(essay_text):
    files = [{"name": "a.txt", "content": essay_text}, {"name": "b.txt", "content": "Short reply."}]
    seq = SubmissionProcessor(max_workers=1).process_batch(files)
    pooled = SubmissionProcessor(max_workers=2).process_batch(files)
    assert [r.analysis.overall_quality for r in seq] == [r.analysis.overall_quality for r in pooled]


def test_empty_batch_returns_empty_list(processor):
    assert processor.process_batch([]) == []


@pytest.mark.parametrize("bad", ["essay.txt", {"name": "a.txt"}, None, 42])
def test_non_sequence_batch_is_rejected(processor, bad):
    with pytest.raises(InvalidBatchInputError):
        processor.process_batch(bad)


def test_invalid_batch_is_a_type_error(processor):
    with pytest.raises(TypeError):
        processor.process_batch("nope")


def test_unknown_criteria_propagate(processor, essay_text):
    with pytest.raises(UnknownDimensionError):
        processor.process_batch(
            [{"name": "a.txt", "content": essay_text}],
            ProcessingOptions(evaluation_criteria=["clarity", "tone"]),
        )


def test_malformed_item_becomes_error_entry(processor, essay_text):
    results = processor.process_batch([{"content": essay_text}, {"name": "ok.txt", "content": essay_text}])
    assert results[0].status == "error"
    assert results[0].file_name == "unknown"
    assert results[1].status == "success"


def test_unsupported_extension_is_extraction_error(processor):
    with pytest.raises(ExtractionError) as exc:
        processor.process_one(SubmissionFile(name="notes.odt", data=b"whatever"))
    assert "notes.odt" in str(exc.value)
    assert isinstance(exc.value.cause, ValueError)


def test_corrupt_pdf_recorded_in_batch(processor):
    results = processor.process_batch([SubmissionFile(name="broken.pdf", data=b"not a pdf at all")])
    assert results[0].status == "error"
    assert results[0].error_message.startswith("Could not extract text from broken.pdf")


def test_missing_text_is_empty(processor):
    with pytest.raises(EmptyContentError):
        processor.process_one(SubmissionFile(name="nothing.txt"))


def test_pdf_bytes_are_extracted(processor, sample_pdf_bytes):
    result = processor.process_batch([SubmissionFile(name="dana.pdf", data=sample_pdf_bytes)])[0]
    assert result.status == "success", result.error_message
    assert result.analysis.word_count > 0


def test_process_one_fields(processor, essay_text):
    options = ProcessingOptions(assignment_type="essay", evaluation_criteria=["clarity", "depth"])
    a = processor.process_one(SubmissionFile(name="x.txt", content=essay_text), options)
    assert set(a.dimension_scores) == {"clarity", "depth"}
    assert a.overall_quality == a.evaluation.overall_score
    assert a.word_count == a.text_analysis.word_count
    assert a.readability_score == a.text_analysis.readability_score
    assert a.feedback == a.evaluation.narrative_feedback
    assert a.metadata.assignment_type == "essay"
    assert a.metadata.evaluation_criteria == ["clarity", "depth"]
    assert a.assignment_analysis.type == "essay"


def test_output_uses_stable_camel_case_keys(processor, essay_text):
    r = processor.process_batch([{"name": "eve.txt", "content": essay_text}])[0]
    payload = r.model_dump(by_alias=True)
    assert {"fileName", "studentName", "status", "analysis", "errorMessage", "timestamp"} <= set(payload)
    analysis = payload["analysis"]
    for key in ("overallQuality", "dimensionScores", "strengths", "improvementAreas",
                "feedbackSuggestions", "wordCount", "readabilityScore"):
        assert key in analysis


@pytest.mark.parametrize("file_name, expected", [
    ("john_doe_essay.pdf", "john"),
    ("Jane Smith.txt", "Jane Smith"),
    ("2024-report.docx", "report"),
    ("1234.txt", "Unknown Student"),
])
def test_student_name(file_name, expected):
    assert student_name(file_name) == expected


def test_result_needs_exactly_one_of_analysis_or_error():
    with pytest.raises(ValidationError):
        SubmissionResult(file_name="a.txt", student_name="a", status="success")
    with pytest.raises(ValidationError):
        SubmissionResult(file_name="a.txt", student_name="a", status="success", error_message="boom")
    ok = SubmissionResult(file_name="a.txt", student_name="a", status="error", error_message="boom")
    assert ok.analysis is None


def test_process_one_accepts_plain_record(processor, essay_text):
    a = processor.process_one({"name": "plain.txt", "content": essay_text})
    assert a.word_count == len(essay_text.split())
    with pytest.raises(ValidationError):
        processor.process_one({"content": essay_text})


def test_default_assignment_type_is_essay(processor, essay_text):
    a = processor.process_one(SubmissionFile(name="x.txt", content=essay_text))
    assert a.metadata.assignment_type == "essay"
    assert a.assignment_analysis.type == "essay"
    assert ProcessingOptions().assignment_type == "essay"
