from __future__ import annotations
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Callable, List, Optional, Sequence
import logging
import os
import re

from bulk_feedback.core.config import BATCH_MAX_WORKERS
from bulk_feedback.core.errors import (
    EmptyContentError,
    ExtractionError,
    InvalidBatchInputError,
    UnknownDimensionError,
)
from bulk_feedback.models.report import (
    AnalysisMetadata,
    ProcessingOptions,
    SubmissionAnalysis,
    SubmissionFile,
    SubmissionResult,
)
from bulk_feedback.services.assignment import AssignmentTypeAnalyzer
from bulk_feedback.services.dimensions import DimensionEvaluator, resolve_dimensions
from bulk_feedback.services.extract import extract_text
from bulk_feedback.services.features import TextFeatureExtractor
from bulk_feedback.services.synthesis import FeedbackSynthesizer

log = logging.getLogger("processor")

_NAME_RUN = re.compile(r"[A-Za-z\s]+")

Extractor = Callable[[str, bytes], str]


def student_name(file_name: str) -> str:
    """First alphabetic run of the file stem, e.g. 'john_doe_essay.pdf' -> 'john'."""
    stem = os.path.splitext(os.path.basename(file_name))[0]
    m = _NAME_RUN.search(stem)
    name = m.group(0).strip() if m else ""
    return name or "Unknown Student"


def _item_name(item: Any) -> str:
    if isinstance(item, SubmissionFile):
        return item.name
    if isinstance(item, dict):
        return str(item.get("name") or "unknown")
    return "unknown"


class SubmissionProcessor:
    """Runs one submission, or a batch of them, through the analysis pipeline.

    Collaborators are created once and only read afterwards, so items can be
    scored on a thread pool without sharing any per-submission state.
    """

    def __init__(
        self,
        extractor: Optional[TextFeatureExtractor] = None,
        analyzer: Optional[AssignmentTypeAnalyzer] = None,
        evaluator: Optional[DimensionEvaluator] = None,
        synthesizer: Optional[FeedbackSynthesizer] = None,
        text_extractor: Extractor = extract_text,
        max_workers: int = BATCH_MAX_WORKERS,
    ):
        self.extractor = extractor or TextFeatureExtractor()
        self.analyzer = analyzer or AssignmentTypeAnalyzer()
        self.evaluator = evaluator or DimensionEvaluator()
        self.synthesizer = synthesizer or FeedbackSynthesizer()
        self._text_extractor = text_extractor
        self.max_workers = max(1, max_workers)

    def resolve_text(self, file: SubmissionFile) -> str:
        if file.content is not None:
            text = file.content
        elif file.data is not None:
            try:
                text = self._text_extractor(file.name, file.data)
            except Exception as e:
                raise ExtractionError(file.name, e) from e
        else:
            text = ""
        if not text.strip():
            raise EmptyContentError(file.name)
        return text

    def process_one(self, file: Any, options: Optional[ProcessingOptions] = None) -> SubmissionAnalysis:
        """`file` is a SubmissionFile or a plain {name, content} record."""
        if not isinstance(file, SubmissionFile):
            file = SubmissionFile.model_validate(file)
        options = options or ProcessingOptions()
        criteria = [d.value for d in resolve_dimensions(options.evaluation_criteria)]
        text = self.resolve_text(file)

        metrics = self.extractor.extract(text)
        type_analysis = self.analyzer.analyze(text, options.assignment_type)
        evaluation = self.evaluator.evaluate_all(text, options.assignment_type, criteria)
        feedback = self.synthesizer.synthesize(metrics, type_analysis, evaluation)

        return SubmissionAnalysis(
            text_analysis=metrics,
            assignment_analysis=type_analysis,
            evaluation=evaluation,
            dimension_scores=evaluation.dimensions,
            feedback=evaluation.narrative_feedback,
            feedback_suggestions=feedback.suggestions,
            improvement_areas=feedback.improvement_areas,
            strengths=feedback.strengths,
            assignment_focus=feedback.assignment_focus,
            word_count=metrics.word_count,
            readability_score=metrics.readability_score,
            overall_quality=evaluation.overall_score,
            metadata=AnalysisMetadata(
                assignment_type=options.assignment_type,
                evaluation_criteria=criteria,
            ),
        )

    def process_batch(
        self,
        files: Sequence[Any],
        options: Optional[ProcessingOptions] = None,
    ) -> List[SubmissionResult]:
        """One result per input, in input order. Per-file failures become error results."""
        if not isinstance(files, (list, tuple)):
            raise InvalidBatchInputError(
                f"Batch input must be a list of files, got {type(files).__name__}"
            )
        options = options or ProcessingOptions()
        # bad criteria are a caller error, not a per-file one
        resolve_dimensions(options.evaluation_criteria)
        if not files:
            return []

        log.info("Processing batch of %d file(s) as %s", len(files), options.assignment_type)
        workers = min(self.max_workers, len(files))
        if workers > 1:
            with ThreadPoolExecutor(max_workers=workers) as pool:
                results = list(pool.map(lambda f: self._process_item(f, options), files))
        else:
            results = [self._process_item(f, options) for f in files]

        failed = sum(1 for r in results if r.status == "error")
        log.info("Batch done: %d succeeded, %d failed", len(results) - failed, failed)
        return results

    def _process_item(self, item: Any, options: ProcessingOptions) -> SubmissionResult:
        name = _item_name(item)
        try:
            log.info("Analyzing %s", name)
            analysis = self.process_one(item, options)
        except UnknownDimensionError:
            raise
        except Exception as e:
            log.warning("Failed to process %s: %s", name, e)
            return SubmissionResult(
                file_name=name,
                student_name=student_name(name),
                status="error",
                error_message=str(e),
            )
        return SubmissionResult(
            file_name=name,
            student_name=student_name(name),
            status="success",
            analysis=analysis,
        )
