from datetime import datetime, timezone
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel

Priority = Literal["high", "medium", "low"]
StrengthLevel = Literal["high", "medium"]
Status = Literal["success", "error"]


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


class CamelModel(BaseModel):
    """Snake_case in Python, camelCase on the wire (model_dump(by_alias=True))."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class FrozenModel(CamelModel):
    model_config = ConfigDict(frozen=True)


# --------------------------------------------------------------------
# Text features
# --------------------------------------------------------------------
class SentimentResult(FrozenModel):
    score: int = 0
    comparative: float = 0.0
    positive_words: List[str] = Field(default_factory=list)
    negative_words: List[str] = Field(default_factory=list)


class GrammarIssue(FrozenModel):
    kind: str
    sentence_index: int = Field(ge=1)
    description: str
    suggestion: str


class WordCount(FrozenModel):
    word: str
    count: int


class VocabularyStats(FrozenModel):
    unique_word_count: int = 0
    total_word_count: int = 0
    diversity: float = Field(default=0.0, ge=0.0, le=1.0)
    overused_words: List[WordCount] = Field(default_factory=list)


class TextMetrics(FrozenModel):
    word_count: int = 0
    sentence_count: int = 0
    paragraph_count: int = 0
    average_words_per_sentence: float = 0.0
    average_syllables_per_word: float = 0.0
    readability_score: float = 0.0
    sentiment: SentimentResult = Field(default_factory=SentimentResult)
    grammar_issues: List[GrammarIssue] = Field(default_factory=list)
    vocabulary: VocabularyStats = Field(default_factory=VocabularyStats)


# --------------------------------------------------------------------
# Dimension evaluation
# --------------------------------------------------------------------
class DimensionResult(FrozenModel):
    dimension: str
    score: float = Field(ge=0.0, le=1.0)
    feedback: str
    details: Dict[str, Any] = Field(default_factory=dict)


class DimensionHighlight(CamelModel):
    dimension: str
    score: float
    feedback: str


class EvaluationReport(CamelModel):
    dimensions: Dict[str, DimensionResult]
    overall_score: float = Field(ge=0.0, le=1.0)
    strengths: List[DimensionHighlight] = Field(default_factory=list)
    improvements: List[DimensionHighlight] = Field(default_factory=list)
    word_count: int = 0
    sentence_count: int = 0
    paragraph_count: int = 0
    readability_score: float = 0.0
    narrative_feedback: str = ""


# --------------------------------------------------------------------
# Assignment-type analysis
# --------------------------------------------------------------------
class TypeAnalysis(CamelModel):
    type: str
    checks: Dict[str, Dict[str, Any]]
    overall_score: float = Field(ge=0.0, le=1.0)
    strengths: List[str] = Field(default_factory=list)
    improvements: List[str] = Field(default_factory=list)


# --------------------------------------------------------------------
# Synthesized feedback
# --------------------------------------------------------------------
class Suggestion(CamelModel):
    category: str
    priority: Priority
    score: float
    feedback: str
    specific_suggestions: str
    details: Dict[str, Any] = Field(default_factory=dict)


class ImprovementArea(CamelModel):
    dimension: str
    current_score: float
    description: str
    priority: Priority
    details: Dict[str, Any] = Field(default_factory=dict)


class Strength(CamelModel):
    dimension: str
    score: float
    strength_level: StrengthLevel
    description: str
    details: Dict[str, Any] = Field(default_factory=dict)


class SynthesizedFeedback(CamelModel):
    suggestions: List[Suggestion] = Field(default_factory=list)
    improvement_areas: List[ImprovementArea] = Field(default_factory=list)
    strengths: List[Strength] = Field(default_factory=list)
    assignment_focus: List[str] = Field(default_factory=list)


# --------------------------------------------------------------------
# Submissions
# --------------------------------------------------------------------
class SubmissionFile(CamelModel):
    """A submission handed to the engine.

    `content` is already-extracted text; `data` is raw upload bytes that still
    need to go through the extraction collaborator.
    """
    name: str
    content: Optional[str] = None
    data: Optional[bytes] = None


class ProcessingOptions(CamelModel):
    assignment_type: str = "essay"
    evaluation_criteria: List[str] = Field(default_factory=list)


class AnalysisMetadata(CamelModel):
    processed_at: str = Field(default_factory=_now)
    assignment_type: str
    evaluation_criteria: List[str]


class SubmissionAnalysis(CamelModel):
    text_analysis: TextMetrics
    assignment_analysis: TypeAnalysis
    evaluation: EvaluationReport
    dimension_scores: Dict[str, DimensionResult]
    feedback: str
    feedback_suggestions: List[Suggestion]
    improvement_areas: List[ImprovementArea]
    strengths: List[Strength]
    assignment_focus: List[str] = Field(default_factory=list)
    word_count: int
    readability_score: float
    overall_quality: float
    metadata: AnalysisMetadata


class SubmissionResult(CamelModel):
    file_name: str
    student_name: str
    status: Status
    analysis: Optional[SubmissionAnalysis] = None
    error_message: Optional[str] = None
    timestamp: str = Field(default_factory=_now)

    @model_validator(mode="after")
    def _analysis_xor_error(self):
        if (self.analysis is None) == (self.error_message is None):
            raise ValueError("exactly one of analysis or error_message must be set")
        if self.status == "success" and self.analysis is None:
            raise ValueError("successful results need an analysis")
        if self.status == "error" and self.error_message is None:
            raise ValueError("error results need an error message")
        return self


# --------------------------------------------------------------------
# Batch summary
# --------------------------------------------------------------------
class MetricStats(CamelModel):
    average: float = 0.0
    min: float = 0.0
    max: float = 0.0


class ScoreDistribution(CamelModel):
    high: int = 0
    medium: int = 0
    low: int = 0


class LabelCount(CamelModel):
    label: str
    count: int


class BatchStatistics(CamelModel):
    word_count: MetricStats = Field(default_factory=MetricStats)
    readability: MetricStats = Field(default_factory=MetricStats)
    overall_score: MetricStats = Field(default_factory=MetricStats)


class BatchSummary(CamelModel):
    total_students: int = 0
    processed_students: int = 0
    error_count: int = 0
    average_score: float = 0.0
    score_distribution: ScoreDistribution = Field(default_factory=ScoreDistribution)
    common_strengths: List[LabelCount] = Field(default_factory=list)
    common_improvements: List[LabelCount] = Field(default_factory=list)
    statistics: BatchStatistics = Field(default_factory=BatchStatistics)


# --------------------------------------------------------------------
# HTTP payloads
# --------------------------------------------------------------------
class AnalyzeRequest(CamelModel):
    files: List[SubmissionFile] = Field(default_factory=list)
    assignment_type: str = "essay"
    evaluation_criteria: List[str] = Field(default_factory=list)


class BatchResponse(CamelModel):
    success: bool = True
    processed_count: int
    results: List[SubmissionResult]
    summary: BatchSummary
