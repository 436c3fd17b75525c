class FeedbackError(Exception):
    """Base exception for the feedback engine."""


class SubmissionError(FeedbackError):
    """A single submission could not be analysed. Recorded per item in a batch."""


class EmptyContentError(SubmissionError):
    """Raised when a submission has no usable text."""

    def __init__(self, name: str = ""):
        label = f" ({name})" if name else ""
        super().__init__(f"File appears to be empty{label}")


class ExtractionError(SubmissionError):
    """Raised when the text-extraction collaborator fails."""

    def __init__(self, name: str, cause: Exception):
        super().__init__(f"Could not extract text from {name}: {cause}")
        self.cause = cause


class UnknownDimensionError(FeedbackError):
    """Raised for an evaluation dimension outside the fixed set."""

    def __init__(self, dimension: str):
        super().__init__(f"Unknown evaluation dimension: {dimension}")
        self.dimension = dimension


class InvalidBatchInputError(FeedbackError, TypeError):
    """Raised when a batch argument is not a sequence of files."""
