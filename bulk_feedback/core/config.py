import os

MAX_UPLOAD_BYTES = 50 * 1024 * 1024  # 50 MB soft cap per request
ALLOWED_EXTENSIONS = {".txt", ".pdf", ".docx"}

# Batch execution
BATCH_MAX_WORKERS = int(os.getenv("BULK_FEEDBACK_MAX_WORKERS", os.cpu_count() or 1))

# Text features
RUN_ON_WORD_LIMIT = 30        # words per sentence before it is flagged as run-on
OVERUSED_WORD_THRESHOLD = 5   # occurrences before a word counts as overused
OVERUSED_WORD_LIMIT = 3       # how many overused words to report

# Optional LanguageTool pass (needs Java at runtime)
GRAMMAR_CHECKER_ENABLED = os.getenv("BULK_FEEDBACK_LANGUAGE_TOOL", "0") == "1"
GRAMMAR_CHECKER_LANGUAGE = os.getenv("BULK_FEEDBACK_LANGUAGE", "en-US")

# Dimension evaluation
DIMENSION_WEIGHTS = {
    "structure": 0.20,
    "creativity": 0.15,
    "accuracy": 0.15,
    "presentation": 0.10,
    "critical_thinking": 0.20,
    "clarity": 0.10,
    "depth": 0.10,
}
LENGTH_PENALTY_WORDS = 150    # below this the overall score is scaled down
LONG_SUBMISSION_WORDS = 1000
STRENGTH_THRESHOLD = 0.7
IMPROVEMENT_THRESHOLD = 0.5
EXCELLENT_TIER = 0.8
GOOD_TIER = 0.6
MAX_GRADE_LEVEL = 16.0        # FK grade that maps to readability 0

# Feedback synthesis
SUGGESTION_THRESHOLD = 0.7
HIGH_PRIORITY_BELOW = 0.4
AREA_MEDIUM_BELOW = 0.6
HIGH_STRENGTH_THRESHOLD = 0.85
GRAMMAR_DENSITY_CEILING = 1.0  # issues per 100 words that drive the grammar score to 0
LENGTH_STRENGTH_WORDS = 150
READABILITY_STRENGTH = 60
VOCABULARY_WEAK_DIVERSITY = 0.4
VOCABULARY_STRONG_DIVERSITY = 0.6
