from __future__ import annotations
from collections import Counter
from typing import List, Optional
import logging
import re

from language_tool_python import LanguageTool

from bulk_feedback.core.config import (
    GRAMMAR_CHECKER_ENABLED,
    GRAMMAR_CHECKER_LANGUAGE,
    OVERUSED_WORD_LIMIT,
    OVERUSED_WORD_THRESHOLD,
    RUN_ON_WORD_LIMIT,
)
from bulk_feedback.models.report import GrammarIssue, TextMetrics, VocabularyStats, WordCount
from bulk_feedback.services.sentiment import AfinnSentiment, SentimentLexicon

log = logging.getLogger("features")

_SENTENCE_BREAK = re.compile(r"[.!?]+")
_PARAGRAPH_BREAK = re.compile(r"\n\s*\n")
_SILENT_ENDING = re.compile(r"(?:[^laeiouy]es|ed|[^laeiouy]e)$")
_VOWEL_RUN = re.compile(r"[aeiouy]+")
_NON_WORD = re.compile(r"[^\w']+")


def split_words(text: str) -> List[str]:
    return text.split()


def split_sentences(text: str) -> List[str]:
    return [s.strip() for s in _SENTENCE_BREAK.split(text) if s.strip()]


def split_paragraphs(text: str) -> List[str]:
    return [p.strip() for p in _PARAGRAPH_BREAK.split(text) if p.strip()]


def count_syllables(word: str) -> int:
    # Heuristic, close enough for readability formulas.
    word = word.lower()
    if len(word) <= 3:
        return 1
    word = _SILENT_ENDING.sub("", word)
    if word.startswith("y"):
        word = word[1:]
    runs = _VOWEL_RUN.findall(word)
    return len(runs) or 1


def flesch_reading_ease(words_per_sentence: float, syllables_per_word: float) -> float:
    return 206.835 - 1.015 * words_per_sentence - 84.6 * syllables_per_word


def heuristic_issues(index: int, sentence: str) -> List[GrammarIssue]:
    issues: List[GrammarIssue] = []
    first = sentence[0]
    if first != first.upper():
        issues.append(GrammarIssue(
            kind="capitalization",
            sentence_index=index,
            description="Sentence should start with a capital letter",
            suggestion="Capitalize the first letter of the sentence",
        ))
    if len(sentence.split()) > RUN_ON_WORD_LIMIT:
        issues.append(GrammarIssue(
            kind="run-on",
            sentence_index=index,
            description=f"Sentence may be too long ({len(sentence.split())} words)",
            suggestion="Consider breaking into shorter sentences",
        ))
    return issues


def vocabulary_stats(words: List[str]) -> VocabularyStats:
    if not words:
        return VocabularyStats()
    folded = [w.lower() for w in words]
    unique = len(set(folded))

    cleaned = (_NON_WORD.sub("", w).strip("'") for w in folded)
    counts = Counter(w for w in cleaned if w)
    overused = sorted(
        ((w, c) for w, c in counts.items() if c > OVERUSED_WORD_THRESHOLD),
        key=lambda item: (-item[1], item[0]),
    )[:OVERUSED_WORD_LIMIT]

    return VocabularyStats(
        unique_word_count=unique,
        total_word_count=len(words),
        diversity=round(unique / len(words), 2),
        overused_words=[WordCount(word=w, count=c) for w, c in overused],
    )


class TextFeatureExtractor:
    """Turns raw text into TextMetrics.

    The sentiment lexicon is injected; LanguageTool is only started when the
    optional grammar pass is switched on, since it needs a Java runtime.
    """

    def __init__(
        self,
        sentiment: Optional[SentimentLexicon] = None,
        use_language_tool: bool = GRAMMAR_CHECKER_ENABLED,
        language: str = GRAMMAR_CHECKER_LANGUAGE,
    ):
        self._sentiment = sentiment or AfinnSentiment()
        self._language_tool = LanguageTool(language) if use_language_tool else None
        if self._language_tool is not None:
            log.info("LanguageTool grammar pass enabled (%s)", language)

    def extract(self, text: str) -> TextMetrics:
        words = split_words(text)
        sentences = split_sentences(text)
        paragraphs = split_paragraphs(text)

        words_per_sentence = len(words) / len(sentences) if sentences else 0.0
        syllables_per_word = (
            sum(count_syllables(w) for w in words) / len(words) if words else 0.0
        )
        readability = (
            flesch_reading_ease(words_per_sentence, syllables_per_word) if words else 0.0
        )

        return TextMetrics(
            word_count=len(words),
            sentence_count=len(sentences),
            paragraph_count=len(paragraphs),
            average_words_per_sentence=round(words_per_sentence, 2),
            average_syllables_per_word=round(syllables_per_word, 2),
            readability_score=round(readability, 2),
            sentiment=self._sentiment.analyze(text),
            grammar_issues=self.grammar_issues(sentences),
            vocabulary=vocabulary_stats(words),
        )

    def grammar_issues(self, sentences: List[str]) -> List[GrammarIssue]:
        issues: List[GrammarIssue] = []
        for index, sentence in enumerate(sentences, start=1):
            issues.extend(heuristic_issues(index, sentence))
            if self._language_tool is not None:
                issues.extend(self._checked_issues(index, sentence))
        return issues

    def _checked_issues(self, index: int, sentence: str) -> List[GrammarIssue]:
        issues: List[GrammarIssue] = []
        for m in self._language_tool.check(sentence):
            suggestion = ", ".join(m.replacements[:3]) if m.replacements else "Review this sentence"
            issues.append(GrammarIssue(
                kind="spelling" if m.ruleIssueType == "misspelling" else "grammar",
                sentence_index=index,
                description=m.message,
                suggestion=suggestion,
            ))
        return issues
