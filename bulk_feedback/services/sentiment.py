from __future__ import annotations
from typing import List, Protocol

from afinn import Afinn

from bulk_feedback.models.report import SentimentResult


class SentimentLexicon(Protocol):
    def analyze(self, text: str) -> SentimentResult: ...


class AfinnSentiment:
    """Lexicon-based polarity using the AFINN word list.

    score is the summed valence of matched words and phrases, comparative
    divides it by the number of whitespace tokens.
    """

    def __init__(self, language: str = "en"):
        self._afinn = Afinn(language=language)

    def analyze(self, text: str) -> SentimentResult:
        tokens = text.split()
        if not tokens:
            return SentimentResult()

        positive: List[str] = []
        negative: List[str] = []
        total = 0
        for match in self._afinn.find_all(text):
            valence = int(self._afinn.score(match))
            total += valence
            if valence > 0:
                positive.append(match)
            elif valence < 0:
                negative.append(match)

        return SentimentResult(
            score=total,
            comparative=total / len(tokens),
            positive_words=positive,
            negative_words=negative,
        )
