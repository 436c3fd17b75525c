from __future__ import annotations
from typing import Any, Callable, Dict, List, Tuple
import logging
import re

from bulk_feedback.models.report import TypeAnalysis
from bulk_feedback.services.features import split_paragraphs, split_sentences, split_words

log = logging.getLogger("assignment")

Check = Dict[str, Any]

TYPE_WEIGHTS: Dict[str, Dict[str, float]] = {
    "essay": {
        "structure": 0.25, "argumentation": 0.25, "evidence": 0.20,
        "style": 0.15, "thesis": 0.10, "conclusion": 0.05,
    },
    "worksheet": {
        "completeness": 0.30, "accuracy": 0.25, "understanding": 0.20,
        "effort": 0.15, "organization": 0.10,
    },
    "report": {
        "structure": 0.20, "research": 0.20, "citations": 0.15,
        "objectivity": 0.15, "methodology": 0.15, "findings": 0.15,
    },
    "creative": {
        "creativity": 0.25, "voice": 0.20, "imagery": 0.20,
        "dialogue": 0.15, "plot": 0.10, "character": 0.10,
    },
    "analysis": {
        "criticalThinking": 0.25, "evidence": 0.20, "interpretation": 0.20,
        "evaluation": 0.15, "synthesis": 0.10, "argumentation": 0.10,
    },
}

# (check, cut, message): strength when score > cut, improvement when score < cut
STRENGTH_RULES: Dict[str, List[Tuple[str, float, str]]] = {
    "essay": [
        ("structure", 0.7, "Well-structured essay"),
        ("argumentation", 0.6, "Strong argumentation"),
        ("evidence", 0.6, "Good use of evidence"),
        ("style", 0.7, "Clear writing style"),
        ("thesis", 0.7, "Clear thesis statement"),
    ],
    "worksheet": [
        ("completeness", 0.8, "Complete responses"),
        ("understanding", 0.6, "Good understanding"),
        ("effort", 0.7, "Good effort"),
        ("organization", 0.7, "Well organized"),
    ],
    "report": [
        ("structure", 0.7, "Well-structured report"),
        ("research", 0.6, "Good research foundation"),
        ("citations", 0.6, "Proper citations"),
        ("objectivity", 0.7, "Objective presentation"),
    ],
    "creative": [
        ("creativity", 0.6, "Creative expression"),
        ("voice", 0.6, "Strong personal voice"),
        ("imagery", 0.6, "Good use of imagery"),
        ("dialogue", 0.6, "Effective dialogue"),
    ],
    "analysis": [
        ("criticalThinking", 0.6, "Strong critical thinking"),
        ("evidence", 0.6, "Good use of evidence"),
        ("interpretation", 0.6, "Good interpretation"),
        ("evaluation", 0.6, "Effective evaluation"),
    ],
}
IMPROVEMENT_RULES: Dict[str, List[Tuple[str, float, str]]] = {
    "essay": [
        ("structure", 0.6, "Improve essay structure"),
        ("argumentation", 0.5, "Strengthen argumentation"),
        ("evidence", 0.5, "Add more evidence"),
        ("style", 0.6, "Improve writing style"),
        ("thesis", 0.6, "Clarify thesis statement"),
    ],
    "worksheet": [
        ("completeness", 0.6, "Answer all questions completely"),
        ("understanding", 0.5, "Show more understanding"),
        ("effort", 0.6, "Provide more detailed answers"),
        ("organization", 0.6, "Improve organization"),
    ],
    "report": [
        ("structure", 0.6, "Improve report structure"),
        ("research", 0.5, "Strengthen research"),
        ("citations", 0.5, "Add more citations"),
        ("objectivity", 0.6, "Maintain objectivity"),
    ],
    "creative": [
        ("creativity", 0.5, "Develop more creativity"),
        ("voice", 0.5, "Strengthen personal voice"),
        ("imagery", 0.5, "Add more sensory details"),
        ("dialogue", 0.5, "Include more dialogue"),
    ],
    "analysis": [
        ("criticalThinking", 0.5, "Develop critical thinking"),
        ("evidence", 0.5, "Use more evidence"),
        ("interpretation", 0.5, "Improve interpretation"),
        ("evaluation", 0.5, "Strengthen evaluation"),
    ],
}

GENERAL_SCORE = 0.7

_EVIDENCE_PATTERNS = [
    re.compile(p, re.IGNORECASE)
    for p in (r"according to", r"research shows", r"studies indicate", r"data suggests", r"findings show")
]
_CITATION = re.compile(r"\[\d+\]|\(\w+\s+\d{4}\)|et al\.", re.IGNORECASE)
_DIALOGUE = re.compile(r"\"[^\"]*\"|“[^”]*”")
_QUESTION_NUMBER = re.compile(r"\d+\.")

INTRO_KEYWORDS = ["introduction", "overview", "purpose", "aim", "goal"]
CONCLUSION_KEYWORDS = ["conclusion", "summary", "finally", "overall", "in conclusion"]


def _present(text: str, keywords: List[str]) -> int:
    """Number of distinct keywords that occur anywhere in the text."""
    lower = text.lower()
    return sum(1 for k in keywords if k in lower)


def _capped(count: float, threshold: float) -> float:
    return min(1.0, count / threshold)


def _keyword_check(text: str, keywords: List[str], threshold: float) -> Check:
    count = _present(text, keywords)
    return {"score": _capped(count, threshold), "count": count}


def _words_per_sentence(text: str) -> float:
    sentences = split_sentences(text)
    return len(split_words(text)) / len(sentences) if sentences else 0.0


# --------------------------------------------------------------------
# Shared checks
# --------------------------------------------------------------------
def argumentation(text: str) -> Check:
    arguments = _present(text, ["argue", "claim", "assert", "maintain", "contend", "propose"])
    evidence = _present(text, ["evidence", "proof", "data", "research", "study", "findings"])
    counters = _present(text, ["however", "although", "despite", "nevertheless"])
    return {
        "score": _capped(arguments + evidence + counters, 5),
        "argumentCount": arguments,
        "evidenceCount": evidence,
        "counterCount": counters,
    }


def evidence(text: str) -> Check:
    count = sum(len(p.findall(text)) for p in _EVIDENCE_PATTERNS)
    return {"score": _capped(count, 3), "count": count}


# --------------------------------------------------------------------
# Essay
# --------------------------------------------------------------------
def essay_structure(text: str) -> Check:
    paragraphs = split_paragraphs(text)
    first = paragraphs[0] if paragraphs else ""
    last = paragraphs[-1] if paragraphs else ""
    has_intro = bool(first) and (_present(first, INTRO_KEYWORDS) > 0 or len(first) > 50)
    has_body = len(paragraphs) >= 3
    has_conclusion = bool(last) and (_present(last, CONCLUSION_KEYWORDS) > 0 or len(last) > 30)
    return {
        "score": (0.4 if has_intro else 0) + (0.4 if has_body else 0) + (0.2 if has_conclusion else 0),
        "hasIntroduction": has_intro,
        "hasBody": has_body,
        "hasConclusion": has_conclusion,
        "paragraphCount": len(paragraphs),
    }


def writing_style(text: str) -> Check:
    words = split_words(text)
    avg = _words_per_sentence(text)
    diversity = len({w.lower() for w in words}) / len(words) if words else 0.0
    # 15-25 words per sentence reads best; 20 is the sweet spot
    length_score = max(0.0, 1 - abs(avg - 20) / 20) if words else 0.0
    vocab_score = min(1.0, diversity * 2)
    return {
        "score": (length_score + vocab_score) / 2,
        "avgWordsPerSentence": round(avg, 2),
        "vocabularyDiversity": round(diversity, 2),
    }


def thesis(text: str) -> Check:
    paragraphs = split_paragraphs(text)
    first = paragraphs[0] if paragraphs else ""
    found = _present(first, ["thesis", "main point", "argument", "claim", "position"]) > 0
    return {"score": 0.8 if found else 0.3, "hasThesis": found, "location": "introduction"}


def conclusion(text: str) -> Check:
    paragraphs = split_paragraphs(text)
    last = paragraphs[-1] if paragraphs else ""
    found = _present(last, CONCLUSION_KEYWORDS) > 0
    return {"score": 0.8 if found else 0.4, "hasConclusion": found, "length": len(last)}


# --------------------------------------------------------------------
# Worksheet
# --------------------------------------------------------------------
def completeness(text: str) -> Check:
    questions = [q.strip() for q in _QUESTION_NUMBER.split(text) if q.strip()]
    answered = [q for q in questions if len(q) > 10]
    return {
        "score": len(answered) / max(1, len(questions)),
        "totalQuestions": len(questions),
        "answeredQuestions": len(answered),
    }


def worksheet_accuracy(text: str) -> Check:
    # Correctness needs subject knowledge this engine does not have.
    return {"score": 0.8, "feedback": "Accuracy assessment requires subject-specific knowledge"}


def effort(text: str) -> Check:
    word_count = len(split_words(text))
    per_answer = word_count / max(1, len(_QUESTION_NUMBER.findall(text)))
    return {
        "score": _capped(per_answer, 20),
        "wordCount": word_count,
        "avgWordsPerAnswer": round(per_answer, 2),
    }


def worksheet_organization(text: str) -> Check:
    numbered = bool(_QUESTION_NUMBER.search(text))
    clear_answers = len(_QUESTION_NUMBER.split(text)) > 1
    return {
        "score": (0.5 if numbered else 0) + (0.5 if clear_answers else 0),
        "hasNumbering": numbered,
        "hasClearAnswers": clear_answers,
    }


# --------------------------------------------------------------------
# Report
# --------------------------------------------------------------------
REPORT_SECTIONS = ["introduction", "methodology", "results", "discussion", "conclusion"]


def report_structure(text: str) -> Check:
    lower = text.lower()
    found = [s for s in REPORT_SECTIONS if s in lower]
    return {
        "score": len(found) / len(REPORT_SECTIONS),
        "foundSections": found,
        "totalSections": len(REPORT_SECTIONS),
    }


def citations(text: str) -> Check:
    count = len(_CITATION.findall(text))
    return {"score": _capped(count, 5), "count": count}


def objectivity(text: str) -> Check:
    subjective = _present(text, ["i think", "i believe", "i feel", "in my opinion"])
    objective = _present(text, ["data shows", "research indicates", "studies suggest"])
    return {
        "score": min(1.0, objective / (subjective + objective + 1)),
        "subjectiveCount": subjective,
        "objectiveCount": objective,
    }


# --------------------------------------------------------------------
# Creative
# --------------------------------------------------------------------
def voice(text: str) -> Check:
    words = split_words(text)
    personal = sum(1 for w in words if w.lower() in {"i", "my", "me", "we", "our"})
    return {
        "score": min(1.0, personal / len(words) * 10) if words else 0.0,
        "personalCount": personal,
        "totalWords": len(words),
    }


def dialogue(text: str) -> Check:
    count = len(_DIALOGUE.findall(text))
    return {"score": _capped(count, 3), "count": count}


# --------------------------------------------------------------------
# General
# --------------------------------------------------------------------
def general_content(text: str) -> Check:
    word_count = len(split_words(text))
    return {
        "score": _capped(word_count, 150),
        "wordCount": word_count,
        "sentenceCount": len(split_sentences(text)),
        "paragraphCount": len(split_paragraphs(text)),
    }


def general_organization(text: str) -> Check:
    paragraphs = split_paragraphs(text)
    return {"score": _capped(len(paragraphs), 3), "paragraphCount": len(paragraphs)}


def general_clarity(text: str) -> Check:
    avg = _words_per_sentence(text)
    # shorter sentences read more clearly
    return {"score": max(0.0, min(1.0, 1 - (avg - 15) / 20)), "avgWordsPerSentence": round(avg, 2)}


class AssignmentTypeAnalyzer:
    """Structural checks that depend on the declared assignment type.

    Unknown types are analysed as `general`, which always succeeds.
    """

    def __init__(self):
        self._handlers: Dict[str, Callable[[str], Dict[str, Check]]] = {
            "essay": self._essay_checks,
            "worksheet": self._worksheet_checks,
            "report": self._report_checks,
            "creative": self._creative_checks,
            "analysis": self._analysis_checks,
        }

    @property
    def supported_types(self) -> List[str]:
        return [*self._handlers, "general"]

    def analyze(self, text: str, assignment_type: str = "general") -> TypeAnalysis:
        handler = self._handlers.get(assignment_type)
        if handler is None:
            if assignment_type != "general":
                log.debug("Unknown assignment type %r, using general analysis", assignment_type)
            return self._general(text)

        checks = handler(text)
        weights = TYPE_WEIGHTS[assignment_type]
        overall = round(sum(checks[name]["score"] * w for name, w in weights.items()), 2)
        return TypeAnalysis(
            type=assignment_type,
            checks=checks,
            overall_score=min(1.0, overall),
            strengths=[msg for name, cut, msg in STRENGTH_RULES[assignment_type] if checks[name]["score"] > cut],
            improvements=[msg for name, cut, msg in IMPROVEMENT_RULES[assignment_type] if checks[name]["score"] < cut],
        )

    def _essay_checks(self, text: str) -> Dict[str, Check]:
        return {
            "structure": essay_structure(text),
            "argumentation": argumentation(text),
            "evidence": evidence(text),
            "style": writing_style(text),
            "thesis": thesis(text),
            "conclusion": conclusion(text),
        }

    def _worksheet_checks(self, text: str) -> Dict[str, Check]:
        return {
            "completeness": completeness(text),
            "accuracy": worksheet_accuracy(text),
            "understanding": _keyword_check(text, ["because", "therefore", "since", "due to", "as a result"], 3),
            "effort": effort(text),
            "organization": worksheet_organization(text),
        }

    def _report_checks(self, text: str) -> Dict[str, Check]:
        return {
            "structure": report_structure(text),
            "research": _keyword_check(text, ["research", "study", "investigation", "analysis", "examination"], 3),
            "citations": citations(text),
            "objectivity": objectivity(text),
            "methodology": _keyword_check(text, ["method", "procedure", "process", "approach", "technique"], 2),
            "findings": _keyword_check(text, ["found", "discovered", "revealed", "showed", "indicated"], 2),
        }

    def _creative_checks(self, text: str) -> Dict[str, Check]:
        return {
            "creativity": _keyword_check(text, ["imagine", "creative", "unique", "original", "innovative"], 3),
            "voice": voice(text),
            "imagery": _keyword_check(
                text, ["saw", "heard", "felt", "smelled", "tasted", "bright", "loud", "soft", "sweet"], 5
            ),
            "dialogue": dialogue(text),
            "plot": _keyword_check(text, ["beginning", "middle", "end", "conflict", "resolution", "climax"], 3),
            "character": _keyword_check(text, ["character", "protagonist", "hero", "villain", "personality"], 2),
        }

    def _analysis_checks(self, text: str) -> Dict[str, Check]:
        return {
            "criticalThinking": _keyword_check(
                text, ["analyze", "evaluate", "critique", "examine", "assess", "compare"], 3
            ),
            "evidence": evidence(text),
            "interpretation": _keyword_check(
                text, ["interpret", "understand", "meaning", "significance", "imply"], 2
            ),
            "evaluation": _keyword_check(text, ["evaluate", "judge", "assess", "rate", "value", "worth"], 2),
            "synthesis": _keyword_check(text, ["synthesize", "combine", "integrate", "merge", "unify"], 2),
            "argumentation": argumentation(text),
        }

    def _general(self, text: str) -> TypeAnalysis:
        return TypeAnalysis(
            type="general",
            checks={
                "content": general_content(text),
                "organization": general_organization(text),
                "clarity": general_clarity(text),
                "depth": _keyword_check(text, ["specifically", "in detail", "thoroughly", "comprehensive"], 2),
            },
            overall_score=GENERAL_SCORE,
            strengths=["Good effort"],
            improvements=["Continue developing your ideas"],
        )
