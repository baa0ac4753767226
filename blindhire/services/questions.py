# blindhire/services/questions.py
"""Shape helpers for multiple-choice questions stored as JSON."""
from typing import List, Optional

from blindhire.errors import ValidationError

MAX_OPTIONS = 4


def _clean(value) -> str:
    return str(value or "").strip()


def normalize_question(raw, index: int, prefix: str = "q") -> Optional[dict]:
    """Return a clean question dict, or None when it cannot be used."""
    if not isinstance(raw, dict):
        return None
    text = _clean(raw.get("question"))
    options = [_clean(o) for o in raw.get("options") or [] if _clean(o)][:MAX_OPTIONS]
    correct_answer = _clean(raw.get("correct_answer") or raw.get("correctAnswer"))
    if not text or len(options) < 2 or correct_answer not in options:
        return None
    question_id = _clean(raw.get("question_id") or raw.get("questionId")) or f"{prefix}{index + 1}"
    return {
        "question_id": question_id,
        "question": text,
        "options": options,
        "correct_answer": correct_answer,
    }


def normalize_question_ids(questions: List[dict], prefix: str = "q") -> List[dict]:
    """Make question ids unique within a round, keeping existing ids where possible."""
    used = set()
    normalized = []
    for index, question in enumerate(questions or []):
        question_id = _clean(question.get("question_id")) or f"{prefix}{index + 1}"
        if question_id in used:
            question_id = f"{prefix}{index + 1}"
        counter = 1
        while question_id in used:
            question_id = f"{prefix}{index + 1}_{counter}"
            counter += 1
        used.add(question_id)
        normalized.append({**question, "question_id": question_id})
    return normalized


def validate_question_set(raw_questions, prefix: str = "q", minimum: int = 1) -> List[dict]:
    """Strict validation for recruiter-supplied tests; raises ValidationError."""
    if not isinstance(raw_questions, list) or len(raw_questions) < minimum:
        raise ValidationError(f"At least {minimum} question(s) are required")

    questions = []
    for index, raw in enumerate(raw_questions):
        question = normalize_question(raw, index, prefix)
        if question is None:
            raise ValidationError(
                f"Question {index + 1} is malformed: it needs text, at least 2 options "
                "and a correct answer matching one option"
            )
        questions.append(question)
    return normalize_question_ids(questions, prefix)


def public_questions(questions: List[dict]) -> List[dict]:
    """Test-taker projection; ``correct_answer`` never leaves the server."""
    return [
        {
            "question_id": q.get("question_id"),
            "question": q.get("question"),
            "options": list(q.get("options") or []),
        }
        for q in questions or []
    ]
