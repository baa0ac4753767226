# blindhire/services/qualification.py
"""
Generic multiple-choice round: start (insert-or-fetch) and one-shot submit.

Used for the eligibility test, the company round and the recruiter work test.
A round leaving ``pending`` is terminal; the status transition is a
conditional UPDATE so two racing submits cannot both win.
"""
import logging
from collections import namedtuple
from datetime import datetime
from typing import Callable, List, Optional

from sqlalchemy.exc import IntegrityError

from blindhire.errors import AlreadySubmitted, NoReattempt, NotFound, ValidationError
from blindhire.extensions import db
from blindhire.services.match_scorer import percent
from blindhire.services.questions import public_questions

logger = logging.getLogger(__name__)

GradeResult = namedtuple("GradeResult", ["status", "score", "pass_score", "passed", "details"])


def clean_answers(answers) -> List[dict]:
    if not isinstance(answers, list) or not answers:
        raise ValidationError("Answers are required")
    cleaned = []
    for item in answers:
        if not isinstance(item, dict):
            continue
        question_id = str(item.get("question_id") or item.get("questionId") or "").strip()
        answer = str(item.get("answer") or "").strip()
        if question_id and answer:
            cleaned.append({"question_id": question_id, "answer": answer})
    if not cleaned:
        raise ValidationError("Answers are required")
    return cleaned


def evaluate_answers(questions: List[dict], answers: List[dict]):
    """Case-insensitive comparison per question id; returns ``(score, details)``."""
    answer_map = {a["question_id"]: a["answer"] for a in answers}
    correct_count = 0
    details = []
    for question in questions or []:
        given = answer_map.get(str(question.get("question_id")), "")
        is_correct = given.strip().lower() == str(question.get("correct_answer") or "").strip().lower()
        if is_correct:
            correct_count += 1
        details.append({"question_id": question.get("question_id"), "answer": given, "is_correct": is_correct})
    return percent(correct_count, len(questions or []) or 1), details


def round_to_dict(row, **extra) -> dict:
    """Candidate-facing view of a round; questions only while pending."""
    data = {
        "status": row.status,
        "score": row.score,
        "pass_score": row.pass_score,
        "submitted_at": row.submitted_at.isoformat() if row.submitted_at else None,
        "questions": public_questions(row.questions) if row.status == "pending" else None,
    }
    data.update(extra)
    return data


class QualificationTest:
    def __init__(self, model, label: str):
        self.model = model
        self.label = label

    def find(self, **key):
        return self.model.query.filter_by(**key).first()

    def start(self, key: dict, build: Callable[[], dict]):
        """
        Return the round stored under ``key``, creating it with ``build()`` if absent.

        A pending round is returned as stored (same questions across reloads);
        a failed one raises NoReattempt. When two starts race, the unique key
        makes the loser read the winner's row instead of overwriting it.
        """
        existing = self.find(**key)
        if existing is not None:
            return self.resume(existing)

        values = build()
        row = self.model(**key, **values)
        row.status = "pending"
        row.score = 0
        row.answers = []
        row.submitted_at = None
        db.session.add(row)
        try:
            db.session.commit()
        except IntegrityError:
            db.session.rollback()
            winner = self.find(**key)
            if winner is None:
                raise
            logger.info(f"{self.label}: concurrent start resolved to the stored round")
            return self.resume(winner)

        logger.info(f"{self.label} created ({len(row.questions)} questions, generated_by={row.generated_by})")
        return row

    def resume(self, row):
        if row.status == "failed":
            raise NoReattempt(f"{self.label} already failed. Reattempt is not allowed for this job.")
        return row

    def submit(self, row, answers, commit: bool = True) -> GradeResult:
        if row is None:
            raise NotFound(f"{self.label} not found. Start the test first.")
        cleaned = clean_answers(answers)
        self._ensure_pending(row)

        score, details = evaluate_answers(row.questions, cleaned)
        passed = score >= row.pass_score
        status = "passed" if passed else "failed"

        updated = (
            self.model.query
            .filter_by(id=row.id, status="pending")
            .update(
                {"status": status, "score": score, "answers": cleaned, "submitted_at": datetime.utcnow()},
                synchronize_session=False,
            )
        )
        if updated != 1:
            db.session.rollback()
            db.session.refresh(row)
            self._ensure_pending(row)
            raise AlreadySubmitted(f"{self.label} already submitted.")

        db.session.refresh(row)
        if commit:
            db.session.commit()
        logger.info(f"{self.label} submitted: score={score} pass_score={row.pass_score} status={status}")
        return GradeResult(status, score, row.pass_score, passed, details)

    def _ensure_pending(self, row: Optional[object]):
        if row.status == "failed":
            raise AlreadySubmitted(f"{self.label} already submitted and failed. Reattempt is not allowed.")
        if row.status != "pending":
            raise AlreadySubmitted(f"{self.label} already submitted.")
