from blindhire.extensions import db


class QuizRoundMixin:
    """Columns shared by every multiple-choice round.

    ``questions`` holds ``correct_answer`` and must only leave the server
    through :func:`blindhire.services.questions.public_questions`.
    """

    questions = db.Column(db.JSON, nullable=False, default=list)
    pass_score = db.Column(db.Integer, nullable=False, default=60)
    score = db.Column(db.Integer, nullable=False, default=0)
    status = db.Column(db.Enum("pending", "passed", "failed", name="quiz_status"), nullable=False, default="pending")
    answers = db.Column(db.JSON, nullable=False, default=list)
    generated_by = db.Column(db.String(20), default="fallback")
    submitted_at = db.Column(db.DateTime)
