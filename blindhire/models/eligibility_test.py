from blindhire.extensions import db
from blindhire.models.quiz import QuizRoundMixin
from datetime import datetime
import uuid


class EligibilityTest(QuizRoundMixin, db.Model):
    __tablename__ = "eligibility_tests"
    __table_args__ = (
        db.UniqueConstraint("candidate_id", "job_id", name="uq_eligibility_tests_candidate_job"),
    )

    id = db.Column(db.String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    candidate_id = db.Column(db.String(36), db.ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    job_id = db.Column(db.String(36), db.ForeignKey("jobs.id", ondelete="CASCADE"), nullable=False, index=True)
    required_skills_snapshot = db.Column(db.JSON, nullable=False, default=list)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    company_round = db.relationship(
        "CompanyRound", back_populates="eligibility_test", uselist=False, cascade="all, delete-orphan"
    )


class CompanyRound(QuizRoundMixin, db.Model):
    """Second gate, built from the job's recruiter-authored test."""
    __tablename__ = "company_rounds"

    id = db.Column(db.String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    eligibility_test_id = db.Column(
        db.String(36), db.ForeignKey("eligibility_tests.id", ondelete="CASCADE"), nullable=False, unique=True
    )
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    eligibility_test = db.relationship("EligibilityTest", back_populates="company_round")
