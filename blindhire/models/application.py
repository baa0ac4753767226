from blindhire.extensions import db
from blindhire.models.quiz import QuizRoundMixin
from datetime import datetime
import uuid


class Application(db.Model):
    __tablename__ = "applications"
    __table_args__ = (
        db.UniqueConstraint("job_id", "candidate_id", name="uq_applications_job_candidate"),
        db.Index("ix_applications_recruiter_status", "recruiter_id", "status"),
    )

    id = db.Column(db.String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    job_id = db.Column(db.String(36), db.ForeignKey("jobs.id", ondelete="CASCADE"), nullable=False, index=True)
    recruiter_id = db.Column(db.String(36), db.ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    candidate_id = db.Column(db.String(36), db.ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    anonymous_id = db.Column(db.String(32), nullable=False, index=True)
    match_score = db.Column(db.Integer, nullable=False, default=0)
    matched_skills = db.Column(db.JSON, nullable=False, default=list)
    missing_skills = db.Column(db.JSON, nullable=False, default=list)
    status = db.Column(
        db.Enum("applied", "shortlisted", "rejected", name="application_status"),
        nullable=False,
        default="applied",
    )
    display_profile = db.Column(db.JSON, nullable=False, default=dict)
    # identity data; only the reveal gate returns it
    private_profile = db.Column(db.JSON, nullable=False, default=dict)
    interview_invite_sent_at = db.Column(db.DateTime)
    interview_invite_message = db.Column(db.Text)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    job = db.relationship("Job", back_populates="applications")
    recruiter_round_test = db.relationship(
        "RecruiterRoundTest", back_populates="application", uselist=False, cascade="all, delete-orphan"
    )


class RecruiterRoundTest(QuizRoundMixin, db.Model):
    """Post-application work test used by the single-gate pipeline."""
    __tablename__ = "recruiter_round_tests"

    id = db.Column(db.String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    application_id = db.Column(
        db.String(36), db.ForeignKey("applications.id", ondelete="CASCADE"), nullable=False, unique=True
    )
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    application = db.relationship("Application", back_populates="recruiter_round_test")
