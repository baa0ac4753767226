from blindhire.extensions import db
from datetime import datetime
import uuid


class Job(db.Model):
    __tablename__ = "jobs"

    id = db.Column(db.String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    recruiter_id = db.Column(db.String(36), db.ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    title = db.Column(db.String(120), nullable=False)
    description = db.Column(db.Text, nullable=False)
    required_skills = db.Column(db.JSON, nullable=False, default=list)
    experience_level = db.Column(db.String(80), default="")
    location = db.Column(db.String(120), default="")
    salary_range = db.Column(db.String(120), default="")
    deadline_at = db.Column(db.DateTime, nullable=True)
    status = db.Column(db.Enum("active", "expired", name="job_status"), default="active", nullable=False)
    # {"questions": [...], "pass_score": 60, "generated_by": "manual" | "ai"}
    recruiter_test = db.Column(db.JSON, nullable=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    recruiter = db.relationship("User", back_populates="jobs")
    applications = db.relationship("Application", back_populates="job", cascade="all, delete-orphan")

    def is_expired(self, now=None):
        """Read-time expiry; there is no background sweep."""
        if self.status == "expired":
            return True
        now = now or datetime.utcnow()
        return self.deadline_at is not None and self.deadline_at <= now

    @property
    def recruiter_test_questions(self):
        return list((self.recruiter_test or {}).get("questions") or [])
