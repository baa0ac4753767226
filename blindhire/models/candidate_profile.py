from blindhire.extensions import db
from datetime import datetime


class CandidateProfile(db.Model):
    """Identity-bearing ``personal`` half and recruiter-safe ``public`` half."""
    __tablename__ = "candidate_profiles"

    user_id = db.Column(db.String(36), db.ForeignKey("users.id", ondelete="CASCADE"), primary_key=True)
    personal = db.Column(db.JSON, nullable=False, default=dict)
    public = db.Column(db.JSON, nullable=False, default=dict)
    resume_anonymized_text = db.Column(db.Text, default="")
    resume_anonymized_at = db.Column(db.DateTime)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    user = db.relationship("User", back_populates="candidate_profile")
