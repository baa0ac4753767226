from blindhire.extensions import db
from datetime import datetime
import uuid


class User(db.Model):
    __tablename__ = "users"

    id = db.Column(db.String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    name = db.Column(db.String(120), nullable=False)
    email = db.Column(db.String(254), unique=True, nullable=False)
    password = db.Column(db.String(255), nullable=False)
    role = db.Column(db.Enum("candidate", "recruiter", name="user_roles"), nullable=False)
    # stable anonymous id shown to recruiters, assigned once
    candidate_public_id = db.Column(db.String(32), unique=True, nullable=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    candidate_profile = db.relationship(
        "CandidateProfile", back_populates="user", uselist=False, cascade="all, delete-orphan"
    )
    jobs = db.relationship("Job", back_populates="recruiter", cascade="all, delete-orphan")

    # for string representation
    def __repr__(self):
        return f"<User {self.email}>"
