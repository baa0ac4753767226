from blindhire.extensions import db, bcrypt
from blindhire.models import User, CandidateProfile
from blindhire.services.profile_service import ensure_candidate_public_id
from datetime import datetime

import click

SEED_PASSWORD = "password123"


def seed():
    click.echo("🌱 Seeding users...")

    users = [
        User(
            name="Recruiter One",
            email="recruiter@example.com",
            password=bcrypt.generate_password_hash(SEED_PASSWORD).decode("utf-8"),
            role="recruiter",
            created_at=datetime.utcnow()
        ),
        User(
            name="Candidate User",
            email="candidate@example.com",
            password=bcrypt.generate_password_hash(SEED_PASSWORD).decode("utf-8"),
            role="candidate",
            created_at=datetime.utcnow()
        ),
    ]

    # prevent duplicates
    for user in users:
        existing = User.query.filter_by(email=user.email).first()
        if existing:
            click.echo(f"⚠️ User '{user.email}' already exists. Skipping insert.")
            continue
        db.session.add(user)
        if user.role == "candidate":
            user.candidate_profile = CandidateProfile(
                personal={"full_name": user.name, "email": user.email},
                public={
                    "skills": ["Python", "SQL", "Flask", "Docker"],
                    "experience_years": 3,
                    "tagline": "Backend developer focused on data services",
                    "city": "Jakarta",
                },
            )

    db.session.commit()

    for user in User.query.filter_by(role="candidate").all():
        ensure_candidate_public_id(user)

    click.echo("✅ Users seeded successfully!")
