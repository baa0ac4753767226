from blindhire.extensions import db
from blindhire.models import Job, User
from blindhire.services.questions import validate_question_set
from datetime import datetime, timedelta

import click


def seed():
    click.echo("🌱 Seeding jobs...")

    recruiter = User.query.filter_by(role="recruiter").first()
    if recruiter is None:
        click.echo("⚠️ No recruiter found. Run the user seeder first.")
        return

    jobs = [
        Job(
            recruiter_id=recruiter.id,
            title="IT Data Engineer",
            location="Jakarta, Indonesia",
            description=(
                "Responsible for designing, developing, and maintaining data pipelines (ETL). "
                "Will work with large datasets, cloud platforms, and data warehousing solutions "
                "to support business intelligence and analytics."
            ),
            required_skills=["Python", "SQL", "AWS", "Docker"],
            experience_level="Mid",
            salary_range="IDR 15-25 jt",
            deadline_at=datetime.utcnow() + timedelta(days=30),
            recruiter_test={
                "questions": validate_question_set([
                    {
                        "question": "Which SQL clause filters rows after aggregation?",
                        "options": ["WHERE", "HAVING", "GROUP BY", "ORDER BY"],
                        "correct_answer": "HAVING",
                    },
                    {
                        "question": "Which Python structure gives O(1) average membership checks?",
                        "options": ["list", "tuple", "set", "str"],
                        "correct_answer": "set",
                    },
                    {
                        "question": "What does ETL stand for?",
                        "options": ["Extract, Transform, Load", "Edit, Test, Launch", "Encode, Transfer, Log", "Export, Track, Link"],
                        "correct_answer": "Extract, Transform, Load",
                    },
                ], prefix="cq"),
                "pass_score": 60,
                "generated_by": "manual",
            },
            created_at=datetime.utcnow(),
        ),
        Job(
            recruiter_id=recruiter.id,
            title="ERP Business Analyst",
            location="Jakarta, Indonesia",
            description=(
                "Act as a liaison between business stakeholders and the IT team for a large-scale ERP implementation. "
                "Responsible for gathering user requirements, mapping business processes, and ensuring the ERP solution meets business needs."
            ),
            required_skills=["SAP", "SQL", "Communication"],
            experience_level="Senior",
            salary_range="IDR 20-30 jt",
            deadline_at=datetime.utcnow() + timedelta(days=30),
            created_at=datetime.utcnow(),
        ),
    ]

    for job in jobs:
        existing_job = Job.query.filter_by(title=job.title, recruiter_id=recruiter.id).first()
        if existing_job:
            click.echo(f"⚠️ Job '{job.title}' already exists. Skipping insert.")
            continue
        db.session.add(job)

    db.session.commit()
    click.echo("✅ Jobs seeded successfully!")
