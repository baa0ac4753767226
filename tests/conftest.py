"""Shared fixtures: an app on in-memory SQLite, a client and data factories."""
import pytest
from flask_jwt_extended import create_access_token

from blindhire import create_app
from blindhire.extensions import bcrypt, db
from blindhire.models import CandidateProfile, Job, User
from blindhire.services.profile_service import ensure_candidate_public_id
from config import Config


class TestConfig(Config):
    TESTING = True
    SQLALCHEMY_DATABASE_URI = "sqlite://"
    SECRET_KEY = "test-secret-key"
    JWT_SECRET_KEY = "test-jwt-secret-key-with-enough-length"
    GEMINI_API_KEY = None
    OPENAI_API_KEY = None
    PIPELINE_VARIANT = "dual_test"
    LOG_FILE = None
    LOG_LEVEL = "WARNING"
    BCRYPT_LOG_ROUNDS = 4


class SingleGateConfig(TestConfig):
    PIPELINE_VARIANT = "single_gate"


def _build_app(config_class):
    app = create_app(config_class)
    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def app():
    yield from _build_app(TestConfig)


@pytest.fixture
def single_gate_app():
    yield from _build_app(SingleGateConfig)


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def pipeline(app):
    return app.extensions["application_pipeline"]


@pytest.fixture
def review_gate(app):
    return app.extensions["review_gate"]


def make_user(role="candidate", email=None, name=None, skills=None, personal=None):
    name = name or ("Rina Candidate" if role == "candidate" else "Budi Recruiter")
    user = User(
        name=name,
        email=email or f"{role}-{User.query.count() + 1}@example.com",
        password=bcrypt.generate_password_hash("password123").decode("utf-8"),
        role=role,
    )
    db.session.add(user)
    if role == "candidate":
        user.candidate_profile = CandidateProfile(
            personal=personal or {
                "full_name": name,
                "email": user.email,
                "phone": "+62 812 3456 7890",
                "gender": "female",
                "college": "Universitas Indonesia",
            },
            public={"skills": list(skills or []), "experience_years": 2, "city": "Jakarta"},
            resume_anonymized_text="Backend developer. Built data pipelines.",
        )
    db.session.commit()
    if role == "candidate":
        ensure_candidate_public_id(user)
    return user


def make_job(recruiter, required_skills=("Python", "SQL", "Docker"), recruiter_test=True, **fields):
    test = None
    if recruiter_test:
        test = {
            "questions": [
                {
                    "question_id": f"cq{i}",
                    "question": f"Company question {i}?",
                    "options": ["right", "wrong a", "wrong b", "wrong c"],
                    "correct_answer": "right",
                }
                for i in range(1, 6)
            ],
            "pass_score": 60,
            "generated_by": "manual",
        }
    job = Job(
        recruiter_id=recruiter.id,
        title=fields.pop("title", "Data Engineer"),
        description=fields.pop("description", "Build and run data pipelines."),
        required_skills=list(required_skills),
        status=fields.pop("status", "active"),
        recruiter_test=test,
        **fields,
    )
    db.session.add(job)
    db.session.commit()
    return job


def correct_answers(row, how_many=None):
    """Answer the first ``how_many`` questions right and the rest wrong."""
    questions = row.questions
    how_many = len(questions) if how_many is None else how_many
    answers = []
    for index, question in enumerate(questions):
        if index < how_many:
            answer = question["correct_answer"]
        else:
            answer = next(o for o in question["options"] if o != question["correct_answer"])
        answers.append({"question_id": question["question_id"], "answer": answer})
    return answers


def auth_headers(user):
    token = create_access_token(identity=user.id, additional_claims={"role": user.role, "email": user.email})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def recruiter(app):
    return make_user("recruiter", email="recruiter@example.com")


@pytest.fixture
def candidate(app):
    return make_user("candidate", email="candidate@example.com", skills=["python", "SQL", "Flask"])
