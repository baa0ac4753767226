from datetime import datetime, timedelta

import pytest

from blindhire.errors import NotFound, Unauthorized, ValidationError
from blindhire.models import Job
from blindhire.services import job_service
from blindhire.services.question_source import QuestionGenerator

from conftest import make_job, make_user

TEST_PAYLOAD = {
    "questions": [
        {"question": "2 + 2?", "options": ["3", "4"], "correct_answer": "4"},
        {"question": "Capital of Indonesia?", "options": ["Jakarta", "Bandung"], "correct_answer": "Jakarta"},
    ],
    "pass_score": 50,
}


@pytest.fixture
def cache(app):
    return app.extensions["response_cache"]


def test_create_job_validates_and_invalidates(cache, recruiter):
    cache.set("jobs:list", ["stale"])
    job = job_service.create_job(recruiter.id, {
        "title": "Backend Engineer",
        "description": "APIs",
        "required_skills": "python, SQL , python",
        "deadline_at": "2099-01-01T00:00:00Z",
        "recruiter_test": TEST_PAYLOAD,
    }, cache)

    assert job.required_skills == ["python", "SQL"]
    assert job.deadline_at == datetime(2099, 1, 1)
    assert [q["question_id"] for q in job.recruiter_test["questions"]] == ["cq1", "cq2"]
    assert job.recruiter_test["pass_score"] == 50
    assert cache.get("jobs:list") is None


def test_create_job_requires_title(cache, recruiter):
    with pytest.raises(ValidationError):
        job_service.create_job(recruiter.id, {"description": "x"}, cache)


@pytest.mark.parametrize("skills", [None, [], " , ", ["", "  "]])
def test_create_job_requires_skills(cache, recruiter, skills):
    with pytest.raises(ValidationError, match="required_skills is required"):
        job_service.create_job(recruiter.id, {"title": "Dev", "description": "Build", "required_skills": skills}, cache)
    assert Job.query.count() == 0


def test_list_jobs_is_cached_and_skips_closed(cache, recruiter):
    open_job = make_job(recruiter, title="Open")
    make_job(recruiter, title="Closed", deadline_at=datetime.utcnow() - timedelta(days=1))

    listed = job_service.list_jobs(cache)
    assert [j["id"] for j in listed] == [open_job.id]

    make_job(recruiter, title="Added later")
    assert job_service.list_jobs(cache) == listed


def test_listing_never_exposes_answers(cache, recruiter):
    job = make_job(recruiter)
    assert "correct_answer" not in str(job_service.list_jobs(cache))
    assert "correct_answer" not in str(job_service.get_job(job.id, cache))


def test_expire_job_owner_only(cache, recruiter):
    job = make_job(recruiter)
    stranger = make_user("recruiter", email="stranger@example.com")
    job_service.get_job(job.id, cache)

    with pytest.raises(Unauthorized):
        job_service.expire_job(job.id, stranger.id, cache)
    job_service.expire_job(job.id, recruiter.id, cache)

    assert job_service.get_job(job.id, cache)["status"] == "expired"


def test_get_missing_job(cache):
    with pytest.raises(NotFound):
        job_service.get_job("missing", cache)


def test_set_recruiter_test(cache, recruiter):
    job = make_job(recruiter, recruiter_test=False)
    result = job_service.set_recruiter_test(job.id, recruiter.id, TEST_PAYLOAD, cache)
    assert result["generated_by"] == "manual"
    assert len(result["questions"]) == 2

    with pytest.raises(ValidationError):
        job_service.set_recruiter_test(job.id, recruiter.id, {"questions": []}, cache)


def test_generate_recruiter_test_uses_local_source_without_keys(app):
    draft = job_service.generate_recruiter_test(
        {"title": "Data Engineer", "required_skills": ["python", "sql", "airflow"]},
        QuestionGenerator(),
    )
    assert draft["generated_by"] == "manual"
    assert len(draft["questions"]) == 3
    assert draft["questions"][0]["question_id"] == "cq1"


def test_suitable_jobs_ranked_and_excludes_applied(pipeline, recruiter, candidate):
    weak = make_job(recruiter, title="Weak", required_skills=["java", "go"])
    strong = make_job(recruiter, title="Strong", required_skills=["python", "sql"])
    applied = make_job(recruiter, title="Applied", required_skills=["python"])
    pipeline.create_application_record(applied, candidate)

    suited = job_service.suitable_jobs(candidate)

    assert [j["id"] for j in suited] == [strong.id, weak.id]
    assert suited[0]["match_score"] == 100
    assert suited[1]["missing_skills"] == ["go", "java"]
