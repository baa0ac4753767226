# blindhire/services/job_service.py
import logging
from datetime import datetime, timezone

from blindhire.errors import Expired, NotFound, Unauthorized, ValidationError
from blindhire.extensions import db
from blindhire.models import Application, Job
from blindhire.serializers import job_to_dict, recruiter_test_to_dict
from blindhire.services.match_scorer import match_to_dict, score_skills
from blindhire.services.questions import validate_question_set
from blindhire.services.response_cache import JOBS_PREFIX

logger = logging.getLogger(__name__)

LIST_KEY = f"{JOBS_PREFIX}list"


def detail_key(job_id):
    return f"{JOBS_PREFIX}detail:{job_id}"


def parse_skills(value):
    if isinstance(value, str):
        value = value.split(",")
    if not isinstance(value, list):
        return []
    skills = []
    for skill in value:
        cleaned = str(skill or "").strip()
        if cleaned and cleaned.lower() not in [s.lower() for s in skills]:
            skills.append(cleaned)
    return skills


def parse_deadline(value):
    if value in (None, ""):
        return None
    try:
        parsed = datetime.fromisoformat(str(value).replace("Z", "+00:00"))
    except ValueError:
        raise ValidationError("deadline_at must be an ISO-8601 date")
    # stored naive UTC, like every other timestamp
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
    return parsed


def parse_pass_score(value, default=60):
    if value in (None, ""):
        return default
    try:
        score = int(value)
    except (TypeError, ValueError):
        raise ValidationError("pass_score must be a number between 0 and 100")
    if not 0 <= score <= 100:
        raise ValidationError("pass_score must be a number between 0 and 100")
    return score


def build_recruiter_test(data, generated_by="manual"):
    if not isinstance(data, dict):
        raise ValidationError("recruiter_test must be an object with questions")
    return {
        "questions": validate_question_set(data.get("questions"), prefix="cq"),
        "pass_score": parse_pass_score(data.get("pass_score")),
        "generated_by": data.get("generated_by") if data.get("generated_by") in ("manual", "ai") else generated_by,
    }


def load_job(job_id):
    job = db.session.get(Job, job_id)
    if job is None:
        raise NotFound("Job not found")
    return job


def load_open_job(job_id):
    """Lookup for pipeline gates: missing -> NotFound, past deadline -> Expired."""
    job = load_job(job_id)
    if job.is_expired():
        raise Expired("This job has expired")
    return job


def load_owned_job(job_id, recruiter_id):
    job = load_job(job_id)
    if job.recruiter_id != str(recruiter_id):
        raise Unauthorized("You do not own this job")
    return job


def create_job(recruiter_id, data, cache):
    data = data or {}
    title = str(data.get("title") or "").strip()
    description = str(data.get("description") or "").strip()
    if not title or not description:
        raise ValidationError("title and description are required")
    required_skills = parse_skills(data.get("required_skills"))
    if not required_skills:
        raise ValidationError("required_skills is required")

    recruiter_test = None
    if data.get("recruiter_test"):
        recruiter_test = build_recruiter_test(data["recruiter_test"])

    job = Job(
        recruiter_id=str(recruiter_id),
        title=title,
        description=description,
        required_skills=required_skills,
        experience_level=str(data.get("experience_level") or "").strip(),
        location=str(data.get("location") or "").strip(),
        salary_range=str(data.get("salary_range") or "").strip(),
        deadline_at=parse_deadline(data.get("deadline_at")),
        status="active",
        recruiter_test=recruiter_test,
    )
    db.session.add(job)
    db.session.commit()
    cache.invalidate(JOBS_PREFIX)
    logger.info(f"✅ job created: {job.id} '{job.title}' by {recruiter_id}")
    return job


def list_jobs(cache, ttl=None):
    cached = cache.get(LIST_KEY)
    if cached is not None:
        return cached

    now = datetime.utcnow()
    jobs = (
        Job.query
        .filter(Job.status == "active")
        .filter((Job.deadline_at.is_(None)) | (Job.deadline_at > now))
        .order_by(Job.created_at.desc())
        .all()
    )
    result = [job_to_dict(job) for job in jobs]
    cache.set(LIST_KEY, result, ttl)
    return result


def get_job(job_id, cache, ttl=None):
    key = detail_key(job_id)
    cached = cache.get(key)
    if cached is not None:
        return cached

    result = job_to_dict(load_job(job_id))
    cache.set(key, result, ttl)
    return result


def my_jobs(recruiter_id):
    jobs = Job.query.filter_by(recruiter_id=str(recruiter_id)).order_by(Job.created_at.desc()).all()
    result = []
    for job in jobs:
        data = job_to_dict(job, include_recruiter=False)
        data["application_count"] = len(job.applications)
        result.append(data)
    return result


def expire_job(job_id, recruiter_id, cache):
    job = load_owned_job(job_id, recruiter_id)
    job.status = "expired"
    db.session.commit()
    cache.invalidate(JOBS_PREFIX)
    logger.info(f"job {job.id} expired by owner")
    return job


def set_recruiter_test(job_id, recruiter_id, data, cache):
    job = load_owned_job(job_id, recruiter_id)
    job.recruiter_test = build_recruiter_test(data)
    db.session.commit()
    cache.invalidate(JOBS_PREFIX)
    logger.info(f"company test set on job {job.id} ({len(job.recruiter_test_questions)} questions)")
    return recruiter_test_to_dict(job)


def generate_recruiter_test(data, generator):
    """Draft a company test for review; nothing is stored."""
    data = data or {}
    title = str(data.get("title") or "").strip()
    skills = parse_skills(data.get("required_skills"))
    if not title and not skills:
        raise ValidationError("title or required_skills is required to generate a test")

    generated_by, questions = generator.generate(title, skills, fallback_tag="manual")
    # company tests are numbered cq1..
    questions = [{**q, "question_id": ""} for q in questions]
    return {
        "questions": validate_question_set(questions, prefix="cq"),
        "pass_score": parse_pass_score(data.get("pass_score")),
        "generated_by": generated_by,
    }


def suitable_jobs(candidate):
    """Open jobs the candidate has not applied to, best skill match first."""
    profile = candidate.candidate_profile
    candidate_skills = list(((profile.public or {}) if profile else {}).get("skills") or [])
    applied_ids = [
        row.job_id for row in Application.query.with_entities(Application.job_id).filter_by(candidate_id=candidate.id)
    ]

    now = datetime.utcnow()
    query = Job.query.filter(Job.status == "active").filter((Job.deadline_at.is_(None)) | (Job.deadline_at > now))
    if applied_ids:
        query = query.filter(Job.id.notin_(applied_ids))

    result = []
    for job in query.all():
        data = job_to_dict(job)
        match = match_to_dict(score_skills(job.required_skills, candidate_skills))
        data["match_score"] = match.pop("score")
        data.update(match)
        result.append(data)
    result.sort(key=lambda item: item["match_score"], reverse=True)
    return result
