"""Row -> dict helpers for API responses (snake_case keys)."""
from blindhire.models import Application, Job


def _iso(value):
    return value.isoformat() if value else None


def job_to_dict(job: Job, include_recruiter=True):
    """Public job view; the recruiter test is summarised, never its answers."""
    test = job.recruiter_test or {}
    data = {
        "id": job.id,
        "title": job.title,
        "description": job.description,
        "required_skills": list(job.required_skills or []),
        "experience_level": job.experience_level or "",
        "location": job.location or "",
        "salary_range": job.salary_range or "",
        "deadline_at": _iso(job.deadline_at),
        "status": "expired" if job.is_expired() else job.status,
        "has_company_test": bool(test.get("questions")),
        "created_at": _iso(job.created_at),
    }
    if include_recruiter:
        data["recruiter"] = {"id": job.recruiter_id, "name": job.recruiter.name if job.recruiter else ""}
    return data


def recruiter_test_to_dict(job: Job):
    """Owner-only view of the company test, answers included."""
    test = job.recruiter_test or {}
    return {
        "job_id": job.id,
        "questions": list(test.get("questions") or []),
        "pass_score": test.get("pass_score", 60),
        "generated_by": test.get("generated_by", "manual"),
    }


def work_test_summary(application: Application):
    round_ = application.recruiter_round_test
    if round_ is None:
        return None
    return {
        "status": round_.status,
        "score": round_.score,
        "pass_score": round_.pass_score,
        "submitted_at": _iso(round_.submitted_at),
    }


def invite_to_dict(application: Application):
    if not application.interview_invite_sent_at:
        return None
    return {
        "sent_at": _iso(application.interview_invite_sent_at),
        "message": application.interview_invite_message or "",
    }


def application_for_recruiter(application: Application):
    # private_profile stays out; reveal_identity is the only way to it
    return {
        "id": application.id,
        "job_id": application.job_id,
        "anonymous_id": application.anonymous_id,
        "match_score": application.match_score,
        "matched_skills": list(application.matched_skills or []),
        "missing_skills": list(application.missing_skills or []),
        "status": application.status,
        "display_profile": dict(application.display_profile or {}),
        "interview_invite": invite_to_dict(application),
        "work_test": work_test_summary(application),
        "created_at": _iso(application.created_at),
    }


def application_for_candidate(application: Application):
    job = application.job
    return {
        "id": application.id,
        "job": {
            "id": job.id,
            "title": job.title,
            "description": job.description,
            "location": job.location or "",
        } if job else None,
        "anonymous_id": application.anonymous_id,
        "match_score": application.match_score,
        "status": application.status,
        "interview_invite": invite_to_dict(application),
        "work_test": work_test_summary(application),
        "created_at": _iso(application.created_at),
    }
