# blindhire/routes/candidate_routes.py
from flask import Blueprint, current_app, jsonify, request

from blindhire.errors import ValidationError
from blindhire.serializers import application_for_candidate
from blindhire.services import job_service, profile_service
from blindhire.services.auth import current_user, role_required
from blindhire.services.qualification import round_to_dict

candidate_bp = Blueprint("candidate_api", __name__, url_prefix="/api/candidate")

PASS_MESSAGES = {
    "eligibility": (
        "Eligibility test passed. You can now continue.",
        "Eligibility test not passed. Reattempt is not allowed for this job.",
    ),
    "company": (
        "Company test passed. Your profile is now shared with recruiter.",
        "Company test not passed. Reattempt is not allowed and your profile was not shared with recruiter.",
    ),
    "work": (
        "Recruiter round test passed. You are shortlisted automatically.",
        "Recruiter round test not passed. Reattempt is not allowed and application is rejected automatically.",
    ),
}


def _pipeline():
    return current_app.extensions["application_pipeline"]


def _answers():
    data = request.get_json(silent=True) or {}
    return data.get("answers")


def _grade_to_dict(result, stage, **extra):
    passed_message, failed_message = PASS_MESSAGES[stage]
    data = {
        "status": result.status,
        "score": result.score,
        "pass_score": result.pass_score,
        "message": passed_message if result.passed else failed_message,
    }
    data.update(extra)
    return data


# ---------- profile ----------

@candidate_bp.route("/profile", methods=["GET"])
@role_required("candidate")
def get_profile():
    user = current_user()
    return jsonify(profile_service.profile_to_dict(user.candidate_profile)), 200


@candidate_bp.route("/profile", methods=["PUT"])
@role_required("candidate")
def update_profile():
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise ValidationError("No JSON data provided")
    profile = profile_service.update_profile(current_user(), data.get("personal"), data.get("public"))
    return jsonify(profile_service.profile_to_dict(profile)), 200


@candidate_bp.route("/profile/resume", methods=["POST"])
@role_required("candidate")
def upload_resume():
    resume = request.files.get("resume")
    if resume is None or resume.filename == "":
        raise ValidationError("Resume file is required")

    profile, updated_fields, _ = profile_service.ingest_resume(
        current_user(),
        resume.read(),
        resume.filename,
        resume.mimetype,
        current_app.extensions["resume_extractor"],
    )
    data = profile_service.profile_to_dict(profile)
    data["updated_fields"] = updated_fields
    return jsonify(data), 200


@candidate_bp.route("/profile/auto-fill", methods=["POST"])
@role_required("candidate")
def auto_fill_profile():
    profile, updated_fields, _ = profile_service.auto_fill_from_resume(
        current_user(), current_app.extensions["resume_extractor"]
    )
    data = profile_service.profile_to_dict(profile)
    data["updated_fields"] = updated_fields
    data["message"] = (
        f"Auto-filled {len(updated_fields)} field(s) from your resume"
        if updated_fields else "Profile already up to date with your resume"
    )
    return jsonify(data), 200


@candidate_bp.route("/jobs/suitable", methods=["GET"])
@role_required("candidate")
def suitable_jobs():
    return jsonify(job_service.suitable_jobs(current_user())), 200


# ---------- eligibility test ----------

@candidate_bp.route("/eligibility/<job_id>/start", methods=["POST"])
@role_required("candidate")
def start_eligibility(job_id):
    row = _pipeline().start_eligibility(current_user(), job_id)
    return jsonify(round_to_dict(row, job_id=row.job_id)), 200


@candidate_bp.route("/eligibility/<job_id>", methods=["GET"])
@role_required("candidate")
def eligibility_status(job_id):
    row = _pipeline().eligibility_status(current_user(), job_id)
    return jsonify(round_to_dict(row, job_id=row.job_id)), 200


@candidate_bp.route("/eligibility/<job_id>/submit", methods=["POST"])
@role_required("candidate")
def submit_eligibility(job_id):
    result = _pipeline().submit_eligibility(current_user(), job_id, _answers())
    return jsonify(_grade_to_dict(result, "eligibility", job_id=job_id)), 200


# ---------- company test ----------

@candidate_bp.route("/company-test/<job_id>", methods=["GET"])
@role_required("candidate")
def open_company_test(job_id):
    row = _pipeline().open_company_test(current_user(), job_id)
    return jsonify(round_to_dict(row, job_id=job_id)), 200


@candidate_bp.route("/company-test/<job_id>/submit", methods=["POST"])
@role_required("candidate")
def submit_company_test(job_id):
    result, application = _pipeline().submit_company_test(current_user(), job_id, _answers())
    return jsonify(_grade_to_dict(
        result, "company",
        job_id=job_id,
        application_id=application.id if application else None,
    )), 200


# ---------- applications ----------

@candidate_bp.route("/applications", methods=["GET"])
@role_required("candidate")
def my_applications():
    applications = _pipeline().my_applications(current_user())
    return jsonify([application_for_candidate(a) for a in applications]), 200


@candidate_bp.route("/applications/<application_id>/work-test", methods=["GET"])
@role_required("candidate")
def get_work_test(application_id):
    application, row = _pipeline().get_work_test(current_user(), application_id)
    return jsonify(round_to_dict(
        row,
        application_id=application.id,
        job={"id": application.job.id, "title": application.job.title},
        application_status=application.status,
    )), 200


@candidate_bp.route("/applications/<application_id>/work-test/submit", methods=["POST"])
@role_required("candidate")
def submit_work_test(application_id):
    result, application = _pipeline().submit_work_test(current_user(), application_id, _answers())
    return jsonify(_grade_to_dict(
        result, "work",
        application_id=application.id,
        application_status=application.status,
    )), 200
