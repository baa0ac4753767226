# blindhire/routes/job_routes.py
from flask import Blueprint, current_app, jsonify, request
from flask_jwt_extended import get_jwt_identity

from blindhire.serializers import application_for_candidate, job_to_dict
from blindhire.services import job_service
from blindhire.services.auth import current_user, role_required

jobs_bp = Blueprint("jobs_api", __name__, url_prefix="/api/jobs")


def _cache():
    return current_app.extensions["response_cache"]


@jobs_bp.route("", methods=["GET"])
def list_jobs():
    return jsonify(job_service.list_jobs(_cache(), current_app.config.get("JOB_CACHE_TTL_SECONDS"))), 200


@jobs_bp.route("", methods=["POST"])
@role_required("recruiter")
def create_job():
    job = job_service.create_job(get_jwt_identity(), request.get_json(silent=True), _cache())
    return jsonify(job_to_dict(job)), 201


@jobs_bp.route("/mine", methods=["GET"])
@role_required("recruiter")
def my_jobs():
    return jsonify(job_service.my_jobs(get_jwt_identity())), 200


@jobs_bp.route("/<job_id>", methods=["GET"])
def get_job(job_id):
    return jsonify(job_service.get_job(job_id, _cache(), current_app.config.get("JOB_CACHE_TTL_SECONDS"))), 200


@jobs_bp.route("/<job_id>/apply", methods=["POST"])
@role_required("candidate")
def apply_to_job(job_id):
    pipeline = current_app.extensions["application_pipeline"]
    application = pipeline.apply(current_user(), job_id)
    return jsonify(application_for_candidate(application)), 201


@jobs_bp.route("/<job_id>/expire", methods=["PUT"])
@role_required("recruiter")
def expire_job(job_id):
    job = job_service.expire_job(job_id, get_jwt_identity(), _cache())
    return jsonify(job_to_dict(job)), 200
