# blindhire/routes/recruiter_routes.py
from flask import Blueprint, current_app, jsonify, request
from flask_jwt_extended import get_jwt, get_jwt_identity, verify_jwt_in_request

from blindhire.errors import Unauthorized
from blindhire.serializers import application_for_recruiter
from blindhire.services import job_service
from blindhire.services.qualification import round_to_dict

recruiter_bp = Blueprint("recruiter_api", __name__, url_prefix="/api/recruiter")


def _gate():
    return current_app.extensions["review_gate"]


# ensure every single endpoint's request carries a recruiter jwt
@recruiter_bp.before_request
def require_recruiter():
    if request.method == "OPTIONS":
        return None
    verify_jwt_in_request()
    if get_jwt().get("role") != "recruiter":
        raise Unauthorized("This action requires the recruiter role")


@recruiter_bp.route("/jobs/<job_id>/applications", methods=["GET"])
def job_applications(job_id):
    return jsonify(_gate().list_applications(get_jwt_identity(), job_id)), 200


@recruiter_bp.route("/applications/<application_id>/shortlist", methods=["PUT"])
def shortlist(application_id):
    data = request.get_json(silent=True) or {}
    application = _gate().shortlist_for_interview(get_jwt_identity(), application_id, data.get("message"))
    return jsonify(application_for_recruiter(application)), 200


@recruiter_bp.route("/applications/<application_id>/reveal", methods=["GET"])
def reveal(application_id):
    return jsonify(_gate().reveal_identity(get_jwt_identity(), application_id)), 200


@recruiter_bp.route("/applications/<application_id>/status", methods=["PUT"])
def update_status(application_id):
    data = request.get_json(silent=True) or {}
    application = _gate().update_status(get_jwt_identity(), application_id, data.get("status"))
    return jsonify(application_for_recruiter(application)), 200


@recruiter_bp.route("/applications/<application_id>/work-test", methods=["POST"])
def assign_work_test(application_id):
    row = _gate().assign_work_test(get_jwt_identity(), application_id, request.get_json(silent=True))
    # recruiter view still hides the answer key once assigned
    return jsonify(round_to_dict(row, application_id=application_id)), 201


@recruiter_bp.route("/jobs/test/generate", methods=["POST"])
def generate_test():
    draft = job_service.generate_recruiter_test(
        request.get_json(silent=True), current_app.extensions["question_generator"]
    )
    return jsonify(draft), 200


@recruiter_bp.route("/jobs/<job_id>/test", methods=["PUT"])
def set_job_test(job_id):
    result = job_service.set_recruiter_test(
        job_id, get_jwt_identity(), request.get_json(silent=True), current_app.extensions["response_cache"]
    )
    return jsonify(result), 200
