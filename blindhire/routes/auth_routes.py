from flask import Blueprint, request, jsonify
from flask_jwt_extended import jwt_required

from blindhire.errors import ValidationError
from blindhire.services.auth import AuthService, current_user, user_to_dict

auth_bp = Blueprint("auth", __name__)


@auth_bp.route("/register", methods=["POST"])
def register():
    data = request.get_json(silent=True)
    if not data:
        raise ValidationError("No JSON data provided")

    user, token = AuthService.register(
        data.get("name"),
        data.get("email"),
        data.get("password"),
        data.get("role"),
    )
    return jsonify({"access_token": token, "user": user_to_dict(user)}), 201


@auth_bp.route("/login", methods=["POST"])
def login():
    data = request.get_json(silent=True)
    if not data:
        raise ValidationError("No JSON data provided")

    email = data.get("email")
    password = data.get("password")
    if not email or not password:
        raise ValidationError("Email and password are required")

    user, token = AuthService.authenticate_user(email, password, data.get("role"))
    return jsonify({"access_token": token, "user": user_to_dict(user)}), 200


@auth_bp.route("/me", methods=["GET"])
@jwt_required()
def me():
    return jsonify(user_to_dict(current_user())), 200
