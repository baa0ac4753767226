# blindhire/services/auth.py
import logging
from datetime import timedelta
from functools import wraps

from flask import current_app
from flask_jwt_extended import create_access_token, get_jwt, get_jwt_identity, verify_jwt_in_request
from sqlalchemy.exc import IntegrityError

from blindhire.errors import NotFound, Unauthorized, ValidationError
from blindhire.extensions import bcrypt, db
from blindhire.models import User
from blindhire.services.profile_service import ensure_candidate_public_id

logger = logging.getLogger(__name__)

ROLES = ("candidate", "recruiter")


def role_required(role):
    """Require a valid JWT whose ``role`` claim equals ``role``."""
    def decorator(fn):
        @wraps(fn)
        def wrapper(*args, **kwargs):
            verify_jwt_in_request()
            if get_jwt().get("role") != role:
                raise Unauthorized(f"This action requires the {role} role")
            return fn(*args, **kwargs)
        return wrapper
    return decorator


def current_user():
    user = db.session.get(User, get_jwt_identity())
    if user is None:
        raise NotFound("User not found")
    return user


def user_to_dict(user):
    return {
        "id": user.id,
        "name": user.name,
        "email": user.email,
        "role": user.role,
        "candidate_public_id": user.candidate_public_id,
    }


class AuthService:
    @staticmethod
    def issue_token(user):
        return create_access_token(
            identity=str(user.id),
            additional_claims={
                "role": user.role,
                "email": user.email
            },
            expires_delta=timedelta(hours=current_app.config.get("JWT_EXPIRES_HOURS", 3))
        )

    @staticmethod
    def authenticate_user(email, password, selected_role=None):
        """
        Check email & password using bcrypt; when a role is selected it must match.
        Return (user, token) or raise.
        """
        logger.info(f"🔐 Auth attempt: {email}, role: {selected_role}")

        user = User.query.filter_by(email=(email or "").strip().lower()).first()
        if not user or not bcrypt.check_password_hash(user.password, password or ""):
            logger.info("❌ Invalid email or password")
            raise Unauthorized("Invalid email or password", status_code=401)

        if selected_role and user.role != selected_role:
            logger.info(f"❌ Role mismatch: expected {selected_role}, got {user.role}")
            raise Unauthorized(f"This account does not have the {selected_role} role")

        logger.info(f"✅ Auth successful for {user.email}, role: {user.role}")
        return user, AuthService.issue_token(user)

    @staticmethod
    def register(name, email, password, selected_role):
        """
        Create a user with the given role; candidates get their public id here.
        Return (user, token).
        """
        name = (name or "").strip()
        email = (email or "").strip().lower()
        logger.info(f"📝 Register attempt: email: {email}, role: {selected_role}")

        if not name or not email or not password:
            raise ValidationError("Name, email and password are required")
        if selected_role not in ROLES:
            raise ValidationError(f"role must be one of {', '.join(ROLES)}")
        if len(password) < 6:
            raise ValidationError("Password must be at least 6 characters")
        if User.query.filter_by(email=email).first():
            raise ValidationError("Email already registered")

        user = User(
            name=name,
            email=email,
            password=bcrypt.generate_password_hash(password).decode("utf-8"),
            role=selected_role
        )
        db.session.add(user)
        try:
            db.session.commit()
        except IntegrityError:
            db.session.rollback()
            raise ValidationError("Email already registered")

        if user.role == "candidate":
            ensure_candidate_public_id(user)

        logger.info(f"✅ Registration successful for {email}")
        return user, AuthService.issue_token(user)
