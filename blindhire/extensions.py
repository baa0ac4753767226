from flask import jsonify
from flask_sqlalchemy import SQLAlchemy
from flask_migrate import Migrate
from flask_jwt_extended import JWTManager
from flask_bcrypt import Bcrypt
from flask_cors import CORS
from sqlalchemy import MetaData

cors = CORS()

# named constraints keep Flask-Migrate autogenerate stable across MySQL/SQLite
db = SQLAlchemy(metadata=MetaData(naming_convention={
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}))
migrate = Migrate()

# login manager for handling JWTs
jwt = JWTManager()

bcrypt = Bcrypt()


@jwt.unauthorized_loader
def _missing_token(reason):
    return jsonify({"error": "Unauthorized", "message": reason}), 401


@jwt.invalid_token_loader
def _invalid_token(reason):
    return jsonify({"error": "Unauthorized", "message": reason}), 401


@jwt.expired_token_loader
def _expired_token(jwt_header, jwt_payload):
    return jsonify({"error": "Unauthorized", "message": "Token has expired"}), 401
