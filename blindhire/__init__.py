import logging

from flask import Flask
from config import Config
from pymysql import connect
from sqlalchemy.engine import make_url
from .extensions import cors, db, migrate, jwt, bcrypt
from .errors import register_error_handlers
from .logging_config import configure_logging
from . import models  # noqa: F401  (register tables with the metadata)
from .routes.auth_routes import auth_bp
from .routes.job_routes import jobs_bp
from .routes.candidate_routes import candidate_bp
from .routes.recruiter_routes import recruiter_bp
from .database.seed.seed_all import seed_all
from .services.pipeline import ApplicationPipeline, variant_from_config
from .services.question_source import build_question_generator
from .services.response_cache import ResponseCache
from .services.resume_extractor import ResumeExtractor
from .services.ai_clients import available_clients
from .services.review_gate import RecruiterReviewGate

logger = logging.getLogger(__name__)


def create_app(config_class=Config):
    app = Flask(__name__)
    app.config.from_object(config_class)
    configure_logging(app)

    # Allow CORS from the web client
    cors.init_app(app, resources={r"/api/*": {"origins": app.config.get("CORS_ORIGINS", [])}})

    if app.config["SQLALCHEMY_DATABASE_URI"].startswith("mysql"):
        create_database_if_not_exists(app.config["SQLALCHEMY_DATABASE_URI"])

    # extensions initialization
    db.init_app(app)
    migrate.init_app(app, db)
    jwt.init_app(app)
    bcrypt.init_app(app)

    register_error_handlers(app)

    # collaborators shared by the request handlers
    variant = variant_from_config(app.config)
    generator = build_question_generator(app.config)
    app.extensions["response_cache"] = ResponseCache(default_ttl=app.config.get("JOB_CACHE_TTL_SECONDS", 30))
    app.extensions["question_generator"] = generator
    app.extensions["resume_extractor"] = ResumeExtractor(available_clients(app.config))
    app.extensions["application_pipeline"] = ApplicationPipeline(
        variant, generator, pass_score=app.config.get("ELIGIBILITY_PASS_SCORE", 60)
    )
    app.extensions["review_gate"] = RecruiterReviewGate(variant, generator)

    app.register_blueprint(auth_bp, url_prefix="/api/auth")
    app.register_blueprint(jobs_bp)
    app.register_blueprint(candidate_bp)
    app.register_blueprint(recruiter_bp)

    app.cli.add_command(seed_all)

    logger.info(f"🚀 Blind Hire API ready (pipeline={variant.name})")
    return app


def create_database_if_not_exists(database_uri):
    url = make_url(database_uri)
    host = url.host or "localhost"
    port = url.port or 3306

    logger.info(f"🔧 Ensuring database '{url.database}' exists on {host}:{port} as '{url.username}'")

    conn = connect(
        host=host,
        port=port,
        user=url.username,
        password=url.password or ""
    )
    try:
        with conn.cursor() as cursor:
            cursor.execute(f"CREATE DATABASE IF NOT EXISTS `{url.database}`")
        conn.commit()
    finally:
        conn.close()
