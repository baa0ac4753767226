import os
from dotenv import load_dotenv

load_dotenv() # load variables from the .env file


def _int_env(name, default):
    value = os.getenv(name)
    return int(value) if value not in (None, "") else default


class Config:
    SECRET_KEY = os.getenv('SECRET_KEY', 'blindhire-default-secret-key')
    JWT_SECRET_KEY = os.getenv('JWT_SECRET_KEY', SECRET_KEY)
    JWT_EXPIRES_HOURS = _int_env('JWT_EXPIRES_HOURS', 3)

    DB_HOST = os.getenv('DB_HOST', 'localhost')
    DB_USER = os.getenv('DB_USER', 'root')
    DB_PASSWORD = os.getenv('DB_PASSWORD')
    DB_NAME = os.getenv('DB_NAME', 'blindhire')

    # Build MySQL connection string (using PyMySQL driver) unless DATABASE_URL is given
    SQLALCHEMY_DATABASE_URI = os.getenv('DATABASE_URL') or (
        f"mysql+pymysql://{DB_USER}@{DB_HOST}/{DB_NAME}"
        if not DB_PASSWORD else
        f"mysql+pymysql://{DB_USER}:{DB_PASSWORD}@{DB_HOST}/{DB_NAME}"
    )

    SQLALCHEMY_TRACK_MODIFICATIONS = False  # disables overhead warning

    CORS_ORIGINS = os.getenv('CORS_ORIGINS', 'http://localhost:3000').split(',')
    MAX_CONTENT_LENGTH = _int_env('MAX_CONTENT_LENGTH', 10 * 1024 * 1024)

    LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO')
    LOG_FILE = os.getenv('LOG_FILE')

    # AI collaborators are optional; the local generators cover outages
    GEMINI_API_KEY = os.getenv('GEMINI_API_KEY')
    GEMINI_MODEL = os.getenv('GEMINI_MODEL', 'models/gemini-2.5-flash')
    OPENAI_API_KEY = os.getenv('OPENAI_API_KEY')
    OPENAI_MODEL = os.getenv('OPENAI_MODEL', 'gpt-4o-mini')
    AI_TIMEOUT_SECONDS = _int_env('AI_TIMEOUT_SECONDS', 20)

    # "dual_test" (eligibility + company test) or "single_gate" (eligibility only)
    PIPELINE_VARIANT = os.getenv('PIPELINE_VARIANT', 'dual_test')
    ELIGIBILITY_PASS_SCORE = _int_env('ELIGIBILITY_PASS_SCORE', 60)
    JOB_CACHE_TTL_SECONDS = _int_env('JOB_CACHE_TTL_SECONDS', 30)
