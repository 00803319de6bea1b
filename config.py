# config.py
import os
from datetime import timedelta

from dotenv import load_dotenv

load_dotenv()

_IS_PRODUCTION = (os.environ.get("APP_ENV") or os.environ.get("FLASK_ENV")) == "production"


class Config:
    SECRET_KEY = os.environ.get("SECRET_KEY", "dev-secret-key-change-me")
    JWT_SECRET_KEY = os.environ.get("JWT_SECRET_KEY", "dev-jwt-secret-change-me")

    SQLALCHEMY_DATABASE_URI = os.environ.get(
        "DATABASE_URL",
        "mysql+pymysql://root:@localhost/fitfusion"
    )
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # 🔐 JWT config: cookie first, bearer header for API clients
    JWT_TOKEN_LOCATION = ["cookies", "headers"]
    JWT_HEADER_NAME = "Authorization"
    JWT_HEADER_TYPE = "Bearer"
    JWT_ACCESS_COOKIE_NAME = "access_token"
    JWT_ACCESS_COOKIE_PATH = "/"
    JWT_SESSION_COOKIE = False                    # persistent cookie, max-age = token expiry
    JWT_COOKIE_SECURE = False
    JWT_COOKIE_SAMESITE = "Lax"
    JWT_COOKIE_CSRF_PROTECT = False               # Lax keeps cross-site forms from sending the cookie
    JWT_ACCESS_CSRF_HEADER_NAME = "X-CSRF-TOKEN"
    JWT_ACCESS_TOKEN_EXPIRES = timedelta(days=7)

    CORS_ORIGINS = [
        o.strip()
        for o in os.environ.get("CORS_ORIGINS", "http://localhost:5173").split(",")
        if o.strip()
    ]

    GEMINI_API_KEY = os.environ.get("GEMINI_API_KEY", "")
    GEMINI_MODEL = os.environ.get("GEMINI_MODEL", "gemini-2.5-flash")
    INSIGHT_PROMPT_MAX_LENGTH = int(os.environ.get("INSIGHT_PROMPT_MAX_LENGTH", 2000))

    LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")


class TestConfig(Config):
    TESTING = True
    SQLALCHEMY_DATABASE_URI = "sqlite://"
    JWT_SECRET_KEY = "test-jwt-secret-with-enough-length-for-hs256"
    GEMINI_API_KEY = "test-key"
    LOG_LEVEL = "DEBUG"


class ProductionConfig(Config):
    # cross-site cookie: every cookie-authenticated write must echo csrf_access_token in X-CSRF-TOKEN
    JWT_COOKIE_SECURE = True
    JWT_COOKIE_SAMESITE = "None"
    JWT_COOKIE_CSRF_PROTECT = True


ActiveConfig = ProductionConfig if _IS_PRODUCTION else Config
