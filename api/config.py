"""
Environment-aware configuration.
Values are read once here; the app factory turns them into explicit
settings objects for the services.
"""
import os
from dotenv import load_dotenv

load_dotenv()  # Read .env if present


def _env_bool(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).lower() in ("1", "true", "yes")


class BaseConfig:
    DEBUG = False
    TESTING = False
    # CORS: in dev we usually allow '*', in prod supply a comma-separated list in env
    CORS_ORIGINS = os.getenv("CORS_ORIGINS", "*")
    # "dev" unlocks POST /admin/reset
    PLATFORM = os.getenv("PLATFORM", "dev")

    DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///chirpy.db")
    SQL_ECHO = _env_bool("SQL_ECHO")

    # access tokens
    JWT_SECRET = os.getenv("JWT_SECRET", "dev-secret-change-me")
    JWT_ALGORITHM = os.getenv("JWT_ALGORITHM", "HS256")
    ACCESS_TOKEN_MAX_TTL_SECONDS = int(os.getenv("ACCESS_TOKEN_MAX_TTL_SECONDS", "3600"))

    # refresh tokens: "accumulate" keeps every session, "rotate" revokes older ones at login
    REFRESH_TOKEN_TTL_DAYS = int(os.getenv("REFRESH_TOKEN_TTL_DAYS", "60"))
    REFRESH_TOKEN_POLICY = os.getenv("REFRESH_TOKEN_POLICY", "accumulate")

    # shared secret of the payment provider webhook
    POLKA_KEY = os.getenv("POLKA_KEY", "")

    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")


class DevelopmentConfig(BaseConfig):
    DEBUG = True
    # In dev, propagate exceptions so our error handler has full context
    PROPAGATE_EXCEPTIONS = True


class TestingConfig(BaseConfig):
    TESTING = True
    PLATFORM = "dev"
    DATABASE_URL = "sqlite:///:memory:"
    JWT_SECRET = "test-secret"
    POLKA_KEY = "test-polka-key"


class ProductionConfig(BaseConfig):
    DEBUG = False
    PLATFORM = os.getenv("PLATFORM", "prod")


def get_config(name: str | None):
    """
    Select config class.
    - If name is provided, choose by name.
    - Else choose based on APP_ENV (dev/test/prod).
    """
    env = (name or os.getenv("APP_ENV", "dev")).lower()
    if env in ["prod", "production"]:
        return ProductionConfig
    if env in ["test", "testing"]:
        return TestingConfig
    return DevelopmentConfig
