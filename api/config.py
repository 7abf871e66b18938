"""
Environment-aware configuration.
Values come from the process environment, with .env loaded if present.
"""
import os
from dotenv import load_dotenv

load_dotenv()  # Read .env if present

DEV_JWT_SECRET = "dev-secret-change-me"


def _env_bool(key: str, default: str = "false") -> bool:
    return os.getenv(key, default).lower() in ("1", "true", "yes")


class BaseConfig:
    SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")  # Set a strong key in production
    DEBUG = False
    TESTING = False
    # CORS: in dev we usually allow '*', in prod supply a comma-separated list in env
    CORS_ORIGINS = os.getenv("CORS_ORIGINS", "*")
    APP_ENV = os.getenv("APP_ENV", "dev")
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

    DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///book-management.db")
    SQL_ECHO = _env_bool("SQL_ECHO")

    # jwt
    JWT_SECRET = os.getenv("JWT_SECRET", DEV_JWT_SECRET)
    JWT_ALGORITHM = os.getenv("JWT_ALGORITHM", "HS256")
    ACCESS_TOKEN_TTL_MIN = int(os.getenv("ACCESS_TOKEN_TTL_MIN", "15"))
    REFRESH_TOKEN_TTL_HOUR = int(os.getenv("REFRESH_TOKEN_TTL_HOUR", "168"))


class DevelopmentConfig(BaseConfig):
    DEBUG = True


class TestingConfig(BaseConfig):
    TESTING = True
    APP_ENV = "testing"
    DATABASE_URL = "sqlite://"
    SQL_ECHO = False
    JWT_SECRET = "testing-secret-with-at-least-32-bytes!!"
    JWT_ALGORITHM = "HS256"
    ACCESS_TOKEN_TTL_MIN = 15
    REFRESH_TOKEN_TTL_HOUR = 168


class ProductionConfig(BaseConfig):
    DEBUG = False
    APP_ENV = "prod"


def get_config(name: str | None):
    """
    Select config class.
    - If name is provided, choose by name.
    - Else choose based on APP_ENV (dev/testing/prod).
    """
    env = (name or os.getenv("APP_ENV", "dev")).lower()
    if env in ["prod", "production"]:
        return ProductionConfig
    if env in ["test", "testing"]:
        return TestingConfig
    return DevelopmentConfig
