import os
from dotenv import load_dotenv

load_dotenv()  # pick up variables from a local .env file


def _get_bool(value, default=False):
    if value is None:
        return default
    return value.strip().lower() in ["true", "1", "yes", "on"]


DEFAULT_ACCESS_SECRET = "change-me-access"
DEFAULT_REFRESH_SECRET = "change-me-refresh"


class Settings:
    API_TITLE = os.getenv("API_TITLE", "College Portal API")
    API_VERSION = os.getenv("API_VERSION", "1.0.0")
    DEBUG = _get_bool(os.getenv("DEBUG"), default=False)
    APP_ENV = os.getenv("APP_ENV", "development").lower()
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

    # MongoDB
    MONGO_URI = os.getenv("MONGO_URI", "mongodb://localhost:27017")
    DATABASE_NAME = os.getenv("DATABASE_NAME", "college_portal")
    MONGO_SERVER_SELECTION_TIMEOUT_MS = int(os.getenv("MONGO_SERVER_SELECTION_TIMEOUT_MS", "5000"))
    MONGO_SOCKET_TIMEOUT_MS = int(os.getenv("MONGO_SOCKET_TIMEOUT_MS", "45000"))

    # JWT: access and refresh tokens are signed with separate secrets
    JWT_ACCESS_SECRET = os.getenv("JWT_ACCESS_SECRET", DEFAULT_ACCESS_SECRET)
    JWT_REFRESH_SECRET = os.getenv("JWT_REFRESH_SECRET", DEFAULT_REFRESH_SECRET)
    JWT_ALGORITHM = "HS256"
    ACCESS_TOKEN_TTL_SECONDS = 15 * 60
    REFRESH_TOKEN_TTL_SECONDS = 7 * 24 * 60 * 60

    BCRYPT_ROUNDS = int(os.getenv("BCRYPT_ROUNDS", "10"))

    # HTTP
    CLIENT_ORIGIN = os.getenv("CLIENT_ORIGIN", "http://localhost:5173")
    PORT = int(os.getenv("PORT", "4000"))
    MAX_BODY_SIZE = int(os.getenv("MAX_BODY_SIZE", str(10 * 1024 * 1024)))

    @property
    def is_production(self) -> bool:
        return self.APP_ENV == "production"


settings = Settings()


def validate_runtime_config() -> None:
    if settings.JWT_ACCESS_SECRET == settings.JWT_REFRESH_SECRET:
        raise RuntimeError("JWT_ACCESS_SECRET and JWT_REFRESH_SECRET must differ.")
    if settings.is_production and (
        settings.JWT_ACCESS_SECRET == DEFAULT_ACCESS_SECRET
        or settings.JWT_REFRESH_SECRET == DEFAULT_REFRESH_SECRET
    ):
        raise RuntimeError("JWT secrets must be set in production.")
