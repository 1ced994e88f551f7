"""Application configuration with environment variables."""

from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    # Environment
    ENV: str = "dev"

    # App Version (format: a.bc.de - major.feature.patch)
    VERSION: str = "0.01.00"

    # Database
    DATABASE_URL: str

    # Session Token (supports key rotation)
    JWT_SECRET: str = "change-this-in-production"
    JWT_SECRET_PREVIOUS: str = ""  # Set during rotation, clear after
    JWT_EXPIRES_HOURS: int = 24 * 7

    # Password sign-in
    BCRYPT_ROUNDS: int = 12
    # Demo policy: accept any password. Honoured only when ENV == "dev".
    AUTH_ALLOW_ANY_PASSWORD: bool = False
    # Block sign-in until an administrator verifies the account
    REQUIRE_VERIFIED_LOGIN: bool = False

    # CORS
    CORS_ORIGINS: str = "http://localhost:3000"

    # Error Tracking (optional, set in production)
    SENTRY_DSN: str = ""

    # Rate Limiting (requests per minute)
    RATE_LIMIT_AUTH: int = 5  # Login / registration attempts
    RATE_LIMIT_PUBLIC: int = 30  # Sightings and photo matching
    RATE_LIMIT_STORAGE_URI: str = "memory://"

    # Case listing
    CASE_LIST_MAX_LIMIT: int = 1000

    # Photo uploads and matching
    PHOTO_MAX_BYTES: int = 10 * 1024 * 1024  # 10 MB
    PHOTO_MATCH_BACKEND: Literal["embedding", "mock"] = "embedding"
    PHOTO_MATCH_THRESHOLD: float = 0.6
    PHOTO_MATCH_LIMIT: int = 10

    # Local file storage for case photos
    LOCAL_STORAGE_PATH: str = "/tmp/findthem-media"
    MEDIA_URL_PREFIX: str = "/media"

    @property
    def cors_origins_list(self) -> list[str]:
        """Parse CORS_ORIGINS into a list."""
        return [o.strip() for o in self.CORS_ORIGINS.split(",") if o.strip()]

    @property
    def jwt_secrets(self) -> list[str]:
        """Returns list of valid secrets (current first, then previous if set)."""
        secrets = [self.JWT_SECRET]
        if self.JWT_SECRET_PREVIOUS:
            secrets.append(self.JWT_SECRET_PREVIOUS)
        return secrets

    @property
    def cookie_secure(self) -> bool:
        """Secure cookies only in production."""
        return self.ENV != "dev"

    @property
    def allow_any_password(self) -> bool:
        """Demo password bypass, never outside dev."""
        return self.AUTH_ALLOW_ANY_PASSWORD and self.ENV == "dev"


settings = Settings()
