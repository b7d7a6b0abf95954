from functools import lru_cache

from pydantic import ValidationInfo, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # App
    app_name: str = "Marketplace Auth"
    app_env: str = "development"  # development, testing, production
    debug: bool = False
    enable_openapi: bool = True  # Set to False in production

    # Security
    log_user_emails: bool = False  # Set to False in production for GDPR compliance

    # Database
    database_url: str
    database_pool_size: int = 5
    database_max_overflow: int = 10

    # JWT - access and refresh tokens are signed with independent keys.
    # For HS256 the secrets sign and verify. For RS256/ES256 the secrets hold
    # PEM private keys and the public keys below verify.
    jwt_access_secret: str
    jwt_refresh_secret: str
    jwt_access_public_key: str | None = None
    jwt_refresh_public_key: str | None = None
    jwt_algorithm: str = "HS256"
    jwt_issuer: str = "marketplace-auth"
    access_token_expire_hours: int = 24
    refresh_token_expire_days: int = 7

    # Password hashing
    argon2_time_cost: int = 3
    argon2_memory_cost: int = 65536
    argon2_parallelism: int = 1

    # Single-use tokens
    email_verification_expire_hours: int = 24
    password_reset_expire_hours: int = 1

    # Email (Resend)
    resend_api_key: str | None = None  # If not set, emails are logged but not sent
    email_from: str = "noreply@example.com"
    email_send_timeout_seconds: int = 30
    verification_url: str = "http://localhost:8000/api/v1/auth/verify"
    password_reset_url: str = "http://localhost:3000/reset-password"

    # CORS
    cors_origins: list[str] = ["http://localhost:3000"]

    @field_validator("jwt_access_secret", "jwt_refresh_secret")
    @classmethod
    def validate_jwt_secret(cls, v: str) -> str:
        if v == "change-this-to-a-secure-random-string":
            raise ValueError(
                "JWT secrets must be changed from default value. "
                "Generate a secure secret with: openssl rand -hex 32"
            )
        if len(v) < 32:
            raise ValueError("JWT secrets must be at least 32 characters")
        return v

    @field_validator("jwt_refresh_secret")
    @classmethod
    def validate_distinct_secrets(cls, v: str, info: ValidationInfo) -> str:
        """Refresh tokens must not be verifiable with the access secret."""
        if v == info.data.get("jwt_access_secret"):
            raise ValueError("JWT_REFRESH_SECRET must differ from JWT_ACCESS_SECRET")
        return v

    @field_validator("cors_origins")
    @classmethod
    def validate_cors_origins(cls, v: list[str]) -> list[str]:
        """Validate CORS origins - reject wildcards when credentials are used."""
        for origin in v:
            if origin == "*":
                raise ValueError(
                    "CORS wildcard '*' is not allowed when allow_credentials=True. "
                    "Specify explicit origins instead."
                )
        return v


@lru_cache
def get_settings() -> Settings:
    return Settings()
