"""
EdAiVi Studio Backend: Application Configuration
================================================

What:  Centralized configuration management using Pydantic Settings.
How:   Pydantic Settings reads environment variables (or a .env file),
       validates types and ranges, and exposes a singleton `settings` object.
Who:   Imported by every module that needs configuration values.
When:  Loaded once at import time; insecure defaults are reported at startup.
"""

from typing import List

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings


DEFAULT_JWT_SECRET = "your-secret-key-change-in-production"


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Every value has a development default. Production deployments MUST
    override JWT_SECRET, DEV_ACCESS_KEY and OWNER_EMAIL.
    """

    # ── Identity ──────────────────────────────────────────────────────────
    app_name: str = Field(default="EdAiVi Studio")
    environment: str = Field(default="development")

    # ── Authentication ────────────────────────────────────────────────────
    # What: HMAC secret used to sign session tokens (HS256)
    jwt_secret: str = Field(default=DEFAULT_JWT_SECRET)

    # What: Lifetime of a regular session token
    jwt_expires_days: int = Field(default=7, ge=1, le=90)

    # What: Lifetime of a developer session token (elevated role claim)
    dev_token_expires_hours: int = Field(default=24, ge=1, le=168)

    # What: Shared secret required by POST /api/auth/dev-login.
    # Empty disables developer login entirely.
    dev_access_key: str = Field(default="")

    # What: The only email allowed to log in as developer
    owner_email: str = Field(default="")

    # What: Lifetimes of one-time email tokens
    verification_token_hours: int = Field(default=24, ge=1, le=168)
    reset_token_minutes: int = Field(default=60, ge=5, le=1440)

    # ── Credits ───────────────────────────────────────────────────────────
    # What: AI credits granted to a newly registered user
    default_ai_credits: int = Field(default=100, ge=0)

    # What: Serialize check-and-charge per user with an asyncio.Lock.
    # False reproduces the unguarded read → check → write sequence.
    serialize_credit_charges: bool = Field(default=True)

    # ── Seed Data ─────────────────────────────────────────────────────────
    seed_demo_data: bool = Field(default=True)
    admin_email: str = Field(default="admin@edaivi.com")
    admin_password: str = Field(default="admin12345")

    # ── Storage / Static ──────────────────────────────────────────────────
    # What: Directory holding the prebuilt frontend bundle (index.html + assets)
    static_dir: str = Field(default="./client")

    # What: Base URL used when minting simulated generated/exported file URLs
    media_base_url: str = Field(default="https://storage.edaivi.com")

    # ── CORS ──────────────────────────────────────────────────────────────
    # Format: Comma-separated URLs
    cors_origins: str = Field(default="http://localhost:3000,http://localhost:3001")

    @property
    def cors_origins_list(self) -> List[str]:
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]

    # ── Server ────────────────────────────────────────────────────────────
    backend_host: str = Field(default="0.0.0.0")
    backend_port: int = Field(default=8082, ge=1024, le=65535)

    # Valid: DEBUG, INFO, WARNING, ERROR, CRITICAL
    log_level: str = Field(default="INFO")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Ensures log level is a valid Python logging level name."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        upper = v.upper()
        if upper not in valid_levels:
            raise ValueError(f"Invalid log_level '{v}'. Must be one of: {valid_levels}")
        return upper

    # ── Rate Limiting ─────────────────────────────────────────────────────
    # What: Per-IP sliding window rate limit (100 requests per 15 minutes)
    rate_limit_requests: int = Field(default=100, ge=10, le=10000)
    rate_limit_window: int = Field(default=900, ge=60, le=86400)  # seconds

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
    }

    @property
    def is_production(self) -> bool:
        return self.environment.strip().lower() == "production"

    @property
    def dev_login_enabled(self) -> bool:
        return bool(self.dev_access_key and self.owner_email)

    def validate_required_for_production(self) -> None:
        """
        What:  Reports insecure or missing security settings.
        When:  Called during app startup (lifespan).
        How:   Collects every problem and raises one ValueError listing them.
        """
        errors = []
        if self.jwt_secret == DEFAULT_JWT_SECRET:
            errors.append("JWT_SECRET is using the development default.")
        if self.dev_access_key and not self.owner_email:
            errors.append("DEV_ACCESS_KEY is set but OWNER_EMAIL is empty; developer login stays disabled.")
        if errors:
            raise ValueError(
                "Configuration validation failed:\n" + "\n".join(f"  - {e}" for e in errors)
            )


settings = Settings()
