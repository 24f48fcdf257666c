"""
API configuration settings.
"""

from pydantic_settings import BaseSettings


class APIConfig(BaseSettings):
    """API configuration settings."""

    # API Settings
    api_title: str = "Book Tracker API"
    api_version: str = "1.0.0"
    api_description: str = "A REST API for tracking the books you have read"

    # Server Settings
    host: str = "0.0.0.0"
    port: int = 8000
    debug: bool = False

    # Security Settings
    secret_key: str = "your-super-secret-key-here-that-is-at-least-32-characters-long"
    algorithm: str = "HS256"
    token_issuer: str = "BookTracker"
    token_audience: str = "BookTrackerUsers"
    access_token_expire_minutes: int = 7 * 24 * 60
    bcrypt_rounds: int = 12

    # Identity used when a request carries no usable subject
    allow_anonymous: bool = False
    fallback_user_id: str = "demo123"

    # Pagination
    default_page_size: int = 10
    max_page_size: int = 100

    # CORS Settings
    cors_origins: list = ["*"]  # Configure appropriately for production
    cors_allow_credentials: bool = True
    cors_allow_methods: list = ["*"]
    cors_allow_headers: list = ["*"]

    # Logging
    log_level: str = "INFO"

    model_config = {
        "env_prefix": "API_",
        "env_file": ".env",
        "extra": "ignore"  # Ignore extra fields from .env
    }


# Global config instance
config = APIConfig()
