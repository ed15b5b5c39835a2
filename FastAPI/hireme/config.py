from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # Required from environment (.env / deployment secrets)
    database_url: str
    secret_key: str
    algorithm: str = "HS256"
    access_token_expire_minutes: int = 60 * 24 * 7  # 7 days
    app_env: str = "development"  # development, staging, production

    # CORS origins as comma-separated values
    # Example: "https://app.example.com,https://admin.example.com"
    cors_allow_origins: str = "http://localhost:5173,http://localhost:3000"

    log_level: str = "INFO"  # DEBUG, INFO, WARNING, ERROR

    # Shared counter store for rate limiting; in-memory when unset
    redis_url: str | None = None
    rate_limit_window_seconds: int = 15 * 60
    rate_limit_per_window: int = 100
    rate_limit_auth_per_min: int = 20

    # Listing defaults
    default_page_size: int = 10
    max_page_size: int = 100
    featured_jobs_limit: int = 6

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"


settings = Settings()
