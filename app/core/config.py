from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    PROJECT_NAME: str = "Review Interactions API"
    VERSION: str = "v1"
    DESCRIPTION: str = "Likes and threaded comments for platform reviews"

    API_V1_STR: str = "/api/v1"

    # --- Database ---
    DATABASE_URL: str = "sqlite+aiosqlite:///./interactions.db"

    # Database Pool Settings
    DB_ECHO: bool = False
    DB_POOL_SIZE: int = 5
    DB_MAX_OVERFLOW: int = 10
    DB_POOL_RECYCLE: int = 3600
    DB_POOL_TIMEOUT: int = 30

    # --- Tokens issued by the auth service ---
    JWT_SECRET: str = "change-me-in-production-this-is-only-a-dev-secret"
    JWT_ALGORITHM: str = "HS256"
    TOKEN_ISSUER: str = "review-platform"
    TOKEN_AUDIENCE: str = "review-platform:users"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 15

    # --- Listings ---
    DEFAULT_PAGE_SIZE: int = 20
    MAX_PAGE_SIZE: int = 100

    # --- Comments ---
    COMMENT_MAX_LENGTH: int = 2000

    # --- HTTP / Logging ---
    LOG_LEVEL: str = "INFO"
    CORS_ORIGINS: str = "http://localhost:3000,http://localhost:8000"
    LOGGING_EXCLUDE_PATHS: set[str] = {"/health", "/metrics", "/favicon.ico"}

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")


settings = Settings()
