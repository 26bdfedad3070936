"""Application settings and configuration.

This module defines all configuration options for the Silica Social application.
Settings are loaded from environment variables with sensible defaults.
"""

from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    Settings can be overridden via environment variables or .env files.
    """

    # Application metadata
    app_name: str = Field(default="Silica Social", alias="APP_NAME")
    app_version: str = Field(default="0.1.0", alias="APP_VERSION")
    debug: bool = Field(default=False, alias="DEBUG")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    # Server binding
    host: str = Field(default="localhost", alias="HOST")
    port: int = Field(default=3000, alias="PORT")

    # Session tokens
    secret_key: str = Field(alias="SECRET_KEY")
    jwt_algorithm: str = Field(default="HS256", alias="JWT_ALGORITHM")
    session_expire_minutes: int = Field(default=60 * 24, alias="SESSION_EXPIRE_MINUTES")
    session_cookie_name: str = Field(default="silica_session", alias="SESSION_COOKIE_NAME")
    session_cookie_secure: bool = Field(default=False, alias="SESSION_COOKIE_SECURE")

    # Database configuration
    database_url: str = Field(default="sqlite:///./db/database.sqlite", alias="DATABASE_URL")
    test_database_url: str | None = Field(default=None, alias="TEST_DATABASE_URL")
    use_testing_database: bool = Field(default=False, alias="USE_TEST_DATABASE")
    sql_debug: bool = Field(default=False, alias="SQL_DEBUG")

    # Credential hashing. Twelve rounds costs roughly a few hundred ms per check.
    bcrypt_rounds: int = Field(default=12, ge=4, le=31, alias="BCRYPT_ROUNDS")
    public_key_attempts: int = Field(default=3, ge=1, alias="PUBLIC_KEY_ATTEMPTS")

    # Filesystem layout
    data_dir: Path = Field(default=Path("db"), alias="DATA_DIR")
    uploads_dir: Path = Field(default=Path("db/uploads"), alias="UPLOADS_DIR")
    public_dir: Path = Field(default=Path("public"), alias="PUBLIC_DIR")
    views_dir: Path = Field(default=Path("views"), alias="VIEWS_DIR")
    media_dir: Path = Field(default=Path("public/media"), alias="MEDIA_DIR")

    # Upload limits
    max_upload_bytes: int = Field(default=50 * 1024 * 1024, alias="MAX_UPLOAD_BYTES")
    max_files_per_request: int = Field(default=5, alias="MAX_FILES_PER_REQUEST")

    # Feed pagination
    default_per_page: int = Field(default=50, alias="DEFAULT_PER_PAGE")

    # CORS configuration for web frontend access
    cors_origins: list[str] = Field(default=["*"], alias="CORS_ORIGINS")
    cors_allow_credentials: bool = Field(default=True, alias="CORS_ALLOW_CREDENTIALS")
    cors_allow_methods: list[str] = Field(default=["GET", "POST", "OPTIONS"], alias="CORS_ALLOW_METHODS")
    cors_allow_headers: list[str] = Field(default=["*"], alias="CORS_ALLOW_HEADERS")

    model_config = SettingsConfigDict(
        env_file=".env",
        validate_assignment=True,
        extra="ignore",
    )

    @property
    def effective_database_url(self) -> str:
        """Return the database URL respecting testing overrides."""
        if self.use_testing_database and self.test_database_url:
            return self.test_database_url
        return self.database_url

    @property
    def session_max_age_seconds(self) -> int:
        """Lifetime of the session cookie in seconds."""
        return self.session_expire_minutes * 60


settings = Settings()  # type: ignore[call-arg]
