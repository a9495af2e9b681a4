from typing import Literal, Optional
from urllib.parse import quote_plus

from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class DatabaseConfig(BaseSettings):
    """Database configuration"""

    host: str = "localhost"
    port: int = 5432
    username: str = "postgres"
    password: SecretStr = Field(default=SecretStr("postgres"))
    database: str = "dictations"
    schema_name: Optional[str] = None
    dsn: Optional[str] = Field(
        default=None,
        description="Full SQLAlchemy URL; overrides the host/port/credential fields.",
    )
    serverless: bool = Field(
        default=False,
        description="If true, disable connection pooling so serverless DBs can pause.",
    )

    @property
    def url(self) -> str:
        """Get database URL"""
        if self.dsn:
            return self.dsn
        username = quote_plus(self.username)
        password = quote_plus(self.password.get_secret_value())
        return (
            "postgresql+asyncpg://"
            f"{username}:{password}"
            f"@{self.host}:{self.port}/{self.database}"
        )

    model_config = SettingsConfigDict(
        env_prefix="DB_",
        env_file=".env",
        secrets_dir=".secrets",
        case_sensitive=False,
        extra="ignore",
    )


class S3Config(BaseSettings):
    """S3 configuration"""

    access_key: Optional[str] = None
    secret_key: Optional[str] = None
    region: str = "us-east-1"
    bucket_name: str = "dictation-audio"
    key_prefix: str = "tts"

    model_config = SettingsConfigDict(
        env_prefix="S3_",
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )


class PollyConfig(BaseSettings):
    """Amazon Polly configuration."""

    region: str = "us-east-1"
    engine: str = "standard"
    voices: dict[str, str] = Field(
        default_factory=lambda: {"en": "Joanna", "ru": "Tatyana"},
    )
    default_voice_id: str = "Joanna"

    model_config = SettingsConfigDict(
        env_prefix="POLLY_",
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )


class TtsConfig(BaseSettings):
    """Speech synthesis provider used to fill in missing word audio."""

    provider: Literal["google", "polly"] = "google"
    host: str = "https://translate.google.com"
    timeout_seconds: float = Field(default=10.0, gt=0)
    slow: bool = False
    default_language: str = "ru"

    model_config = SettingsConfigDict(
        env_prefix="TTS_",
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )


class StorageConfig(BaseSettings):
    """Durable storage for generated and uploaded audio files."""

    backend: Literal["local", "s3"] = "local"
    upload_dir: str = "uploads"
    url_prefix: str = "/uploads"

    model_config = SettingsConfigDict(
        env_prefix="STORAGE_",
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )


class SecurityConfig(BaseSettings):
    """JWT and application security configuration."""

    jwt_secret_key: SecretStr = Field(
        default=SecretStr("access_secret"),
        validation_alias="JWT_SECRET",
    )
    refresh_secret_key: SecretStr = Field(
        default=SecretStr("refresh_secret"),
        validation_alias="REFRESH_SECRET",
    )
    jwt_algorithm: str = Field(default="HS256", validation_alias="JWT_ALGORITHM")
    access_token_expires_minutes: int = Field(
        default=15,
        validation_alias="JWT_EXPIRATION_MINUTES",
        ge=1,
    )
    refresh_token_expires_days: int = Field(
        default=30,
        validation_alias="REFRESH_EXPIRATION_DAYS",
        ge=1,
    )
    refresh_cookie_secure: bool = Field(
        default=False,
        validation_alias="REFRESH_COOKIE_SECURE",
    )

    model_config = SettingsConfigDict(
        env_prefix="",
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )


class Settings(BaseSettings):
    """Application settings"""

    app_name: str = "Dictation Backend"
    app_version: str = "1.0.0"
    debug: bool = False
    host: str = "0.0.0.0"
    port: int = 8000
    api_prefix: str = "/api"
    log_file: str = "logs/app.log"
    audio_log_file: str = "logs/audio_resolution.log"

    # Database
    database: DatabaseConfig = Field(default_factory=DatabaseConfig)

    # Speech synthesis
    tts: TtsConfig = Field(default_factory=TtsConfig)

    # Audio storage
    storage: StorageConfig = Field(default_factory=StorageConfig)

    # S3
    s3: S3Config = Field(default_factory=S3Config)

    # Polly
    polly: PollyConfig = Field(default_factory=PollyConfig)

    # Security
    security: SecurityConfig = Field(default_factory=SecurityConfig)

    # CORS
    cors_origins: list[str] = ["*"]
    cors_allow_credentials: bool = True
    cors_allow_methods: list[str] = ["*"]
    cors_allow_headers: list[str] = ["*"]

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )


# Global settings instance
settings = Settings()
