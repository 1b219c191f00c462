from dataclasses import dataclass

from pydantic import AliasChoices, AnyUrl, Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


@dataclass(frozen=True)
class JwtConfig:
    """Signing parameters handed to the token issuer."""

    secret: str
    algorithm: str
    issuer: str
    audience: str
    expires_days: int


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=(".env", "../.env"), extra="ignore")

    database_url: AnyUrl | None = None
    postgres_url: AnyUrl | None = Field(
        default=None, validation_alias=AliasChoices("POSTGRES_URL", "PG_URL")
    )
    db_pool_min_size: int = 1
    db_pool_max_size: int = 10
    jwt_secret: str = Field(
        default="change-me-to-a-32-byte-or-longer-secret",
        validation_alias=AliasChoices("JWT_SECRET", "JWT_KEY"),
    )
    jwt_algorithm: str = "HS256"
    jwt_issuer: str = "coursehub-api"
    jwt_audience: str = "coursehub-clients"
    jwt_expires_days: int = 7
    default_page_size: int = 10
    max_page_size: int = 100
    log_level: str = "INFO"
    cors_allow_origins: list[str] = [
        "http://localhost:3000",
        "http://127.0.0.1:3000",
        "http://localhost:5173",
        "http://127.0.0.1:5173",
    ]
    cors_allow_origin_regex: str | None = r"http://(localhost|127\.0\.0\.1)(:\d+)?"
    sentry_dsn: str | None = Field(
        default=None, validation_alias=AliasChoices("SENTRY_DSN", "BACKEND_SENTRY_DSN")
    )
    sentry_traces_sample_rate: float = Field(
        default=0.0,
        validation_alias=AliasChoices(
            "SENTRY_TRACES_SAMPLE_RATE",
            "BACKEND_SENTRY_TRACES_SAMPLE_RATE",
        ),
    )

    @model_validator(mode="after")
    def _populate_database_url(self):
        if self.database_url is None:
            if self.postgres_url is None:
                raise ValueError("DATABASE_URL or POSTGRES_URL is required")
            self.database_url = self.postgres_url
        if self.max_page_size < 1:
            raise ValueError("MAX_PAGE_SIZE must be positive")
        self.default_page_size = max(1, min(self.default_page_size, self.max_page_size))
        return self

    @field_validator("cors_allow_origins", mode="before")
    @classmethod
    def _split_origins(cls, value):
        if isinstance(value, str):
            return [origin.strip() for origin in value.split(",") if origin.strip()]
        return value

    def jwt_config(self) -> JwtConfig:
        return JwtConfig(
            secret=self.jwt_secret,
            algorithm=self.jwt_algorithm,
            issuer=self.jwt_issuer,
            audience=self.jwt_audience,
            expires_days=self.jwt_expires_days,
        )


settings = Settings()
