from __future__ import annotations

from typing import List, Any, Literal
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field, AnyUrl, AliasChoices, field_validator, model_validator


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="forbid",  # typos in .env fail loudly
    )

    # General
    APP_NAME: str = "Classroom Live Forms Backend"
    API_V1_PREFIX: str = "/api/v1"
    APP_ENV: str = Field(
        "dev",
        validation_alias=AliasChoices("APP_ENV", "app_env"),
        description="Application environment: dev|staging|prod",
    )
    BACKEND_PORT: int = Field(
        8000,
        validation_alias=AliasChoices("BACKEND_PORT", "app_port"),
        description="Backend port to bind",
    )
    LOG_LEVEL: str = Field(
        "INFO",
        validation_alias=AliasChoices("LOG_LEVEL", "log_level"),
    )

    # Persistence
    COURSE_STORE: Literal["memory", "redis", "supabase"] = Field(
        "memory",
        validation_alias=AliasChoices("COURSE_STORE", "course_store"),
        description="Which document store holds the courses",
    )
    OPTIMISTIC_LOCKING: bool = Field(
        True,
        validation_alias=AliasChoices("OPTIMISTIC_LOCKING", "optimistic_locking"),
        description="Reject saves of a course that changed since it was loaded",
    )

    # Redis
    REDIS_URL: str = Field(
        "redis://localhost:6379/0",
        validation_alias=AliasChoices("REDIS_URL", "redis_url"),
        description="redis:// or rediss:// URL",
    )
    REDIS_PREFIX: str = Field(
        "classroom:",
        validation_alias=AliasChoices("REDIS_PREFIX", "redis_prefix"),
    )

    # Supabase
    SUPABASE_URL: AnyUrl | None = Field(
        None,
        validation_alias=AliasChoices("SUPABASE_URL", "supabase_url"),
        description="Your Supabase project URL",
    )
    SUPABASE_SERVICE_ROLE_KEY: str | None = Field(
        None,
        validation_alias=AliasChoices("SUPABASE_SERVICE_ROLE_KEY", "supabase_service_role_key"),
        description="Service role key (server-side)",
    )
    SUPABASE_SCHEMA: str = Field(
        "public",
        validation_alias=AliasChoices("SUPABASE_SCHEMA", "supabase_schema"),
        description="Supabase schema name",
    )
    SUPABASE_COURSES_TABLE: str = Field(
        "courses",
        validation_alias=AliasChoices("SUPABASE_COURSES_TABLE", "supabase_courses_table"),
    )

    # Live sessions
    CONNECT_CODE_MIN: int = Field(100000, ge=0)
    CONNECT_CODE_MAX: int = Field(999999, ge=1)
    LIVE_FEED_LEGACY: bool = Field(
        False,
        validation_alias=AliasChoices("LIVE_FEED_LEGACY", "live_feed_legacy"),
        description="Reproduce the old live feed: full started forms plus a redacted copy of every form",
    )

    # CORS origins
    FRONTEND_ORIGINS: List[str] = [
        "http://localhost:5173",
        "http://localhost:3000",
        "http://127.0.0.1:5173",
    ]

    @field_validator("FRONTEND_ORIGINS", mode="before")
    @classmethod
    def _parse_origins(cls, v: Any) -> Any:
        """
        FRONTEND_ORIGINS may be given in .env as:
        - a JSON array: ["http://localhost:5173","http://localhost:3000"]
        - a comma separated string: http://localhost:5173,http://localhost:3000
        - or separated by ;
        """
        if isinstance(v, str):
            s = v.strip()
            if s.startswith("[") and s.endswith("]"):
                import json
                try:
                    return json.loads(s)
                except ValueError:
                    pass
            return [item.strip() for item in s.replace(";", ",").split(",") if item.strip()]
        return v

    @model_validator(mode="after")
    def _check_backend(self) -> "Settings":
        if self.CONNECT_CODE_MIN >= self.CONNECT_CODE_MAX:
            raise ValueError("CONNECT_CODE_MIN must be lower than CONNECT_CODE_MAX")
        if self.COURSE_STORE == "supabase" and (
            self.SUPABASE_URL is None or not self.SUPABASE_SERVICE_ROLE_KEY
        ):
            raise ValueError("COURSE_STORE=supabase needs SUPABASE_URL and SUPABASE_SERVICE_ROLE_KEY")
        return self


settings = Settings()
