"""Application configuration and settings management."""

from pathlib import Path
from typing import Any, Literal, Optional

import json
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Runtime configuration loaded from environment variables or defaults."""

    model_config = SettingsConfigDict(
        env_prefix="DISPATCH_",
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
    )

    app_name: str = "Emergency Vehicle Dispatch API"
    api_prefix: str = "/api"
    log_level: str = Field(default="INFO", description="Root log level applied by create_app().")
    frontend_allowed_origins: tuple[str, ...] = Field(
        default=("*",),
        description="Permitted web origins for browser clients (CORS).",
    )

    store_backend: Literal["supabase", "memory"] = Field(
        default="supabase",
        description="Backing store for zones, edges and the dispatch log.",
    )
    network_file: Optional[Path] = Field(
        default=None,
        description="JSON topology loaded into the in-memory store (zones + edges).",
    )

    # Supabase configuration
    supabase_url: Optional[str] = Field(
        default=None,
        description="Supabase project URL (e.g., https://xxx.supabase.co).",
    )
    supabase_key: Optional[str] = Field(
        default=None,
        description="Supabase service role key for backend operations.",
    )
    zones_table: str = "zip_codes"
    edges_table: str = "edges"
    dispatch_logs_table: str = "dispatch_logs"

    allocation_max_attempts: int = Field(
        default=3,
        ge=1,
        description="Compare-and-swap attempts before an allocation is reported as a conflict.",
    )
    dispatch_log_limit: int = Field(default=50, ge=1, le=1000)

    @field_validator("network_file", mode="before")
    @classmethod
    def _expand_path(cls, value: Any) -> Path | None:
        if value is None or value == "":
            return None
        path_value = value if isinstance(value, Path) else Path(str(value))
        return path_value.expanduser().resolve()

    @field_validator("frontend_allowed_origins", mode="before")
    @classmethod
    def _parse_str_tuple_from_env(cls, value: Any) -> tuple[str, ...]:
        """Parse string tuple from environment variable (comma-separated or JSON array)."""
        if isinstance(value, tuple):
            return value
        if isinstance(value, list):
            return tuple(str(item) for item in value)
        if isinstance(value, str):
            # Try JSON first
            try:
                parsed = json.loads(value)
                if isinstance(parsed, list):
                    return tuple(str(item) for item in parsed)
            except (json.JSONDecodeError, TypeError):
                pass
            if "," in value:
                return tuple(item.strip() for item in value.split(",") if item.strip())
            if value.strip():
                return (value.strip(),)
        return tuple()


settings = Settings()
