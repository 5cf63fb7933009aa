"""
Centralised settings loader (pydantic-settings).
"""

from __future__ import annotations
from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


# ------------------------------------------------------------------ #
#  Master settings model
# ------------------------------------------------------------------ #
class _Settings(BaseSettings):
    # ─── runtime / DB / auth ─────────────────────────────────────────
    env_name: str = Field("local", validation_alias="ENV_NAME")
    database_url: str | None = Field(None, validation_alias="DATABASE_URL")
    cloud_sql_instance: str | None = Field(None, validation_alias="CLOUD_SQL_CONNECTION_NAME")
    db_user: str | None = Field(None, validation_alias="DB_USER")
    db_pass: str | None = Field(None, validation_alias="DB_PASS")
    db_name: str | None = Field(None, validation_alias="DB_NAME")
    jwt_secret: str = Field("changeme", validation_alias="JWT_SECRET")
    jwt_ttl_minutes: int = Field(60, validation_alias="JWT_TTL_MINUTES")

    # ─── plan engine switches ───────────────────────────────────────
    assessment_mode: str = Field("basic", validation_alias="ASSESSMENT_MODE")
    secondary_blend_threshold: float = Field(30.0, validation_alias="SECONDARY_BLEND_THRESHOLD")
    enable_personalization: bool = Field(True, validation_alias="ENABLE_PERSONALIZATION")
    enable_seasonal_adjustments: bool = Field(True, validation_alias="ENABLE_SEASONAL_ADJUSTMENTS")
    enable_health_condition_support: bool = Field(
        True, validation_alias="ENABLE_HEALTH_CONDITION_SUPPORT"
    )
    plan_random_seed: int | None = Field(None, validation_alias="PLAN_RANDOM_SEED")

    # allow other teammates’ env-vars without crashing
    model_config = SettingsConfigDict(extra="ignore", env_file=".env", env_file_encoding="utf-8")


# ------------------------------------------------------------------ #
#  Cached singleton accessor
# ------------------------------------------------------------------ #
@lru_cache
def _cached() -> _Settings:  # pragma: no cover
    return _Settings()  # type: ignore[call-arg]


settings: _Settings = _cached()
