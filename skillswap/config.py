from __future__ import annotations

import json
import os
from functools import lru_cache
from pathlib import Path
from typing import Annotated, Any

from dotenv import load_dotenv
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

from skillswap.constants import ROLE_ADMIN


PROJECT_ROOT = Path(__file__).resolve().parents[1]
SQLITE_DEFAULT_URL = "sqlite:///./skillswap.db"


def _running_tests() -> bool:
    return os.getenv("ENVIRONMENT", "").lower() == "test" or "PYTEST_CURRENT_TEST" in os.environ


# A local .env must not leak into the test database or admin allowlist.
if (PROJECT_ROOT / ".env").exists() and not _running_tests():
    load_dotenv(dotenv_path=PROJECT_ROOT / ".env", override=True)


def normalize_email(value: str) -> str:
    return (value or "").strip().lower()


def split_env_list(raw: Any) -> list[str]:
    """Accept a list, a JSON array string or a comma-separated string."""
    if raw is None:
        return []
    if isinstance(raw, str):
        text = raw.strip()
        if text.startswith("["):
            try:
                decoded = json.loads(text)
            except ValueError:
                decoded = text.strip("[]").split(",")
            raw = decoded if isinstance(decoded, list) else [decoded]
        else:
            raw = text.split(",")
    elif not isinstance(raw, (list, tuple, set)):
        raw = [raw]
    return [str(item).strip() for item in raw if item is not None and str(item).strip()]


class Settings(BaseSettings):
    app_name: str = Field(default="Skill Swap Platform")
    version: str = Field(default="0.1.0")
    environment: str = Field(default="development")
    debug: bool = Field(default=True)

    # DB_URL wins. Otherwise sqlite in development, or MySQL assembled from DB_* parts.
    db_url: str | None = Field(default=None, validation_alias="DB_URL")
    db_use_mysql: bool = Field(default=False, validation_alias="DB_USE_MYSQL")
    db_host: str = Field(default="localhost", validation_alias="DB_HOST")
    db_port: int = Field(default=3306, validation_alias="DB_PORT")
    db_name: str = Field(default="skillswap", validation_alias="DB_NAME")
    db_user: str = Field(default="root", validation_alias="DB_USER")
    db_password: str = Field(default="password", validation_alias="DB_PASSWORD")
    db_charset: str = Field(default="utf8mb4", validation_alias="DB_CHARSET")

    jwt_secret: str = Field(default="change-me", validation_alias="JWT_SECRET")
    jwt_algorithm: str = Field(default="HS256", validation_alias="JWT_ALGORITHM")
    access_token_expire_minutes: int = Field(default=7 * 24 * 60, validation_alias="ACCESS_TOKEN_EXPIRE_MINUTES")
    password_hash_iterations: int = Field(default=240_000, validation_alias="PASSWORD_HASH_ITERATIONS")

    cors_origins: Annotated[list[str], NoDecode] = Field(
        default_factory=lambda: ["http://localhost:3000", "http://127.0.0.1:3000"],
        validation_alias="CORS_ORIGINS",
    )

    # Members whose email is listed here are admins whatever their stored role.
    #   ADMIN_EMAILS=admin@skillswap.com,ops@skillswap.com
    #   ADMIN_EMAILS=["admin@skillswap.com"]
    admin_emails: Annotated[list[str], NoDecode] = Field(default_factory=list, validation_alias="ADMIN_EMAILS")
    # Re-read ADMIN_EMAILS from the process environment on every check.
    admin_emails_reload: bool = Field(default=False, validation_alias="ADMIN_EMAILS_RELOAD")

    pagination_default_limit: int = Field(default=10, validation_alias="PAGINATION_DEFAULT_LIMIT")
    pagination_max_limit: int = Field(default=50, validation_alias="PAGINATION_MAX_LIMIT")

    # 0 or 1 ranks match candidates sequentially.
    match_workers: int = Field(default=0, validation_alias="MATCH_WORKERS")

    @field_validator("admin_emails", mode="before")
    @classmethod
    def _normalize_admin_emails(cls, v: Any) -> list[str]:
        return [normalize_email(e) for e in split_env_list(v)]

    @field_validator("cors_origins", mode="before")
    @classmethod
    def _split_cors_origins(cls, v: Any) -> list[str]:
        return split_env_list(v)

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")


@lru_cache
def get_settings() -> Settings:
    return Settings()


settings = get_settings()


def build_sqlalchemy_db_url(cfg: Settings) -> str:
    if cfg.db_url:
        return cfg.db_url
    if not cfg.db_use_mysql and cfg.environment.lower() == "development":
        return SQLITE_DEFAULT_URL
    # Passwords with URL-special characters should go through DB_URL instead.
    return (
        f"mysql+pymysql://{cfg.db_user}:{cfg.db_password}@{cfg.db_host}:{cfg.db_port}/{cfg.db_name}"
        f"?charset={cfg.db_charset}"
    )


def get_admin_allowlist(*, reload: bool | None = None) -> set[str]:
    if settings.admin_emails_reload if reload is None else reload:
        return {normalize_email(e) for e in split_env_list(os.environ.get("ADMIN_EMAILS"))}
    return set(settings.admin_emails)


def is_admin_email(email: str) -> bool:
    return normalize_email(email) in get_admin_allowlist()


def is_admin_account(role: str | None, email: str) -> bool:
    """Admin by stored role or by ADMIN_EMAILS allowlist."""
    return role == ROLE_ADMIN or is_admin_email(email)
