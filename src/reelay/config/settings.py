from __future__ import annotations

import os
import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from dotenv import load_dotenv
from pydantic import BaseModel, Field, ValidationError

CONFIG_PATH_ENV = "REELAY_CONFIG"


class Settings(BaseModel):
    """Application configuration resolved from env vars and optional TOML files."""

    supabase_url: str | None = Field(default=None, alias="SUPABASE_URL")
    supabase_api_key: str | None = Field(default=None, alias="SUPABASE_API_KEY")
    access_token: str | None = Field(default=None, alias="SUPABASE_ACCESS_TOKEN")
    user_id: str | None = Field(default=None, alias="REELAY_USER_ID")

    movies_file: Path | None = Field(default=None, alias="REELAY_MOVIES_FILE")

    page_size: int = Field(default=100, ge=1, alias="REELAY_PAGE_SIZE")
    fetch_batch_size: int = Field(default=1000, ge=1, alias="REELAY_FETCH_BATCH_SIZE")
    request_timeout: float = Field(default=20.0, gt=0, alias="REELAY_REQUEST_TIMEOUT")

    model_config = {
        "populate_by_name": True,
        "str_strip_whitespace": True,
        "extra": "ignore",
    }

    def require_backend(self) -> None:
        """Ensure diary backend connection settings are available."""
        if not self.supabase_url or not self.supabase_api_key:
            raise SettingsError(
                "Missing SUPABASE_URL or SUPABASE_API_KEY. Configure environment or TOML file.",
            )


class SettingsError(RuntimeError):
    """Raised when configuration cannot be resolved."""


@dataclass(frozen=True)
class SettingsLoadResult:
    settings: Settings
    source_path: Path | None


def load_settings(config_path: Path | None = None, *, load_env: bool = True) -> SettingsLoadResult:
    """Load settings from .env files, environment variables, and optional TOML configuration."""

    if load_env:
        load_dotenv()

    resolved_path = _determine_config_path(config_path)
    config_data: dict[str, Any] = {}

    if resolved_path and resolved_path.exists():
        try:
            with resolved_path.open("rb") as handle:
                toml_payload = tomllib.load(handle)
        except tomllib.TOMLDecodeError as exc:
            raise SettingsError(f"Invalid TOML in {resolved_path}: {exc}") from exc
        config_data = _flatten_toml(toml_payload)

    try:
        env_data = _collect_env_overrides()
    except ValueError as exc:
        raise SettingsError(f"Invalid environment override: {exc}") from exc
    merged = {**config_data, **env_data}

    try:
        settings = Settings.model_validate(merged)
    except ValidationError as exc:  # pragma: no cover - surfaced via CLI messaging
        raise SettingsError(str(exc)) from exc

    return SettingsLoadResult(settings=settings, source_path=resolved_path)


def _determine_config_path(config_path: Path | None) -> Path | None:
    if config_path:
        return config_path

    env_override = os.getenv(CONFIG_PATH_ENV)
    if env_override:
        return Path(env_override).expanduser().resolve()

    default_path = Path.home() / ".config" / "reelay" / "config.toml"
    return default_path if default_path.exists() else None


def _flatten_toml(payload: dict[str, Any]) -> dict[str, Any]:
    result: dict[str, Any] = {}

    backend_cfg = payload.get("backend", {})
    if "url" in backend_cfg:
        result["supabase_url"] = backend_cfg.get("url")
    if "api_key" in backend_cfg:
        result["supabase_api_key"] = backend_cfg.get("api_key")
    if "access_token" in backend_cfg:
        result["access_token"] = backend_cfg.get("access_token")
    if "user_id" in backend_cfg:
        result["user_id"] = str(backend_cfg.get("user_id"))

    library_cfg = payload.get("library", {})
    if "movies_file" in library_cfg:
        result["movies_file"] = Path(str(library_cfg.get("movies_file"))).expanduser()

    browse_cfg = payload.get("browse", {})
    if "page_size" in browse_cfg:
        result["page_size"] = int(browse_cfg.get("page_size"))
    if "fetch_batch_size" in browse_cfg:
        result["fetch_batch_size"] = int(browse_cfg.get("fetch_batch_size"))
    if "request_timeout" in browse_cfg:
        result["request_timeout"] = float(browse_cfg.get("request_timeout"))

    return result


def _collect_env_overrides() -> dict[str, Any]:
    mapping: dict[str, str] = {
        "SUPABASE_URL": "supabase_url",
        "SUPABASE_API_KEY": "supabase_api_key",
        "SUPABASE_ACCESS_TOKEN": "access_token",
        "REELAY_USER_ID": "user_id",
        "REELAY_MOVIES_FILE": "movies_file",
        "REELAY_PAGE_SIZE": "page_size",
        "REELAY_FETCH_BATCH_SIZE": "fetch_batch_size",
        "REELAY_REQUEST_TIMEOUT": "request_timeout",
    }

    result: dict[str, Any] = {}
    for env_name, field in mapping.items():
        if env_name not in os.environ:
            continue
        value = os.environ[env_name]
        if field in {"page_size", "fetch_batch_size"}:
            result[field] = int(value)
        elif field == "request_timeout":
            result[field] = float(value)
        elif field == "movies_file":
            result[field] = Path(value).expanduser()
        else:
            result[field] = value
    return result


__all__ = ["Settings", "SettingsError", "SettingsLoadResult", "load_settings"]
