"""Application settings loaded from JSON with environment overrides."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
import json
import os
from pathlib import Path
from typing import Any, Optional

from yearfill.errors import ValidationError


_ALLOWED_BACKENDS = {"meta-json", "mutagen"}
_DEFAULT_BACKEND = "mutagen"
DEFAULT_EXTENSIONS = (".flac", ".m4a", ".mp3", ".mp4", ".ogg", ".opus")
_DEFAULT_SEARCH_URL = "https://www.google.com/search?q={query}"


@dataclass(frozen=True)
class Settings:
    acoustid_api_key: Optional[str] = None
    acoustid_base_url: str = "https://api.acoustid.org/v2"
    acoustid_min_interval: float = 0.0
    musicbrainz_base_url: str = "https://musicbrainz.org/ws/2"
    musicbrainz_search_limit: int = 25
    contact: Optional[str] = None
    tag_backend: str = _DEFAULT_BACKEND
    search_url_template: str = _DEFAULT_SEARCH_URL
    inter_file_pause: float = 0.5
    http_timeout: float = 10.0
    extensions: tuple[str, ...] = field(default=DEFAULT_EXTENSIONS)

    def with_overrides(self, **overrides: Any) -> "Settings":
        """Return a copy with every non-None override applied and validated."""
        applied = {key: value for key, value in overrides.items() if value is not None}
        updated = replace(self, **applied)
        _validate(updated)
        return updated


def load_settings(path: Optional[Path]) -> Settings:
    """Load settings from JSON config file, with environment variable overrides.

    Priority order:
    1. Environment variables (for appropriate settings)
    2. JSON config file
    3. Defaults

    Args:
        path: Path to JSON config file, or None to use defaults only

    Returns:
        Settings object with resolved values

    Raises:
        ValidationError: If the file is not valid JSON or a value is out of range
    """
    json_settings: dict[str, Any] = {}
    if path and path.exists():
        try:
            json_settings = json.loads(path.read_text())
        except json.JSONDecodeError as exc:
            raise ValidationError(f"Invalid settings file {path}: {exc}") from exc
        if not isinstance(json_settings, dict):
            raise ValidationError(f"Settings file {path} must contain a JSON object")

    defaults = Settings()
    extensions = json_settings.get("extensions", defaults.extensions)
    settings = Settings(
        acoustid_api_key=os.getenv("ACOUSTID_API_KEY") or json_settings.get("acoustid_api_key"),
        acoustid_base_url=json_settings.get("acoustid_base_url", defaults.acoustid_base_url),
        acoustid_min_interval=float(
            json_settings.get("acoustid_min_interval", defaults.acoustid_min_interval)
        ),
        musicbrainz_base_url=json_settings.get("musicbrainz_base_url", defaults.musicbrainz_base_url),
        musicbrainz_search_limit=int(
            json_settings.get("musicbrainz_search_limit", defaults.musicbrainz_search_limit)
        ),
        contact=os.getenv("YEARFILL_CONTACT") or json_settings.get("contact"),
        tag_backend=os.getenv("YEARFILL_TAG_BACKEND") or json_settings.get("tag_backend", _DEFAULT_BACKEND),
        search_url_template=json_settings.get("search_url_template", defaults.search_url_template),
        inter_file_pause=float(json_settings.get("inter_file_pause", defaults.inter_file_pause)),
        http_timeout=float(json_settings.get("http_timeout", defaults.http_timeout)),
        extensions=_normalize_extensions(extensions),
    )
    _validate(settings)
    return settings


def default_config_path() -> Path:
    return Path.home() / ".config" / "yearfill" / "settings.json"


def _normalize_extensions(values: Any) -> tuple[str, ...]:
    if isinstance(values, str) or not isinstance(values, (list, tuple)):
        raise ValidationError("extensions must be a list of file suffixes")
    normalized = {
        value.lower() if value.startswith(".") else f".{value.lower()}"
        for value in values
        if isinstance(value, str) and value
    }
    return tuple(sorted(normalized))


def _validate(settings: Settings) -> None:
    if settings.tag_backend not in _ALLOWED_BACKENDS:
        raise ValidationError(f"Unsupported tag backend: {settings.tag_backend}")
    if settings.acoustid_min_interval < 0 or settings.inter_file_pause < 0:
        raise ValidationError("Pause intervals must not be negative")
    if settings.http_timeout <= 0:
        raise ValidationError("http_timeout must be positive")
    if settings.musicbrainz_search_limit < 1:
        raise ValidationError("musicbrainz_search_limit must be at least 1")
    if "{query}" not in settings.search_url_template:
        raise ValidationError("search_url_template must contain a {query} placeholder")
    if not settings.extensions:
        raise ValidationError("At least one audio extension is required")
