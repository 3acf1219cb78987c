"""Unit tests for settings loading and overrides."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from yearfill.errors import ValidationError
from yearfill.settings import Settings, default_config_path, load_settings


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in ("ACOUSTID_API_KEY", "YEARFILL_CONTACT", "YEARFILL_TAG_BACKEND"):
        monkeypatch.delenv(name, raising=False)


def test_default_config_path_is_deterministic(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("HOME", "/tmp/yearfill-home")
    assert default_config_path() == Path("/tmp/yearfill-home/.config/yearfill/settings.json")


def test_defaults_without_file(tmp_path: Path) -> None:
    settings = load_settings(tmp_path / "missing.json")
    assert settings == Settings()
    assert settings.inter_file_pause == 0.5
    assert settings.tag_backend == "mutagen"
    assert ".mp3" in settings.extensions


def test_json_values_and_env_overrides(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    config = tmp_path / "settings.json"
    config.write_text(
        json.dumps(
            {
                "acoustid_api_key": "from-file",
                "tag_backend": "meta-json",
                "extensions": ["MP3", ".flac"],
                "acoustid_min_interval": 0.34,
            }
        )
    )
    monkeypatch.setenv("ACOUSTID_API_KEY", "from-env")

    settings = load_settings(config)

    assert settings.acoustid_api_key == "from-env"
    assert settings.tag_backend == "meta-json"
    assert settings.extensions == (".flac", ".mp3")
    assert settings.acoustid_min_interval == 0.34


@pytest.mark.parametrize(
    "content",
    [
        "{broken",
        "[]",
        json.dumps({"tag_backend": "eyed3"}),
        json.dumps({"inter_file_pause": -1}),
        json.dumps({"search_url_template": "https://example.org/"}),
        json.dumps({"extensions": "mp3"}),
    ],
)
def test_invalid_settings_raise_validation_error(tmp_path: Path, content: str) -> None:
    config = tmp_path / "settings.json"
    config.write_text(content)
    with pytest.raises(ValidationError):
        load_settings(config)


def test_with_overrides_ignores_none_and_validates() -> None:
    settings = Settings().with_overrides(acoustid_api_key="cli-key", tag_backend=None)
    assert settings.acoustid_api_key == "cli-key"
    assert settings.tag_backend == "mutagen"
    with pytest.raises(ValidationError):
        Settings().with_overrides(tag_backend="bogus")
