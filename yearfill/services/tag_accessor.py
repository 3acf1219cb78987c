"""Tag accessor backends for reading and writing single tag fields."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Optional, Protocol

from mutagen import File as MutagenFile
from mutagen import MutagenError

from yearfill.core.models import MediaFile

DATE_FIELD = "date"
ARTIST_FIELD = "artist"
TITLE_FIELD = "title"

logger = logging.getLogger(__name__)


class TagAccessor(Protocol):
    """Backend interface for single-field tag access."""

    def get(self, field: str, path: Path) -> Optional[str]:
        ...

    def set(self, field: str, value: str, path: Path) -> bool:
        ...


def get_tag_accessor(backend: str) -> TagAccessor:
    if backend == "meta-json":
        return MetaJsonTagAccessor()
    if backend == "mutagen":
        return MutagenTagAccessor()
    raise ValueError(f"Unknown tag backend: {backend}")


def read_media_file(path: Path, accessor: TagAccessor) -> MediaFile:
    """Read the date, artist and title tags of a file once.

    Unreadable tags are treated as absent; the failure is logged, not raised.
    """
    fields: dict[str, Optional[str]] = {}
    for field in (DATE_FIELD, ARTIST_FIELD, TITLE_FIELD):
        try:
            fields[field] = accessor.get(field, path)
        except (MutagenError, OSError, ValueError) as exc:
            logger.warning("Cannot read %s tag from %s: %s", field, path, exc)
            fields[field] = None
    return MediaFile(
        path=path.resolve(),
        artist=fields[ARTIST_FIELD] or "",
        title=fields[TITLE_FIELD] or "",
        existing_year=fields[DATE_FIELD] or None,
    )


class MetaJsonTagAccessor:
    """Tag accessor that stores tags in .meta.json sidecars (tests)."""

    @staticmethod
    def _meta_path(path: Path) -> Path:
        return path.with_suffix(path.suffix + ".meta.json")

    def _read(self, path: Path) -> dict:
        meta_path = self._meta_path(path)
        if not meta_path.exists():
            return {}
        data = json.loads(meta_path.read_text())
        return data if isinstance(data, dict) else {}

    def get(self, field: str, path: Path) -> Optional[str]:
        try:
            tags = self._read(path).get("tags") or {}
        except json.JSONDecodeError as exc:
            raise ValueError(f"Corrupt sidecar for {path}: {exc}") from exc
        value = tags.get(field)
        return str(value) if value not in (None, "") else None

    def set(self, field: str, value: str, path: Path) -> bool:
        try:
            data = self._read(path)
            if data.get("read_only"):
                logger.warning("Sidecar for %s is read-only", path)
                return False
            tags = dict(data.get("tags") or {})
            tags[field] = value
            data["tags"] = tags
            self._meta_path(path).write_text(json.dumps(data, indent=2, sort_keys=True))
        except (OSError, json.JSONDecodeError) as exc:
            logger.warning("Failed to write %s to %s: %s", field, path, exc)
            return False
        return True


class MutagenTagAccessor:
    """Tag accessor backed by mutagen's format-neutral "easy" interface."""

    def get(self, field: str, path: Path) -> Optional[str]:
        audio = MutagenFile(path, easy=True)
        if audio is None:
            raise ValueError(f"Unsupported audio format: {path.suffix.lower()}")
        if audio.tags is None:
            return None
        for value in audio.tags.get(field, []):
            text = str(value).strip()
            if text:
                return text
        return None

    def set(self, field: str, value: str, path: Path) -> bool:
        try:
            audio = MutagenFile(path, easy=True)
            if audio is None:
                logger.warning("Unsupported audio format: %s", path)
                return False
            if audio.tags is None:
                audio.add_tags()
            audio[field] = [value]
            audio.save()
            readback = self.get(field, path)
        except (MutagenError, OSError, ValueError, KeyError) as exc:
            logger.warning("Failed to write %s to %s: %s", field, path, exc)
            return False
        if readback != value:
            logger.warning(
                "Tag write verification failed for %s: %s=%r", path, field, readback
            )
            return False
        return True
