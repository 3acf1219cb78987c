"""Core data models for yearfill."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Optional


class ResolutionStatus(str, Enum):
    """How a file's year was resolved, or why it was not."""

    UPDATED = "Updated"
    UPDATED_FALLBACK = "UpdatedFallback"
    FALLBACK_FOUND = "FallbackFound"
    NO_MATCH = "NoMatch"
    UPDATE_FAILED = "UpdateFailed"
    FPCALC_FAILED = "FpcalcFailed"


YEAR_BEARING_STATUSES = frozenset(
    {
        ResolutionStatus.UPDATED,
        ResolutionStatus.UPDATED_FALLBACK,
        ResolutionStatus.FALLBACK_FOUND,
    }
)


class ResolutionSource(str, Enum):
    """Lookup service that produced the outcome."""

    ACOUSTID = "acoustid"
    MUSICBRAINZ = "musicbrainz"
    NONE = "none"


class LookupStatus(str, Enum):
    """Result of a single lookup layer."""

    FOUND = "FOUND"
    NO_MATCH = "NO_MATCH"
    FAILED = "FAILED"


@dataclass(frozen=True)
class MediaFile:
    """An audio file as read once from disk.

    `existing_year` holds the raw date tag; any value puts the file out of scope.
    """

    path: Path
    artist: str = ""
    title: str = ""
    existing_year: Optional[str] = None

    @property
    def has_year(self) -> bool:
        return bool(self.existing_year and self.existing_year.strip())

    @property
    def searchable(self) -> bool:
        """True when both artist and title can be used for a text search."""
        return bool(self.artist.strip() and self.title.strip())


@dataclass(frozen=True)
class FingerprintSample:
    duration: float
    fingerprint: str


@dataclass(frozen=True)
class Candidate:
    """A year proposed by a lookup source; only `year` takes part in selection."""

    year: int
    source: ResolutionSource
    score: Optional[float] = None


@dataclass(frozen=True)
class LookupResult:
    """Discriminated result of one lookup layer."""

    status: LookupStatus
    source: ResolutionSource
    year: Optional[int] = None
    candidates: tuple[Candidate, ...] = ()
    detail: str = ""

    def __post_init__(self) -> None:
        if (self.status == LookupStatus.FOUND) != (self.year is not None):
            raise ValueError(f"LookupResult {self.status.value} inconsistent with year={self.year}")

    @property
    def found(self) -> bool:
        return self.status == LookupStatus.FOUND

    @classmethod
    def found_year(
        cls, source: ResolutionSource, year: int, candidates: tuple[Candidate, ...]
    ) -> "LookupResult":
        return cls(status=LookupStatus.FOUND, source=source, year=year, candidates=candidates)

    @classmethod
    def no_match(cls, source: ResolutionSource, detail: str = "") -> "LookupResult":
        return cls(status=LookupStatus.NO_MATCH, source=source, detail=detail)

    @classmethod
    def failed(cls, source: ResolutionSource, detail: str) -> "LookupResult":
        return cls(status=LookupStatus.FAILED, source=source, detail=detail)


@dataclass(frozen=True)
class ResolutionOutcome:
    """Final, immutable result of resolving one MediaFile."""

    media: MediaFile
    status: ResolutionStatus
    source: ResolutionSource = ResolutionSource.NONE
    year: Optional[int] = None

    def __post_init__(self) -> None:
        carries_year = self.status in YEAR_BEARING_STATUSES
        if carries_year != (self.year is not None):
            raise ValueError(
                f"Outcome status {self.status.value} must "
                f"{'carry' if carries_year else 'not carry'} a year"
            )

    @property
    def path(self) -> Path:
        return self.media.path
