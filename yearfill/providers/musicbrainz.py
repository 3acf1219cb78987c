"""MusicBrainz recording search client used as the fallback year source."""

from __future__ import annotations

from dataclasses import dataclass
import logging
import time
from typing import Any, Callable, Optional
import urllib.parse

from yearfill import __version__ as YEARFILL_VERSION
from yearfill.core.models import Candidate, LookupResult, ResolutionSource
from yearfill.core.report import DiagnosticTrace
from yearfill.core.years import earliest_year, parse_year
from yearfill.providers.http import ProviderRequestError, fetch_json, json_list

# MusicBrainz allows one request per second per client.
RATE_LIMIT_SECONDS = 1.0
_SEARCH_LIMIT = 25

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RecordingRelease:
    id: Optional[str]
    title: Optional[str]
    date: Optional[str]

    @classmethod
    def from_payload(cls, payload: dict) -> "RecordingRelease":
        date = payload.get("date")
        return cls(
            id=payload.get("id"),
            title=payload.get("title"),
            date=date if isinstance(date, str) else None,
        )


@dataclass(frozen=True)
class Recording:
    id: Optional[str]
    title: Optional[str]
    score: Optional[int]
    releases: tuple[RecordingRelease, ...] = ()

    @classmethod
    def from_payload(cls, payload: dict) -> "Recording":
        releases = json_list(payload, "releases")
        score = payload.get("score")
        return cls(
            id=payload.get("id"),
            title=payload.get("title"),
            score=score if isinstance(score, int) and not isinstance(score, bool) else None,
            releases=tuple(
                RecordingRelease.from_payload(release)
                for release in releases
                if isinstance(release, dict)
            ),
        )


@dataclass(frozen=True)
class RecordingSearchResponse:
    recordings: tuple[Recording, ...] = ()

    @classmethod
    def from_payload(cls, payload: Any) -> "RecordingSearchResponse":
        if not isinstance(payload, dict):
            raise ValueError("MusicBrainz response is not a JSON object")
        recordings = json_list(payload, "recordings")
        return cls(
            recordings=tuple(
                Recording.from_payload(recording)
                for recording in recordings
                if isinstance(recording, dict)
            )
        )


def musicbrainz_years(response: RecordingSearchResponse) -> set[int]:
    """Collect every parseable release year across all recordings."""
    years: set[int] = set()
    for recording in response.recordings:
        for release in recording.releases:
            year = parse_year(release.date)
            if year is not None:
                years.add(year)
    return years


def build_query(artist: str, title: str) -> str:
    """Title as free text, artist as a structured filter."""
    escaped = artist.replace("\\", "\\\\").replace('"', '\\"')
    return f'{title} AND artist:"{escaped}"'


class MusicBrainzClient:
    """Recording search against the MusicBrainz JSON web service."""

    def __init__(
        self,
        *,
        base_url: str = "https://musicbrainz.org/ws/2",
        contact: Optional[str] = None,
        timeout: float = 10.0,
        limit: int = _SEARCH_LIMIT,
        trace: Optional[DiagnosticTrace] = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._useragent = f"yearfill/{YEARFILL_VERSION}"
        if contact:
            self._useragent += f" ( {contact} )"
        self._timeout = timeout
        self._limit = limit
        self._trace = trace
        self._sleep = sleep

    def search_url(self, artist: str, title: str) -> str:
        params = {
            "query": build_query(artist, title),
            "fmt": "json",
            "limit": str(self._limit),
        }
        return f"{self._base_url}/recording/?{urllib.parse.urlencode(params)}"

    def search_year(self, artist: str, title: str) -> LookupResult:
        """Resolve the earliest release year of recordings matching artist and title.

        Always sleeps RATE_LIMIT_SECONDS before returning, whatever the outcome.

        Raises:
            ValueError: If artist or title is empty
        """
        if not artist.strip() or not title.strip():
            raise ValueError("MusicBrainz search requires both artist and title")

        url = self.search_url(artist, title)
        try:
            payload = fetch_json(
                url, useragent=self._useragent, timeout=self._timeout, trace=self._trace
            )
            response = RecordingSearchResponse.from_payload(payload)
        except ProviderRequestError as exc:
            return LookupResult.failed(
                ResolutionSource.MUSICBRAINZ, f"musicbrainz search failed: {exc}"
            )
        except ValueError as exc:
            if self._trace is not None:
                self._trace.error(f"malformed MusicBrainz response from {url}: {exc}")
            return LookupResult.failed(
                ResolutionSource.MUSICBRAINZ, f"musicbrainz response malformed: {exc}"
            )
        finally:
            self._sleep(RATE_LIMIT_SECONDS)

        years = musicbrainz_years(response)
        logger.debug("MusicBrainz years for %r / %r: %s", artist, title, sorted(years))
        year = earliest_year(years)
        if year is None:
            return LookupResult.no_match(
                ResolutionSource.MUSICBRAINZ,
                f"{len(response.recordings)} recordings without usable dates",
            )
        candidates = tuple(
            Candidate(year=value, source=ResolutionSource.MUSICBRAINZ) for value in sorted(years)
        )
        return LookupResult.found_year(ResolutionSource.MUSICBRAINZ, year, candidates)
