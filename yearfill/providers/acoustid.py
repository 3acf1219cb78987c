"""AcoustID fingerprint lookup client.

Looks up a (duration, fingerprint) pair and returns the earliest release year
attached to the best-scoring match.

API Documentation: https://acoustid.org/webservice
"""

from __future__ import annotations

from dataclasses import dataclass
import logging
import time
from typing import Any, Callable, Optional
import urllib.parse

from yearfill import __version__ as YEARFILL_VERSION
from yearfill.core.models import Candidate, FingerprintSample, LookupResult, ResolutionSource
from yearfill.core.report import DiagnosticTrace
from yearfill.core.years import coerce_year, earliest_year
from yearfill.providers.http import ProviderRequestError, fetch_json, json_list

_LOOKUP_META = "releases"

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PartialDate:
    year: Optional[int] = None
    month: Optional[int] = None
    day: Optional[int] = None

    @classmethod
    def from_payload(cls, payload: Any) -> Optional["PartialDate"]:
        if not isinstance(payload, dict):
            return None
        return cls(
            year=coerce_year(payload.get("year")),
            month=_optional_int(payload.get("month")),
            day=_optional_int(payload.get("day")),
        )


@dataclass(frozen=True)
class AcoustIDRelease:
    id: Optional[str]
    date: Optional[PartialDate]
    events: tuple[Optional[PartialDate], ...] = ()

    @classmethod
    def from_payload(cls, payload: dict) -> "AcoustIDRelease":
        events = json_list(payload, "releaseevents")
        return cls(
            id=payload.get("id"),
            date=PartialDate.from_payload(payload.get("date")),
            events=tuple(
                PartialDate.from_payload(event.get("date"))
                for event in events
                if isinstance(event, dict)
            ),
        )

    def years(self) -> set[int]:
        dates = (self.date, *self.events)
        return {date.year for date in dates if date is not None and date.year is not None}


@dataclass(frozen=True)
class AcoustIDResult:
    id: Optional[str]
    score: float
    releases: tuple[AcoustIDRelease, ...] = ()

    @classmethod
    def from_payload(cls, payload: dict) -> "AcoustIDResult":
        releases = json_list(payload, "releases")
        return cls(
            id=payload.get("id"),
            score=_optional_float(payload.get("score")) or 0.0,
            releases=tuple(
                AcoustIDRelease.from_payload(release)
                for release in releases
                if isinstance(release, dict)
            ),
        )


@dataclass(frozen=True)
class AcoustIDResponse:
    status: str
    results: tuple[AcoustIDResult, ...] = ()
    error: Optional[str] = None

    @classmethod
    def from_payload(cls, payload: Any) -> "AcoustIDResponse":
        if not isinstance(payload, dict):
            raise ValueError("AcoustID response is not a JSON object")
        error = payload.get("error")
        message = error.get("message") if isinstance(error, dict) else None
        results = json_list(payload, "results")
        return cls(
            status=str(payload.get("status", "")),
            results=tuple(
                AcoustIDResult.from_payload(result)
                for result in results
                if isinstance(result, dict)
            ),
            error=message,
        )

    @property
    def ok(self) -> bool:
        return self.status == "ok"

    def best_result(self) -> Optional[AcoustIDResult]:
        """Highest score wins; on equal scores the first result is kept."""
        best: Optional[AcoustIDResult] = None
        for result in self.results:
            if best is None or result.score > best.score:
                best = result
        return best


def acoustid_years(response: AcoustIDResponse) -> set[int]:
    """Collect every release and release-event year of the best result."""
    if not response.ok:
        return set()
    best = response.best_result()
    if best is None:
        return set()
    years: set[int] = set()
    for release in best.releases:
        years |= release.years()
    return years


class AcoustIDClient:
    """Fingerprint match client for the AcoustID web service."""

    def __init__(
        self,
        api_key: str,
        *,
        base_url: str = "https://api.acoustid.org/v2",
        useragent: Optional[str] = None,
        timeout: float = 10.0,
        min_interval: float = 0.0,
        trace: Optional[DiagnosticTrace] = None,
        sleep: Callable[[float], None] = time.sleep,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if not api_key:
            raise ValueError("AcoustID API key required")
        self._api_key = api_key
        self._base_url = base_url.rstrip("/")
        self._useragent = useragent or f"yearfill/{YEARFILL_VERSION}"
        self._timeout = timeout
        self._min_interval = min_interval
        self._trace = trace
        self._sleep = sleep
        self._clock = clock
        self._last_request: Optional[float] = None

    def lookup_url(self, sample: FingerprintSample) -> str:
        params = {
            "client": self._api_key,
            "meta": _LOOKUP_META,
            "duration": str(round(sample.duration)),
            "fingerprint": sample.fingerprint,
        }
        return f"{self._base_url}/lookup?{urllib.parse.urlencode(params)}"

    def lookup_year(self, sample: FingerprintSample) -> LookupResult:
        """Resolve the earliest release year for a fingerprint sample."""
        url = self.lookup_url(sample)
        self._throttle()
        try:
            payload = fetch_json(
                url, useragent=self._useragent, timeout=self._timeout, trace=self._trace
            )
            response = AcoustIDResponse.from_payload(payload)
        except ProviderRequestError as exc:
            return LookupResult.failed(ResolutionSource.ACOUSTID, f"acoustid lookup failed: {exc}")
        except ValueError as exc:
            if self._trace is not None:
                self._trace.error(f"malformed AcoustID response from {url}: {exc}")
            return LookupResult.failed(ResolutionSource.ACOUSTID, f"acoustid response malformed: {exc}")
        finally:
            self._last_request = self._clock()

        if response.status == "error":
            logger.debug("AcoustID returned an error: %s", response.error)
            return LookupResult.failed(
                ResolutionSource.ACOUSTID, f"acoustid error: {response.error or 'unknown'}"
            )
        if not response.ok:
            return LookupResult.no_match(ResolutionSource.ACOUSTID, f"status {response.status!r}")
        best = response.best_result()
        if best is None:
            return LookupResult.no_match(ResolutionSource.ACOUSTID, "no results")

        years = acoustid_years(response)
        year = earliest_year(years)
        if year is None:
            return LookupResult.no_match(
                ResolutionSource.ACOUSTID, f"no release dates on result {best.id}"
            )
        candidates = tuple(
            Candidate(year=value, source=ResolutionSource.ACOUSTID, score=best.score)
            for value in sorted(years)
        )
        return LookupResult.found_year(ResolutionSource.ACOUSTID, year, candidates)

    def _throttle(self) -> None:
        if self._min_interval <= 0 or self._last_request is None:
            return
        remaining = self._min_interval - (self._clock() - self._last_request)
        if remaining > 0:
            self._sleep(remaining)


def _optional_int(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str) and value.isdigit():
        return int(value)
    return None


def _optional_float(value: Any) -> Optional[float]:
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value)
    try:
        return float(value)
    except (TypeError, ValueError):
        return None
