"""Year resolution engine - layered lookup per file.

Each file moves through a fixed sequence of layers and ends in exactly one
terminal state:

- existing year: skipped, no lookups, no report row
- fingerprint tool failure: fall back to text search, else FpcalcFailed
- AcoustID match: write tag, Updated or UpdateFailed
- AcoustID no match or failure: fall back to text search, else NoMatch
- MusicBrainz match: write tag, UpdatedFallback or FallbackFound
- MusicBrainz no match or failure: NoMatch

Text search is only attempted when both artist and title are non-empty.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional, Protocol

from yearfill.core.fingerprint import FingerprintError
from yearfill.core.models import (
    FingerprintSample,
    LookupResult,
    MediaFile,
    ResolutionOutcome,
    ResolutionSource,
    ResolutionStatus,
)
from yearfill.core.report import DiagnosticTrace
from yearfill.services.tag_accessor import DATE_FIELD, TagAccessor

logger = logging.getLogger(__name__)


class FingerprintSource(Protocol):
    def fingerprint(self, audio_path: Path) -> FingerprintSample:
        ...


class FingerprintLookup(Protocol):
    def lookup_year(self, sample: FingerprintSample) -> LookupResult:
        ...


class RecordingSearch(Protocol):
    def search_year(self, artist: str, title: str) -> LookupResult:
        ...


class YearResolver:
    """Resolves one file at a time; holds no per-file state between calls."""

    def __init__(
        self,
        fingerprinter: FingerprintSource,
        matcher: FingerprintLookup,
        searcher: RecordingSearch,
        tags: TagAccessor,
        trace: DiagnosticTrace,
    ) -> None:
        self._fingerprinter = fingerprinter
        self._matcher = matcher
        self._searcher = searcher
        self._tags = tags
        self._trace = trace

    def resolve(self, media: MediaFile) -> Optional[ResolutionOutcome]:
        """Resolve a file's release year.

        Returns:
            The terminal outcome, or None when the file already has a year
        """
        if media.has_year:
            self._trace.decision(media.path, f"skip: existing year {media.existing_year!r}")
            return None

        try:
            sample = self._fingerprinter.fingerprint(media.path)
        except FingerprintError as exc:
            self._trace.error(f"{media.path}: fpcalc failed: {exc}")
            if media.searchable:
                self._trace.decision(media.path, "fingerprint failed, trying text search")
                return self._fallback(media)
            self._trace.decision(media.path, "fingerprint failed, no artist/title for fallback")
            return ResolutionOutcome(media=media, status=ResolutionStatus.FPCALC_FAILED)

        primary = self._matcher.lookup_year(sample)
        self._trace_lookup(media, primary)
        if primary.year is not None:
            if self._write_year(media, primary.year):
                return ResolutionOutcome(
                    media=media,
                    status=ResolutionStatus.UPDATED,
                    source=ResolutionSource.ACOUSTID,
                    year=primary.year,
                )
            return ResolutionOutcome(
                media=media,
                status=ResolutionStatus.UPDATE_FAILED,
                source=ResolutionSource.ACOUSTID,
            )

        if media.searchable:
            return self._fallback(media)
        self._trace.decision(media.path, "no fingerprint match, no artist/title for fallback")
        return ResolutionOutcome(media=media, status=ResolutionStatus.NO_MATCH)

    def _fallback(self, media: MediaFile) -> ResolutionOutcome:
        result = self._searcher.search_year(media.artist, media.title)
        self._trace_lookup(media, result)
        if result.year is None:
            return ResolutionOutcome(media=media, status=ResolutionStatus.NO_MATCH)

        status = (
            ResolutionStatus.UPDATED_FALLBACK
            if self._write_year(media, result.year)
            else ResolutionStatus.FALLBACK_FOUND
        )
        return ResolutionOutcome(
            media=media,
            status=status,
            source=ResolutionSource.MUSICBRAINZ,
            year=result.year,
        )

    def _write_year(self, media: MediaFile, year: int) -> bool:
        value = str(year)
        try:
            written = self._tags.set(DATE_FIELD, value, media.path)
        except Exception as exc:
            logger.warning("Tag write raised for %s: %s", media.path, exc)
            written = False
        if written:
            self._trace.decision(media.path, f"wrote year {value}")
        else:
            self._trace.error(f"{media.path}: failed to write year {value}")
        return written

    def _trace_lookup(self, media: MediaFile, result: LookupResult) -> None:
        source = result.source.value
        if result.found:
            years = ", ".join(str(candidate.year) for candidate in result.candidates)
            self._trace.decision(
                media.path, f"{source}: earliest year {result.year} from [{years}]"
            )
        else:
            self._trace.decision(
                media.path, f"{source}: {result.status.value.lower()} ({result.detail})"
            )
