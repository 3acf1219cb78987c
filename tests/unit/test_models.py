"""Unit tests for outcome invariants."""

from __future__ import annotations

from pathlib import Path

import pytest

from yearfill.core.models import (
    LookupResult,
    LookupStatus,
    MediaFile,
    ResolutionOutcome,
    ResolutionSource,
    ResolutionStatus,
)


@pytest.fixture
def media() -> MediaFile:
    return MediaFile(path=Path("/music/a.mp3"), artist="Artist A", title="Song B")


@pytest.mark.parametrize(
    "status",
    [ResolutionStatus.UPDATED, ResolutionStatus.UPDATED_FALLBACK, ResolutionStatus.FALLBACK_FOUND],
)
def test_year_bearing_statuses_require_year(media: MediaFile, status: ResolutionStatus) -> None:
    assert ResolutionOutcome(media=media, status=status, year=1999).year == 1999
    with pytest.raises(ValueError):
        ResolutionOutcome(media=media, status=status)


@pytest.mark.parametrize(
    "status",
    [ResolutionStatus.NO_MATCH, ResolutionStatus.UPDATE_FAILED, ResolutionStatus.FPCALC_FAILED],
)
def test_other_statuses_reject_year(media: MediaFile, status: ResolutionStatus) -> None:
    assert ResolutionOutcome(media=media, status=status).year is None
    with pytest.raises(ValueError):
        ResolutionOutcome(media=media, status=status, year=1999)


def test_status_values_match_report_vocabulary() -> None:
    assert [status.value for status in ResolutionStatus] == [
        "Updated",
        "UpdatedFallback",
        "FallbackFound",
        "NoMatch",
        "UpdateFailed",
        "FpcalcFailed",
    ]


def test_lookup_result_found_requires_year() -> None:
    with pytest.raises(ValueError):
        LookupResult(status=LookupStatus.FOUND, source=ResolutionSource.ACOUSTID)
    with pytest.raises(ValueError):
        LookupResult(status=LookupStatus.NO_MATCH, source=ResolutionSource.ACOUSTID, year=2000)


def test_media_file_scope_flags() -> None:
    assert MediaFile(path=Path("/a.mp3"), existing_year="1990").has_year
    assert not MediaFile(path=Path("/a.mp3"), existing_year="  ").has_year
    assert MediaFile(path=Path("/a.mp3"), artist="A", title="B").searchable
    assert not MediaFile(path=Path("/a.mp3"), artist="A", title="   ").searchable
    assert not MediaFile(path=Path("/a.mp3"), artist="", title="B").searchable
