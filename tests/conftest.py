"""Pytest configuration and shared fixtures."""

from __future__ import annotations

import os
import urllib.request
from typing import Any, Callable

import pytest

from tests.helpers.http import FakeClock, FakeHTTP
from yearfill.core.report import DiagnosticTrace


def pytest_collection_modifyitems(config: pytest.Config, items: list[pytest.Item]) -> None:
    run_network = os.getenv("RUN_REQUIRES_NETWORK", "").lower() in {"1", "true", "yes"}
    for item in items:
        if "requires_network" in item.keywords and not run_network:
            item.add_marker(pytest.mark.skip(reason="requires network access"))


@pytest.fixture
def trace() -> DiagnosticTrace:
    return DiagnosticTrace()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def fake_http(monkeypatch: pytest.MonkeyPatch, clock: FakeClock) -> Callable[..., FakeHTTP]:
    """Install a FakeHTTP as urlopen; call with the bodies to serve."""

    def _install(*bodies: Any) -> FakeHTTP:
        fake = FakeHTTP(*bodies, clock=clock)
        monkeypatch.setattr(urllib.request, "urlopen", fake)
        return fake

    return _install


@pytest.fixture
def acoustid_payload() -> Callable[..., dict]:
    """Factory for AcoustID lookup responses with meta=releases."""

    def _create(*results: dict, status: str = "ok") -> dict:
        return {"status": status, "results": list(results)}

    return _create


@pytest.fixture
def musicbrainz_payload() -> Callable[..., dict]:
    """Factory for MusicBrainz recording search responses.

    Each argument is the list of release date strings of one recording.
    """

    def _release(index: int, position: int, date: str | None) -> dict:
        release = {"id": f"rel-{index}-{position}", "title": "Album"}
        if date is not None:
            release["date"] = date
        return release

    def _create(*recordings: list[str | None]) -> dict:
        return {
            "created": "2024-01-01T00:00:00.000Z",
            "count": len(recordings),
            "offset": 0,
            "recordings": [
                {
                    "id": f"rec-{index}",
                    "score": 100,
                    "title": "Song",
                    "releases": [
                        _release(index, position, date) for position, date in enumerate(dates)
                    ],
                }
                for index, dates in enumerate(recordings)
            ],
        }

    return _create
