"""Run accumulators: the per-file report and the diagnostic trace."""

from __future__ import annotations

import csv
from dataclasses import dataclass
from datetime import datetime
import logging
from pathlib import Path
from typing import Iterator, Optional, TextIO
import urllib.parse

from yearfill.core.models import ResolutionOutcome, ResolutionStatus

REPORT_COLUMNS = ("path", "artist", "title", "year", "status", "search_url")

trace_logger = logging.getLogger("yearfill.trace")


@dataclass(frozen=True)
class TraceEntry:
    kind: str
    message: str

    def render(self) -> str:
        return f"[{self.kind}] {self.message}"


class DiagnosticTrace:
    """Plain-text trace of every request, raw response and decision.

    Entries are kept in memory and, when a sink is given, written to it as they
    are recorded so a partial run still leaves a usable log.
    """

    def __init__(self, sink: Optional[TextIO] = None) -> None:
        self._sink = sink
        self._entries: list[TraceEntry] = []

    @property
    def entries(self) -> tuple[TraceEntry, ...]:
        return tuple(self._entries)

    def request(self, url: str) -> None:
        self._record("request", url)

    def response(self, url: str, body: str) -> None:
        self._record("response", f"{url}\n{body}")

    def decision(self, path: Path, message: str) -> None:
        self._record("decision", f"{path}: {message}")

    def error(self, message: str) -> None:
        self._record("error", message)

    def messages(self, kind: str) -> list[str]:
        return [entry.message for entry in self._entries if entry.kind == kind]

    def _record(self, kind: str, message: str) -> None:
        entry = TraceEntry(kind=kind, message=message)
        self._entries.append(entry)
        trace_logger.debug(entry.render())
        if self._sink is not None:
            stamp = datetime.now().isoformat(timespec="seconds")
            self._sink.write(f"{stamp} {entry.render()}\n")
            self._sink.flush()


def search_url(template: str, title: str, artist: str) -> str:
    """Build the diagnostic web-search link for a report row."""
    query = " ".join(part for part in (title.strip(), artist.strip()) if part)
    return template.format(query=urllib.parse.quote_plus(query))


class RunReport:
    """Append-only, traversal-ordered sequence of outcomes."""

    def __init__(self) -> None:
        self._outcomes: list[ResolutionOutcome] = []

    def append(self, outcome: ResolutionOutcome) -> None:
        self._outcomes.append(outcome)

    def __iter__(self) -> Iterator[ResolutionOutcome]:
        return iter(self._outcomes)

    def __len__(self) -> int:
        return len(self._outcomes)

    @property
    def outcomes(self) -> tuple[ResolutionOutcome, ...]:
        return tuple(self._outcomes)

    def summary(self) -> dict[str, int]:
        counts = {status.value: 0 for status in ResolutionStatus}
        for outcome in self._outcomes:
            counts[outcome.status.value] += 1
        return counts

    def rows(self, search_url_template: str) -> list[dict[str, str]]:
        rows: list[dict[str, str]] = []
        for outcome in self._outcomes:
            media = outcome.media
            rows.append(
                {
                    "path": str(media.path),
                    "artist": media.artist,
                    "title": media.title,
                    "year": str(outcome.year) if outcome.year is not None else "",
                    "status": outcome.status.value,
                    "search_url": search_url(search_url_template, media.title, media.artist),
                }
            )
        return rows

    def write_csv(self, path: Path, search_url_template: str) -> Path:
        path.parent.mkdir(parents=True, exist_ok=True)
        with path.open("w", newline="", encoding="utf-8") as handle:
            writer = csv.DictWriter(handle, fieldnames=REPORT_COLUMNS)
            writer.writeheader()
            writer.writerows(self.rows(search_url_template))
        return path
