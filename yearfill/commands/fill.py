"""Fill command - resolve missing release years across a library."""

from __future__ import annotations

from argparse import Namespace
from collections.abc import Iterable
import logging
from pathlib import Path
import time
from typing import Callable, Optional

from yearfill import __version__ as YEARFILL_VERSION
from yearfill.commands.output import emit_output, summary_lines
from yearfill.core.fingerprint import Fingerprinter, require_fpcalc
from yearfill.core.models import ResolutionOutcome
from yearfill.core.report import DiagnosticTrace, RunReport
from yearfill.core.resolver import (
    FingerprintLookup,
    FingerprintSource,
    RecordingSearch,
    YearResolver,
)
from yearfill.errors import IOFailure, ValidationError
from yearfill.infrastructure.scanner import LibraryScanner
from yearfill.providers.acoustid import AcoustIDClient
from yearfill.providers.musicbrainz import MusicBrainzClient
from yearfill.services.tag_accessor import TagAccessor, get_tag_accessor, read_media_file
from yearfill.settings import Settings, default_config_path, load_settings

DEFAULT_REPORT = Path("yearfill-report.csv")
DEFAULT_TRACE_LOG = Path("yearfill-trace.log")

logger = logging.getLogger(__name__)


def process_files(
    paths: Iterable[Path],
    resolver: YearResolver,
    tags: TagAccessor,
    *,
    report: RunReport,
    pause: float = 0.5,
    sleep: Callable[[float], None] = time.sleep,
    on_outcome: Optional[Callable[[ResolutionOutcome], None]] = None,
) -> RunReport:
    """Resolve files one after another, appending outcomes in traversal order.

    Files that already carry a year produce no row and no pause. Every other
    file is followed by `pause` seconds to throttle the fingerprint service.
    """
    for path in paths:
        media = read_media_file(path, tags)
        outcome = resolver.resolve(media)
        if outcome is None:
            continue
        report.append(outcome)
        if on_outcome is not None:
            on_outcome(outcome)
        if pause > 0:
            sleep(pause)
    return report


def _outcome_line(outcome: ResolutionOutcome) -> str:
    year = f" {outcome.year}" if outcome.year is not None else ""
    return f"{outcome.status.value}:{year} {outcome.path}"


def run_fill(
    args: Namespace,
    *,
    settings: Settings | None = None,
    fingerprinter: FingerprintSource | None = None,
    matcher: FingerprintLookup | None = None,
    searcher: RecordingSearch | None = None,
    tags: TagAccessor | None = None,
    sleep: Callable[[float], None] = time.sleep,
    output_sink=print,
) -> int:
    """Scan a library, resolve missing years, and write the report."""
    if fingerprinter is None:
        require_fpcalc()
        fingerprinter = Fingerprinter()

    config_path = getattr(args, "config", None) or default_config_path()
    settings = (settings or load_settings(Path(config_path))).with_overrides(
        acoustid_api_key=getattr(args, "api_key", None),
        tag_backend=getattr(args, "tag_backend", None),
    )
    library_root = Path(args.library_root).resolve()
    if not library_root.is_dir():
        raise IOFailure(f"Library root does not exist: {library_root}")
    if matcher is None and not settings.acoustid_api_key:
        raise ValidationError("AcoustID API key required (--api-key or ACOUSTID_API_KEY)")

    json_output = getattr(args, "json", False)
    report_path = Path(getattr(args, "report", None) or DEFAULT_REPORT)
    trace_path = Path(getattr(args, "trace_log", None) or DEFAULT_TRACE_LOG)
    tags = tags or get_tag_accessor(settings.tag_backend)
    scanner = LibraryScanner(
        library_root,
        extensions=settings.extensions,
        exclude_patterns=getattr(args, "exclude", None) or (),
    )

    trace_path.parent.mkdir(parents=True, exist_ok=True)
    report = RunReport()
    with trace_path.open("a", encoding="utf-8") as sink:
        trace = DiagnosticTrace(sink)
        trace.decision(library_root, f"yearfill {YEARFILL_VERSION} run started")
        resolver = YearResolver(
            fingerprinter=fingerprinter,
            matcher=matcher or AcoustIDClient(
                settings.acoustid_api_key or "",
                base_url=settings.acoustid_base_url,
                timeout=settings.http_timeout,
                min_interval=settings.acoustid_min_interval,
                trace=trace,
                sleep=sleep,
            ),
            searcher=searcher or MusicBrainzClient(
                base_url=settings.musicbrainz_base_url,
                contact=settings.contact,
                timeout=settings.http_timeout,
                limit=settings.musicbrainz_search_limit,
                trace=trace,
                sleep=sleep,
            ),
            tags=tags,
            trace=trace,
        )

        def _progress(outcome: ResolutionOutcome) -> None:
            if not json_output:
                output_sink(_outcome_line(outcome))

        process_files(
            scanner.iter_files(),
            resolver,
            tags,
            report=report,
            pause=settings.inter_file_pause,
            sleep=sleep,
            on_outcome=_progress,
        )
        trace.decision(library_root, f"run finished, {len(report)} files resolved")

    report.write_csv(report_path, settings.search_url_template)
    logger.info("Wrote report for %d files to %s", len(report), report_path)

    counts = report.summary()
    payload = {
        "library_root": str(library_root),
        "status": "OK",
        "report": str(report_path),
        "trace_log": str(trace_path),
        "counts": counts,
        "items": report.rows(settings.search_url_template),
    }
    emit_output(
        command="fill",
        payload=payload,
        json_output=json_output,
        output_sink=output_sink,
        human_lines=(
            *summary_lines("fill", counts),
            f"fill: report={report_path} trace={trace_path}",
        ),
    )
    return 0
