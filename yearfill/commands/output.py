"""Command output: a versioned JSON envelope or plain summary lines."""

from __future__ import annotations

import json
from collections.abc import Callable, Iterable, Mapping
from typing import Any

from yearfill import __version__ as YEARFILL_VERSION

SCHEMA_VERSION = "v1"


def render_envelope(command: str, payload: Mapping[str, Any]) -> str:
    """Serialize a payload with stable key order so runs diff cleanly."""
    return json.dumps(
        {
            "schema_version": SCHEMA_VERSION,
            "tool_version": YEARFILL_VERSION,
            "command": command,
            "data": dict(payload),
        },
        sort_keys=True,
        separators=(",", ":"),
        ensure_ascii=True,
    )


def emit_output(
    *,
    command: str,
    payload: Mapping[str, Any],
    json_output: bool,
    output_sink: Callable[[str], Any] = print,
    human_lines: Iterable[str] = (),
) -> None:
    if json_output:
        output_sink(render_envelope(command, payload))
    else:
        for text in human_lines:
            output_sink(text)


def summary_lines(command: str, counts: Mapping[str, int]) -> list[str]:
    """Render per-status counts as one `key=value` line, zero counts omitted."""
    parts = [f"{status}={count}" for status, count in counts.items() if count]
    return [f"{command}: " + (" ".join(parts) if parts else "nothing to resolve")]
