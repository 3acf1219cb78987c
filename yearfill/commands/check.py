"""Check command - verify the external fingerprint tool is available."""

from __future__ import annotations

from argparse import Namespace

from yearfill.commands.output import emit_output
from yearfill.core.fingerprint import require_fpcalc


def run_check(args: Namespace, *, output_sink=print) -> int:
    """Report where fpcalc lives; raises PreconditionFailure when it is missing."""
    fpcalc = require_fpcalc()
    emit_output(
        command="check",
        payload={"status": "OK", "fpcalc": fpcalc},
        json_output=getattr(args, "json", False),
        output_sink=output_sink,
        human_lines=(f"check: fpcalc={fpcalc}",),
    )
    return 0
