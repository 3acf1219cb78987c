"""Fingerprint extraction through pyacoustid and the fpcalc tool."""

from __future__ import annotations

import logging
import os
import shutil
from pathlib import Path
from typing import Optional

import acoustid

from yearfill.core.models import FingerprintSample
from yearfill.errors import PreconditionFailure

logger = logging.getLogger(__name__)


class FingerprintError(Exception):
    """The fingerprint tool could not produce a fingerprint for a file."""


def find_fpcalc() -> Optional[str]:
    """Locate fpcalc, honouring the FPCALC override pyacoustid also reads."""
    override = os.environ.get(acoustid.FPCALC_ENVVAR)
    if override:
        return shutil.which(override) or (override if Path(override).is_file() else None)
    return shutil.which(acoustid.FPCALC_COMMAND)


def require_fpcalc() -> str:
    """Fail fast when the fingerprint tool is missing.

    Raises:
        PreconditionFailure: If fpcalc cannot be found
    """
    path = find_fpcalc()
    if path is None:
        raise PreconditionFailure(
            "fpcalc not found; install Chromaprint or set FPCALC to its location"
        )
    return path


class Fingerprinter:
    """Computes (duration, fingerprint) for an audio file."""

    def fingerprint(self, audio_path: Path) -> FingerprintSample:
        """Fingerprint a file.

        Args:
            audio_path: Path to audio file

        Returns:
            FingerprintSample with duration in seconds and the encoded fingerprint

        Raises:
            FingerprintError: If fpcalc fails or returns no usable data
        """
        try:
            duration, fingerprint = acoustid.fingerprint_file(str(audio_path), force_fpcalc=True)
        except acoustid.FingerprintGenerationError as exc:
            logger.debug("Fingerprint generation failed for %s: %s", audio_path, exc)
            raise FingerprintError(str(exc)) from exc
        except OSError as exc:
            logger.debug("File access error for %s: %s", audio_path, exc)
            raise FingerprintError(str(exc)) from exc

        if isinstance(fingerprint, bytes):
            fingerprint = fingerprint.decode("ascii", errors="ignore")
        if not fingerprint:
            raise FingerprintError(f"no fingerprint extracted from {audio_path}")
        if not duration or duration <= 0:
            raise FingerprintError(f"invalid duration {duration!r} for {audio_path}")

        logger.debug("Extracted fingerprint from %s (duration: %ss)", audio_path, duration)
        return FingerprintSample(duration=float(duration), fingerprint=fingerprint)
