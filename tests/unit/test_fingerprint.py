"""Unit tests for the fpcalc-backed fingerprinter."""

from __future__ import annotations

from pathlib import Path

import acoustid
import pytest

from yearfill.core import fingerprint as fingerprint_module
from yearfill.core.fingerprint import FingerprintError, Fingerprinter, find_fpcalc, require_fpcalc
from yearfill.errors import PreconditionFailure


def test_fingerprint_decodes_fpcalc_output(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    calls = []

    def fake_fingerprint_file(path, force_fpcalc=False):
        calls.append((path, force_fpcalc))
        return 180.5, b"AQADtEmUaEkSRZEG"

    monkeypatch.setattr(acoustid, "fingerprint_file", fake_fingerprint_file)
    audio = tmp_path / "a.flac"

    sample = Fingerprinter().fingerprint(audio)

    assert sample.duration == 180.5
    assert sample.fingerprint == "AQADtEmUaEkSRZEG"
    assert calls == [(str(audio), True)]


@pytest.mark.parametrize(
    "error",
    [acoustid.FingerprintGenerationError("fpcalc exited with status 3"), acoustid.NoBackendError("fpcalc not found")],
)
def test_fingerprint_tool_errors(monkeypatch: pytest.MonkeyPatch, tmp_path: Path, error: Exception) -> None:
    def fake_fingerprint_file(path, force_fpcalc=False):
        raise error

    monkeypatch.setattr(acoustid, "fingerprint_file", fake_fingerprint_file)
    with pytest.raises(FingerprintError):
        Fingerprinter().fingerprint(tmp_path / "a.flac")


@pytest.mark.parametrize("result", [(180.0, b""), (0, b"AQAD"), (None, b"AQAD")])
def test_fingerprint_rejects_empty_output(monkeypatch: pytest.MonkeyPatch, tmp_path: Path, result) -> None:
    monkeypatch.setattr(acoustid, "fingerprint_file", lambda path, force_fpcalc=False: result)
    with pytest.raises(FingerprintError):
        Fingerprinter().fingerprint(tmp_path / "a.flac")


def test_require_fpcalc_missing(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("FPCALC", raising=False)
    monkeypatch.setattr(fingerprint_module.shutil, "which", lambda name: None)
    assert find_fpcalc() is None
    with pytest.raises(PreconditionFailure):
        require_fpcalc()


def test_require_fpcalc_found_on_path(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("FPCALC", raising=False)
    monkeypatch.setattr(fingerprint_module.shutil, "which", lambda name: f"/usr/bin/{name}")
    assert require_fpcalc() == "/usr/bin/fpcalc"


def test_fpcalc_env_override(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    tool = tmp_path / "fpcalc-custom"
    tool.write_text("#!/bin/sh\n")
    monkeypatch.setenv("FPCALC", str(tool))
    monkeypatch.setattr(fingerprint_module.shutil, "which", lambda name: None)
    assert find_fpcalc() == str(tool)
