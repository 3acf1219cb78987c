"""Test helper utilities."""

from .fakes import FakeFingerprinter, FakeMatcher, FakeSearcher, RecordingTags
from .fs import create_audio_stub, build_library, read_sidecar_tags
from .http import FakeHTTP, FakeClock

__all__ = [
    "FakeClock",
    "FakeFingerprinter",
    "FakeHTTP",
    "FakeMatcher",
    "FakeSearcher",
    "RecordingTags",
    "build_library",
    "create_audio_stub",
    "read_sidecar_tags",
]
