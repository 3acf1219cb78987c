"""Lookup service clients."""

from .acoustid import AcoustIDClient
from .http import ProviderRequestError
from .musicbrainz import MusicBrainzClient

__all__ = [
    "AcoustIDClient",
    "MusicBrainzClient",
    "ProviderRequestError",
]
