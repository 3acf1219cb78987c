"""Fill in missing release years for audio files."""

__version__ = "0.1.0"
