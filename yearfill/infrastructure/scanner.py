"""Recursive audio file discovery."""

from __future__ import annotations

import fnmatch
import os
from collections.abc import Iterable, Iterator
from pathlib import Path

from yearfill.settings import DEFAULT_EXTENSIONS


class LibraryScanner:
    """Enumerates audio files under a library root in a stable order.

    Symlinked directories are not followed and symlinked files are skipped.
    Exclude patterns use fnmatch syntax.
    """

    def __init__(
        self,
        root: Path,
        extensions: Iterable[str] | None = None,
        exclude_patterns: Iterable[str] = (),
    ) -> None:
        self.root = root
        self.extensions = frozenset(ext.lower() for ext in (extensions or DEFAULT_EXTENSIONS))
        self.exclude_patterns = tuple(exclude_patterns)

    def iter_files(self) -> Iterator[Path]:
        """Yield audio files depth-first, directories and names sorted."""
        if not self.root.is_dir():
            return
        for dirpath, dirnames, filenames in os.walk(self.root, followlinks=False):
            dirnames.sort()
            directory = Path(dirpath)
            for name in sorted(filenames):
                file_path = directory / name
                if not file_path.is_file() or file_path.is_symlink():
                    continue
                if self._should_include(file_path):
                    yield file_path

    def _should_include(self, path: Path) -> bool:
        if path.suffix.lower() not in self.extensions:
            return False
        # Patterns may target the absolute path or the path under the root.
        candidates = (str(path), path.relative_to(self.root).as_posix())
        return not any(
            fnmatch.fnmatch(candidate, pattern)
            for pattern in self.exclude_patterns
            for candidate in candidates
        )
