"""Loaders that map an include path to shader source text."""

from __future__ import annotations

from pathlib import Path
from typing import Callable, Mapping

from .errors import IncludeLoadError
from .utils import logger

# A loader takes the include path verbatim and returns the file's text.
Loader = Callable[[str], str]


class FileLoader:
    """Loads include files from disk.

    The path is first tried as given, relative to the current working
    directory. If that does not exist, each search path is tried in order.

    Args:
        search_paths: Extra directories to look in for include files.
        encoding: Text encoding of the shader files.
    """

    def __init__(
        self,
        search_paths: list[str | Path] | None = None,
        encoding: str = "utf-8",
    ) -> None:
        self.search_paths = [Path(p) for p in search_paths or []]
        self.encoding = encoding

    def __call__(self, path: str) -> str:
        resolved = self._find(path)
        if resolved is None:
            raise IncludeLoadError(path, "file not found")

        try:
            with open(resolved, encoding=self.encoding, newline="") as f:
                text = f.read()
        except (OSError, UnicodeDecodeError) as e:
            raise IncludeLoadError(path, str(e)) from e

        logger.debug(f"Loaded include {path!r} from {resolved}")
        return text

    def _find(self, path: str) -> Path | None:
        """Find the first existing file for an include path."""
        candidate = Path(path)
        if candidate.is_file():
            return candidate
        if candidate.is_absolute():
            return None
        for search_path in self.search_paths:
            candidate = search_path / path
            if candidate.is_file():
                return candidate
        return None


class DictLoader:
    """Serves include files from an in-memory mapping."""

    def __init__(self, sources: Mapping[str, str]) -> None:
        self.sources = dict(sources)

    def __call__(self, path: str) -> str:
        try:
            return self.sources[path]
        except KeyError:
            raise IncludeLoadError(path, "not registered") from None
