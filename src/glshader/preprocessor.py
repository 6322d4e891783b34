"""Expansion of ``#include <path>`` directives in shader source.

Only one directive is understood. There is no macro substitution, no
conditional compilation and no caching: every live directive is replaced
with whatever the loader returns for its path, every time it appears.

A directive is disabled when a ``//`` line comment starts anywhere before
it on the same line. Block comments are *not* recognized, so a directive
inside ``/* ... */`` is still expanded.
"""

from __future__ import annotations

from pathlib import Path

from .errors import IncludeDepthError, IncludeLoadError, IncludeSyntaxError
from .loader import FileLoader, Loader
from .utils import logger

INCLUDE_TOKEN = "include <"


def expand(source: str, loader: Loader, max_depth: int | None = None) -> str:
    """Replace every live include directive with the loaded file's text.

    After each splice scanning resumes at the start of the inserted text,
    so includes inside included files are expanded depth-first by the same
    loop.

    Args:
        source: Shader source text.
        loader: Callable mapping an include path to its text.
        max_depth: Optional nesting limit. ``None`` means unlimited, in
            which case a self-including file never terminates.

    Returns:
        The fully expanded source.

    Raises:
        IncludeSyntaxError: If a directive has no ``>`` before the end of its line.
        IncludeLoadError: If the loader cannot supply an include path.
        IncludeDepthError: If ``max_depth`` is set and exceeded.
    """
    text = source
    cursor = 0
    line = 0
    comment_line = -1
    # End offsets of the included regions enclosing the cursor, innermost last
    regions: list[int] = []

    while True:
        start = text.find("#", cursor)
        if start == -1:
            return text

        # Advance the line and comment state over the skipped span
        i = cursor
        while i < start:
            char = text[i]
            if char == "\n":
                line += 1
            elif char == "/" and text.startswith("/", i + 1):
                comment_line = line
                i += 1
            i += 1

        cursor = start + 1
        if line == comment_line:
            continue
        if not text.startswith(INCLUDE_TOKEN, cursor):
            continue

        path_start = cursor + len(INCLUDE_TOKEN)
        end = path_start
        while True:
            if end >= len(text) or text[end] == "\n":
                raise IncludeSyntaxError(start, line)
            if text[end] == ">":
                break
            end += 1
        path = text[path_start:end]

        while regions and regions[-1] <= start:
            regions.pop()
        depth = len(regions) + 1
        if max_depth is not None and depth > max_depth:
            raise IncludeDepthError(path, depth)

        try:
            content = loader(path)
        except OSError as e:
            raise IncludeLoadError(path, str(e)) from e

        logger.debug(f"Including {path!r} at offset {start} (depth {depth})")
        text = text[:start] + content + text[end + 1:]

        shift = len(content) - (end + 1 - start)
        regions = [region + shift for region in regions]
        regions.append(start + len(content))
        cursor = start


class IncludePreprocessor:
    """Expands include directives with a fixed loader and depth limit.

    Args:
        loader: Include loader. Defaults to a ``FileLoader`` resolving
            paths against the current working directory.
        max_depth: Optional include nesting limit.
    """

    def __init__(self, loader: Loader | None = None, max_depth: int | None = None) -> None:
        self.loader = loader if loader is not None else FileLoader()
        self.max_depth = max_depth

    def process(self, source: str) -> str:
        """Expand all include directives in source text."""
        return expand(source, self.loader, max_depth=self.max_depth)

    def process_file(self, path: str | Path, encoding: str = "utf-8") -> str:
        """Read a shader file and expand its include directives."""
        with open(path, encoding=encoding, newline="") as f:
            source = f.read()
        return self.process(source)
