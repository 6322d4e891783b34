"""Exceptions raised while preprocessing, compiling and linking shaders."""

from __future__ import annotations

from .stages import ShaderStage, stage_label


class ShaderError(RuntimeError):
    """Base class for all glshader errors."""


class IncludeError(ShaderError):
    """Base class for include preprocessor failures."""


class IncludeSyntaxError(IncludeError):
    """An ``#include <`` was opened but not closed on the same line."""

    def __init__(self, offset: int, line: int) -> None:
        self.offset = offset
        self.line = line
        super().__init__(
            f"Could not find end of #include statement (line {line + 1}, offset {offset})"
        )


class IncludeLoadError(IncludeError):
    """The loader could not supply content for an include path."""

    def __init__(self, path: str, reason: str | None = None) -> None:
        self.path = path
        self.reason = reason
        message = f"Could not open include file: {path}"
        if reason:
            message += f" ({reason})"
        super().__init__(message)


class IncludeDepthError(IncludeError):
    """Include nesting went deeper than the configured limit."""

    def __init__(self, path: str, depth: int) -> None:
        self.path = path
        self.depth = depth
        super().__init__(
            f"Include depth {depth} exceeded while including {path}; "
            "the include chain is probably recursive"
        )


class ShaderCompileError(ShaderError):
    """A single shader stage failed to compile."""

    def __init__(self, stage: ShaderStage | int, log: str, name: str = "unnamed") -> None:
        self.stage = stage
        self.log = log
        self.name = name
        super().__init__(f"{stage_label(stage)}::FAILED_COMPILATION ({name}):\n{log}")


class ProgramLinkError(ShaderError):
    """The shader program failed to link."""

    def __init__(self, log: str, name: str = "unnamed") -> None:
        self.log = log
        self.name = name
        super().__init__(f"Shader program linking failed ({name}):\n{log}")
