"""Shader stage kinds and their diagnostic labels."""

from __future__ import annotations

from enum import IntEnum
from pathlib import Path

from OpenGL import GL


class ShaderStage(IntEnum):
    """Programmable pipeline stages, valued by their GL enum."""

    VERTEX = GL.GL_VERTEX_SHADER
    TESS_CONTROL = GL.GL_TESS_CONTROL_SHADER
    TESS_EVALUATION = GL.GL_TESS_EVALUATION_SHADER
    GEOMETRY = GL.GL_GEOMETRY_SHADER
    FRAGMENT = GL.GL_FRAGMENT_SHADER
    COMPUTE = GL.GL_COMPUTE_SHADER

    @property
    def label(self) -> str:
        return _LABELS[self]

    @classmethod
    def from_suffix(cls, path: str | Path) -> ShaderStage:
        """Guess the stage from a file extension such as ``.vert`` or ``.fs``."""
        suffix = Path(path).suffix.lower()
        try:
            return _SUFFIXES[suffix]
        except KeyError:
            raise ValueError(f"Cannot infer shader stage from file name: {path}") from None

    @classmethod
    def from_name(cls, name: str) -> ShaderStage:
        """Look up a stage by config key, e.g. ``fragment`` or ``tess_control``."""
        try:
            return cls[name.upper()]
        except KeyError:
            raise ValueError(f"Unknown shader stage: {name}") from None


_LABELS = {
    ShaderStage.VERTEX: "VERTEX_SHADER",
    ShaderStage.TESS_CONTROL: "TESSELLATION_CONTROL_SHADER",
    ShaderStage.TESS_EVALUATION: "TESSELLATION_EVALUATION_SHADER",
    ShaderStage.GEOMETRY: "GEOMETRY_SHADER",
    ShaderStage.FRAGMENT: "FRAGMENT_SHADER",
    ShaderStage.COMPUTE: "COMPUTE_SHADER",
}

_SUFFIXES = {
    ".vert": ShaderStage.VERTEX,
    ".vs": ShaderStage.VERTEX,
    ".tesc": ShaderStage.TESS_CONTROL,
    ".tese": ShaderStage.TESS_EVALUATION,
    ".geom": ShaderStage.GEOMETRY,
    ".gs": ShaderStage.GEOMETRY,
    ".frag": ShaderStage.FRAGMENT,
    ".fs": ShaderStage.FRAGMENT,
    ".comp": ShaderStage.COMPUTE,
    ".cs": ShaderStage.COMPUTE,
}


def stage_label(stage: int) -> str:
    """Return the diagnostic label for a GL shader type.

    Unknown values map to ``INCORRECT_SHADER_SPECIFIED``.
    """
    try:
        return ShaderStage(stage).label
    except ValueError:
        return "INCORRECT_SHADER_SPECIFIED"
