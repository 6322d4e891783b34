"""Load shader build settings from YAML configuration files."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from .loader import FileLoader
from .preprocessor import IncludePreprocessor
from .stages import ShaderStage


@dataclass
class ProgramSpec:
    """A named program and the files of its stages."""

    name: str
    stages: list[tuple[ShaderStage, Path]]


@dataclass
class ShaderConfig:
    """Shader build settings.

    YAML format:
    ```yaml
    include_paths: [shaders/lib]
    max_include_depth: 32
    extended_glsl: true
    programs:
      basic:
        vertex: shaders/basic.vert
        fragment: shaders/basic.frag
    ```

    Relative paths are resolved against the directory of the config file.
    Leaving out ``max_include_depth`` disables the include depth limit.
    """

    include_paths: list[Path] = field(default_factory=list)
    max_include_depth: int | None = None
    extended_glsl: bool = True
    programs: dict[str, ProgramSpec] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: dict[str, Any] | None, base_dir: str | Path = ".") -> ShaderConfig:
        """Build a config from parsed YAML data.

        Raises:
            ValueError: If the data is malformed
        """
        data = data or {}
        if not isinstance(data, dict):
            raise ValueError("Shader config must be a mapping")
        base_dir = Path(base_dir)

        include_paths = data.get("include_paths", [])
        if not isinstance(include_paths, list):
            raise ValueError("include_paths must be a list")

        max_depth = data.get("max_include_depth")
        if max_depth is not None and (
            isinstance(max_depth, bool) or not isinstance(max_depth, int) or max_depth < 1
        ):
            raise ValueError(f"max_include_depth must be a positive integer, got {max_depth!r}")

        programs = {}
        for name, stage_data in (data.get("programs") or {}).items():
            programs[name] = cls._parse_program(name, stage_data, base_dir)

        return cls(
            include_paths=[base_dir / p for p in include_paths],
            max_include_depth=max_depth,
            extended_glsl=bool(data.get("extended_glsl", True)),
            programs=programs,
        )

    @staticmethod
    def _parse_program(name: str, data: Any, base_dir: Path) -> ProgramSpec:
        if not isinstance(data, dict) or not data:
            raise ValueError(f"Program '{name}' must map stage names to files")
        stages = [
            (ShaderStage.from_name(stage), base_dir / path)
            for stage, path in data.items()
        ]
        return ProgramSpec(name=name, stages=stages)

    def make_loader(self) -> FileLoader:
        """Create a file loader searching the configured include paths."""
        return FileLoader(self.include_paths)

    def make_preprocessor(self) -> IncludePreprocessor:
        """Create an include preprocessor using these settings."""
        return IncludePreprocessor(self.make_loader(), max_depth=self.max_include_depth)


def load_config(path: str | Path) -> ShaderConfig:
    """Load a shader config from a YAML file."""
    path = Path(path)
    with open(path) as f:
        data = yaml.safe_load(f)

    return ShaderConfig.from_dict(data, base_dir=path.parent)
