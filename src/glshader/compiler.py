"""Shader compilation and management utilities."""

from __future__ import annotations

import os
from contextlib import ExitStack
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, Any, Sequence, Union

import numpy as np
from OpenGL import GL

from .errors import ProgramLinkError, ShaderCompileError
from .loader import FileLoader
from .preprocessor import IncludePreprocessor
from .stages import ShaderStage
from .utils import logger

if TYPE_CHECKING:
    from .config import ShaderConfig

# A stage file is given either as a path (stage inferred from its suffix)
# or as an explicit (stage, path) pair.
StageFile = Union[str, Path, tuple[ShaderStage, Union[str, Path]]]

_VECTOR_SHAPES = {(): 1, (1,): 1, (2,): 2, (3,): 3, (4,): 4}
_MATRIX_SHAPES = {(3, 3): 3, (4, 4): 4}


def _element_type(dtype: np.dtype, double: bool = False) -> tuple[str, type]:
    """Map a numpy dtype to a GL uniform suffix and upload dtype."""
    if dtype.kind == "f":
        if double:
            return "d", np.float64
        return "f", np.float32
    if dtype.kind in ("i", "b"):
        return "i", np.int32
    if dtype.kind == "u":
        return "ui", np.uint32
    raise TypeError(f"Unsupported uniform element type: {dtype}")


def _decode_log(log: bytes | str) -> str:
    if isinstance(log, bytes):
        return log.decode(errors="replace")
    return log


@dataclass
class ShaderProgram:
    """Compiled shader program with uniform management."""

    program_id: int
    name: str = "unnamed"
    _uniform_cache: dict[str, int] = field(default_factory=dict, repr=False)

    def use(self) -> None:
        """Activate this shader program."""
        GL.glUseProgram(self.program_id)

    def get_uniform_location(self, name: str) -> int:
        """Get uniform location, caching for performance."""
        if name not in self._uniform_cache:
            loc = GL.glGetUniformLocation(self.program_id, name)
            self._uniform_cache[name] = loc
        return self._uniform_cache[name]

    def set_uniform(self, name: str, value: Any, double: bool = False) -> None:
        """Set a uniform value by name.

        Python scalars upload as int (``bool``/``int``) or float. Floating
        point values, including numpy float64 arrays, upload as single
        precision unless ``double`` is set, which selects the ``d`` calls
        for ``double``/``dvec``/``dmat`` uniforms. Signed integer arrays
        upload as ``i`` and unsigned ones as ``ui``. Shapes (n,) with n in
        1..4 are vectors; (3, 3) and (4, 4) float arrays are matrices.

        Raises:
            TypeError: If the value's type or shape has no GL uniform call.
        """
        loc = self.get_uniform_location(name)
        if loc == -1:
            return  # Uniform not found or optimized out

        if isinstance(value, np.ndarray):
            self._set_array(loc, value, double)
        elif isinstance(value, bool):
            GL.glUniform1i(loc, int(value))
        elif isinstance(value, (float, np.floating)) and not double:
            GL.glUniform1f(loc, float(value))
        elif isinstance(value, np.generic):
            self._set_array(loc, np.asarray(value), double)
        elif isinstance(value, int):
            GL.glUniform1i(loc, value)
        elif isinstance(value, (float, tuple, list)):
            dtype = np.float64 if double else np.float32
            self._set_array(loc, np.asarray(value, dtype=dtype), double)
        else:
            raise TypeError(f"Unsupported uniform value for '{name}': {type(value).__name__}")

    def _set_array(self, loc: int, value: np.ndarray, double: bool = False) -> None:
        suffix, dtype = _element_type(value.dtype, double)
        data = np.ascontiguousarray(value, dtype=dtype)

        if data.shape in _VECTOR_SHAPES:
            size = _VECTOR_SHAPES[data.shape]
            upload = getattr(GL, f"glUniform{size}{suffix}v")
            upload(loc, 1, data.reshape(size))
        elif data.shape in _MATRIX_SHAPES and suffix in ("f", "d"):
            size = _MATRIX_SHAPES[data.shape]
            upload = getattr(GL, f"glUniformMatrix{size}{suffix}v")
            # Transpose because numpy is row-major, OpenGL expects column-major
            upload(loc, 1, GL.GL_TRUE, data)
        else:
            raise TypeError(f"Unsupported uniform shape {data.shape} for dtype {value.dtype}")

    def set_uniform_array(self, name: str, values: list, double: bool = False) -> None:
        """Set an array uniform (e.g., uLightPositions[0], [1], etc.)."""
        for i, value in enumerate(values):
            self.set_uniform(f"{name}[{i}]", value, double=double)

    def delete(self) -> None:
        """Delete the shader program."""
        if self.program_id:
            GL.glDeleteProgram(self.program_id)
            self.program_id = 0


class ShaderCompiler:
    """Compiles and caches shader programs."""

    _cache: dict[tuple, ShaderProgram] = {}

    @classmethod
    def compile_stages(
        cls,
        stages: Sequence[tuple[ShaderStage, str]],
        name: str = "unnamed",
    ) -> ShaderProgram:
        """Compile any set of shader stages into a linked program.

        Every shader object created here is deleted before returning, also
        when a later stage fails to compile. The program is deleted too if
        linking fails or any GL call after its creation raises.

        Args:
            stages: (stage, source) pairs in attachment order
            name: Optional name for error messages

        Returns:
            Compiled ShaderProgram

        Raises:
            ShaderCompileError: If a stage fails to compile
            ProgramLinkError: If linking fails
        """
        if not stages:
            raise ValueError(f"No shader stages given for program '{name}'")

        with ExitStack() as cleanup:
            shader_ids = []
            for stage, source in stages:
                shader_id = GL.glCreateShader(stage)
                cleanup.callback(GL.glDeleteShader, shader_id)
                GL.glShaderSource(shader_id, source)
                GL.glCompileShader(shader_id)

                if not GL.glGetShaderiv(shader_id, GL.GL_COMPILE_STATUS):
                    error = _decode_log(GL.glGetShaderInfoLog(shader_id))
                    raise ShaderCompileError(stage, error, name)
                shader_ids.append(shader_id)

            program = GL.glCreateProgram()
            with ExitStack() as program_guard:
                program_guard.callback(GL.glDeleteProgram, program)
                for shader_id in shader_ids:
                    GL.glAttachShader(program, shader_id)
                GL.glLinkProgram(program)
                for shader_id in shader_ids:
                    GL.glDetachShader(program, shader_id)

                if not GL.glGetProgramiv(program, GL.GL_LINK_STATUS):
                    error = _decode_log(GL.glGetProgramInfoLog(program))
                    raise ProgramLinkError(error, name)
                # Linked: the program outlives this call
                program_guard.pop_all()

        logger.debug(f"Linked program '{name}' ({len(shader_ids)} stages)")
        return ShaderProgram(program_id=program, name=name)

    @classmethod
    def compile(
        cls,
        vertex_source: str,
        fragment_source: str,
        name: str = "unnamed",
    ) -> ShaderProgram:
        """Compile vertex and fragment shaders into a program.

        Args:
            vertex_source: GLSL vertex shader source code
            fragment_source: GLSL fragment shader source code
            name: Optional name for error messages

        Returns:
            Compiled ShaderProgram
        """
        return cls.compile_stages(
            [(ShaderStage.VERTEX, vertex_source), (ShaderStage.FRAGMENT, fragment_source)],
            name=name,
        )

    @classmethod
    def load(
        cls,
        *files: StageFile,
        extended_glsl: bool = True,
        preprocessor: IncludePreprocessor | None = None,
    ) -> ShaderProgram:
        """Load and compile shaders from files.

        Args:
            *files: Stage files, as paths with a recognized suffix
                    (``.vert``, ``.frag``, ...) or (stage, path) pairs
            extended_glsl: Expand ``#include <path>`` directives before compiling
            preprocessor: Preprocessor to use; defaults to one resolving
                          includes against the current working directory

        Returns:
            Compiled ShaderProgram

        Raises:
            FileNotFoundError: If a stage file does not exist
        """
        stages = [cls._resolve_stage(f) for f in files]
        name = ":".join(str(path) for _, path in stages)

        if extended_glsl and preprocessor is None:
            preprocessor = IncludePreprocessor()

        cache_key = cls._cache_key(stages, preprocessor if extended_glsl else None)
        if cache_key is not None and cache_key in cls._cache:
            return cls._cache[cache_key]

        sources = []
        for stage, path in stages:
            logger.debug(f"Loading {stage.label} from {path}")
            if extended_glsl:
                source = preprocessor.process_file(path)
            else:
                source = path.read_text()
            sources.append((stage, source))

        program = cls.compile_stages(sources, name=name)
        if cache_key is not None:
            cls._cache[cache_key] = program
        return program

    @classmethod
    def load_program(cls, config: ShaderConfig, name: str) -> ShaderProgram:
        """Load a program declared in a shader config file."""
        if name not in config.programs:
            raise KeyError(f"Program '{name}' not defined in shader config")
        spec = config.programs[name]
        return cls.load(
            *spec.stages,
            extended_glsl=config.extended_glsl,
            preprocessor=config.make_preprocessor(),
        )

    @staticmethod
    def _cache_key(
        stages: list[tuple[ShaderStage, Path]],
        preprocessor: IncludePreprocessor | None,
    ) -> tuple | None:
        """Build a cache key from the stage files and include settings.

        Returns None, which disables caching, when the include loader is
        not a ``FileLoader``.
        """
        files = tuple((stage, str(path.resolve())) for stage, path in stages)
        if preprocessor is None:
            return files, None

        loader = preprocessor.loader
        if not isinstance(loader, FileLoader):
            return None
        # Includes resolve against the working directory first
        include_settings = (
            os.getcwd(),
            tuple(str(p.resolve()) for p in loader.search_paths),
            loader.encoding,
            preprocessor.max_depth,
        )
        return files, include_settings

    @staticmethod
    def _resolve_stage(item: StageFile) -> tuple[ShaderStage, Path]:
        if isinstance(item, tuple):
            stage, path = item
            return ShaderStage(stage), Path(path)
        return ShaderStage.from_suffix(item), Path(item)

    @classmethod
    def clear_cache(cls) -> None:
        """Clear the shader cache and delete all cached programs."""
        for program in cls._cache.values():
            program.delete()
        cls._cache.clear()
