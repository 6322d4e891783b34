"""glshader - GLSL include preprocessing and program compilation."""

from .compiler import ShaderCompiler, ShaderProgram
from .config import ProgramSpec, ShaderConfig, load_config
from .errors import (
    IncludeDepthError,
    IncludeError,
    IncludeLoadError,
    IncludeSyntaxError,
    ProgramLinkError,
    ShaderCompileError,
    ShaderError,
)
from .loader import DictLoader, FileLoader
from .preprocessor import IncludePreprocessor, expand
from .stages import ShaderStage, stage_label
from .utils import set_log_level

__all__ = [
    "DictLoader",
    "FileLoader",
    "IncludeDepthError",
    "IncludeError",
    "IncludeLoadError",
    "IncludePreprocessor",
    "IncludeSyntaxError",
    "ProgramLinkError",
    "ProgramSpec",
    "ShaderCompileError",
    "ShaderCompiler",
    "ShaderConfig",
    "ShaderError",
    "ShaderProgram",
    "ShaderStage",
    "expand",
    "load_config",
    "set_log_level",
    "stage_label",
]
