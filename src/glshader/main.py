"""Command line entry point for glshader."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

import yaml

from .config import ShaderConfig, load_config
from .errors import IncludeError
from .preprocessor import IncludePreprocessor
from .utils import set_log_level


def positive_int(text: str) -> int:
    """Argument type for counts that must be at least 1."""
    try:
        value = int(text)
    except ValueError:
        raise argparse.ArgumentTypeError(f"not an integer: {text!r}") from None
    if value < 1:
        raise argparse.ArgumentTypeError(f"must be at least 1, got {value}")
    return value


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        prog="glshader",
        description="Expand #include <path> directives in shader sources",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "files",
        nargs="+",
        metavar="FILE",
        help="Shader source files to expand",
    )
    parser.add_argument(
        "-I", "--include-path",
        action="append",
        default=[],
        metavar="DIR",
        help="Extra directory to search for include files (repeatable)",
    )
    parser.add_argument(
        "-c", "--config",
        metavar="PATH",
        help="YAML shader config providing include paths and depth limit",
    )
    parser.add_argument(
        "--max-depth",
        type=positive_int,
        metavar="N",
        help="Fail when includes nest deeper than N (default: unlimited)",
    )
    parser.add_argument(
        "-o", "--output",
        metavar="PATH",
        help="Write the expanded source here instead of stdout",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Log every include as it is spliced",
    )
    return parser.parse_args(argv)


def build_preprocessor(args: argparse.Namespace) -> IncludePreprocessor:
    """Combine config file settings with command line overrides."""
    config = load_config(args.config) if args.config else ShaderConfig()
    config.include_paths.extend(Path(p) for p in args.include_path)
    if args.max_depth is not None:
        config.max_include_depth = args.max_depth
    return config.make_preprocessor()


def main(argv: list[str] | None = None) -> int:
    """Expand the given shader files."""
    args = parse_args(argv)
    if args.verbose:
        logging.basicConfig(format="%(levelname)s: %(message)s")
        set_log_level(logging.DEBUG)

    try:
        preprocessor = build_preprocessor(args)
    except (OSError, ValueError, yaml.YAMLError) as e:
        print(f"error: {args.config}: {e}", file=sys.stderr)
        return 1

    chunks = []
    for path in args.files:
        try:
            chunks.append(preprocessor.process_file(path))
        except (IncludeError, OSError) as e:
            print(f"error: {path}: {e}", file=sys.stderr)
            return 1
    expanded = "".join(chunks)

    if args.output:
        Path(args.output).write_text(expanded)
    else:
        sys.stdout.write(expanded)
    return 0


if __name__ == "__main__":
    sys.exit(main())
