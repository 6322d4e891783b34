"""Tests for the command line entry point."""

import logging

import pytest

from glshader.main import main
from glshader.utils import logger


def test_main_writes_expanded_source(tmp_path, monkeypatch, capsys):
    monkeypatch.chdir(tmp_path)
    (tmp_path / "common.glsl").write_text("C\n")
    (tmp_path / "a.frag").write_text("#include <common.glsl>\nA\n")

    assert main(["a.frag"]) == 0

    assert capsys.readouterr().out == "C\n\nA\n"


def test_main_concatenates_files_to_output(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    lib = tmp_path / "lib"
    lib.mkdir()
    (lib / "common.glsl").write_text("C")
    (tmp_path / "a.vert").write_text("#include <common.glsl>\n")
    (tmp_path / "b.frag").write_text("B\n")
    out = tmp_path / "out.glsl"

    assert main(["a.vert", "b.frag", "-I", "lib", "-o", str(out)]) == 0

    assert out.read_text() == "C\nB\n"


def test_main_reports_missing_include(tmp_path, monkeypatch, capsys):
    monkeypatch.chdir(tmp_path)
    (tmp_path / "a.frag").write_text("#include <missing.glsl>\n")

    assert main(["a.frag"]) == 1

    captured = capsys.readouterr()
    assert captured.out == ""
    assert "missing.glsl" in captured.err


def test_main_reports_missing_source(tmp_path, monkeypatch, capsys):
    monkeypatch.chdir(tmp_path)
    assert main(["nope.frag"]) == 1
    assert "nope.frag" in capsys.readouterr().err


def test_main_depth_limit_from_config(tmp_path, monkeypatch, capsys):
    monkeypatch.chdir(tmp_path)
    (tmp_path / "shaders.yaml").write_text("max_include_depth: 3\n")
    (tmp_path / "loop.glsl").write_text("#include <loop.glsl>\n")

    assert main(["loop.glsl", "-c", "shaders.yaml"]) == 1
    assert "Include depth 4" in capsys.readouterr().err


def test_main_max_depth_overrides_config(tmp_path, monkeypatch, capsys):
    monkeypatch.chdir(tmp_path)
    (tmp_path / "shaders.yaml").write_text("max_include_depth: 1\n")
    (tmp_path / "a.glsl").write_text("#include <b.glsl>")
    (tmp_path / "b.glsl").write_text("B")
    (tmp_path / "main.glsl").write_text("#include <a.glsl>\n")

    assert main(["main.glsl", "-c", "shaders.yaml", "--max-depth", "2"]) == 0
    assert capsys.readouterr().out == "B\n"


@pytest.mark.parametrize("value", ["0", "-2", "deep"])
def test_main_rejects_non_positive_max_depth(tmp_path, monkeypatch, capsys, value):
    monkeypatch.chdir(tmp_path)
    (tmp_path / "a.frag").write_text("A\n")

    with pytest.raises(SystemExit) as excinfo:
        main(["a.frag", "--max-depth", value])

    assert excinfo.value.code == 2
    assert "--max-depth" in capsys.readouterr().err


@pytest.mark.parametrize(
    "config_text",
    [
        "include_paths: [unclosed\n",
        "max_include_depth: 0\n",
        "- just\n- a list\n",
    ],
)
def test_main_reports_bad_config(tmp_path, monkeypatch, capsys, config_text):
    monkeypatch.chdir(tmp_path)
    (tmp_path / "shaders.yaml").write_text(config_text)
    (tmp_path / "a.frag").write_text("A\n")

    assert main(["a.frag", "-c", "shaders.yaml"]) == 1

    captured = capsys.readouterr()
    assert captured.out == ""
    assert captured.err.startswith("error: shaders.yaml:")


def test_main_reports_missing_config(tmp_path, monkeypatch, capsys):
    monkeypatch.chdir(tmp_path)
    (tmp_path / "a.frag").write_text("A\n")

    assert main(["a.frag", "-c", "nope.yaml"]) == 1
    assert "nope.yaml" in capsys.readouterr().err


def test_main_verbose_enables_debug_logging(tmp_path, monkeypatch, capsys):
    monkeypatch.chdir(tmp_path)
    (tmp_path / "a.frag").write_text("A\n")
    saved = logger.level

    try:
        assert main(["a.frag", "-v"]) == 0
        assert logger.level == logging.DEBUG
    finally:
        logger.setLevel(saved)
