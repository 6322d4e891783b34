"""Tests for include file loaders."""

import pytest

from glshader import DictLoader, FileLoader, IncludeLoadError


def test_file_loader_reads_relative_to_cwd(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    (tmp_path / "light.glsl").write_text("vec3 light;\n")
    assert FileLoader()("light.glsl") == "vec3 light;\n"


def test_file_loader_uses_search_paths(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    lib = tmp_path / "lib"
    lib.mkdir()
    (lib / "pbr.glsl").write_text("PBR")
    assert FileLoader([lib])("pbr.glsl") == "PBR"


def test_file_loader_prefers_cwd_over_search_paths(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    lib = tmp_path / "lib"
    lib.mkdir()
    (lib / "x.glsl").write_text("lib")
    (tmp_path / "x.glsl").write_text("cwd")
    assert FileLoader([lib])("x.glsl") == "cwd"


def test_file_loader_absolute_path(tmp_path):
    path = tmp_path / "abs.glsl"
    path.write_text("ABS")
    assert FileLoader()(str(path)) == "ABS"


def test_file_loader_keeps_line_endings(tmp_path):
    path = tmp_path / "crlf.glsl"
    path.write_bytes(b"a\r\nb\r\n")
    assert FileLoader()(str(path)) == "a\r\nb\r\n"


def test_file_loader_missing_file(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    with pytest.raises(IncludeLoadError) as excinfo:
        FileLoader([tmp_path / "lib"])("nope.glsl")
    assert excinfo.value.path == "nope.glsl"


def test_file_loader_rejects_directories(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    (tmp_path / "dir.glsl").mkdir()
    with pytest.raises(IncludeLoadError):
        FileLoader()("dir.glsl")


def test_file_loader_bad_encoding(tmp_path):
    path = tmp_path / "latin1.glsl"
    path.write_bytes(b"\xff\xfe\xfa")
    with pytest.raises(IncludeLoadError) as excinfo:
        FileLoader()(str(path))
    assert isinstance(excinfo.value.__cause__, UnicodeDecodeError)


def test_dict_loader():
    loader = DictLoader({"a.glsl": "A"})
    assert loader("a.glsl") == "A"
    with pytest.raises(IncludeLoadError) as excinfo:
        loader("b.glsl")
    assert excinfo.value.path == "b.glsl"
