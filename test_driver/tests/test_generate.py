"""Tests for gig.generate: request handling and the append policy."""

from __future__ import annotations

from pathlib import Path

import pytest

from gig.errors import OutputExistsError, TemplateNotFoundError
from gig.generate import GenerateRequest, build_document, generate, render
from gig.output import WriteMode


@pytest.fixture
def index(make_index):
    return make_index({
        "Go.gitignore": "# Go\n*.exe\n",
        "Rust.gitignore": "# Rust\n*.exe\ntarget/\n",
        "Global/macOS.gitignore": ".DS_Store\n",
    })


class TestBuildDocument:
    def test_single_template_verbatim(self):
        assert build_document(["*.a\n*.a\r\n"]) == "*.a\n*.a\r\n"

    def test_multiple_merged(self):
        result = build_document(["# Go\n*.exe\n", "# Rust\n*.exe\ntarget/\n"])
        assert result == "# Go\n*.exe\n# Rust\ntarget/\n"

    def test_existing_content_first(self):
        result = build_document(["*.exe\n*.log\n"], existing="*.log\nbuild/\n")
        assert result == "*.log\nbuild/\n*.exe\n"


class TestGenerateRequest:
    def test_default_mode(self):
        assert GenerateRequest(("go",)).mode is WriteMode.FAIL_IF_EXISTS

    def test_append_and_force_overwrite(self):
        assert GenerateRequest(("go",), append=True).mode is WriteMode.OVERWRITE
        assert GenerateRequest(("go",), force=True).mode is WriteMode.OVERWRITE

    def test_append_and_force_exclusive(self):
        with pytest.raises(ValueError):
            GenerateRequest(("go",), append=True, force=True)


class TestGenerate:
    def test_writes_merged(self, tmp_path: Path, index):
        out = tmp_path / ".gitignore"
        generate(GenerateRequest(("go", "rust"), output=out), index)
        assert out.read_text() == "# Go\n*.exe\n# Rust\ntarget/\n"

    def test_existing_file_refused(self, tmp_path: Path, index):
        out = tmp_path / ".gitignore"
        out.write_text("keep\n")
        with pytest.raises(OutputExistsError):
            generate(GenerateRequest(("go",), output=out), index)
        assert out.read_text() == "keep\n"

    def test_force_overwrites(self, tmp_path: Path, index):
        out = tmp_path / ".gitignore"
        out.write_text("*.exe\nold\n")
        generate(GenerateRequest(("go",), output=out, force=True), index)
        assert out.read_text() == "# Go\n*.exe\n"

    def test_append_existing_wins(self, tmp_path: Path, index):
        out = tmp_path / ".gitignore"
        out.write_text("# mine\n*.exe\n")
        generate(GenerateRequest(("rust",), output=out, append=True), index)
        assert out.read_text() == "# mine\n*.exe\n# Rust\ntarget/\n"

    def test_append_keeps_crlf(self, tmp_path: Path, index):
        out = tmp_path / ".gitignore"
        out.write_bytes(b"node_modules\r\n")
        generate(GenerateRequest(("macos",), output=out, append=True), index)
        assert out.read_bytes() == b"node_modules\r\n.DS_Store\r\n"

    def test_append_through_symlink(self, tmp_path: Path, index):
        target = tmp_path / "shared.gitignore"
        target.write_text("# mine\n")
        out = tmp_path / ".gitignore"
        out.symlink_to(target)
        generate(GenerateRequest(("go",), output=out, append=True), index)
        assert out.is_symlink()
        assert target.read_text() == "# mine\n# Go\n*.exe\n"

    def test_append_without_existing_file(self, tmp_path: Path, index):
        out = tmp_path / ".gitignore"
        generate(GenerateRequest(("macos",), output=out, append=True), index)
        assert out.read_text() == ".DS_Store\n"

    def test_lookup_failure_writes_nothing(self, tmp_path: Path, index):
        out = tmp_path / ".gitignore"
        with pytest.raises(TemplateNotFoundError):
            generate(GenerateRequest(("go", "nope"), output=out), index)
        assert not out.exists()

    def test_lookup_failure_leaves_append_target(self, tmp_path: Path, index):
        out = tmp_path / ".gitignore"
        out.write_text("mine\n")
        with pytest.raises(TemplateNotFoundError):
            generate(GenerateRequest(("nope",), output=out, append=True), index)
        assert out.read_text() == "mine\n"

    def test_logs_written_path(self, tmp_path: Path, index, capture_logs):
        out = tmp_path / ".gitignore"
        generate(GenerateRequest(("go", "rust"), output=out), index)
        assert f"Wrote {out} (go, rust)" in capture_logs.getvalue()


def test_render_does_not_write(tmp_path: Path, index):
    out = tmp_path / ".gitignore"
    rendered = render(GenerateRequest(("go",), output=out), index)
    assert rendered.text == "# Go\n*.exe\n"
    assert rendered.mode is WriteMode.FAIL_IF_EXISTS
    assert not out.exists()
