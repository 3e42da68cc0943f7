"""Tests for tool input validation and error wrapping."""

from __future__ import annotations

import base64
from pathlib import Path

import pytest

from docx_body_events.errors import USAGE, resolve_file_for_tool
from docx_body_events.validators import (
    resolve_file_input,
    validate_file_bytes,
    validate_path_safe,
)
from tests.conftest import make_body, make_docx


@pytest.fixture
def docx_file(tmp_path: Path) -> Path:
    path = tmp_path / "sample.docx"
    path.write_bytes(make_docx({"word/document.xml": make_body("<w:p/>")}))
    return path


class TestValidateFileBytes:
    def test_empty(self) -> None:
        with pytest.raises(ValueError, match="empty"):
            validate_file_bytes(b"")

    def test_not_a_zip(self) -> None:
        with pytest.raises(ValueError, match="valid .docx"):
            validate_file_bytes(b"<xml/>")

    def test_zip_magic_accepted(self) -> None:
        validate_file_bytes(b"PK\x03\x04rest")


class TestValidatePathSafe:
    def test_null_byte_rejected(self) -> None:
        with pytest.raises(ValueError, match="Invalid file path"):
            validate_path_safe("doc\x00.docx")

    def test_system_paths_rejected(self) -> None:
        with pytest.raises(ValueError, match="system paths"):
            validate_path_safe("/proc/self/status")

    def test_returns_resolved_path(self, docx_file: Path) -> None:
        assert validate_path_safe(str(docx_file)) == docx_file.resolve()


class TestResolveFileInput:
    def test_from_path(self, docx_file: Path) -> None:
        assert resolve_file_input(None, str(docx_file)) == docx_file.read_bytes()

    def test_from_base64(self, docx_file: Path) -> None:
        raw = docx_file.read_bytes()
        encoded = base64.b64encode(raw).decode()
        assert resolve_file_input(encoded, None) == raw

    def test_path_wins_over_base64(self, docx_file: Path) -> None:
        assert resolve_file_input("!!!", str(docx_file)) == docx_file.read_bytes()

    def test_neither_supplied(self) -> None:
        with pytest.raises(ValueError, match="Neither was supplied"):
            resolve_file_input(None, None)

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(ValueError, match="not found"):
            resolve_file_input(None, str(tmp_path / "absent.docx"))

    def test_unsupported_extension(self, tmp_path: Path) -> None:
        path = tmp_path / "sheet.xlsx"
        path.write_bytes(b"PK\x03\x04")
        with pytest.raises(ValueError, match="Unsupported file extension"):
            resolve_file_input(None, str(path))

    def test_invalid_base64(self) -> None:
        with pytest.raises(ValueError, match="Invalid base64"):
            resolve_file_input("!!!not base64", None)

    def test_base64_of_non_docx(self) -> None:
        encoded = base64.b64encode(b"hello").decode()
        with pytest.raises(ValueError, match="valid .docx"):
            resolve_file_input(encoded, None)


class TestResolveFileForTool:
    def test_error_names_tool_and_example(self) -> None:
        with pytest.raises(ValueError) as exc_info:
            resolve_file_for_tool("extract_body_text", None, None)
        message = str(exc_info.value)
        assert message.startswith("extract_body_text error:")
        assert "Neither was supplied" in message
        assert USAGE["extract_body_text"] in message

    def test_success_passes_bytes_through(self, docx_file: Path) -> None:
        raw = resolve_file_for_tool("list_body_parts", None, str(docx_file))
        assert raw == docx_file.read_bytes()
