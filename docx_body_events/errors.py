# Copyright (C) 2025 the contributors
# SPDX-License-Identifier: AGPL-3.0-or-later
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU Affero General Public License as published
# by the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.
#
# This program is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE. See the
# GNU Affero General Public License for more details.
#
# You should have received a copy of the GNU Affero General Public License
# along with this program. If not, see <https://www.gnu.org/licenses/>.

"""Exception types and rich error wrapping for the tool surface.

The translator itself never raises. Errors come from the layers around it:
reading the archive, parsing a part with lxml, and resolving tool input.
Every error is a ValueError so MCP clients see a plain message.
"""

from __future__ import annotations

from docx_body_events.validators import resolve_file_input


class InvalidArchiveError(ValueError):
    """The bytes are not a readable ZIP archive."""


class BodyPartError(ValueError):
    """Base class for problems with a .docx body part."""

    def __init__(self, part_name: str, message: str) -> None:
        self.part_name = part_name
        super().__init__(f"{part_name}: {message}")


class MissingPartError(BodyPartError):
    def __init__(self, part_name: str, available: list[str] | None = None) -> None:
        message = "part not found in archive"
        if available:
            message += f". Body parts present: {', '.join(available)}"
        super().__init__(part_name, message)


class MalformedPartError(BodyPartError):
    """lxml rejected the part's XML."""


# ── Usage examples per tool ──────────────────────────────────────────────────

USAGE: dict[str, str] = {
    "extract_body_events": (
        'extract_body_events(file_path="report.docx")'
    ),
    "extract_body_text": (
        'extract_body_text(file_path="report.docx", '
        'part_name="word/footnotes.xml")'
    ),
    "list_body_parts": (
        'list_body_parts(file_path="report.docx")'
    ),
}


def tool_error(tool_name: str, exc: Exception) -> ValueError:
    """Build a ValueError naming the tool, with a usage example appended."""
    example = USAGE.get(tool_name, tool_name)
    return ValueError(
        f"{tool_name} error: {exc}\n"
        f"  Example: {example}"
    )


def resolve_file_for_tool(
    tool_name: str,
    file_bytes_b64: str | None,
    file_path: str | None,
) -> bytes:
    """Wrap resolve_file_input with tool-specific context on failure."""
    try:
        return resolve_file_input(file_bytes_b64, file_path)
    except ValueError as exc:
        raise tool_error(tool_name, exc) from exc
