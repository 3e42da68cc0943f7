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

"""MCP server exposing body-part translation as tools.

Each tool accepts either a file_path or base64-encoded bytes and an optional
part_name (defaults to the main document).
"""

from __future__ import annotations

from mcp.server.fastmcp import FastMCP

from docx_body_events.config import HandlerConfig
from docx_body_events.errors import (
    BodyPartError,
    InvalidArchiveError,
    resolve_file_for_tool,
    tool_error,
)
from docx_body_events.log import configure_logging, get_logger
from docx_body_events.models import (
    BodyEventsResponse,
    BodyPartsResponse,
    BodyTextResponse,
)
from docx_body_events.package import (
    list_body_parts as package_list_body_parts,
    main_document_part,
    translate_part,
)
from docx_body_events.sinks import PlainTextSink, RecordingSink

logger = get_logger(__name__)

mcp = FastMCP("docx-body-events")


@mcp.tool()
def extract_body_events(
    file_bytes_b64: str = "",
    file_path: str = "",
    part_name: str = "",
    include_deleted_text: bool = False,
    include_move_from_text: bool = False,
) -> dict:
    """Return the ordered content events of one body part.

    Events are paragraphs, runs (with bold/italic and text), tables, rows,
    cells, hyperlinks, bookmarks, tracked-change sections, note references
    and embedded picture/OLE references, in document order.

    file_path: path to the .docx on disk (preferred for interactive use).
    file_bytes_b64: base64-encoded file bytes (for programmatic use).
    part_name: e.g. word/footnotes.xml. Empty means the main document.
    include_deleted_text / include_move_from_text: keep the text of
        tracked deletions / moved-away text in runs.
    """
    tool = "extract_body_events"
    raw = resolve_file_for_tool(tool, file_bytes_b64 or None, file_path or None)
    config = HandlerConfig(
        include_deleted_text=include_deleted_text,
        include_move_from_text=include_move_from_text,
    )
    sink = RecordingSink(
        include_deleted_text=config.include_deleted_text,
        include_move_from_text=config.include_move_from_text,
    )
    try:
        name = part_name or main_document_part(raw)
        translate_part(raw, sink, name, config)
    except (InvalidArchiveError, BodyPartError) as exc:
        raise tool_error(tool, exc) from exc
    logger.info("extract_body_events: %s → %d events", name, len(sink.events))
    return BodyEventsResponse(part_name=name, events=sink.events).model_dump(
        mode="json"
    )


@mcp.tool()
def extract_body_text(
    file_bytes_b64: str = "",
    file_path: str = "",
    part_name: str = "",
    include_deleted_text: bool = False,
    include_move_from_text: bool = False,
) -> dict:
    """Return one body part rendered as plain text.

    Paragraphs become lines; table cells are tab-separated, rows
    newline-separated. Pictures appear as [image: name], notes as
    [footnote N] / [endnote N], embedded objects as [embedded object rId],
    hyperlinks as ``text <target>``.

    file_path: path to the .docx on disk (preferred for interactive use).
    file_bytes_b64: base64-encoded file bytes (for programmatic use).
    part_name: e.g. word/header1.xml. Empty means the main document.
    """
    tool = "extract_body_text"
    raw = resolve_file_for_tool(tool, file_bytes_b64 or None, file_path or None)
    sink = PlainTextSink(
        include_deleted_text=include_deleted_text,
        include_move_from_text=include_move_from_text,
    )
    try:
        name = part_name or main_document_part(raw)
        translate_part(raw, sink, name)
    except (InvalidArchiveError, BodyPartError) as exc:
        raise tool_error(tool, exc) from exc
    return BodyTextResponse(part_name=name, text=sink.text).model_dump()


@mcp.tool()
def list_body_parts(
    file_bytes_b64: str = "",
    file_path: str = "",
) -> dict:
    """List the body parts in the document: main document first, then
    headers, footers, footnotes and endnotes.

    Pass any of them as part_name to the other tools.
    """
    tool = "list_body_parts"
    raw = resolve_file_for_tool(tool, file_bytes_b64 or None, file_path or None)
    try:
        parts = package_list_body_parts(raw)
    except (InvalidArchiveError, BodyPartError) as exc:
        raise tool_error(tool, exc) from exc
    return BodyPartsResponse(parts=parts).model_dump()


def main() -> None:
    configure_logging()
    mcp.run()


if __name__ == "__main__":
    main()
