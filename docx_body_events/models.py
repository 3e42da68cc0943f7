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

"""Pydantic models for formatting accumulators, content events, and tool outputs."""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, Field

# Sentinel for list level / numbering id when absent or not an integer
UNKNOWN_INT = -1


# ── Enums ──────────────────────────────────────────────────────────────────────

class EditType(str, Enum):
    NONE = "none"
    INSERT = "insert"
    DELETE = "delete"
    MOVE_TO = "move_to"
    MOVE_FROM = "move_from"


class EventKind(str, Enum):
    """One member per BodyContentsSink callback."""
    RUN = "run"
    HYPERLINK_START = "hyperlink_start"
    HYPERLINK_END = "hyperlink_end"
    START_PARAGRAPH = "start_paragraph"
    END_PARAGRAPH = "end_paragraph"
    START_TABLE = "start_table"
    END_TABLE = "end_table"
    START_TABLE_ROW = "start_table_row"
    END_TABLE_ROW = "end_table_row"
    START_TABLE_CELL = "start_table_cell"
    END_TABLE_CELL = "end_table_cell"
    START_EDITED_SECTION = "start_edited_section"
    END_EDITED_SECTION = "end_edited_section"
    FOOTNOTE_REFERENCE = "footnote_reference"
    ENDNOTE_REFERENCE = "endnote_reference"
    EMBEDDED_OLE_REF = "embedded_ole_ref"
    EMBEDDED_PIC_REF = "embedded_pic_ref"
    START_BOOKMARK = "start_bookmark"
    END_BOOKMARK = "end_bookmark"


# ── Formatting accumulators ────────────────────────────────────────────────────

class ParagraphProperties(BaseModel):
    """Paragraph formatting collected from <w:pPr>.

    ilvl/num_id hold UNKNOWN_INT until a <w:numPr> child supplies a value.
    """
    style_id: str | None = None
    ilvl: int = UNKNOWN_INT
    num_id: int = UNKNOWN_INT

    def reset(self) -> None:
        self.style_id = None
        self.ilvl = UNKNOWN_INT
        self.num_id = UNKNOWN_INT


class RunProperties(BaseModel):
    bold: bool = False
    italic: bool = False


# ── Recorded events ────────────────────────────────────────────────────────────

class BodyEvent(BaseModel):
    """A single sink callback, as recorded by RecordingSink.

    data holds the callback arguments keyed by parameter name. Properties
    objects are stored as snapshots.
    """
    kind: EventKind
    data: dict[str, Any] = Field(default_factory=dict)


# ── Tool responses ─────────────────────────────────────────────────────────────

class BodyEventsResponse(BaseModel):
    part_name: str
    events: list[BodyEvent]


class BodyTextResponse(BaseModel):
    part_name: str
    text: str


class BodyPartsResponse(BaseModel):
    parts: list[str]
