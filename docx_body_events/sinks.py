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

"""Ready-made BodyContentsSink implementations.

RecordingSink keeps every callback as a BodyEvent, in order. PlainTextSink
renders the body as plain text: one line per paragraph, table cells
separated by tabs and rows by newlines.
"""

from __future__ import annotations

from datetime import datetime

from docx_body_events.models import (
    BodyEvent,
    EditType,
    EventKind,
    ParagraphProperties,
    RunProperties,
)


class RecordingSink:
    """Collect sink callbacks as BodyEvent records.

    The two policy flags are plain attributes and may be flipped while a
    part is being translated.
    """

    def __init__(
        self,
        include_deleted_text: bool = False,
        include_move_from_text: bool = False,
    ) -> None:
        self.events: list[BodyEvent] = []
        self.deleted_text = include_deleted_text
        self.move_from_text = include_move_from_text

    def _record(self, kind: EventKind, **data) -> None:
        self.events.append(BodyEvent(kind=kind, data=data))

    def kinds(self) -> list[EventKind]:
        return [e.kind for e in self.events]

    def of_kind(self, kind: EventKind) -> list[BodyEvent]:
        return [e for e in self.events if e.kind == kind]

    def run(self, run_properties: RunProperties, contents: str) -> None:
        self._record(EventKind.RUN, properties=run_properties, text=contents)

    def hyperlink_start(self, link: str | None) -> None:
        self._record(EventKind.HYPERLINK_START, link=link)

    def hyperlink_end(self) -> None:
        self._record(EventKind.HYPERLINK_END)

    def start_paragraph(self, paragraph_properties: ParagraphProperties) -> None:
        self._record(EventKind.START_PARAGRAPH, properties=paragraph_properties)

    def end_paragraph(self) -> None:
        self._record(EventKind.END_PARAGRAPH)

    def start_table(self) -> None:
        self._record(EventKind.START_TABLE)

    def end_table(self) -> None:
        self._record(EventKind.END_TABLE)

    def start_table_row(self) -> None:
        self._record(EventKind.START_TABLE_ROW)

    def end_table_row(self) -> None:
        self._record(EventKind.END_TABLE_ROW)

    def start_table_cell(self) -> None:
        self._record(EventKind.START_TABLE_CELL)

    def end_table_cell(self) -> None:
        self._record(EventKind.END_TABLE_CELL)

    def start_edited_section(
        self, editor: str | None, date: datetime | None, edit_type: EditType
    ) -> None:
        self._record(
            EventKind.START_EDITED_SECTION,
            editor=editor, date=date, edit_type=edit_type,
        )

    def end_edited_section(self) -> None:
        self._record(EventKind.END_EDITED_SECTION)

    def footnote_reference(self, note_id: str | None) -> None:
        self._record(EventKind.FOOTNOTE_REFERENCE, id=note_id)

    def endnote_reference(self, note_id: str | None) -> None:
        self._record(EventKind.ENDNOTE_REFERENCE, id=note_id)

    def embedded_ole_ref(self, rel_id: str | None) -> None:
        self._record(EventKind.EMBEDDED_OLE_REF, rel_id=rel_id)

    def embedded_pic_ref(
        self, pic_file_name: str | None, pic_description: str | None
    ) -> None:
        self._record(
            EventKind.EMBEDDED_PIC_REF,
            file_name=pic_file_name, description=pic_description,
        )

    def start_bookmark(self, bookmark_id: str | None, name: str | None) -> None:
        self._record(EventKind.START_BOOKMARK, id=bookmark_id, name=name)

    def end_bookmark(self, bookmark_id: str | None) -> None:
        self._record(EventKind.END_BOOKMARK, id=bookmark_id)

    def include_deleted_text(self) -> bool:
        return self.deleted_text

    def include_move_from_text(self) -> bool:
        return self.move_from_text


class _TableFrame:
    """Rows of one open table; each row is a list of cell texts."""

    def __init__(self) -> None:
        self.rows: list[list[str]] = []
        self.cell_parts: list[str] | None = None

    def render(self) -> str:
        return "\n".join("\t".join(row) for row in self.rows)


class PlainTextSink:
    """Render body content as plain text.

    Paragraphs become lines. Inside a table, a cell's paragraphs are joined
    with a space; a nested table is flattened into its parent cell with
    rows separated by " | ". Hyperlinks are rendered as ``text <target>``.
    """

    def __init__(
        self,
        include_deleted_text: bool = False,
        include_move_from_text: bool = False,
    ) -> None:
        self.deleted_text = include_deleted_text
        self.move_from_text = include_move_from_text
        self._blocks: list[str] = []
        self._paragraph: list[str] = []
        self._tables: list[_TableFrame] = []
        self._link: str | None = None

    @property
    def text(self) -> str:
        return "\n".join(self._blocks)

    def _emit_block(self, text: str) -> None:
        if self._tables and self._tables[-1].cell_parts is not None:
            self._tables[-1].cell_parts.append(text)
        else:
            self._blocks.append(text)

    def run(self, run_properties: RunProperties, contents: str) -> None:
        self._paragraph.append(contents)

    def hyperlink_start(self, link: str | None) -> None:
        self._link = link

    def hyperlink_end(self) -> None:
        if self._link:
            self._paragraph.append(f" <{self._link}>")
        self._link = None

    def start_paragraph(self, paragraph_properties: ParagraphProperties) -> None:
        pass

    def end_paragraph(self) -> None:
        self._emit_block("".join(self._paragraph))
        self._paragraph = []

    def start_table(self) -> None:
        self._tables.append(_TableFrame())

    def end_table(self) -> None:
        if not self._tables:
            return
        frame = self._tables.pop()
        if self._tables:
            self._emit_block(" | ".join("\t".join(r) for r in frame.rows))
        else:
            self._blocks.append(frame.render())

    def start_table_row(self) -> None:
        if self._tables:
            self._tables[-1].rows.append([])

    def end_table_row(self) -> None:
        pass

    def start_table_cell(self) -> None:
        if self._tables:
            self._tables[-1].cell_parts = []

    def end_table_cell(self) -> None:
        if not self._tables:
            return
        frame = self._tables[-1]
        if not frame.rows:
            frame.rows.append([])
        frame.rows[-1].append(" ".join(frame.cell_parts or []).strip())
        frame.cell_parts = None

    def start_edited_section(
        self, editor: str | None, date: datetime | None, edit_type: EditType
    ) -> None:
        pass

    def end_edited_section(self) -> None:
        pass

    def footnote_reference(self, note_id: str | None) -> None:
        self._paragraph.append(f"[footnote {note_id}]")

    def endnote_reference(self, note_id: str | None) -> None:
        self._paragraph.append(f"[endnote {note_id}]")

    def embedded_ole_ref(self, rel_id: str | None) -> None:
        self._paragraph.append(f"[embedded object {rel_id}]")

    def embedded_pic_ref(
        self, pic_file_name: str | None, pic_description: str | None
    ) -> None:
        label = pic_file_name or pic_description
        self._paragraph.append(f"[image: {label}]" if label else "[image]")

    def start_bookmark(self, bookmark_id: str | None, name: str | None) -> None:
        pass

    def end_bookmark(self, bookmark_id: str | None) -> None:
        pass

    def include_deleted_text(self) -> bool:
        return self.deleted_text

    def include_move_from_text(self) -> bool:
        return self.move_from_text
