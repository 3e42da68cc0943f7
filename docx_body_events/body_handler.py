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

"""Streaming translator from WordprocessingML body XML events to content events.

Handles anything that holds body content: the main document, headers,
footers, footnotes and endnotes. The handler is pushed XML events in
document order (see xml_events.feed_xml) and calls a BodyContentsSink with
paragraphs, runs, tables, hyperlinks, bookmarks, tracked-change sections,
note references and embedded picture/OLE references.

There is no element stack. Nesting is tracked with a handful of flags and
two alternate-content depth counters held in HandlerState; the grammar
guarantees none of the flagged elements re-enter themselves while open.
One handler instance serves exactly one part.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from functools import partial
from typing import Callable, Mapping, Protocol

from docx_body_events.config import DEFAULT_CONFIG, HandlerConfig
from docx_body_events.dates import parse_edit_date
from docx_body_events.log import get_logger
from docx_body_events.models import (
    UNKNOWN_INT,
    EditType,
    ParagraphProperties,
    RunProperties,
)
from docx_body_events.xml_utils import MC_NS, O_NS, R_NS, W_NS, clark, split_clark

logger = get_logger(__name__)

TAB_CHAR = "\t"
NEWLINE = "\n"

CHOICE = "Choice"
FALLBACK = "Fallback"

# w:val spellings that switch a toggle property (w:b, w:i) off
_FALSE_VALUES = {"0", "false", "off"}


class BodyTag(str, Enum):
    """Local names the handler reacts to. Anything else is ignored."""
    RPR = "rPr"
    R = "r"
    T = "t"
    TAB = "tab"
    P = "p"
    B = "b"
    TC = "tc"
    P_STYLE = "pStyle"
    I = "i"  # noqa: E741
    TR = "tr"
    NUM_PR = "numPr"
    ILVL = "ilvl"
    NUM_ID = "numId"
    BR = "br"
    BOOKMARK_START = "bookmarkStart"
    BOOKMARK_END = "bookmarkEnd"
    HYPERLINK = "hyperlink"
    TBL = "tbl"
    BLIP = "blip"
    C_NV_PR = "cNvPr"
    PIC = "pic"
    FOOTNOTE_REFERENCE = "footnoteReference"
    IMAGEDATA = "imagedata"
    INS = "ins"
    DEL_TEXT = "delText"
    DEL = "del"
    MOVE_TO = "moveTo"
    MOVE_FROM = "moveFrom"
    OLE_OBJECT = "OLEObject"
    CR = "cr"
    ENDNOTE_REFERENCE = "endnoteReference"
    PPR = "pPr"
    PICT = "pict"


_TAGS_BY_NAME: dict[str, BodyTag] = {tag.value: tag for tag in BodyTag}

_EDIT_TAGS: dict[BodyTag, EditType] = {
    BodyTag.INS: EditType.INSERT,
    BodyTag.DEL: EditType.DELETE,
    BodyTag.MOVE_TO: EditType.MOVE_TO,
    BodyTag.MOVE_FROM: EditType.MOVE_FROM,
}


class BodyContentsSink(Protocol):
    """Receiver of content events.

    start_paragraph may be called twice for one paragraph: once as soon as
    its first non-pPr child opens, and again when </w:pPr> closes with the
    complete properties. The later call is authoritative.

    include_deleted_text / include_move_from_text are queried on every
    relevant character event, so a sink may change policy mid-stream.
    """

    def run(self, run_properties: RunProperties, contents: str) -> None: ...

    def hyperlink_start(self, link: str | None) -> None: ...

    def hyperlink_end(self) -> None: ...

    def start_paragraph(self, paragraph_properties: ParagraphProperties) -> None: ...

    def end_paragraph(self) -> None: ...

    def start_table(self) -> None: ...

    def end_table(self) -> None: ...

    def start_table_row(self) -> None: ...

    def end_table_row(self) -> None: ...

    def start_table_cell(self) -> None: ...

    def end_table_cell(self) -> None: ...

    def start_edited_section(
        self, editor: str | None, date: datetime | None, edit_type: EditType
    ) -> None: ...

    def end_edited_section(self) -> None: ...

    def footnote_reference(self, note_id: str | None) -> None: ...

    def endnote_reference(self, note_id: str | None) -> None: ...

    def embedded_ole_ref(self, rel_id: str | None) -> None: ...

    def embedded_pic_ref(
        self, pic_file_name: str | None, pic_description: str | None
    ) -> None: ...

    def start_bookmark(self, bookmark_id: str | None, name: str | None) -> None: ...

    def end_bookmark(self, bookmark_id: str | None) -> None: ...

    def include_deleted_text(self) -> bool: ...

    def include_move_from_text(self) -> bool: ...


@dataclass
class HandlerState:
    """Mutable per-session state. Flags mirror the open-element categories."""
    in_run: bool = False
    in_rpr: bool = False
    in_t: bool = False
    in_ppr: bool = False
    in_num_pr: bool = False
    in_pic: bool = False
    in_del_text: bool = False
    last_start_was_p: bool = False
    edit_type: EditType = EditType.NONE
    choice_depth: int = 0
    fallback_depth: int = 0
    pic_rel_id: str | None = None
    pic_description: str | None = None
    run_buffer: list[str] = field(default_factory=list)
    run_properties: RunProperties = field(default_factory=RunProperties)
    paragraph_properties: ParagraphProperties = field(
        default_factory=ParagraphProperties
    )


def _w_attr(attrs: Mapping[str, str], local: str) -> str | None:
    return attrs.get(clark(W_NS, local))


def _int_val(attrs: Mapping[str, str]) -> int:
    """Read w:val as an int; missing or malformed values give UNKNOWN_INT."""
    raw = _w_attr(attrs, "val")
    if raw is not None:
        try:
            return int(raw)
        except ValueError:
            pass
    return UNKNOWN_INT


def _toggle_val(attrs: Mapping[str, str]) -> bool:
    raw = _w_attr(attrs, "val")
    return raw is None or raw.strip().lower() not in _FALSE_VALUES


class BodyXmlHandler:
    """Translate body-part XML events into BodyContentsSink calls.

    sink: receiver of content events.
    relationships: relationship id → target (hyperlink URL, media path).
    config: HandlerConfig; only skip_fallback is read here.
    """

    def __init__(
        self,
        sink: BodyContentsSink,
        relationships: Mapping[str, str] | None = None,
        config: HandlerConfig | None = None,
    ) -> None:
        self._sink = sink
        self._relationships: Mapping[str, str] = relationships or {}
        self._config = config or DEFAULT_CONFIG
        self._state = HandlerState()

        self._start_handlers: dict[BodyTag, Callable[[Mapping[str, str]], None]] = {
            BodyTag.RPR: self._start_rpr,
            BodyTag.R: self._start_run,
            BodyTag.T: self._start_text,
            BodyTag.TAB: self._start_tab,
            BodyTag.P: self._start_paragraph_element,
            BodyTag.B: self._start_bold,
            BodyTag.TC: lambda attrs: self._sink.start_table_cell(),
            BodyTag.P_STYLE: self._start_paragraph_style,
            BodyTag.I: self._start_italic,
            BodyTag.TR: lambda attrs: self._sink.start_table_row(),
            BodyTag.NUM_PR: self._start_num_pr,
            BodyTag.ILVL: self._start_ilvl,
            BodyTag.NUM_ID: self._start_num_id,
            BodyTag.BR: self._start_line_break,
            BodyTag.BOOKMARK_START: self._start_bookmark,
            BodyTag.BOOKMARK_END: self._start_bookmark_end,
            BodyTag.HYPERLINK: self._start_hyperlink,
            BodyTag.TBL: lambda attrs: self._sink.start_table(),
            BodyTag.BLIP: self._start_blip,
            BodyTag.C_NV_PR: self._start_c_nv_pr,
            BodyTag.PIC: self._start_pic,
            BodyTag.FOOTNOTE_REFERENCE: self._start_footnote_reference,
            BodyTag.IMAGEDATA: self._start_imagedata,
            BodyTag.DEL_TEXT: self._start_del_text,
            BodyTag.OLE_OBJECT: self._start_ole_object,
            BodyTag.CR: self._start_line_break,
            BodyTag.ENDNOTE_REFERENCE: self._start_endnote_reference,
            BodyTag.PPR: self._start_ppr,
        }
        for tag, edit_type in _EDIT_TAGS.items():
            self._start_handlers[tag] = partial(self._start_edit, edit_type)
        self._end_handlers: dict[BodyTag, Callable[[], None]] = {
            BodyTag.PIC: self._end_pic,
            BodyTag.RPR: self._end_rpr,
            BodyTag.R: self._end_run,
            BodyTag.T: self._end_text,
            BodyTag.PPR: self._end_ppr,
            BodyTag.P: self._end_paragraph_element,
            BodyTag.TC: self._sink.end_table_cell,
            BodyTag.TR: self._sink.end_table_row,
            BodyTag.TBL: self._sink.end_table,
            BodyTag.HYPERLINK: self._sink.hyperlink_end,
            BodyTag.DEL_TEXT: self._end_del_text,
            BodyTag.NUM_PR: self._end_num_pr,
            BodyTag.INS: self._end_edit,
            BodyTag.DEL: self._end_edit,
            BodyTag.MOVE_TO: self._end_edit,
            BodyTag.MOVE_FROM: self._end_edit,
            BodyTag.PICT: self._flush_picture,
        }

    # ── Introspection ──────────────────────────────────────────────────────

    @property
    def edit_type(self) -> EditType:
        return self._state.edit_type

    @property
    def in_text(self) -> bool:
        """True while a <w:t> element is open."""
        return self._state.in_t

    @property
    def alternate_content_active(self) -> bool:
        """True while events are being skipped inside mc:Choice/mc:Fallback."""
        state = self._state
        if state.choice_depth > 0:
            return True
        return self._config.skip_fallback and state.fallback_depth > 0

    # ── XML event entry points ─────────────────────────────────────────────

    def start_element(
        self, uri: str | None, local_name: str, attrs: Mapping[str, str]
    ) -> None:
        state = self._state
        if uri == MC_NS:
            if local_name == CHOICE:
                state.choice_depth += 1
            elif local_name == FALLBACK:
                state.fallback_depth += 1

        if self.alternate_content_active:
            return

        if state.last_start_was_p and local_name != BodyTag.PPR.value:
            self._sink.start_paragraph(state.paragraph_properties.model_copy())
        state.last_start_was_p = False

        tag = _TAGS_BY_NAME.get(local_name)
        if tag is None:
            return
        handler = self._start_handlers.get(tag)
        if handler is not None:
            handler(attrs)

    def end_element(self, uri: str | None, local_name: str) -> None:
        if uri == MC_NS and local_name in (CHOICE, FALLBACK):
            self._close_alternate_content(local_name)
            return

        if self.alternate_content_active:
            return

        tag = _TAGS_BY_NAME.get(local_name)
        if tag is None:
            return
        handler = self._end_handlers.get(tag)
        if handler is not None:
            handler()

    def characters(self, text: str) -> None:
        state = self._state
        if self.alternate_content_active:
            return
        if state.edit_type is EditType.MOVE_FROM and state.in_t:
            if self._sink.include_move_from_text():
                state.run_buffer.append(text)
        elif state.in_t:
            state.run_buffer.append(text)
        elif (
            state.edit_type is EditType.DELETE
            and self._sink.include_deleted_text()
        ):
            state.run_buffer.append(text)

    def ignorable_whitespace(self, text: str) -> None:
        state = self._state
        if self.alternate_content_active:
            return
        if state.in_t:
            state.run_buffer.append(text)
        elif state.in_del_text and self._sink.include_deleted_text():
            state.run_buffer.append(text)

    # ── Alternate content ──────────────────────────────────────────────────

    def _close_alternate_content(self, local_name: str) -> None:
        state = self._state
        if local_name == CHOICE:
            if state.choice_depth > 0:
                state.choice_depth -= 1
            else:
                logger.debug("Unbalanced </mc:Choice> ignored")
        elif state.fallback_depth > 0:
            state.fallback_depth -= 1
        else:
            logger.debug("Unbalanced </mc:Fallback> ignored")

    # ── Runs and text ──────────────────────────────────────────────────────

    def _start_rpr(self, attrs: Mapping[str, str]) -> None:
        self._state.in_rpr = True

    def _end_rpr(self) -> None:
        self._state.in_rpr = False

    def _start_run(self, attrs: Mapping[str, str]) -> None:
        if self._state.in_run:
            logger.debug("<w:r> opened inside an open run")
        self._state.in_run = True

    def _end_run(self) -> None:
        state = self._state
        self._sink.run(state.run_properties.model_copy(), "".join(state.run_buffer))
        state.in_run = False
        state.run_buffer.clear()
        # Only the toggles are cleared; other fields carry over to the next run
        state.run_properties.bold = False
        state.run_properties.italic = False

    def _start_text(self, attrs: Mapping[str, str]) -> None:
        self._state.in_t = True

    def _end_text(self) -> None:
        self._state.in_t = False

    def _start_tab(self, attrs: Mapping[str, str]) -> None:
        # <w:tabs><w:tab/></w:tabs> inside pPr defines tab stops, not content
        if not self._state.in_ppr:
            self._state.run_buffer.append(TAB_CHAR)

    def _start_line_break(self, attrs: Mapping[str, str]) -> None:
        self._state.run_buffer.append(NEWLINE)

    def _start_bold(self, attrs: Mapping[str, str]) -> None:
        state = self._state
        if state.in_run and state.in_rpr:
            state.run_properties.bold = _toggle_val(attrs)

    def _start_italic(self, attrs: Mapping[str, str]) -> None:
        # rPr also appears under pPr (paragraph mark); only run-level counts
        state = self._state
        if state.in_run and state.in_rpr:
            state.run_properties.italic = _toggle_val(attrs)

    # ── Paragraphs ─────────────────────────────────────────────────────────

    def _start_paragraph_element(self, attrs: Mapping[str, str]) -> None:
        self._state.last_start_was_p = True

    def _end_paragraph_element(self) -> None:
        state = self._state
        self._sink.end_paragraph()
        state.paragraph_properties.reset()
        state.last_start_was_p = False

    def _start_ppr(self, attrs: Mapping[str, str]) -> None:
        self._state.in_ppr = True

    def _end_ppr(self) -> None:
        state = self._state
        state.in_ppr = False
        self._sink.start_paragraph(state.paragraph_properties.model_copy())
        state.paragraph_properties.reset()

    def _start_paragraph_style(self, attrs: Mapping[str, str]) -> None:
        if self._state.in_ppr:
            self._state.paragraph_properties.style_id = _w_attr(attrs, "val")

    def _start_num_pr(self, attrs: Mapping[str, str]) -> None:
        self._state.in_num_pr = True

    def _end_num_pr(self) -> None:
        self._state.in_num_pr = False

    def _start_ilvl(self, attrs: Mapping[str, str]) -> None:
        state = self._state
        if state.in_ppr and state.in_num_pr:
            state.paragraph_properties.ilvl = _int_val(attrs)

    def _start_num_id(self, attrs: Mapping[str, str]) -> None:
        state = self._state
        if state.in_ppr and state.in_num_pr:
            state.paragraph_properties.num_id = _int_val(attrs)

    # ── Bookmarks, hyperlinks, notes ───────────────────────────────────────

    def _start_bookmark(self, attrs: Mapping[str, str]) -> None:
        self._sink.start_bookmark(_w_attr(attrs, "id"), _w_attr(attrs, "name"))

    def _start_bookmark_end(self, attrs: Mapping[str, str]) -> None:
        self._sink.end_bookmark(_w_attr(attrs, "id"))

    def _start_hyperlink(self, attrs: Mapping[str, str]) -> None:
        rel_id = attrs.get(clark(R_NS, "id"))
        if rel_id is not None:
            self._sink.hyperlink_start(self._relationships.get(rel_id))
            return
        anchor = _w_attr(attrs, "anchor")
        if anchor is not None:
            anchor = "#" + anchor
        self._sink.hyperlink_start(anchor)

    def _start_footnote_reference(self, attrs: Mapping[str, str]) -> None:
        self._sink.footnote_reference(_w_attr(attrs, "id"))

    def _start_endnote_reference(self, attrs: Mapping[str, str]) -> None:
        self._sink.endnote_reference(_w_attr(attrs, "id"))

    # ── Tracked changes ────────────────────────────────────────────────────

    def _start_edit(self, edit_type: EditType, attrs: Mapping[str, str]) -> None:
        # Spans do not nest: a new span simply overwrites the current kind
        editor = _w_attr(attrs, "author")
        date = parse_edit_date(_w_attr(attrs, "date"))
        self._sink.start_edited_section(editor, date, edit_type)
        self._state.edit_type = edit_type

    def _end_edit(self) -> None:
        self._state.edit_type = EditType.NONE
        self._sink.end_edited_section()

    def _start_del_text(self, attrs: Mapping[str, str]) -> None:
        self._state.in_del_text = True

    def _end_del_text(self) -> None:
        self._state.in_del_text = False

    # ── Pictures and embedded objects ──────────────────────────────────────

    def _start_blip(self, attrs: Mapping[str, str]) -> None:
        self._state.pic_rel_id = attrs.get(clark(R_NS, "embed"))

    def _start_c_nv_pr(self, attrs: Mapping[str, str]) -> None:
        self._state.pic_description = attrs.get("descr")

    def _start_pic(self, attrs: Mapping[str, str]) -> None:
        self._state.in_pic = True

    def _end_pic(self) -> None:
        self._flush_picture()

    def _start_imagedata(self, attrs: Mapping[str, str]) -> None:
        self._state.pic_rel_id = attrs.get(clark(R_NS, "id"))
        self._state.pic_description = attrs.get(clark(O_NS, "title"))

    def _flush_picture(self) -> None:
        state = self._state
        pic_file_name = None
        if state.pic_rel_id is not None:
            pic_file_name = self._relationships.get(state.pic_rel_id)
        self._sink.embedded_pic_ref(pic_file_name, state.pic_description)
        state.pic_rel_id = None
        state.pic_description = None
        state.in_pic = False

    def _start_ole_object(self, attrs: Mapping[str, str]) -> None:
        ole_type = None
        rel_id = None
        for name, value in attrs.items():
            uri, local = split_clark(name)
            if local == "Type":
                ole_type = value
            elif uri == R_NS and local == "id":
                rel_id = value
        if ole_type == "Embed":
            self._sink.embedded_ole_ref(rel_id)
        else:
            logger.debug("Skipping OLE object of type %r", ole_type)
