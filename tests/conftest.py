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

"""Shared test helpers: namespaced body XML builders, in-memory .docx
archives, and a translate() shortcut that returns the RecordingSink.
"""

from __future__ import annotations

import io
import zipfile
from typing import Mapping

import pytest

from docx_body_events.config import HandlerConfig
from docx_body_events.models import EventKind
from docx_body_events.sinks import RecordingSink
from docx_body_events.xml_events import parse_part
from docx_body_events.xml_utils import NAMESPACES

W = NAMESPACES["w"]

_NS_DECLS = " ".join(
    f'xmlns:{prefix}="{uri}"' for prefix, uri in NAMESPACES.items()
    if prefix != "pr"
)

CONTENT_TYPES = (
    '<?xml version="1.0" encoding="UTF-8" standalone="yes"?>'
    '<Types xmlns="http://schemas.openxmlformats.org/package/2006/content-types">'
    '<Default Extension="rels" '
    'ContentType="application/vnd.openxmlformats-package.relationships+xml"/>'
    '<Default Extension="xml" ContentType="application/xml"/>'
    '<Override PartName="/word/document.xml" ContentType="application/'
    'vnd.openxmlformats-officedocument.wordprocessingml.document.main+xml"/>'
    "</Types>"
)

PACKAGE_RELS = (
    '<?xml version="1.0" encoding="UTF-8" standalone="yes"?>'
    '<Relationships xmlns="http://schemas.openxmlformats.org/package/2006/relationships">'
    '<Relationship Id="rId1" '
    'Type="http://schemas.openxmlformats.org/officeDocument/2006/relationships/officeDocument" '
    'Target="word/document.xml"/>'
    "</Relationships>"
)


def make_body(*children_xml: str) -> str:
    """Wrap child XML strings in <w:document><w:body> with every namespace declared."""
    inner = "".join(children_xml)
    return (
        f"<w:document {_NS_DECLS}><w:body>{inner}</w:body></w:document>"
    )


def make_rels(targets: Mapping[str, str], external: bool = False) -> str:
    """Build a .rels part mapping Id → Target."""
    mode = ' TargetMode="External"' if external else ""
    rels = "".join(
        f'<Relationship Id="{rid}" Type="urn:test" Target="{target}"{mode}/>'
        for rid, target in targets.items()
    )
    return (
        '<Relationships xmlns="http://schemas.openxmlformats.org/package/2006/relationships">'
        f"{rels}</Relationships>"
    )


def make_docx(parts: Mapping[str, str | bytes]) -> bytes:
    """Build a .docx archive in memory.

    Content types and the package relationships are added unless *parts*
    supplies its own.
    """
    files: dict[str, str | bytes] = {
        "[Content_Types].xml": CONTENT_TYPES,
        "_rels/.rels": PACKAGE_RELS,
    }
    files.update(parts)
    buf = io.BytesIO()
    with zipfile.ZipFile(buf, "w", zipfile.ZIP_DEFLATED) as zf:
        for name, data in files.items():
            zf.writestr(name, data)
    return buf.getvalue()


def translate(
    body_xml: str,
    relationships: Mapping[str, str] | None = None,
    sink: RecordingSink | None = None,
    config: HandlerConfig | None = None,
) -> RecordingSink:
    """Run *body_xml* through the lxml driver and return the recording sink."""
    sink = sink or RecordingSink()
    parse_part(body_xml, sink, relationships, config)
    return sink


def texts(sink: RecordingSink) -> list[str]:
    """Text of every run event, in order."""
    return [e.data["text"] for e in sink.of_kind(EventKind.RUN)]


def structural_kinds(sink: RecordingSink) -> list[EventKind]:
    """Event kinds with the paragraph/table scaffolding only."""
    keep = {
        EventKind.START_TABLE, EventKind.END_TABLE,
        EventKind.START_TABLE_ROW, EventKind.END_TABLE_ROW,
        EventKind.START_TABLE_CELL, EventKind.END_TABLE_CELL,
        EventKind.END_PARAGRAPH,
    }
    return [k for k in sink.kinds() if k in keep]


@pytest.fixture
def sink() -> RecordingSink:
    return RecordingSink()
