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

"""Word (.docx) archive access: body parts and their relationships.

Body parts are the main document plus any headers, footers, footnotes and
endnotes. translate_part() streams one of them straight from the ZIP into a
BodyXmlHandler.
"""

from __future__ import annotations

import re
import zipfile
from io import BytesIO

from docx_body_events.body_handler import BodyContentsSink, BodyXmlHandler
from docx_body_events.config import DEFAULT_CONFIG, HandlerConfig
from docx_body_events.errors import InvalidArchiveError, MissingPartError
from docx_body_events.log import get_logger
from docx_body_events.relationships import (
    OFFICE_DOCUMENT_TYPE,
    find_target_by_type,
    parse_relationships,
    rels_name_for,
)
from docx_body_events.xml_events import feed_xml

logger = get_logger(__name__)

DEFAULT_DOCUMENT_PART = "word/document.xml"
_PACKAGE_RELS = "_rels/.rels"

# Ordering of secondary body parts after the main document
_SECONDARY_PARTS = [
    re.compile(r"^word/header\d*\.xml$"),
    re.compile(r"^word/footer\d*\.xml$"),
    re.compile(r"^word/footnotes\.xml$"),
    re.compile(r"^word/endnotes\.xml$"),
]


def _open_archive(file_bytes: bytes) -> zipfile.ZipFile:
    try:
        return zipfile.ZipFile(BytesIO(file_bytes))
    except zipfile.BadZipFile as exc:
        raise InvalidArchiveError(
            "file_bytes is not a readable .docx archive"
        ) from exc


def _main_document_name(zf: zipfile.ZipFile) -> str:
    """Find the main document via the package relationships."""
    try:
        rels_xml = zf.read(_PACKAGE_RELS)
    except KeyError:
        return DEFAULT_DOCUMENT_PART
    target = find_target_by_type(rels_xml, OFFICE_DOCUMENT_TYPE, _PACKAGE_RELS)
    if not target:
        return DEFAULT_DOCUMENT_PART
    return target.lstrip("/")


def main_document_part(file_bytes: bytes) -> str:
    """Return the name of the main document part, e.g. word/document.xml."""
    with _open_archive(file_bytes) as zf:
        return _main_document_name(zf)


def list_body_parts(file_bytes: bytes) -> list[str]:
    """Return the body parts present in the archive, main document first."""
    with _open_archive(file_bytes) as zf:
        names = set(zf.namelist())
        main = _main_document_name(zf)

    parts: list[str] = [main] if main in names else []
    for pattern in _SECONDARY_PARTS:
        parts.extend(sorted(n for n in names if pattern.match(n)))
    return parts


def read_part(file_bytes: bytes, part_name: str) -> bytes:
    """Return the raw XML of *part_name*. Raises MissingPartError if absent."""
    with _open_archive(file_bytes) as zf:
        try:
            return zf.read(part_name)
        except KeyError:
            raise MissingPartError(part_name) from None


def read_relationships(file_bytes: bytes, part_name: str) -> dict[str, str]:
    """Return the relationship lookup for *part_name* (empty if it has none)."""
    rels_name = rels_name_for(part_name)
    with _open_archive(file_bytes) as zf:
        try:
            rels_xml = zf.read(rels_name)
        except KeyError:
            logger.debug("No relationships part for %s", part_name)
            return {}
    return parse_relationships(rels_xml, rels_name)


def translate_part(
    file_bytes: bytes,
    sink: BodyContentsSink,
    part_name: str | None = None,
    config: HandlerConfig | None = None,
) -> BodyXmlHandler:
    """Stream one body part of a .docx into *sink*.

    part_name defaults to the main document. Relationships are loaded from
    the part's .rels so hyperlinks and pictures resolve to their targets.
    """
    config = config or DEFAULT_CONFIG
    if part_name is None:
        part_name = main_document_part(file_bytes)
    relationships = read_relationships(file_bytes, part_name)
    handler = BodyXmlHandler(sink, relationships, config)
    with _open_archive(file_bytes) as zf:
        try:
            stream = zf.open(part_name)
        except KeyError:
            raise MissingPartError(part_name, list_body_parts(file_bytes)) from None
        with stream:
            feed_xml(stream, handler, config.chunk_size, part_name)
    return handler
