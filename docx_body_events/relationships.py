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

"""Relationship (.rels) parsing into the id → target lookup a body part needs."""

from __future__ import annotations

import posixpath

from lxml import etree

from docx_body_events.errors import MalformedPartError
from docx_body_events.xml_utils import NAMESPACES, SECURE_PARSER

PR = NAMESPACES["pr"]

OFFICE_DOCUMENT_TYPE = (
    "http://schemas.openxmlformats.org/officeDocument/2006/relationships/"
    "officeDocument"
)


def rels_name_for(part_name: str) -> str:
    """Return the .rels part name for *part_name*.

    word/document.xml → word/_rels/document.xml.rels
    """
    folder, name = posixpath.split(part_name)
    return posixpath.join(folder, "_rels", f"{name}.rels")


def _relationship_elements(
    rels_xml: bytes, part_name: str
) -> list[etree._Element]:
    try:
        root = etree.fromstring(rels_xml, SECURE_PARSER)
    except etree.XMLSyntaxError as exc:
        raise MalformedPartError(part_name, f"malformed XML: {exc}") from exc
    return list(root.iter(f"{{{PR}}}Relationship"))


def parse_relationships(
    rels_xml: bytes, part_name: str = "<rels>"
) -> dict[str, str]:
    """Map every Relationship Id to its Target.

    External targets (hyperlinks) and internal ones (media/image1.png) are
    both kept exactly as written. Entries missing Id or Target are skipped.
    """
    lookup: dict[str, str] = {}
    for rel in _relationship_elements(rels_xml, part_name):
        rel_id = rel.get("Id")
        target = rel.get("Target")
        if rel_id and target is not None:
            lookup[rel_id] = target
    return lookup


def find_target_by_type(
    rels_xml: bytes, rel_type: str, part_name: str = "<rels>"
) -> str | None:
    """Return the Target of the first relationship of *rel_type*, if any."""
    for rel in _relationship_elements(rels_xml, part_name):
        if rel.get("Type") == rel_type:
            return rel.get("Target")
    return None
