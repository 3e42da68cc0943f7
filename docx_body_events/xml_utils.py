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

"""OOXML namespaces, Clark-name helpers and the hardened parser factory."""

from __future__ import annotations

from lxml import etree

# OOXML namespaces (canonical source)
NAMESPACES = {
    "w": "http://schemas.openxmlformats.org/wordprocessingml/2006/main",
    "r": "http://schemas.openxmlformats.org/officeDocument/2006/relationships",
    "wp": "http://schemas.openxmlformats.org/drawingml/2006/wordprocessingDrawing",
    "a": "http://schemas.openxmlformats.org/drawingml/2006/main",
    "pic": "http://schemas.openxmlformats.org/drawingml/2006/picture",
    "mc": "http://schemas.openxmlformats.org/markup-compatibility/2006",
    "o": "urn:schemas-microsoft-com:office:office",
    "v": "urn:schemas-microsoft-com:vml",
    "pr": "http://schemas.openxmlformats.org/package/2006/relationships",
}

W_NS = NAMESPACES["w"]
R_NS = NAMESPACES["r"]
MC_NS = NAMESPACES["mc"]
O_NS = NAMESPACES["o"]


def make_secure_parser(**kwargs) -> etree.XMLParser:
    """Build an XMLParser that never touches the network or expands entities.

    Extra keyword arguments (e.g. ``target=``) are passed straight through.
    """
    return etree.XMLParser(
        resolve_entities=False,
        no_network=True,
        load_dtd=False,
        huge_tree=False,
        **kwargs,
    )


SECURE_PARSER = make_secure_parser()


def split_clark(name: str) -> tuple[str, str]:
    """Split a Clark-notation name ``{uri}local`` into ``(uri, local)``.

    Names without a namespace return an empty uri.
    """
    if name.startswith("{"):
        uri, local = name[1:].split("}", 1)
        return uri, local
    return "", name


def clark(uri: str, local: str) -> str:
    """Build a Clark-notation name; an empty uri yields the bare local name."""
    if not uri:
        return local
    return f"{{{uri}}}{local}"
