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

"""Drive a BodyXmlHandler from raw part XML using lxml's parser-target API.

lxml does the tokenizing; the target below turns its start/end/data
callbacks into handler events. Input is fed incrementally, so a part read
from a ZIP stream is never held in memory as a tree.
"""

from __future__ import annotations

from typing import BinaryIO, Mapping, Union

from lxml import etree

from docx_body_events.body_handler import BodyContentsSink, BodyXmlHandler
from docx_body_events.config import DEFAULT_CONFIG, HandlerConfig
from docx_body_events.errors import MalformedPartError
from docx_body_events.log import get_logger
from docx_body_events.xml_utils import make_secure_parser, split_clark

logger = get_logger(__name__)

XmlSource = Union[bytes, str, BinaryIO]


class HandlerTarget:
    """lxml parser target forwarding events to a BodyXmlHandler.

    Whitespace-only text between elements is reported as ignorable
    whitespace; text inside <w:t> and all other text as characters.
    close() returns the number of elements seen.
    """

    def __init__(self, handler: BodyXmlHandler) -> None:
        self._handler = handler
        self.element_count = 0

    def start(self, tag: str, attrib: Mapping[str, str]) -> None:
        self.element_count += 1
        uri, local = split_clark(tag)
        self._handler.start_element(uri or None, local, dict(attrib))

    def end(self, tag: str) -> None:
        uri, local = split_clark(tag)
        self._handler.end_element(uri or None, local)

    def data(self, data: str) -> None:
        # Inside <w:t> whitespace is content and goes through the text policies
        if data.isspace() and not self._handler.in_text:
            self._handler.ignorable_whitespace(data)
        else:
            self._handler.characters(data)

    def close(self) -> int:
        return self.element_count


def feed_xml(
    xml: XmlSource,
    handler: BodyXmlHandler,
    chunk_size: int | None = None,
    part_name: str = "<memory>",
) -> int:
    """Push *xml* through lxml into *handler*.

    xml: bytes, str, or a binary file-like object.
    Returns the number of elements seen. Raises MalformedPartError when lxml
    rejects the input.
    """
    size = chunk_size or DEFAULT_CONFIG.chunk_size
    parser = make_secure_parser(target=HandlerTarget(handler))

    try:
        if isinstance(xml, (bytes, str)):
            data = xml.encode("utf-8") if isinstance(xml, str) else xml
            for offset in range(0, len(data), size):
                parser.feed(data[offset:offset + size])
        else:
            while True:
                chunk = xml.read(size)
                if not chunk:
                    break
                parser.feed(chunk)
        count = parser.close()
    except etree.XMLSyntaxError as exc:
        logger.warning("Malformed XML in %s: %s", part_name, exc)
        raise MalformedPartError(part_name, f"malformed XML: {exc}") from exc

    logger.debug("Translated %s: %d elements", part_name, count)
    return count


def parse_part(
    xml: XmlSource,
    sink: BodyContentsSink,
    relationships: Mapping[str, str] | None = None,
    config: HandlerConfig | None = None,
    part_name: str = "<memory>",
) -> BodyXmlHandler:
    """Translate one body part into *sink* events and return the handler."""
    config = config or DEFAULT_CONFIG
    handler = BodyXmlHandler(sink, relationships, config)
    feed_xml(xml, handler, config.chunk_size, part_name)
    return handler
