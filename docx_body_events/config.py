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

"""Handler and driver settings."""

from __future__ import annotations

from pydantic import BaseModel, Field

# Bytes handed to lxml per feed() call
DEFAULT_CHUNK_SIZE = 64 * 1024


class HandlerConfig(BaseModel):
    """Settings for one translation session.

    skip_fallback: when True, both mc:Choice and mc:Fallback content is
        skipped. When False only mc:Choice is skipped and the fallback
        rendering is consumed.
    chunk_size: bytes fed to the XML parser per call.
    include_deleted_text / include_move_from_text: initial policies for the
        bundled sinks.
    """
    skip_fallback: bool = True
    chunk_size: int = Field(default=DEFAULT_CHUNK_SIZE, gt=0)
    include_deleted_text: bool = False
    include_move_from_text: bool = False


DEFAULT_CONFIG = HandlerConfig()
