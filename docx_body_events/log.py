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

"""Central logging configuration for the package."""

from __future__ import annotations

import logging

_DEFAULT_LEVEL = logging.INFO
_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def get_logger(name: str | None = None) -> logging.Logger:
    """Return a module-level logger.

    Library modules never configure the root logger; configure_logging()
    does that for the server entry point.
    """
    return logging.getLogger(name)


def configure_logging(level: int | str = _DEFAULT_LEVEL) -> None:
    """Install a basic stderr handler if the root logger has none yet."""
    if not logging.getLogger().handlers:
        logging.basicConfig(level=level, format=_FORMAT)
    else:
        logging.getLogger().setLevel(level)
