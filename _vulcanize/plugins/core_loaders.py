# Copyright (C) 2018-'25  Frank Sachsenheim
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU Affero General Public License as published
# by the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.
#
# This program is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
# GNU Affero General Public License for more details.
#
# You should have received a copy of the GNU Affero General Public License
# along with this program.  If not, see <https://www.gnu.org/licenses/>.

"""
The ``core_loaders`` module provides a set of loaders to retrieve markup from various
data sources.
"""

from __future__ import annotations

from contextlib import suppress
from io import IOBase, UnsupportedOperation
from pathlib import Path
from typing import TYPE_CHECKING, Any

from _vulcanize.builder import parse_fragment
from _vulcanize.plugins import plugin_manager

if TYPE_CHECKING:
    from types import SimpleNamespace

    from _vulcanize.typing import LoaderResult


@plugin_manager.register_loader()
def path_loader(data: Any, config: SimpleNamespace) -> LoaderResult:
    """
    This loader loads from a file that is pointed at with a :class:`pathlib.Path`
    instance. The file's absolute path is bound to ``source_path`` on the ``config``
    namespace.
    """
    if isinstance(data, Path):
        config.source_path = data.absolute()
        with data.open("rb") as file:
            return buffer_loader(file, config)
    return "The input value is not a pathlib.Path instance."


@plugin_manager.register_loader(after=path_loader)
def buffer_loader(data: Any, config: SimpleNamespace) -> LoaderResult:
    """
    This loader loads markup from a :term:`file-like object` that reads binary data.
    """
    if isinstance(data, IOBase):
        with suppress(UnsupportedOperation):
            data.seek(0)
        return parse_fragment(data.read(), config.parser_options, config.context)
    return "The input value is no buffer object."


@plugin_manager.register_loader()
def text_loader(data: Any, config: SimpleNamespace) -> LoaderResult:
    """
    Parses markup that is given as string or byte sequence.
    """
    if isinstance(data, (bytes, str)):
        return parse_fragment(data, config.parser_options, config.context)
    return "The input value is not a byte sequence or a string."


__all__ = (
    buffer_loader.__name__,
    path_loader.__name__,
    text_loader.__name__,
)
