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

from __future__ import annotations

import enum
from collections.abc import Callable, Iterable
from typing import TYPE_CHECKING, Any, TypeAlias, TypeVar

if TYPE_CHECKING:
    from types import SimpleNamespace

    from _vulcanize.fragment import Fragment
    from _vulcanize.nodes import NodeBase


# node kinds


class NodeKind(enum.Enum):
    Element = enum.auto()
    Text = enum.auto()
    Comment = enum.auto()
    Document = enum.auto()


# aliases


GenericDecorated = TypeVar("GenericDecorated", bound=Callable[..., Any])
SecondOrderDecorator: TypeAlias = "Callable[[GenericDecorated], GenericDecorated]"

Filter: TypeAlias = "Callable[[NodeBase], bool]"
NodeSource: TypeAlias = "str | NodeBase"

LoaderResult: TypeAlias = "Fragment | str"
Loader: TypeAlias = "Callable[[Any, SimpleNamespace], LoaderResult]"
LoaderConstraint: TypeAlias = "Loader | Iterable[Loader] | None"


#


__all__ = (
    "Filter",
    "GenericDecorated",
    "Loader",
    "LoaderConstraint",
    "LoaderResult",
    NodeKind.__name__,
    "NodeSource",
    "SecondOrderDecorator",
)
