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
A :class:`Fragment` is a handle over a run of sibling nodes. These are either the
freshly parsed top-level nodes of a document or of a document fragment or the members
of such run that were spliced into a tree. The tree manipulations that the import
resolution and the cleanup transformations rely on are implemented here:

>>> from _vulcanize.nodes import TagNode
>>> fragment = Fragment.from_nodes((TagNode("a"), TagNode("b")))
>>> fragment.replace_with_fragment(
...     fragment.first_node, Fragment.from_nodes((TagNode("x"), TagNode("y")))
... )
>>> str(fragment)
'<x></x><y></y><b></b>'
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from typing import TYPE_CHECKING, Optional

from _vulcanize.css import css_filter
from _vulcanize.exceptions import InvalidOperation
from _vulcanize.nodes import NodeBase, _unlink
from _vulcanize.serializer import serialize

if TYPE_CHECKING:
    from _vulcanize.typing import Filter


class Fragment:
    """
    :param first_node: The first member of the run.
    :param last_node: The last member of the run, following the
                      :attr:`NodeBase.next_sibling` references from ``first_node``
                      must lead to it.

    Both are :obj:`None` for an empty fragment.
    """

    __slots__ = ("first_node", "last_node")

    def __init__(
        self,
        first_node: Optional[NodeBase] = None,
        last_node: Optional[NodeBase] = None,
    ):
        if (first_node is None) is not (last_node is None):
            raise ValueError("Either both or none of the ends must be given.")
        self.first_node = first_node
        self.last_node = last_node

    def __bool__(self) -> bool:
        return self.first_node is not None

    def __contains__(self, node: NodeBase) -> bool:
        return any(n is node for n in self)

    def __iter__(self) -> Iterator[NodeBase]:
        node = self.first_node
        last_node = self.last_node
        while node is not None:
            following = node._next_sibling
            yield node
            if node is last_node:
                return
            node = following

    def __len__(self) -> int:
        return sum(1 for _ in self)

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__}({list(self)}) [{hex(id(self))}]>"

    def __str__(self) -> str:
        return serialize(self)

    @classmethod
    def from_node(cls, node: NodeBase) -> Fragment:
        """Wraps a single node."""
        return cls(node, node)

    @classmethod
    def from_nodes(cls, nodes: Iterable[NodeBase]) -> Fragment:
        """
        Links detached nodes to a run of siblings and returns a fragment over them.

        :raises InvalidOperation: If a node isn't detached.
        """
        result = cls()
        for node in nodes:
            if not node.is_detached:
                raise InvalidOperation("Only detached nodes can form a new fragment.")
            if (last_node := result.last_node) is None:
                result.first_node = node
            else:
                last_node._next_sibling = node
                node._previous_sibling = last_node
            result.last_node = node
        return result

    def css_select(self, expression: str) -> list[NodeBase]:
        """
        Returns the nodes that match a CSS selector in document order. See
        :func:`_vulcanize.css.css_filter` for the supported selector syntax.
        """
        return self.search(css_filter(expression))

    def remove(self, node: NodeBase):
        """
        Removes a node from the tree or the fragment's top-level members that it is part
        of. Afterwards the node is fully detached.
        """
        if self.first_node is node:
            self.first_node = node._next_sibling
        if self.last_node is node:
            self.last_node = node._previous_sibling
        _unlink(node)

    def replace_with_fragment(self, node: NodeBase, fragment: Fragment):
        """
        Replaces a node with the members of another, detached fragment. If that fragment
        is empty, this is equivalent to :meth:`remove`. The other fragment keeps
        referring its members which are then part of this fragment's tree.

        :param node: A node in this fragment's tree or one of its top-level members.
        :param fragment: A fragment whose members are not yet part of any tree.
        :raises InvalidOperation: If the other fragment isn't detached.
        """
        first_node, last_node = fragment.first_node, fragment.last_node
        if first_node is None or last_node is None:
            self.remove(node)
            return

        if (
            first_node._parent is not None
            or first_node._previous_sibling is not None
            or last_node._next_sibling is not None
        ):
            raise InvalidOperation("Only a detached fragment can be inserted.")

        parent = node._parent
        for member in fragment:
            member._parent = parent

        previous, following = node._previous_sibling, node._next_sibling
        first_node._previous_sibling = previous
        last_node._next_sibling = following
        if previous is not None:
            previous._next_sibling = first_node
        if following is not None:
            following._previous_sibling = last_node

        if parent is not None:
            if parent._first_child is node:  # type: ignore
                parent._first_child = first_node  # type: ignore
            if parent._last_child is node:  # type: ignore
                parent._last_child = last_node  # type: ignore

        if self.first_node is node:
            self.first_node = first_node
        if self.last_node is node:
            self.last_node = last_node

        node._parent = node._previous_sibling = node._next_sibling = None

    def replace_with_node(self, node: NodeBase, new_node: NodeBase):
        """Replaces a node with another, detached one."""
        if not new_node.is_detached:
            raise InvalidOperation("Only a detached node can be inserted.")
        self.replace_with_fragment(node, Fragment.from_node(new_node))

    def search(self, *filter: Filter) -> list[NodeBase]:
        """
        Returns all nodes, the top-level members and their descendants, that match all
        given filters in document order.
        """
        result = []
        for node in self:
            if all(f(node) for f in filter):
                result.append(node)
            result.extend(node.iterate_descendants(*filter))
        return result


__all__ = (Fragment.__name__,)
