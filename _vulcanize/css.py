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
Compiles CSS selectors as parsed by :mod:`cssselect` into node filters.

>>> from _vulcanize.nodes import TagNode
>>> node = TagNode("polymer-element", {"name": "x-foo", "noscript": ""})
>>> css_filter("polymer-element[noscript]")(node)
True
>>> css_filter("polymer-element:not([name])")(node)
False
"""

from __future__ import annotations

from functools import lru_cache
from typing import TYPE_CHECKING, Final, Optional

from cssselect import SelectorSyntaxError, parse
from cssselect.parser import (
    Attrib,
    Class,
    CombinedSelector,
    Element,
    Hash,
    Negation,
    Pseudo,
)

from _vulcanize.exceptions import InvalidOperation
from _vulcanize.filters import (
    all_of,
    any_of,
    has_attribute,
    has_attribute_value,
    has_tag_name,
    is_tag_node,
    is_text_node,
    not_,
)
from _vulcanize.nodes import TagNode

if TYPE_CHECKING:
    from _vulcanize.nodes import NodeBase
    from _vulcanize.typing import Filter


# constants


WHITESPACE: Final = " \t\n\r\f"


# api


@lru_cache(maxsize=64)
def css_filter(expression: str) -> Filter:
    """
    Returns a filter that matches tag nodes against a group of CSS selectors.

    :param expression: One or more comma separated selectors.
    :raises InvalidOperation: When the expression can't be parsed or uses features that
                              aren't supported.
    """
    try:
        selectors = parse(expression)
    except SelectorSyntaxError as e:
        raise InvalidOperation(f"Invalid CSS selector: {expression}") from e

    filters = []
    for selector in selectors:
        if selector.pseudo_element is not None:
            raise InvalidOperation(
                f"Pseudo-elements are not supported: ::{selector.pseudo_element}"
            )
        filters.append(_compile(selector.parsed_tree))

    if len(filters) == 1:
        return filters[0]
    return any_of(*filters)


# compilation


def _compile(tree) -> Filter:
    match tree:
        case Element(namespace=None, element=None):
            return is_tag_node
        case Element(namespace=None, element=name):
            return has_tag_name(name)
        case Hash(selector=selector, id=identifier):
            return all_of(_compile(selector), has_attribute_value("id", identifier))
        case Class(selector=selector, class_name=class_name):
            return all_of(_compile(selector), _has_token("class", class_name))
        case Attrib(namespace=None):
            return all_of(_compile(tree.selector), _compile_attribute(tree))
        case Negation(selector=selector, subselector=subselector):
            return all_of(_compile(selector), not_(_compile(subselector)))
        case Pseudo(selector=selector, ident=ident):
            return all_of(_compile(selector), _compile_pseudo_class(ident))
        case CombinedSelector(
            selector=selector, combinator=combinator, subselector=subselector
        ):
            return _compile_combination(
                _compile(selector), combinator, _compile(subselector)
            )

    raise InvalidOperation(f"Unsupported CSS selector feature: {tree!r}")


def _compile_attribute(attrib: Attrib) -> Filter:
    name = attrib.attrib.lower()
    operator = attrib.operator
    if operator == "exists":
        return has_attribute(name)

    value: str = attrib.value.value  # type: ignore

    match operator:
        case "=":
            return has_attribute_value(name, value)
        case "~=":
            return _has_token(name, value)
        case "|=":
            return _attribute_test(
                name, lambda v: v == value or v.startswith(value + "-")
            )
        case "^=":
            return _attribute_test(name, lambda v: bool(value) and v.startswith(value))
        case "$=":
            return _attribute_test(name, lambda v: bool(value) and v.endswith(value))
        case "*=":
            return _attribute_test(name, lambda v: bool(value) and value in v)
        case "!=":
            return all_of(is_tag_node, not_(has_attribute_value(name, value)))

    raise InvalidOperation(f"Unsupported attribute operator: {operator}")


def _compile_combination(left: Filter, combinator: str, right: Filter) -> Filter:
    match combinator:
        case " ":

            def is_descendant(node: NodeBase) -> bool:
                return any(True for _ in node.iterate_ancestors(left))

            return all_of(right, is_descendant)

        case ">":

            def is_child(node: NodeBase) -> bool:
                return (parent := node._parent) is not None and left(parent)

            return all_of(right, is_child)

        case "+":

            def is_adjacent_sibling(node: NodeBase) -> bool:
                sibling = _preceding_tag_sibling(node)
                return sibling is not None and left(sibling)

            return all_of(right, is_adjacent_sibling)

        case "~":

            def is_general_sibling(node: NodeBase) -> bool:
                return any(
                    True for _ in node.iterate_preceding_siblings(is_tag_node, left)
                )

            return all_of(right, is_general_sibling)

    raise InvalidOperation(f"Unsupported combinator: {combinator!r}")


def _compile_pseudo_class(ident: str) -> Filter:
    match ident.lower():
        case "first-child":
            return _is_first_child
        case "last-child":
            return _is_last_child
        case "only-child":
            return all_of(_is_first_child, _is_last_child)
        case "empty":
            return _is_empty

    raise InvalidOperation(f"Unsupported pseudo-class: :{ident}")


# filters


def _attribute_test(name, test) -> Filter:
    def attribute_test(node: NodeBase) -> bool:
        if not isinstance(node, TagNode):
            return False
        if (value := node.attributes.get(name)) is None:
            return False
        return test(value)

    return attribute_test


def _has_token(name: str, token: str) -> Filter:
    if not token or any(c in WHITESPACE for c in token):
        return any_of()
    return _attribute_test(name, lambda v: token in v.split())


def _is_empty(node: NodeBase) -> bool:
    return not any(
        True
        for _ in node.iterate_children(
            any_of(is_tag_node, all_of(is_text_node, lambda n: n.content != ""))
        )
    )


def _is_first_child(node: NodeBase) -> bool:
    return _preceding_tag_sibling(node) is None


def _is_last_child(node: NodeBase) -> bool:
    return next(node.iterate_following_siblings(is_tag_node), None) is None


def _preceding_tag_sibling(node: NodeBase) -> Optional[NodeBase]:
    return next(node.iterate_preceding_siblings(is_tag_node), None)


#


__all__ = (css_filter.__name__,)
