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

from collections.abc import Iterable
from io import StringIO, TextIOWrapper
from typing import TYPE_CHECKING, BinaryIO, Final, TextIO

from _vulcanize.exceptions import InvalidCodePath
from _vulcanize.typing import NodeKind

if TYPE_CHECKING:
    from _vulcanize.fragment import Fragment
    from _vulcanize.nodes import NodeBase, TagNode


# constants


CTRL_CHAR_ENTITY_NAME_MAPPING: Final = (
    ("&", "amp"),
    (">", "gt"),
    ("<", "lt"),
    ('"', "quot"),
)
CCE_TABLE_FOR_ATTRIBUTES: Final = str.maketrans(
    {ord(k): f"&{v};" for k, v in CTRL_CHAR_ENTITY_NAME_MAPPING}
)
CCE_TABLE_FOR_TEXT: Final = str.maketrans(
    {ord(k): f"&{v};" for k, v in CTRL_CHAR_ENTITY_NAME_MAPPING if k != '"'}
)

DEFAULT_DOCTYPE: Final = "<!DOCTYPE html>"

RAW_TEXT_ELEMENTS: Final = frozenset(
    ("iframe", "noembed", "noframes", "plaintext", "script", "style", "xmp")
)
VOID_ELEMENTS: Final = frozenset(
    (
        "area",
        "base",
        "basefont",
        "bgsound",
        "br",
        "col",
        "embed",
        "frame",
        "hr",
        "img",
        "input",
        "keygen",
        "link",
        "meta",
        "param",
        "source",
        "track",
        "wbr",
    )
)


# api


def render_document(fragment: Fragment) -> str:
    """
    Serializes a fragment as complete document. If the fragment doesn't start with a
    document node that bears a document type declaration, ``<!DOCTYPE html>`` is
    prepended.
    """
    first_node = fragment.first_node
    if (
        first_node is not None
        and first_node.kind is NodeKind.Document
        and first_node.doctype  # type: ignore
    ):
        return serialize(fragment)
    return DEFAULT_DOCTYPE + serialize(fragment)


def serialize(target: NodeBase | Fragment) -> str:
    """Returns the HTML serialization of a node or all members of a fragment."""
    serializer = Serializer(_StringWriter())
    serializer.serialize(target)
    return serializer.writer.result


def write(target: NodeBase | Fragment, buffer: BinaryIO, encoding: str = "utf-8"):
    """
    Writes the HTML serialization of a node or fragment to a :term:`file-like object`
    that accepts binary data.
    """
    text_buffer = TextIOWrapper(buffer, encoding=encoding)
    serializer = Serializer(_SerializationWriter(text_buffer))
    serializer.serialize(target)
    text_buffer.flush()
    text_buffer.detach()


# serializer


class Serializer:
    __slots__ = ("writer",)

    def __init__(self, writer: _SerializationWriter):
        self.writer: Final = writer

    def serialize(self, target: NodeBase | Fragment):
        if isinstance(target, Iterable):
            for node in target:
                self.serialize_node(node)
        else:
            self.serialize_node(target)

    def serialize_node(self, node: NodeBase):
        match node.kind:
            case NodeKind.Element:
                self._serialize_tag(node)  # type: ignore
            case NodeKind.Text:
                self._serialize_text(node)
            case NodeKind.Comment:
                self.writer(f"<!--{node.content}-->")  # type: ignore
            case NodeKind.Document:
                if doctype := node.doctype:  # type: ignore
                    self.writer(doctype)
                self._serialize_child_nodes(node)
            case _:  # pragma: no cover
                raise InvalidCodePath

    def _serialize_attributes(self, attributes: dict[str, str]):
        for name, value in attributes.items():
            self.writer(f' {name}="{value.translate(CCE_TABLE_FOR_ATTRIBUTES)}"')

    def _serialize_child_nodes(self, node: NodeBase):
        for child_node in node.iterate_children():
            self.serialize_node(child_node)

    def _serialize_tag(self, node: TagNode):
        local_name = node.local_name
        self.writer(f"<{local_name}")
        self._serialize_attributes(node.attributes)
        self.writer(">")

        if local_name in VOID_ELEMENTS and node.first_child is None:
            return

        self._serialize_child_nodes(node)
        self.writer(f"</{local_name}>")

    def _serialize_text(self, node: NodeBase):
        content: str = node.content  # type: ignore
        parent = node._parent
        if (
            parent is not None
            and parent.kind is NodeKind.Element
            and parent.local_name in RAW_TEXT_ELEMENTS  # type: ignore
        ):
            self.writer(content)
        else:
            self.writer(content.translate(CCE_TABLE_FOR_TEXT))


# writer


class _SerializationWriter:
    __slots__ = ("buffer",)

    def __init__(self, buffer: TextIO):
        self.buffer: Final = buffer

    def __call__(self, data: str):
        self.buffer.write(data)

    @property
    def result(self) -> str:
        assert isinstance(self.buffer, StringIO)
        return self.buffer.getvalue()


class _StringWriter(_SerializationWriter):
    __slots__ = ()

    def __init__(self):
        super().__init__(StringIO())


#


__all__ = (
    Serializer.__name__,
    render_document.__name__,
    serialize.__name__,
    write.__name__,
)
