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

import re
from collections.abc import Iterator
from types import SimpleNamespace
from typing import TYPE_CHECKING, Any, Final, NamedTuple, Optional

from lxml import etree, html

from _vulcanize.exceptions import FailedDocumentLoading, ParsingError
from _vulcanize.filters import has_tag_name
from _vulcanize.fragment import Fragment
from _vulcanize.nodes import CommentNode, DocumentNode, TagNode, TextNode
from _vulcanize.plugins import plugin_manager

if TYPE_CHECKING:
    from _vulcanize.nodes import NodeBase
    from _vulcanize.typing import Loader


# constants


_looks_like_full_html: Final = re.compile(
    r"^\s*<(?:html|!doctype)", re.IGNORECASE
).match


# options


class ParserOptions(NamedTuple):
    """The configuration options that define the HTML parser's behaviour."""

    encoding: str = "utf-8"
    """
    The name of the Python codec that data passed as :class:`bytes` is decoded with. It
    doesn't affect parsing of data that is passed as :class:`str`. Default: ``utf-8``.
    """
    remove_comments: bool = False
    """Ignore comments. Default: :obj:`False`."""


# parsing


def parse_fragment(
    data: str | bytes,
    options: Optional[ParserOptions] = None,
    context: Optional[NodeBase] = None,
) -> Fragment:
    """
    Parses HTML markup into a fragment.

    :param data: The markup.
    :param options: The parser configuration.
    :param context: The node that the parsed contents are to be placed in. If it's
                    :obj:`None` the markup is parsed as whole document and the
                    resulting fragment's only member is a :class:`DocumentNode`.
                    Otherwise it's parsed as a fragment whose members are the parsed
                    top-level nodes.

    The type of the context element doesn't affect how the markup is parsed, a fragment
    is always parsed as contents of a document's ``head`` and ``body``.

    :raises ParsingError: When the HTML parser fails or byte data can't be decoded
                          with the configured encoding.
    """
    if options is None:
        options = ParserOptions()

    if isinstance(data, bytes):
        data = _decode(data, options.encoding)

    if not data.strip():
        if context is None:
            return Fragment.from_node(
                DocumentNode(
                    children=(
                        TagNode("html", children=(TagNode("head"), TagNode("body"))),
                    )
                )
            )
        return Fragment()

    parser = html.HTMLParser(
        remove_comments=options.remove_comments,
        default_doctype=False,
    )

    if context is None:
        return Fragment.from_node(_parse_document(data, parser))

    if not _looks_like_full_html(data):
        data = f"<html><body>{data}</body></html>"

    root = _parse(data, parser)
    return Fragment.from_nodes(_convert_fragment_contents(root))


def _decode(data: bytes, encoding: str) -> str:
    try:
        return data.decode(encoding).lstrip("\ufeff")
    except (LookupError, UnicodeDecodeError) as e:
        raise ParsingError(f"Can't decode the markup as {encoding}: {e}") from e


def _parse(data: str, parser: html.HTMLParser) -> etree._Element:
    try:
        return html.document_fromstring(data, parser=parser)
    except (etree.ParserError, etree.XMLSyntaxError) as e:
        raise ParsingError(str(e)) from e


def _parse_document(data: str, parser: html.HTMLParser) -> DocumentNode:
    root = _parse(data, parser)
    doctype = root.getroottree().docinfo.doctype or None

    prologue = []
    for sibling in root.itersiblings(preceding=True):
        prologue.insert(0, sibling)

    html_element = _convert_element(root)
    # libxml2 doesn't add a body to documents that lack one
    if not any(True for _ in html_element.iterate_children(has_tag_name("body"))):
        html_element.append_child(TagNode("body"))

    return DocumentNode(
        children=(
            *_convert_siblings(prologue),
            html_element,
            *_convert_siblings(root.itersiblings()),
        ),
        doctype=doctype,
    )


# conversion


def _convert_element(element: etree._Element) -> TagNode:
    result = TagNode(element.tag, dict(element.attrib))  # type: ignore
    if element.text:
        result.append_child(TextNode(element.text))
    for node in _convert_siblings(element):
        result.append_child(node)
    return result


def _convert_fragment_contents(root: etree._Element) -> Iterator[NodeBase]:
    for section in root:
        if not isinstance(section.tag, str):
            continue
        match section.tag.lower():
            case "head":
                yield from _convert_siblings(section)
            case "body":
                if section.text:
                    yield TextNode(section.text)
                yield from _convert_siblings(section)


def _convert_siblings(elements) -> Iterator[NodeBase]:
    for element in elements:
        if isinstance(element, etree._Comment):
            yield CommentNode(element.text or "")
        elif isinstance(element.tag, str):
            yield _convert_element(element)
        # processing instructions and entities are dropped, their tails are kept
        if element.tail:
            yield TextNode(element.tail)


# loading


def load_fragment(
    source: Any,
    context: Optional[NodeBase] = None,
    parser_options: Optional[ParserOptions] = None,
) -> Fragment:
    """
    Loads a fragment from a source with the first registered loader that accepts it.

    :param source: Anything that a loader can handle, the core loaders accept
                   :class:`pathlib.Path` instances, binary file-like objects, strings
                   and byte sequences.
    :param context: See :func:`parse_fragment`.
    :param parser_options: The parser configuration.
    :raises FailedDocumentLoading: When no loader succeeded.
    """
    config = SimpleNamespace(
        context=context,
        parser_options=ParserOptions() if parser_options is None else parser_options,
    )
    loader_excuses: dict[Loader, str | Exception] = {}

    for loader in plugin_manager.loaders:
        try:
            loader_result = loader(source, config)
        except Exception as e:
            loader_excuses[loader] = e
        else:
            if isinstance(loader_result, str):
                loader_excuses[loader] = loader_result
            else:
                return loader_result

    raise FailedDocumentLoading(source, loader_excuses)


__all__ = (
    ParserOptions.__name__,
    load_fragment.__name__,
    parse_fragment.__name__,
)
