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
The transformations that are applied to a flattened document before it's written.
"""

from __future__ import annotations

import logging
import os
import posixpath
import re
from pathlib import Path
from typing import Final, NamedTuple
from urllib.parse import urlsplit, urlunsplit

from _vulcanize.exceptions import InvalidOperation
from _vulcanize.filters import (
    all_of,
    closest,
    has_attribute,
    has_tag_name,
    is_comment_node,
    is_import_link,
    is_inline_javascript,
    is_text_node,
)
from _vulcanize.inliner import inline_scripts
from _vulcanize.nodes import (
    NodeBase,
    TagNode,
    create_external_script,
    create_script,
)
from _vulcanize.transform import Transformation


logger = logging.getLogger(__name__)


# constants


POLYMER_INVOCATION: Final = re.compile(r"Polymer\(([^,{]+)?(?:,\s*)?({|\))")
WHITESPACE_PRESERVING_ELEMENTS: Final = frozenset(
    ("pre", "script", "style", "textarea")
)


# options


class InlineScriptsOptions(NamedTuple):
    output_dir: str | os.PathLike = "."
    """The directory that the script references are relative to."""
    excluded: tuple[re.Pattern[str] | str, ...] = ()
    """Scripts whose reference matches any of these patterns are kept."""


class SeparateScriptsOptions(NamedTuple):
    path: str | os.PathLike = "vulcanized.js"
    """The file that the scripts are written to."""


# transformations


class DeduplicateImports(Transformation):
    """
    Removes all imports whose normalized reference is equal to one of a preceding
    import. These are left over when imports are excluded from flattening.
    """

    def transform(self):
        seen: set[str] = set()
        duplicates = []
        for node in self.fragment.search(is_import_link):
            key = _normalize_reference(node.attributes.get("href"))  # type: ignore
            if key is None:
                continue
            if key in seen:
                duplicates.append(node)
            else:
                seen.add(key)

        for node in duplicates:
            logger.info("Removing duplicate import %s", node.attributes["href"])
            self.fragment.remove(node)


class InlineScripts(Transformation):
    """Replaces references to local scripts with the scripts' contents."""

    options_class = InlineScriptsOptions

    def transform(self):
        inline_scripts(self.fragment, self.options.output_dir, self.options.excluded)


class RemoveCommentsAndWhitespace(Transformation):
    """
    Removes all comments and the text nodes that consist only of whitespace, except
    those in elements whose whitespace is significant.
    """

    def transform(self):
        for node in self.fragment.search(is_comment_node):
            self.fragment.remove(node)

        for node in self.fragment.search(is_text_node, _is_blank):
            if not any(True for _ in node.iterate_ancestors(_preserves_whitespace)):
                self.fragment.remove(node)


class RemoveNoScript(Transformation):
    """
    Replaces the ``noscript`` attribute of ``polymer-element`` elements with an explicit
    invocation of ``Polymer()``.
    """

    def transform(self):
        for node in self.fragment.search(
            has_tag_name("polymer-element"), has_attribute("noscript")
        ):
            name = node.attributes.get("name", "")  # type: ignore
            logger.info("Injecting explicit Polymer invocation for %s", name)
            del node.attributes["noscript"]  # type: ignore
            node.append_child(create_script(f"Polymer('{name}');"))  # type: ignore


class SeparateScripts(Transformation):
    """
    Moves the contents of all inline scripts into one file that is then referenced at
    the end of the document's ``body``. This is useful to comply with a Content
    Security Policy that prohibits inline scripts.
    """

    options_class = SeparateScriptsOptions

    def transform(self):
        fragment = self.fragment
        path = Path(self.options.path)

        bodies = fragment.search(has_tag_name("body"))
        if not bodies:
            raise InvalidOperation("There's no body to add the script reference to.")

        logger.info("Separating scripts into %s", path)
        contents = []
        for node in fragment.search(is_inline_javascript):
            contents.append(node.text_content)  # type: ignore
            fragment.remove(node)

        path.write_text(";\n".join(contents), encoding="utf-8")
        bodies[0].append_child(create_external_script(path.name))  # type: ignore


class UseNamedPolymerInvocations(Transformation):
    """
    Injects the element's name into anonymous ``Polymer()`` invocations in the scripts
    of ``polymer-element`` elements.
    """

    def transform(self):
        is_polymer_element = all_of(
            has_tag_name("polymer-element"), has_attribute("name")
        )
        for script in self.fragment.search(is_inline_javascript):
            if (element := closest(script, is_polymer_element)) is None:
                continue

            content = script.text_content  # type: ignore
            match = POLYMER_INVOCATION.search(content)
            if match is None or match.group(1) is not None:
                continue

            invocation = f"Polymer('{element.attributes['name']}'"  # type: ignore
            invocation += ",{" if match.group(2) == "{" else ")"
            logger.info("%s -> %s", match.group(0), invocation)
            script.text_content = content.replace(  # type: ignore
                match.group(0), invocation, 1
            )


# helpers


def _is_blank(node: NodeBase) -> bool:
    return not node.content.strip()  # type: ignore


def _normalize_reference(reference: str | None) -> str | None:
    if not reference:
        return None
    try:
        parts = urlsplit(reference)
    except ValueError:
        return None
    path = posixpath.normpath(parts.path) if parts.path else ""
    if parts.path.endswith("/") and not path.endswith("/"):
        path += "/"
    return urlunsplit(
        (
            (parts.scheme or "http").lower(),
            parts.netloc.lower(),
            path,
            parts.query,
            parts.fragment,
        )
    )


def _preserves_whitespace(node: NodeBase) -> bool:
    return (
        isinstance(node, TagNode)
        and node.local_name in WHITESPACE_PRESERVING_ELEMENTS
    )


__all__ = (
    DeduplicateImports.__name__,
    InlineScripts.__name__,
    InlineScriptsOptions.__name__,
    RemoveCommentsAndWhitespace.__name__,
    RemoveNoScript.__name__,
    SeparateScripts.__name__,
    SeparateScriptsOptions.__name__,
    UseNamedPolymerInvocations.__name__,
)
