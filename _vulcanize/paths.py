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
When a document's contents are moved from its source directory into a document that
is written to another directory, the relative references to resources must be
re-based onto that output directory:

>>> rewrite_reference("img/logo.png?v=2", "/app/elements", "/app")
'elements/img/logo.png?v=2'
>>> rewrite_css_urls("a { background: url('bg.png') }", "/app/elements", "/app")
"a { background: url('elements/bg.png') }"
>>> rewrite_reference("https://example.org/x.js", "/app/elements", "/app")
'https://example.org/x.js'
"""

from __future__ import annotations

import os
import re
from pathlib import Path
from typing import TYPE_CHECKING, Final
from urllib.parse import unquote, urlsplit, urlunsplit

from _vulcanize.filters import is_tag_node, is_text_node

if TYPE_CHECKING:
    from _vulcanize.fragment import Fragment


# constants


CSS_URL_PATTERN: Final = re.compile(r"""url\(\s*(["']?)(.*?)\1\s*\)""")
TEMPLATE_MARKER: Final = "{{"
URL_ATTRIBUTES: Final = ("action", "href", "src")


# api


def is_local_reference(reference: str) -> bool:
    """
    Tells whether a reference points to a resource relative to the referring document.
    References with a scheme or a network location, server-absolute paths, references
    to a fragment of the same document and templated values are not.
    """
    if not reference or TEMPLATE_MARKER in reference:
        return False
    if reference.startswith(("/", "#")):
        return False
    parts = urlsplit(reference)
    return not (parts.scheme or parts.netloc) and bool(parts.path)


def reference_to_path(reference: str, base_dir: str | os.PathLike) -> Path:
    """
    Returns the canonical path of the file that a local reference points to. Query and
    fragment are discarded, percent-encoded characters are decoded.
    """
    return (Path(base_dir) / unquote(urlsplit(reference).path)).resolve()


def resolve_paths(
    fragment: Fragment, source_dir: str | os.PathLike, output_dir: str | os.PathLike
):
    """
    Re-bases the references in the URL attributes, in ``style`` attributes and in the
    contents of ``<style>`` elements that are relative to ``source_dir`` onto
    ``output_dir``. All ``polymer-element`` elements get an ``assetpath`` attribute
    that points from the output to the source directory.
    """
    asset_path = _relative_posix_path(source_dir, output_dir)
    asset_path = "" if asset_path == "." else asset_path + "/"

    for node in fragment.search(is_tag_node):
        attributes = node.attributes  # type: ignore
        for name in URL_ATTRIBUTES:
            if value := attributes.get(name):
                attributes[name] = rewrite_reference(value, source_dir, output_dir)

        if (value := attributes.get("style")) and TEMPLATE_MARKER not in value:
            attributes["style"] = rewrite_css_urls(value, source_dir, output_dir)

        match node.local_name:  # type: ignore
            case "style":
                for child in node.iterate_children(is_text_node):
                    child.content = rewrite_css_urls(  # type: ignore
                        child.content, source_dir, output_dir  # type: ignore
                    )
            case "polymer-element":
                attributes["assetpath"] = asset_path


def rewrite_css_urls(
    css: str, source_dir: str | os.PathLike, output_dir: str | os.PathLike
) -> str:
    """Re-bases the references in all ``url()`` notations of a style sheet."""

    def replace(match: re.Match) -> str:
        quote, reference = match.group(1), match.group(2)
        reference = rewrite_reference(reference, source_dir, output_dir)
        return f"url({quote}{reference}{quote})"

    return CSS_URL_PATTERN.sub(replace, css)


def rewrite_reference(
    reference: str, source_dir: str | os.PathLike, output_dir: str | os.PathLike
) -> str:
    """
    Re-bases a reference relative to ``source_dir`` onto ``output_dir``. Query and
    fragment are kept, non-local references are returned as they are.
    """
    if not is_local_reference(reference):
        return reference

    parts = urlsplit(reference)
    target = os.path.normpath(os.path.join(os.path.abspath(source_dir), parts.path))
    path = _relative_posix_path(target, output_dir)
    if parts.path.endswith("/") and not path.endswith("/"):
        path += "/"
    return urlunsplit(("", "", path, parts.query, parts.fragment))


def _relative_posix_path(target: str | os.PathLike, start: str | os.PathLike) -> str:
    relative_path = os.path.relpath(os.path.abspath(target), os.path.abspath(start))
    return Path(relative_path).as_posix()


__all__ = (
    is_local_reference.__name__,
    reference_to_path.__name__,
    resolve_paths.__name__,
    rewrite_css_urls.__name__,
    rewrite_reference.__name__,
)
