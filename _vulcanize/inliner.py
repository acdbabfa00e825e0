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
The functions in this module replace references to style sheets and scripts with
elements that contain the referenced files' contents. The references are expected to
be relative to the output directory, as :func:`_vulcanize.paths.resolve_paths` leaves
them.
"""

from __future__ import annotations

import logging
import os
import re
from typing import TYPE_CHECKING, Final

from _vulcanize.filters import is_external_script, is_stylesheet_link
from _vulcanize.nodes import create_script, create_style
from _vulcanize.paths import is_local_reference, reference_to_path, rewrite_css_urls

if TYPE_CHECKING:
    from collections.abc import Iterable

    from _vulcanize.fragment import Fragment
    from _vulcanize.nodes import TagNode


logger = logging.getLogger(__name__)


# constants


SCRIPT_END_TAG_PATTERN: Final = re.compile("</script", re.IGNORECASE)


# api


def is_excluded(reference: str, patterns: Iterable[re.Pattern[str] | str]) -> bool:
    """Tells whether any of the patterns is found in the reference."""
    return any(re.search(pattern, reference) for pattern in patterns)


def inline_scripts(
    fragment: Fragment,
    output_dir: str | os.PathLike,
    excluded: Iterable[re.Pattern[str] | str] = (),
):
    """
    Replaces all ``script`` elements that refer a local file with ones that contain the
    file's content.

    :param fragment: The fragment whose scripts shall be inlined.
    :param output_dir: The directory that the references are relative to.
    :param excluded: Scripts whose reference matches any of these patterns are kept.
    :raises OSError: When a referenced file can't be read.
    """
    excluded = tuple(excluded)
    for node in fragment.search(is_external_script):
        if (src := _inlineable_reference(node, "src", excluded)) is None:
            continue

        path = reference_to_path(src, output_dir)
        logger.debug("Inlining script %s", path)
        content = SCRIPT_END_TAG_PATTERN.sub(
            lambda m: "<\\" + m.group()[1:], path.read_text(encoding="utf-8")
        )
        script = create_script(content)
        _carry_over_attributes(node, script, ("src",))
        fragment.replace_with_node(node, script)


def inline_stylesheets(
    fragment: Fragment,
    output_dir: str | os.PathLike,
    excluded: Iterable[re.Pattern[str] | str] = (),
):
    """
    Replaces all ``link`` elements that refer a local style sheet with ``style``
    elements that contain the style sheet's content. The ``url()`` references therein
    are re-based onto the output directory.

    :param fragment: The fragment whose style sheets shall be inlined.
    :param output_dir: The directory that the references are relative to.
    :param excluded: Style sheets whose reference matches any of these patterns are
                     kept.
    :raises OSError: When a referenced file can't be read.
    """
    excluded = tuple(excluded)
    for node in fragment.search(is_stylesheet_link):
        if (href := _inlineable_reference(node, "href", excluded)) is None:
            continue

        path = reference_to_path(href, output_dir)
        logger.debug("Inlining style sheet %s", path)
        style = create_style(
            rewrite_css_urls(path.read_text(encoding="utf-8"), path.parent, output_dir)
        )
        _carry_over_attributes(node, style, ("href", "rel"))
        fragment.replace_with_node(node, style)


def _carry_over_attributes(source: TagNode, target: TagNode, skip: tuple[str, ...]):
    for name, value in source.attributes.items():
        if name not in skip:
            target.attributes[name] = value


def _inlineable_reference(
    node: TagNode, attribute: str, excluded: tuple[re.Pattern[str] | str, ...]
) -> str | None:
    reference = node.attributes.get(attribute)
    if not reference or not is_local_reference(reference):
        return None
    if is_excluded(reference, excluded):
        logger.info("Not inlining excluded %s", reference)
        return None
    return reference


__all__ = (
    inline_scripts.__name__,
    inline_stylesheets.__name__,
    is_excluded.__name__,
)
