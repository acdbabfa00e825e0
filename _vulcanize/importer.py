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
The :class:`Importer` replaces HTML imports with the contents of the imported
documents, recursively. Each file is included only once per resolution: it's recorded
as read as soon as it's loaded, before its own imports are resolved. Hence any later
import of the same file, including one that closes a cycle of imports, is removed
without further ado.
"""

from __future__ import annotations

import logging
import os
import re
from pathlib import Path
from typing import TYPE_CHECKING, Optional

from _vulcanize.builder import load_fragment
from _vulcanize.exceptions import (
    FailedDocumentLoading,
    FailedImport,
    InvalidOperation,
    ParsingError,
)
from _vulcanize.filters import is_import_link
from _vulcanize.inliner import inline_stylesheets, is_excluded
from _vulcanize.paths import is_local_reference, reference_to_path, resolve_paths

if TYPE_CHECKING:
    from collections.abc import Iterable

    from _vulcanize.builder import ParserOptions
    from _vulcanize.fragment import Fragment
    from _vulcanize.nodes import NodeBase


logger = logging.getLogger(__name__)


def _compile_patterns(
    patterns: Iterable[re.Pattern[str] | str],
) -> tuple[re.Pattern[str], ...]:
    return tuple(re.compile(p) if isinstance(p, str) else p for p in patterns)


class Importer:
    """
    An importer serves exactly one resolution of a document's imports.

    :param excluded_imports: Imports whose reference matches any of these regular
                             expressions are left as they are.
    :param excluded_stylesheets: Style sheets whose reference matches any of these
                                 regular expressions aren't inlined.
    :param output_dir: The directory that the resulting document is written to, all
                       relative references are re-based onto it.
    :param parser_options: The parser configuration for all loaded documents.
    """

    __slots__ = (
        "excluded_imports",
        "excluded_stylesheets",
        "output_dir",
        "parser_options",
        "_read",
        "_used",
    )

    def __init__(
        self,
        excluded_imports: Iterable[re.Pattern[str] | str] = (),
        excluded_stylesheets: Iterable[re.Pattern[str] | str] = (),
        output_dir: str | os.PathLike = ".",
        parser_options: Optional[ParserOptions] = None,
    ):
        self.excluded_imports = _compile_patterns(excluded_imports)
        self.excluded_stylesheets = _compile_patterns(excluded_stylesheets)
        self.output_dir = Path(output_dir).resolve()
        self.parser_options = parser_options
        self._read: set[Path] = set()
        self._used = False

    @property
    def read(self) -> frozenset[Path]:
        """The canonical paths of all files that were loaded so far."""
        return frozenset(self._read)

    def flatten(
        self, path: str | os.PathLike, context: Optional[NodeBase] = None
    ) -> Fragment:
        """
        Loads a document and replaces its imports with the flattened contents of the
        imported documents.

        :param path: The document's location.
        :param context: The node that the document's contents are to be placed in,
                        with :obj:`None` it's parsed as a whole document.
        :return: The fully expanded fragment.
        :raises FailedImport: When any of the involved documents can't be loaded.
        :raises InvalidOperation: When the instance was already used for a resolution.
        """
        if self._used:
            raise InvalidOperation(
                "An importer can only be used for one resolution, use a new instance."
            )
        self._used = True
        return self._flatten(Path(path).resolve(), context)

    def _flatten(self, path: Path, context: Optional[NodeBase]) -> Fragment:
        logger.debug("Flattening %s", path)
        fragment = self._load(path, context)

        for node in fragment.search(is_import_link):
            href = node.attributes.get("href")  # type: ignore
            if not self._is_resolvable(href):
                continue

            target = reference_to_path(href, self.output_dir)
            if target in self._read:
                logger.info("Removing duplicate import of %s in %s", target, path)
                fragment.remove(node)
                continue

            # a top-level import is parsed as fragment nonetheless
            parent = node.parent
            try:
                content = self._flatten(target, node if parent is None else parent)
            except FailedImport as e:
                e.trail.insert(0, path)
                raise
            fragment.replace_with_fragment(node, content)

        return fragment

    def _is_resolvable(self, href: Optional[str]) -> bool:
        if not href:
            return False
        if is_excluded(href, self.excluded_imports):
            logger.info("Skipping excluded import %s", href)
            return False
        if not is_local_reference(href):
            logger.info("Skipping non-local import %s", href)
            return False
        return True

    def _load(self, path: Path, context: Optional[NodeBase]) -> Fragment:
        try:
            fragment = load_fragment(
                path, context=context, parser_options=self.parser_options
            )
            resolve_paths(fragment, path.parent, self.output_dir)
            inline_stylesheets(fragment, self.output_dir, self.excluded_stylesheets)
        except (FailedDocumentLoading, OSError, ParsingError) as e:
            raise FailedImport(path) from e

        self._read.add(path)
        return fragment


__all__ = (Importer.__name__,)
