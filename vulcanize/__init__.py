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
*vulcanize* flattens a tree of HTML documents that are connected by HTML imports into a
single document.

>>> from pathlib import Path
>>> from vulcanize import Importer, render_document
>>> importer = Importer(output_dir="build")
>>> fragment = importer.flatten(Path("index.html"))  # doctest: +SKIP
>>> Path("build/index.html").write_text(render_document(fragment))  # doctest: +SKIP
"""

from __future__ import annotations

from _vulcanize.builder import ParserOptions, load_fragment, parse_fragment
from _vulcanize.cli import main, vulcanize
from _vulcanize.config import Excludes, VulcanizeOptions, read_config_file
from _vulcanize.css import css_filter
from _vulcanize.fragment import Fragment
from _vulcanize.importer import Importer
from _vulcanize.nodes import (
    CommentNode,
    DocumentNode,
    NodeBase,
    NodeKind,
    TagNode,
    TextNode,
    create_external_script,
    create_script,
    create_style,
)
from _vulcanize.serializer import render_document, serialize, write


__all__ = (
    CommentNode.__name__,
    DocumentNode.__name__,
    Excludes.__name__,
    Fragment.__name__,
    Importer.__name__,
    NodeBase.__name__,
    NodeKind.__name__,
    ParserOptions.__name__,
    TagNode.__name__,
    TextNode.__name__,
    VulcanizeOptions.__name__,
    create_external_script.__name__,
    create_script.__name__,
    create_style.__name__,
    css_filter.__name__,
    load_fragment.__name__,
    main.__name__,
    parse_fragment.__name__,
    read_config_file.__name__,
    render_document.__name__,
    serialize.__name__,
    vulcanize.__name__,
    write.__name__,
)
