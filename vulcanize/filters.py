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

from _vulcanize.filters import (
    all_of,
    any_of,
    closest,
    has_attribute,
    has_attribute_value,
    has_tag_name,
    is_comment_node,
    is_document_node,
    is_external_script,
    is_import_link,
    is_inline_javascript,
    is_stylesheet_link,
    is_tag_node,
    is_text_node,
    not_,
    search,
)


__all__ = (
    all_of.__name__,
    any_of.__name__,
    closest.__name__,
    has_attribute.__name__,
    has_attribute_value.__name__,
    has_tag_name.__name__,
    is_comment_node.__name__,
    is_document_node.__name__,
    "is_external_script",
    "is_import_link",
    "is_inline_javascript",
    "is_stylesheet_link",
    is_tag_node.__name__,
    is_text_node.__name__,
    not_.__name__,
    search.__name__,
)
