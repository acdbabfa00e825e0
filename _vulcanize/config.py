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
The options of a vulcanization. Exclusion patterns can be read from a JSON file like
this one::

    {
        "excludes": {
            "imports": ["^https?://", "polymer\\\\.html$"],
            "scripts": ["analytics"],
            "styles": ["theme\\\\.css$"]
        }
    }
"""

from __future__ import annotations

import json
import os
import re
from pathlib import Path
from typing import TYPE_CHECKING, Final, NamedTuple, Optional

from _vulcanize.exceptions import ConfigurationError

if TYPE_CHECKING:
    from collections.abc import Iterable


# constants


DEFAULT_OUTPUT: Final = Path("vulcanized.html")
EXCLUDES_CATEGORIES: Final = ("imports", "scripts", "styles")


# options


class Excludes(NamedTuple):
    """Regular expressions that exclude references from being processed."""

    imports: tuple[re.Pattern[str], ...] = ()
    """Imports that are not flattened."""
    scripts: tuple[re.Pattern[str], ...] = ()
    """Scripts that are not inlined."""
    styles: tuple[re.Pattern[str], ...] = ()
    """Style sheets that are not inlined."""

    def merge(self, other: Excludes) -> Excludes:
        """Returns the patterns of both in one instance."""
        return Excludes(*(a + b for a, b in zip(self, other)))


class VulcanizeOptions(NamedTuple):
    input: Path
    """The document to flatten."""
    output: Path = DEFAULT_OUTPUT
    """The file that the flattened document is written to."""
    excludes: Excludes = Excludes()
    """See :class:`Excludes`."""
    inline: bool = False
    """Inline external scripts."""
    csp: bool = False
    """Separate inline scripts into an extra file."""
    csp_file: Optional[Path] = None
    """
    The file for the separated scripts, defaults to the output file name with a
    ``.js`` suffix.
    """
    strip: bool = False
    """Remove comments and insignificant whitespace."""
    verbose: bool = False
    """Log more details."""

    @property
    def output_dir(self) -> Path:
        return self.output.absolute().parent

    @property
    def scripts_file(self) -> Path:
        if self.csp_file is None:
            return self.output.with_suffix(".js")
        return self.csp_file


# api


def compile_patterns(patterns: Iterable[str]) -> tuple[re.Pattern[str], ...]:
    """
    :raises ConfigurationError: When a pattern is not a valid regular expression.
    """
    result = []
    for pattern in patterns:
        try:
            result.append(re.compile(pattern))
        except re.error as e:
            raise ConfigurationError(
                f"Invalid regular expression {pattern!r}: {e}"
            ) from e
    return tuple(result)


def read_config_file(path: str | os.PathLike) -> Excludes:
    """
    Reads the exclusion patterns from a JSON file.

    :raises ConfigurationError: When the file can't be read or its contents are not as
                                expected.
    """
    try:
        with Path(path).open("rt", encoding="utf-8") as file:
            data = json.load(file)
    except OSError as e:
        raise ConfigurationError(f"Couldn't read the configuration file {path}.") from e
    except json.JSONDecodeError as e:
        raise ConfigurationError(f"Invalid JSON in {path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigurationError(f"The configuration in {path} must be an object.")

    excludes = data.get("excludes", {})
    if not isinstance(excludes, dict):
        raise ConfigurationError("The excludes setting must be an object.")
    if unknown := set(excludes) - set(EXCLUDES_CATEGORIES):
        raise ConfigurationError(
            f"Unknown excludes categories: {', '.join(sorted(unknown))}"
        )

    patterns = {}
    for category in EXCLUDES_CATEGORIES:
        value = excludes.get(category, [])
        if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
            raise ConfigurationError(
                f"The {category} excludes must be a list of strings."
            )
        patterns[category] = compile_patterns(value)

    return Excludes(**patterns)


__all__ = (
    Excludes.__name__,
    VulcanizeOptions.__name__,
    compile_patterns.__name__,
    read_config_file.__name__,
)
