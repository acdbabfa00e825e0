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

"""These are the specific vulcanize exceptions."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from pathlib import Path

    from _vulcanize.typing import Loader


class VulcanizeBaseException(Exception):
    pass


class ConfigurationError(VulcanizeBaseException):
    """Raised when a configuration file can't be read or holds invalid values."""

    def __init__(self, message: str):
        super().__init__(message)


class FailedDocumentLoading(VulcanizeBaseException):
    def __init__(self, source: Any, excuses: dict[Loader, str | Exception]):
        self.source = source
        self.excuses = excuses

    def __str__(self):
        return f"Couldn't load {self.source!r} with these loaders: {self.excuses}"


class FailedImport(VulcanizeBaseException):
    """
    Raised when a document can't be loaded while imports are resolved. The original
    exception is available as ``__cause__``.

    :param path: The file that failed to load.
    :param trail: The importing files that led to it, the outermost first.
    """

    def __init__(self, path: Path, trail: list[Path] | None = None):
        self.path = path
        self.trail: list[Path] = [] if trail is None else trail

    def __str__(self):
        if self.trail:
            via = " → ".join(str(p) for p in self.trail)
            result = f"Failed while importing {self.path} (via {via})"
        else:
            result = f"Failed while importing {self.path}"
        if self.__cause__ is not None:
            result += f": {self.__cause__}"
        return result


class InvalidCodePath(VulcanizeBaseException, RuntimeError):
    """Raised when a code path that is not expected to be executed is reached."""

    def __init__(self):  # pragma: no cover
        super().__init__(
            "An unintended path was taken through the code. Please report this bug."
        )


class InvalidOperation(VulcanizeBaseException):
    """Raised when an invalid operation is attempted by the client code."""

    pass


class ParsingError(VulcanizeBaseException):
    pass


__all__ = (
    ConfigurationError.__name__,
    FailedDocumentLoading.__name__,
    FailedImport.__name__,
    InvalidCodePath.__name__,
    InvalidOperation.__name__,
    ParsingError.__name__,
    VulcanizeBaseException.__name__,
)
