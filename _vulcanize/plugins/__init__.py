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

import logging
from collections.abc import Iterable
from importlib.metadata import entry_points
from typing import TYPE_CHECKING

from _vulcanize.exceptions import InvalidOperation

if TYPE_CHECKING:
    from _vulcanize.typing import Loader, LoaderConstraint, SecondOrderDecorator


logger = logging.getLogger(__name__)


class PluginManager:
    __slots__ = ("loaders",)

    def __init__(self):
        self.loaders: list[Loader] = []

    @staticmethod
    def load_plugins():
        """
        Loads the contributed loaders and all modules that are registered as entrypoint
        in the ``vulcanize`` group.
        """
        import _vulcanize.plugins.core_loaders  # noqa: F401

        for entrypoint in entry_points().select(group="vulcanize"):
            entrypoint.load()
            logger.debug("Loaded plugin %s", entrypoint.name)

    def register_loader(
        self, before: LoaderConstraint = None, after: LoaderConstraint = None
    ) -> SecondOrderDecorator:
        """
        Registers a document loader. A loader is called with the source that is to be
        loaded and a :class:`types.SimpleNamespace` that holds the ``parser_options``
        and the ``context`` that the source is to be parsed in. It either returns a
        :class:`_vulcanize.fragment.Fragment` or a string that explains why it didn't
        attempt to load the source.

        A module that is specified as ``vulcanize`` plugin for sources that are given
        as ``file://`` URLs might look like this:

        .. testcode::

            from pathlib import Path
            from types import SimpleNamespace
            from typing import Any
            from urllib.parse import unquote, urlsplit

            from _vulcanize.plugins import plugin_manager
            from _vulcanize.plugins.core_loaders import path_loader
            from _vulcanize.typing import LoaderResult


            @plugin_manager.register_loader(before=path_loader)
            def file_url_loader(source: Any, config: SimpleNamespace) -> LoaderResult:
                if isinstance(source, str) and source.startswith("file://"):
                    return path_loader(Path(unquote(urlsplit(source).path)), config)

                # return an indication why this loader didn't attempt to load in order
                # to support debugging
                return "The input value is not an URL with the file scheme."

        You might want to specify a loader to be considered before or after another
        one, that is what the ``before`` and ``after`` arguments are for.
        """

        if before is not None and after is not None:
            raise NotImplementedError(
                "A loader can only be registered relative to others in one direction."
            )

        def registrar(loader: Loader) -> Loader:
            assert callable(loader)
            if before is not None:
                index = min(self._positions(before))
            elif after is not None:
                index = max(self._positions(after)) + 1
            else:
                index = len(self.loaders)
            self.loaders.insert(index, loader)
            return loader

        return registrar

    def _positions(self, loaders: Loader | Iterable[Loader]) -> list[int]:
        if not isinstance(loaders, Iterable):
            loaders = (loaders,)
        result = []
        for loader in loaders:
            try:
                result.append(self.loaders.index(loader))
            except ValueError as e:
                raise InvalidOperation(
                    f"The loader {loader!r} to refer to is not registered."
                ) from e
        return result


plugin_manager = PluginManager()


__all__ = (PluginManager.__name__, "plugin_manager")
