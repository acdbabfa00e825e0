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
The passes that tidy up a flattened document share this calling interface: a
transformation is called with a :class:`_vulcanize.fragment.Fragment`, manipulates
its tree in place and returns it.

A pass is written by subclassing :class:`Transformation` and implementing its
``transform`` method, the fragment is available as ``self.fragment`` while it runs::

   from vulcanize.transform import Transformation


   class RemoveTitles(Transformation):
       def transform(self):
           for node in self.fragment.css_select("title"):
               self.fragment.remove(node)


   fragment = RemoveTitles()(fragment)

Passes that can be configured declare a :class:`typing.NamedTuple` as
``options_class``. Without options an instance of it with its defaults is used::

   from typing import NamedTuple


   class RemoveElementsOptions(NamedTuple):
       selector: str = "title"


   class RemoveElements(Transformation):
       options_class = RemoveElementsOptions

       def transform(self):
           for node in self.fragment.css_select(self.options.selector):
               self.fragment.remove(node)


   fragment = RemoveElements(RemoveElementsOptions(selector="meta"))(fragment)

A :class:`TransformationSequence` runs passes one after another, it accepts pass
classes, configured instances and other sequences::

   from vulcanize.transform import TransformationSequence

   tidy_up = TransformationSequence(RemoveTitles, RemoveElements(...))
   fragment = tidy_up(fragment)
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import Iterator
from typing import ClassVar, NamedTuple, Optional

from _vulcanize.fragment import Fragment


logger = logging.getLogger(__name__)


class TransformationBase(ABC):
    """The calling interface of passes and sequences of such."""

    @abstractmethod
    def __call__(self, fragment: Fragment) -> Fragment:
        pass


class Transformation(TransformationBase):
    """
    The base class of all passes.

    :param options: An instance of the class' ``options_class``, defaults to one with
                    default values.
    :raises TypeError: When the options are of another type.
    """

    options_class: ClassVar[Optional[type]] = None

    def __init__(self, options: Optional[NamedTuple] = None):
        options_class = self.options_class
        if options is None and options_class is not None:
            options = options_class()
        elif options is not None and (
            options_class is None or not isinstance(options, options_class)
        ):
            raise TypeError(
                f"{self.__class__.__name__} expects options of type "
                f"{getattr(options_class, '__name__', None)}."
            )
        self.options = options
        self.fragment = Fragment()

    def __call__(self, fragment: Fragment) -> Fragment:
        logger.debug("Applying %s", self.__class__.__name__)
        self.fragment = fragment
        try:
            self.transform()
            result = self.fragment
        finally:
            # no reference to a processed tree is kept
            self.fragment = Fragment()
        return result

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__}({self.options!r})>"

    @abstractmethod
    def transform(self):
        """
        Implements the pass. It operates on ``self.fragment`` which is the fragment
        that the instance was called with.
        """
        pass


class TransformationSequence(TransformationBase):
    """
    Combines any number of :class:`Transformation` subclasses or instances and other
    :class:`TransformationSequence` instances or subclasses. Classes are instantiated
    without arguments.

    :raises TypeError: When any other object is passed.
    """

    def __init__(self, *transformations: TransformationBase | type[TransformationBase]):
        result = []
        for transformation in transformations:
            if isinstance(transformation, type) and issubclass(
                transformation, TransformationBase
            ):
                transformation = transformation()
            if not isinstance(transformation, TransformationBase):
                raise TypeError(
                    "Only subclasses of TransformationBase or instances of such are "
                    f"allowed, got {transformation!r}."
                )
            result.append(transformation)
        self.transformations: tuple[TransformationBase, ...] = tuple(result)

    def __call__(self, fragment: Fragment) -> Fragment:
        for transformation in self.transformations:
            fragment = transformation(fragment)
        return fragment

    def __iter__(self) -> Iterator[TransformationBase]:
        return iter(self.transformations)

    def __len__(self) -> int:
        return len(self.transformations)


__all__ = (
    Transformation.__name__,
    TransformationBase.__name__,
    TransformationSequence.__name__,
)
