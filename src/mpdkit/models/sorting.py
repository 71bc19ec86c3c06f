"""Sort descriptors for library queries.

A descriptor renders into the ``sort`` argument of ``find`` and round-trips
through a compact string so callers can persist the user's choice.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import ClassVar

logger = logging.getLogger(__name__)


class SortOption(Enum):
    """Tag to sort by, valued with the MPD tag name."""

    ARTIST = "albumartistsort"
    ALBUM = "albumsort"
    SONG = "titlesort"
    MODIFIED = "Last-Modified"

    @property
    def label(self) -> str:
        """Return a display label."""
        return _SORT_LABELS[self]


_SORT_LABELS = {
    SortOption.ARTIST: "Artist",
    SortOption.ALBUM: "Album",
    SortOption.SONG: "Song",
    SortOption.MODIFIED: "Last Modified",
}


class SortDirection(Enum):
    """Sort direction, valued with the prefix MPD expects."""

    ASCENDING = ""
    DESCENDING = "-"

    @property
    def label(self) -> str:
        """Return a display label."""
        return "Ascending" if self is SortDirection.ASCENDING else "Descending"


@dataclass(frozen=True, slots=True)
class SortDescriptor:
    """A sort option combined with a direction."""

    option: SortOption
    direction: SortDirection = SortDirection.ASCENDING

    DEFAULT: ClassVar["SortDescriptor"]

    @property
    def argument(self) -> str:
        """Return the value for MPD's ``sort`` argument, e.g. ``-albumsort``."""
        return f"{self.direction.value}{self.option.value}"

    @property
    def raw_value(self) -> str:
        """Return the persisted form, e.g. ``albumsort_descending``."""
        direction = "ascending" if self.direction is SortDirection.ASCENDING else "descending"
        return f"{self.option.value}_{direction}"

    @classmethod
    def from_raw_value(cls, raw_value: str) -> "SortDescriptor":
        """Parse the persisted form, returning the default when unknown."""
        option_value, _, direction_value = raw_value.partition("_")
        try:
            option = SortOption(option_value)
        except ValueError:
            logger.debug("Unknown sort descriptor %r, using default", raw_value)
            return cls.DEFAULT

        direction = (
            SortDirection.DESCENDING
            if direction_value == "descending"
            else SortDirection.ASCENDING
        )
        return cls(option, direction)


SortDescriptor.DEFAULT = SortDescriptor(SortOption.ARTIST)
