"""Search field selection."""

from dataclasses import dataclass
from enum import Enum
from typing import ClassVar


class SearchField(Enum):
    """A tag the user can search in."""

    TITLE = "Title"
    ARTIST = "Artist"
    ALBUM = "Album"
    GENRE = "Genre"
    COMPOSER = "Composer"
    PERFORMER = "Performer"
    CONDUCTOR = "Conductor"
    ENSEMBLE = "Ensemble"
    MOOD = "Mood"
    COMMENT = "Comment"

    @property
    def label(self) -> str:
        """Return a display label."""
        return self.value


@dataclass(frozen=True, slots=True)
class SearchFields:
    """An immutable set of selected search fields.

    The persisted form is a comma separated, sorted list of field values,
    e.g. ``"Artist,Title"``.
    """

    selected: frozenset[SearchField] = frozenset()

    DEFAULT: ClassVar["SearchFields"]

    @classmethod
    def of(cls, *fields: SearchField) -> "SearchFields":
        """Create a selection from the given fields."""
        return cls(frozenset(fields))

    @classmethod
    def from_raw_value(cls, raw_value: str) -> "SearchFields":
        """Parse the persisted form, ignoring unknown names."""
        known = {field.value: field for field in SearchField}
        return cls(frozenset(known[name] for name in raw_value.split(",") if name in known))

    @property
    def raw_value(self) -> str:
        """Return the persisted form."""
        return ",".join(sorted(field.value for field in self.selected))

    @property
    def fields(self) -> set[str]:
        """Return the selected MPD tag names (lower-cased)."""
        return {field.value.lower() for field in self.selected}

    @property
    def is_empty(self) -> bool:
        """Return True if nothing is selected."""
        return not self.selected

    def contains(self, field: SearchField) -> bool:
        """Return True if ``field`` is selected."""
        return field in self.selected

    def toggle(self, field: SearchField) -> "SearchFields":
        """Return a copy with ``field`` added or removed."""
        return SearchFields(self.selected ^ {field})

    def __contains__(self, field: object) -> bool:
        return field in self.selected


SearchFields.DEFAULT = SearchFields()
