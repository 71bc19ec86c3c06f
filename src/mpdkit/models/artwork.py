"""Cover art payload."""

from dataclasses import dataclass, field


@dataclass(frozen=True, slots=True)
class Artwork:
    """Raw cover art bytes for a file.

    Two artworks are equal when their bytes are equal, so songs sharing one
    cover compare equal regardless of which file they came from.

    Attributes:
        data: Raw image bytes.
        file: The file URI the art was requested for.
        mime_type: MIME type if the server reported one.
    """

    data: bytes
    file: str = field(default="", compare=False)
    mime_type: str = field(default="", compare=False)

    @property
    def is_valid(self) -> bool:
        """Return True if art data is present."""
        return len(self.data) > 0
