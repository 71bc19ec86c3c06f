"""Audio output model."""

import logging
from dataclasses import dataclass, field

logger = logging.getLogger(__name__)

_ATTRIBUTE_PREFIX = "attribute:"


@dataclass(frozen=True, slots=True)
class Output:
    """An MPD audio output (ALSA device, HTTP stream, ...).

    Attributes:
        id: Output id used by ``enableoutput``/``toggleoutput``.
        name: Configured output name.
        plugin: Output plugin, e.g. "alsa", "pulse" or "httpd".
        is_enabled: Whether the output is enabled.
        attributes: Plugin specific runtime attributes.
    """

    id: int
    name: str
    plugin: str
    is_enabled: bool = False
    attributes: dict[str, str] = field(default_factory=dict, hash=False)

    @property
    def is_httpd(self) -> bool:
        """Return True for HTTP streaming outputs."""
        return self.plugin == "httpd"

    @classmethod
    def from_fields(cls, fields: dict[str, str]) -> "Output | None":
        """Build an output from lower-cased response fields.

        Returns None unless ``outputid``, ``outputname`` and ``plugin`` are
        all present and the id is an integer.
        """
        try:
            output_id = int(fields["outputid"])
            name = fields["outputname"]
            plugin = fields["plugin"]
        except (KeyError, ValueError):
            logger.debug("Skipping incomplete output record: %s", fields)
            return None

        attributes = {
            key[len(_ATTRIBUTE_PREFIX) :].strip(): value
            for key, value in fields.items()
            if key.startswith(_ATTRIBUTE_PREFIX)
        }

        return cls(
            id=output_id,
            name=name,
            plugin=plugin,
            is_enabled=fields.get("outputenabled") == "1",
            attributes=attributes,
        )
