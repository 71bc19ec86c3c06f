"""Data models for MPD media, playlists, outputs and server settings."""

from mpdkit.models.artwork import Artwork
from mpdkit.models.media import Album, Artist, Media, Mediable, Song
from mpdkit.models.output import Output
from mpdkit.models.playlist import Playlist
from mpdkit.models.search import SearchField, SearchFields
from mpdkit.models.server import Server
from mpdkit.models.sorting import SortDescriptor, SortDirection, SortOption
from mpdkit.models.source import Source, SourceKind
from mpdkit.models.status import Stats, Status
from mpdkit.models.types import ArtworkGetter, IdleEvent, MediaType, PlayerState

__all__ = [
    "Album",
    "Artist",
    "Artwork",
    "ArtworkGetter",
    "IdleEvent",
    "Media",
    "MediaType",
    "Mediable",
    "Output",
    "PlayerState",
    "Playlist",
    "SearchField",
    "SearchFields",
    "Server",
    "SortDescriptor",
    "SortDirection",
    "SortOption",
    "Source",
    "SourceKind",
    "Stats",
    "Status",
    "Song",
]
