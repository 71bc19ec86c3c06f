"""MPD response parsing.

MPD answers with ``key: value`` lines terminated by ``OK`` (or ``ACK`` on
error, which the connection raises before anything reaches this module).
Multi-record responses repeat a marker key, e.g. ``file`` for songs or
``outputid`` for outputs, at the start of every record.

Reference: https://mpd.readthedocs.io/en/stable/protocol.html
"""

import logging

from mpdkit.api.errors import MalformedResponseError, UnsupportedOperationError
from mpdkit.models.media import (
    UNKNOWN_ALBUM,
    UNKNOWN_ARTIST,
    UNKNOWN_TITLE,
    Album,
    Artist,
    Media,
    Song,
)
from mpdkit.models.output import Output
from mpdkit.models.playlist import Playlist
from mpdkit.models.status import Stats, Status
from mpdkit.models.types import IdleEvent, MediaType, PlayerState

logger = logging.getLogger(__name__)

SUCCESS_MARKER = "OK"
NAME_SEPARATOR = " - "


def parse_line(line: str) -> tuple[str, str]:
    """Split a response line into a lower-cased key and a value.

    Only the first colon splits, so ``"a:b:c"`` gives ``("a", "b:c")``.

    Raises:
        MalformedResponseError: If the line has no colon.
    """
    parts = line.split(":", 1)
    if len(parts) != 2:
        raise MalformedResponseError(f"Malformed response line: {line!r}")
    return parts[0].strip().lower(), parts[1].strip()


def _is_terminator(line: str) -> bool:
    return line == SUCCESS_MARKER or line == "list_OK"


def parse_fields(lines: list[str]) -> dict[str, str]:
    """Fold response lines into a dict; later keys overwrite earlier ones."""
    fields: dict[str, str] = {}
    for line in lines:
        if _is_terminator(line):
            continue
        key, value = parse_line(line)
        fields[key] = value
    return fields


def chunk_lines(lines: list[str], prefix: str) -> list[list[str]]:
    """Split a flat response into records starting with ``prefix``.

    Lines before the first record are dropped. When no line carries the
    prefix at all, every line is returned as a single chunk.
    """
    if not lines:
        return []

    chunks: list[list[str]] = []
    for line in lines:
        if line.startswith(prefix):
            chunks.append([line])
        elif chunks:
            chunks[-1].append(line)

    if not chunks:
        return [list(lines)]
    return chunks


def _to_int(value: str | None) -> int | None:
    if value is None:
        return None
    try:
        # track and disc may be "3/12"
        return int(value.split("/", 1)[0])
    except ValueError:
        return None


def _to_index(value: str | None) -> int | None:
    number = _to_int(value)
    if number is None or number < 0:
        return None
    return number


def _to_float(value: str | None) -> float | None:
    if value is None:
        return None
    try:
        return float(value)
    except ValueError:
        return None


def _artist_name(fields: dict[str, str]) -> str:
    for key in ("albumartist", "artist"):
        if key in fields:
            return fields[key]
    return UNKNOWN_ARTIST


def _song_artist_and_title(fields: dict[str, str]) -> tuple[str, str]:
    name = fields.get("name")
    if name is not None and "artist" not in fields and "title" not in fields:
        artist, separator, title = name.partition(NAME_SEPARATOR)
        if separator:
            return artist, title
        return UNKNOWN_ARTIST, name
    return fields.get("artist", UNKNOWN_ARTIST), fields.get("title", UNKNOWN_TITLE)


def _build_artist(file: str, fields: dict[str, str]) -> Artist:
    return Artist(file=file, name=_artist_name(fields), name_sort=fields.get("albumartistsort"))


def _build_album(file: str, fields: dict[str, str]) -> Album:
    return Album(
        file=file,
        title=fields.get("album", UNKNOWN_ALBUM),
        artist=_build_artist(file, fields),
        title_sort=fields.get("albumsort"),
    )


def _build_song(file: str, fields: dict[str, str], index: int | None) -> Song:
    artist, title = _song_artist_and_title(fields)
    position = _to_index(fields.get("pos"))
    disc = _to_int(fields.get("disc"))
    track = _to_int(fields.get("track"))
    duration = _to_float(fields.get("duration"))
    if duration is None:
        duration = _to_float(fields.get("time"))

    return Song(
        file=file,
        album=_build_album(file, fields),
        identifier=_to_index(fields.get("id")),
        position=position if position is not None else index,
        artist=artist,
        artist_sort=fields.get("artistsort"),
        title=title,
        title_sort=fields.get("titlesort"),
        duration=duration if duration is not None else 0.0,
        disc=disc if disc is not None else 1,
        track=track if track is not None else 1,
        genre=fields.get("genre"),
        composer=fields.get("composer"),
        performer=fields.get("performer"),
        conductor=fields.get("conductor"),
        ensemble=fields.get("ensemble"),
        mood=fields.get("mood"),
        comment=fields.get("comment"),
    )


def parse_media_response(
    lines: list[str],
    media_type: MediaType,
    index: int | None = None,
) -> Media:
    """Build one media entity from a response record.

    Args:
        lines: The record's lines; ``OK`` terminators are ignored.
        media_type: Which entity to build.
        index: Fallback song position when the record has no ``pos``.

    Returns:
        A Song, Album or Artist depending on ``media_type``.

    Raises:
        MalformedResponseError: If ``file`` is missing or a line is malformed.
        UnsupportedOperationError: For media types other than song, album or artist.
    """
    fields = parse_fields(lines)

    file = fields.get("file")
    if file is None:
        raise MalformedResponseError("Media record without a 'file' field")

    match media_type:
        case MediaType.SONG:
            return _build_song(file, fields, index)
        case MediaType.ALBUM:
            return _build_album(file, fields)
        case MediaType.ARTIST:
            return _build_artist(file, fields)
        case _:
            raise UnsupportedOperationError(f"Cannot parse {media_type.value} from a media record")


def parse_media_response_array(
    lines: list[str],
    media_type: MediaType,
    index: bool = False,
) -> list[Media]:
    """Parse a multi-record response chunked on ``file:``.

    With ``index``, each record's position in the response becomes the
    fallback position for songs without ``pos``.
    """
    content = [line for line in lines if not _is_terminator(line)]
    return [
        parse_media_response(chunk, media_type, position if index else None)
        for position, chunk in enumerate(chunk_lines(content, "file:"))
    ]


def parse_status(lines: list[str]) -> Status:
    """Parse the combined ``status`` + ``currentsong`` response.

    Raises:
        MalformedResponseError: If ``state`` holds an unknown value.
    """
    fields = parse_fields(lines)

    state = None
    if "state" in fields:
        try:
            state = PlayerState(fields["state"])
        except ValueError as e:
            raise MalformedResponseError(f"Unknown player state: {fields['state']}") from e

    song = None
    if "file" in fields:
        song = _build_song(fields["file"], fields, None)

    def flag(key: str) -> bool | None:
        return fields[key] == "1" if key in fields else None

    return Status(
        state=state,
        is_consume=flag("consume"),
        is_random=flag("random"),
        is_repeat=flag("repeat"),
        elapsed=_to_float(fields.get("elapsed")),
        volume=_to_int(fields.get("volume")),
        playlist_version=_to_int(fields.get("playlist")),
        playlist_length=_to_int(fields.get("playlistlength")),
        song=song,
    )


def parse_stats(lines: list[str]) -> Stats:
    """Parse a ``stats`` response."""
    fields = parse_fields(lines)
    return Stats(
        artists=_to_int(fields.get("artists")),
        albums=_to_int(fields.get("albums")),
        songs=_to_int(fields.get("songs")),
        uptime=_to_int(fields.get("uptime")),
        playtime=_to_int(fields.get("db_playtime")),
        update=_to_int(fields.get("db_update")),
    )


def parse_playlists(lines: list[str]) -> list[Playlist]:
    """Parse a ``listplaylists`` response."""
    playlists: list[Playlist] = []
    for line in lines:
        if _is_terminator(line):
            continue
        key, value = parse_line(line)
        if key == "playlist":
            playlists.append(Playlist(value))
    return playlists


def _output_fields(lines: list[str]) -> dict[str, str]:
    fields: dict[str, str] = {}
    for line in lines:
        key, value = parse_line(line)
        if key == "attribute":
            # attribute: dop=0
            name, _, value = value.partition("=")
            key = f"attribute:{name}"
        fields[key] = value
    return fields


def parse_outputs(lines: list[str]) -> list[Output]:
    """Parse an ``outputs`` response, skipping incomplete records."""
    content = [line for line in lines if not _is_terminator(line)]
    outputs: list[Output] = []
    for chunk in chunk_lines(content, "outputid:"):
        output = Output.from_fields(_output_fields(chunk))
        if output is None:
            logger.warning("Ignoring incomplete output record: %s", chunk)
            continue
        outputs.append(output)
    return outputs


def parse_idle_event(lines: list[str]) -> IdleEvent:
    """Return the first subsystem reported by an ``idle`` response.

    Raises:
        MalformedResponseError: If there is no ``changed:`` line or the
            subsystem is unknown.
    """
    for line in lines:
        if _is_terminator(line):
            continue
        key, value = parse_line(line)
        if key != "changed":
            continue
        try:
            return IdleEvent(value)
        except ValueError as e:
            raise MalformedResponseError(f"Unknown idle event: {value}") from e
    raise MalformedResponseError("Idle response without a 'changed' line")


def find_field(lines: list[str], key: str) -> str | None:
    """Return the value of the first ``key`` line, or None."""
    for line in lines:
        if _is_terminator(line) or ":" not in line:
            continue
        name, value = parse_line(line)
        if name == key:
            return value
    return None
