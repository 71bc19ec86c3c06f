"""Outbound encoding of MPD commands.

Arguments are quoted and escaped here; nothing in this module touches the
network. Reference: https://mpd.readthedocs.io/en/stable/protocol.html
"""

COMMAND_LIST_BEGIN = "command_list_begin"
COMMAND_LIST_END = "command_list_end"


def escape(value: str, quote: str | None = '"') -> str:
    """Escape an argument for an MPD command.

    Backslashes are always doubled. With a quote character, that character is
    escaped as well and the result is wrapped in it. Only ``"`` and ``'`` are
    escaped; any other quote character just wraps the value.

    Args:
        value: The raw argument.
        quote: Quote character to wrap the result in, or None.

    Returns:
        The escaped (and possibly quoted) argument.
    """
    escaped = value.replace("\\", "\\\\")
    if quote is None:
        return escaped

    if quote == '"':
        escaped = escaped.replace('"', '\\"')
    elif quote == "'":
        escaped = escaped.replace("'", "\\'")

    return f"{quote}{escaped}{quote}"


def filter_clause(key: str, value: str, comparator: str = "==", quote: bool = True) -> str:
    """Build a filter expression for ``find``, ``search`` and friends.

    The value is single-quoted inside the clause, then the whole clause is
    escaped again so it survives being passed as one double-quoted argument.

    Args:
        key: Tag to filter on, e.g. "artist".
        value: Value to compare against.
        comparator: Comparison operator, "==" by default.
        quote: Wrap the clause in double quotes.

    Returns:
        The escaped clause.
    """
    escaped = escape(value, quote="'")
    clause = f"({key} {comparator} {escaped})"
    clause = clause.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{clause}"' if quote else clause


def build_command_line(commands: list[str]) -> str:
    """Join commands into one request, wrapping several in a command list."""
    if len(commands) > 1:
        commands = [COMMAND_LIST_BEGIN, *commands, COMMAND_LIST_END]
    return "\n".join(commands)


def format_command(command: str, *args: str | int | float) -> str:
    """Format an MPD command with arguments.

    String arguments are escaped and double-quoted; numbers are passed as is.

    Args:
        command: The MPD command name.
        *args: Command arguments.

    Returns:
        Formatted command string (without newline).
    """
    if not args:
        return command
    parts = [arg if not isinstance(arg, str) else escape(arg) for arg in args]
    return " ".join([command, *(str(part) for part in parts)])


def encode(line: str) -> bytes:
    """Encode one request for the wire, adding the trailing newline."""
    return f"{line}\n".encode()
