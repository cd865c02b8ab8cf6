"""
Session timestamp codec.

Converts between the `YYYY-MM-DD HH-MM-SS` session identifier (local time)
and timezone-aware datetimes. Every artifact of one session shares this
identifier as its basename.

Dependencies: None (pure domain layer)
System role: Session identity
"""

from datetime import datetime, timezone

from annotator.core.exceptions import MalformedTimestampError

JSON_EXTENSION = ".json"

VIDEO_EXTENSIONS = frozenset(
    {".mkv", ".mp4", ".mov", ".webm", ".avi", ".flv", ".m4v", ".ts"}
)

KNOWN_EXTENSIONS = VIDEO_EXTENSIONS | {JSON_EXTENSION}


def strip_extension(name: str) -> str:
    """
    Remove a known artifact extension from a basename.

    Args:
        name: Basename, with or without extension

    Returns:
        str: Basename without a trailing known extension
    """
    dot = name.rfind(".")
    if dot != -1 and name[dot:].lower() in KNOWN_EXTENSIONS:
        return name[:dot]
    return name


def _split_triplet(part: str, value: str) -> list[int]:
    components = part.split("-")
    if len(components) != 3:
        raise MalformedTimestampError(value, "expected three dash-separated components")
    for component in components:
        if not (component.isascii() and component.isdigit()):
            raise MalformedTimestampError(value, f"non-numeric component {component!r}")
    return [int(component) for component in components]


def parse(name: str) -> datetime:
    """
    Parse a session identifier into an aware local-time datetime.

    Args:
        name: `YYYY-MM-DD HH-MM-SS`, optionally with a known extension

    Returns:
        datetime: Instant in the local timezone

    Raises:
        MalformedTimestampError: Wrong arity, non-numeric or invalid date
    """
    stem = strip_extension(name)
    parts = stem.split(" ")
    if len(parts) != 2:
        raise MalformedTimestampError(name, "expected a date and a time separated by one space")

    year, month, day = _split_triplet(parts[0], name)
    hour, minute, second = _split_triplet(parts[1], name)

    try:
        return datetime(year, month, day, hour, minute, second).astimezone()
    except (ValueError, OverflowError, OSError) as e:
        raise MalformedTimestampError(name, str(e)) from e


def format(instant: datetime) -> str:
    """
    Format an instant as a session identifier in local time.

    Naive datetimes are taken as local time already.

    Args:
        instant: Instant to format (sub-second part is dropped)

    Returns:
        str: `YYYY-MM-DD HH-MM-SS`
    """
    local = instant.astimezone() if instant.tzinfo is not None else instant
    return (
        f"{local.year:04d}-{local.month:02d}-{local.day:02d} "
        f"{local.hour:02d}-{local.minute:02d}-{local.second:02d}"
    )


def is_valid(name: str) -> bool:
    """Check whether `name` parses as a session identifier."""
    try:
        parse(name)
    except MalformedTimestampError:
        return False
    return True


def ensure_canonical(name: str) -> str:
    """
    Require the exact zero-padded `YYYY-MM-DD HH-MM-SS` shape.

    Args:
        name: Candidate identifier, optionally with a known extension

    Returns:
        str: The identifier without extension

    Raises:
        MalformedTimestampError: Not parseable, or not zero-padded
    """
    stem = strip_extension(name)
    if format(parse(stem)) != stem:
        raise MalformedTimestampError(name, "not zero-padded")
    return stem


def now_session_id() -> str:
    """Session identifier for the current local time."""
    return format(datetime.now().astimezone())


def to_epoch_millis(instant: datetime) -> int:
    """Convert a datetime to epoch milliseconds (naive = local time)."""
    return int(round(instant.timestamp() * 1000))


def from_epoch_millis(millis: int) -> datetime:
    """Convert epoch milliseconds to an aware local datetime."""
    return datetime.fromtimestamp(millis / 1000, tz=timezone.utc).astimezone()
