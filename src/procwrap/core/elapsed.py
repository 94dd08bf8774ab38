"""Parse process elapsed time as printed by ``ps -o etime``.

Accepted forms are ``MM:SS``, ``HH:MM:SS`` and ``DD-HH:MM:SS``.
"""


class ElapsedTimeParseError(Exception):
    """Elapsed time string is not in a recognised format."""


def _to_int(field: str, token: str) -> int:
    if not (field.isascii() and field.isdigit()):
        raise ElapsedTimeParseError(f"Non-numeric field {field!r} in elapsed time {token!r}")
    return int(field)


def parse_elapsed(token: str) -> int:
    """Convert an elapsed time string to seconds.

    Args:
        token: Elapsed time such as ``"2:05"``, ``"1:02:03"`` or ``"1-00:00:10"``

    Returns:
        Total seconds

    Raises:
        ElapsedTimeParseError: If the field count or content is invalid
    """
    text = token.strip()
    days = 0
    if "-" in text:
        day_part, _, text = text.partition("-")
        days = _to_int(day_part, token)
        fields = text.split(":")
        if len(fields) != 3:
            raise ElapsedTimeParseError(f"Day prefix requires HH:MM:SS, got {token!r}")
    else:
        fields = text.split(":")

    values = [_to_int(field, token) for field in fields]
    if len(values) == 2:
        minutes, seconds = values
        return minutes * 60 + seconds
    if len(values) == 3:
        hours, minutes, seconds = values
        return ((days * 24 + hours) * 60 + minutes) * 60 + seconds

    raise ElapsedTimeParseError(f"Expected 2 or 3 fields in elapsed time, got {token!r}")
