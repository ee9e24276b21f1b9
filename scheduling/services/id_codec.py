"""
id_codec.py
-----------
Convert external string ids to 64-bit integer primary keys and back.

Ids travel as strings at the API boundary so clients never lose precision on
values above 2**53.
"""

from ..exceptions import InvalidId

MAX_ID = 2 ** 63 - 1


def parse_id(value) -> int:
    """
    Parse a positive 64-bit id.

    Raises:
        InvalidId: for None, blanks, non-digits, zero/negatives, or overflow.
    """
    if isinstance(value, bool):
        raise InvalidId()
    if isinstance(value, int):
        number = value
    else:
        text = str(value if value is not None else "").strip()
        if not (text.isascii() and text.isdigit()):
            raise InvalidId()
        number = int(text)

    if number <= 0 or number > MAX_ID:
        raise InvalidId()
    return number


def parse_ids(values) -> list:
    """Parse a list of ids, preserving order."""
    if values is None:
        raise InvalidId()
    return [parse_id(value) for value in values]


def format_id(value: int) -> str:
    return str(value)
