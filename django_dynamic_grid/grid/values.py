"""
Interpretation of cell values per column type.

Cells are stored as text. Text columns use the text as is, Number columns hold
an ``int`` or ``float`` (``None`` when empty) in the projection and are shown
with grouped digits.
"""
import math
import re

from ..choices import ColumnType
from ..exceptions import ValidationError


NUMBER_KEYSTROKE_RE = re.compile(r'[0-9eE+\-.]*')


def empty_value(column_type):
    if column_type == ColumnType.NUMBER:
        return None
    return ''


def is_empty(value):
    return value is None or value == ''


def parse_number(text):
    """
    Parse ``text`` as an int when it is an integer literal, otherwise as a float.
    Raises ``ValueError`` for anything that is not a finite number.
    """
    text = text.strip()
    try:
        return int(text)
    except ValueError:
        pass
    number = float(text)
    if not math.isfinite(number):
        raise ValueError('%r is not a finite number' % text)
    return number


def cell_value(text, column_type):
    "Stored text to projection value."
    if text is None:
        return empty_value(column_type)
    if column_type == ColumnType.NUMBER:
        if not text.strip():
            return None
        try:
            return parse_number(text)
        except ValueError:
            # keep whatever was stored rather than hiding it
            return text
    return text


def accepts_keystroke(text, column_type):
    if column_type == ColumnType.NUMBER:
        return NUMBER_KEYSTROKE_RE.fullmatch(text) is not None
    return True


def validate_buffer(buffer, column_type):
    "Returns an error message for ``buffer``, or None when it can be committed."
    if column_type != ColumnType.NUMBER or not buffer.strip():
        return None
    try:
        parse_number(buffer)
    except ValueError:
        return '"%s" is not a number' % buffer
    return None


def coerce(buffer, column_type):
    error = validate_buffer(buffer, column_type)
    if error is not None:
        raise ValidationError(error)
    if column_type == ColumnType.NUMBER:
        if not buffer.strip():
            return None
        return parse_number(buffer)
    return buffer


def to_storage(value, column_type):
    if value is None:
        return ''
    return str(value)


def to_buffer(value, column_type):
    "Text an editor starts from when it opens on ``value``."
    if value is None:
        return ''
    return str(value)


def format_display(value, column_type):
    if is_empty(value):
        return ''
    if column_type == ColumnType.NUMBER and isinstance(value, (int, float)):
        return '{:,}'.format(value)
    return str(value)
