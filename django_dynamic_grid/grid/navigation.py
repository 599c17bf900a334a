"""
Keyboard movement over the grid.

Arrow keys clamp at the edges. Tab and Shift+Tab walk the grid column by column
and wrap onto the next or previous row; at the very first or last cell they do
nothing.
"""
from dataclasses import dataclass


ARROW_UP = 'ArrowUp'
ARROW_DOWN = 'ArrowDown'
ARROW_LEFT = 'ArrowLeft'
ARROW_RIGHT = 'ArrowRight'
TAB = 'Tab'
ENTER = 'Enter'
ESCAPE = 'Escape'
BACKSPACE = 'Backspace'
DELETE = 'Delete'

ARROW_DELTAS = {
    ARROW_UP: (-1, 0),
    ARROW_DOWN: (1, 0),
    ARROW_LEFT: (0, -1),
    ARROW_RIGHT: (0, 1),
}


@dataclass(frozen=True)
class KeyEvent:
    "A keydown, named the way browsers name ``KeyboardEvent.key``."
    key: str
    shift: bool = False
    ctrl: bool = False
    meta: bool = False
    alt: bool = False

    @property
    def is_printable(self):
        return len(self.key) == 1 and not (self.ctrl or self.meta)


def clamp(index, count):
    return max(0, min(index, count - 1))


def arrow_target(row, column, key, row_count, column_count):
    delta_row, delta_column = ARROW_DELTAS[key]
    return clamp(row + delta_row, row_count), clamp(column + delta_column, column_count)


def tab_target(row, column, row_count, column_count, backwards=False):
    "Next cell in reading order, or None at the end of the grid."
    if backwards:
        if column > 0:
            return row, column - 1
        if row > 0:
            return row - 1, column_count - 1
        return None
    if column < column_count - 1:
        return row, column + 1
    if row < row_count - 1:
        return row + 1, 0
    return None


def step_target(row, column, row_count, column_count, key, backwards=False):
    """
    Where the selection lands after committing an edit: Enter moves down,
    Tab moves right (left with Shift). Both clamp instead of wrapping.
    """
    if key == ENTER:
        return clamp(row + 1, row_count), column
    step = -1 if backwards else 1
    return row, clamp(column + step, column_count)
