from dataclasses import dataclass
from typing import Optional


class Idle(object):
    "Nothing selected."

    coordinate = None

    def __eq__(self, other):
        return isinstance(other, Idle)

    def __hash__(self):
        return hash(Idle)

    def __repr__(self):
        return 'Idle()'


IDLE = Idle()


@dataclass(frozen=True)
class Selected:
    row: int
    column: int

    @property
    def coordinate(self):
        return (self.row, self.column)


@dataclass
class Editing:
    """
    The cell at (row, column) is open in the editor. ``buffer`` holds the text
    typed so far and ``error`` the validation message for it, if any.
    """
    row: int
    column: int
    buffer: str = ''
    error: Optional[str] = None

    @property
    def coordinate(self):
        return (self.row, self.column)
