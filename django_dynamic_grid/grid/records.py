import uuid
from dataclasses import dataclass, field
from typing import Optional

from ..choices import ColumnType


def new_key():
    return uuid.uuid4().hex


class MutationStatus(object):
    PENDING = 'pending'
    COMMITTED = 'committed'
    FAILED = 'failed'


@dataclass
class GridColumn:
    """
    A column as the engine sees it.

    ``key`` is the local identity used by the projection and never changes;
    ``id`` is the entity store id and stays ``None`` while the create is in flight.
    """
    id: Optional[int]
    name: str
    type: str = ColumnType.TEXT
    width: int = 200
    position: int = 0
    status: str = MutationStatus.COMMITTED
    key: str = field(default_factory=new_key)


@dataclass
class GridRow:
    id: Optional[int]
    position: int = 0
    status: str = MutationStatus.COMMITTED
    key: str = field(default_factory=new_key)


@dataclass
class GridCell:
    id: int
    row_id: int
    column_id: int
    value: str = ''


@dataclass
class Mutation:
    """One optimistic change and where its persistence call stands."""
    kind: str
    target: object
    status: str = MutationStatus.PENDING
    error: Optional[Exception] = None
