from .engine import GridEngine, Notification
from .navigation import KeyEvent
from .projection import GridProjection, build_projection
from .records import GridCell, GridColumn, GridRow, Mutation, MutationStatus
from .state import IDLE, Editing, Idle, Selected
from .viewport import Viewport
