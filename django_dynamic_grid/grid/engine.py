import asyncio
import logging
from dataclasses import dataclass
from typing import Optional

from ..choices import ColumnType
from ..conf import grid_setting
from ..exceptions import DuplicateNameError, PersistenceError, ValidationError
from . import navigation
from . import values as cell_values
from .navigation import KeyEvent
from .projection import GridProjection, build_projection
from .records import GridColumn, GridRow, Mutation, MutationStatus
from .state import IDLE, Editing, Selected

logger = logging.getLogger(__name__)


@dataclass
class Notification:
    level: str
    message: str
    mutation: Optional[Mutation] = None


class GridEngine(object):
    """
    Selection, keyboard navigation, inline editing and optimistic mutations for
    the grid of one table.

    The pointer and keyboard handlers are plain methods that must run inside an
    event loop: a commit updates the projection at once and leaves the call to
    the gateway to a background task, see ``drain()``. Adding rows and columns
    are coroutines that return once every call they issued has resolved.

    Failed persistence calls never raise out of the engine. The optimistic
    change is rolled back, the mutation is marked failed and a ``Notification``
    is recorded (and passed to ``on_notify`` when given).
    """

    def __init__(self, gateway, table_id, viewport=None, on_notify=None):
        self.gateway = gateway
        self.table_id = table_id
        self.viewport = viewport
        self.on_notify = on_notify
        self.state = IDLE
        self.projection = GridProjection()
        self.mutations = []
        self.notifications = []
        # (row key, column key) -> id of the persisted cell
        self._cell_ids = {}
        # (row key, column key) -> (mutation, value) of the latest unresolved commit
        self._inflight = {}
        self._cell_locks = {}
        # (row key, column key) -> last value the entity store accepted, kept while commits are in flight
        self._confirmed = {}
        # row/column key -> future resolved with True once its create went through
        self._creating = {}
        self._tasks = set()

    ####################
    # LOADING          #
    ####################

    async def load(self):
        columns, rows, cells = await asyncio.gather(
            self.gateway.list_columns(self.table_id),
            self.gateway.list_rows(self.table_id),
            self.gateway.list_cells_for_table(self.table_id),
        )
        self._apply_snapshot(columns, rows, cells)
        return self.projection

    refresh = load

    def _apply_snapshot(self, columns, rows, cells):
        """
        Rebuild the projection from entity store records. Local entities are
        matched by id and kept, so keys, selection and pending creates survive.
        """
        anchor = self._anchor()
        merged_columns = _merge(self.projection.columns, columns, ('name', 'type', 'width', 'position'))
        merged_rows = _merge(self.projection.rows, rows, ('position',))
        projection = build_projection(merged_columns, merged_rows, cells)

        row_keys = {row.id: row.key for row in projection.rows if row.id is not None}
        column_keys = {column.id: column.key for column in projection.columns if column.id is not None}
        cell_ids = {}
        for cell in cells:
            if cell.row_id in row_keys and cell.column_id in column_keys:
                cell_ids[(row_keys[cell.row_id], column_keys[cell.column_id])] = cell.id
        for coordinate, cell_id in self._cell_ids.items():
            if coordinate[0] in row_keys.values() and coordinate[1] in column_keys.values():
                cell_ids.setdefault(coordinate, cell_id)
        self._cell_ids = cell_ids

        for (row_key, column_key), (mutation, value) in self._inflight.items():
            row_index = projection.row_index(row_key)
            column_index = projection.column_index(column_key)
            if row_index is not None and column_index is not None:
                projection.set_value(row_index, column_index, value)

        self.projection = projection
        self._reanchor(anchor)

    ####################
    # STATE            #
    ####################

    def _set_state(self, state):
        previous = self.state.coordinate
        self.state = state
        if self.viewport is not None and state.coordinate is not None and state.coordinate != previous:
            self.viewport.scroll_into_view(state.row, state.column, self.projection.column_widths())

    def _anchor(self):
        coordinate = self.state.coordinate
        if coordinate is None:
            return None
        row, column = coordinate
        return self.projection.rows[row].key, self.projection.columns[column].key, row, column

    def _reanchor(self, anchor):
        "Point the selection back at the same cell after rows or columns moved."
        if anchor is None:
            return
        row_key, column_key, row, column = anchor
        projection = self.projection
        if not projection.row_count or not projection.column_count:
            self._set_state(IDLE)
            return
        row_index = projection.row_index(row_key)
        column_index = projection.column_index(column_key)
        still_there = row_index is not None and column_index is not None
        if row_index is None:
            row_index = navigation.clamp(row, projection.row_count)
        if column_index is None:
            column_index = navigation.clamp(column, projection.column_count)
        state = self.state
        if isinstance(state, Editing) and still_there:
            self._set_state(Editing(row_index, column_index, state.buffer, state.error))
        else:
            self._set_state(Selected(row_index, column_index))

    ####################
    # POINTER          #
    ####################

    def click(self, row, column):
        if not self.projection.contains(row, column):
            return False
        state = self.state
        if isinstance(state, Editing):
            if state.coordinate == (row, column):
                return True
            self._leave_editing(state)
        self._set_state(Selected(row, column))
        return True

    def double_click(self, row, column):
        if not self.projection.contains(row, column):
            return False
        state = self.state
        if isinstance(state, Editing):
            if state.coordinate == (row, column):
                return True
            self._leave_editing(state)
        self._begin_edit(row, column)
        return True

    def blur(self):
        state = self.state
        if not isinstance(state, Editing):
            return False
        if not self._commit(state):
            return False
        self._set_state(Selected(state.row, state.column))
        return True

    def deselect(self):
        self._set_state(IDLE)

    ####################
    # KEYBOARD         #
    ####################

    def handle_key(self, event):
        """
        Feed one keydown to the engine. ``event`` is a ``KeyEvent`` or a key
        name. Returns True when the key was consumed.
        """
        if isinstance(event, str):
            event = KeyEvent(event)
        state = self.state
        if isinstance(state, Editing):
            return self._editing_key(state, event)
        if isinstance(state, Selected):
            return self._selected_key(state, event)
        return False

    def _selected_key(self, state, event):
        key = event.key
        row_count = self.projection.row_count
        column_count = self.projection.column_count
        if key in navigation.ARROW_DELTAS:
            target = navigation.arrow_target(state.row, state.column, key, row_count, column_count)
            self._set_state(Selected(*target))
            return True
        if key == navigation.TAB:
            target = navigation.tab_target(state.row, state.column, row_count, column_count, backwards=event.shift)
            if target is not None:
                self._set_state(Selected(*target))
            return True
        if key == navigation.ESCAPE:
            self._set_state(IDLE)
            return True
        if key == navigation.ENTER:
            self._begin_edit(state.row, state.column)
            return True
        column = self.projection.columns[state.column]
        if key in (navigation.BACKSPACE, navigation.DELETE):
            self._commit_value(state.row, state.column, cell_values.empty_value(column.type))
            return True
        if event.is_printable:
            if not cell_values.accepts_keystroke(key, column.type):
                return False
            # typing over a selected cell replaces its value
            self._set_state(Editing(state.row, state.column, key, cell_values.validate_buffer(key, column.type)))
            return True
        return False

    def _editing_key(self, state, event):
        key = event.key
        if key == navigation.ESCAPE:
            self._set_state(Selected(state.row, state.column))
            return True
        if key in (navigation.ENTER, navigation.TAB):
            if not self._commit(state):
                return True
            target = navigation.step_target(
                state.row, state.column,
                self.projection.row_count, self.projection.column_count,
                key, backwards=event.shift,
            )
            self._set_state(Selected(*target))
            return True
        if key == navigation.BACKSPACE:
            return self.edit_buffer(state.buffer[:-1])
        if event.is_printable:
            return self.edit_buffer(state.buffer + key)
        return False

    def edit_buffer(self, text):
        """
        Replace the editor text. Characters a Number column cannot hold are
        refused, text that does not parse yet is kept with an error.
        """
        state = self.state
        if not isinstance(state, Editing):
            return False
        column_type = self.projection.columns[state.column].type
        if not cell_values.accepts_keystroke(text, column_type):
            return False
        state.buffer = text
        state.error = cell_values.validate_buffer(text, column_type)
        return True

    ####################
    # EDITING          #
    ####################

    def _begin_edit(self, row, column):
        column_type = self.projection.columns[column].type
        buffer = cell_values.to_buffer(self.projection.value_at(row, column), column_type)
        self._set_state(Editing(row, column, buffer, cell_values.validate_buffer(buffer, column_type)))

    def _leave_editing(self, state):
        if not self._commit(state):
            logger.debug('Discarding invalid edit at %s: %s', state.coordinate, state.error)

    def _commit(self, state):
        column = self.projection.columns[state.column]
        try:
            value = cell_values.coerce(state.buffer, column.type)
        except ValidationError as e:
            state.error = str(e)
            return False
        self._commit_value(state.row, state.column, value)
        return True

    def _commit_value(self, row_index, column_index, value):
        previous = self.projection.value_at(row_index, column_index)
        if value == previous:
            return None
        loop = asyncio.get_running_loop()
        row = self.projection.rows[row_index]
        column = self.projection.columns[column_index]
        coordinate = (row.key, column.key)
        mutation = self._begin('commit_cell', coordinate)
        if coordinate not in self._inflight:
            self._confirmed[coordinate] = previous
        self.projection.set_value(row_index, column_index, value)
        self._inflight[coordinate] = (mutation, value)
        self._spawn(loop, self._persist_cell(mutation, row, column, previous, value))
        return mutation

    async def _persist_cell(self, mutation, row, column, previous, value):
        coordinate = (row.key, column.key)
        # one call per cell at a time, so an absent cell is only ever created once
        lock = self._cell_locks.setdefault(coordinate, asyncio.Lock())
        async with lock:
            if not await self._wait_created(row.key, column.key):
                if self._forget(mutation, coordinate):
                    self._confirmed.pop(coordinate, None)
                mutation.status = MutationStatus.FAILED
                return
            text = cell_values.to_storage(value, column.type)
            cell_id = self._cell_ids.get(coordinate)
            try:
                if cell_id is None:
                    cell = await self.gateway.create_cell(row.id, column.id, text)
                    self._cell_ids[coordinate] = cell.id
                else:
                    await self.gateway.update_cell(cell_id, text)
            except PersistenceError as e:
                if self._forget(mutation, coordinate):
                    # earlier commits may have failed too, go back to what was last saved
                    restored = self._confirmed.pop(coordinate, previous)
                    row_index = self.projection.row_index(row.key)
                    column_index = self.projection.column_index(column.key)
                    if row_index is not None and column_index is not None:
                        self.projection.set_value(row_index, column_index, restored)
                self._fail(mutation, e, 'Could not save the value in "%s"' % column.name)
                return
        if self._forget(mutation, coordinate):
            self._confirmed.pop(coordinate, None)
        elif coordinate in self._confirmed:
            self._confirmed[coordinate] = value
        self._succeed(mutation)
        if grid_setting('REFRESH_AFTER_COMMIT'):
            await self._refresh_quietly()

    def _forget(self, mutation, coordinate):
        "Drop the in-flight marker if ``mutation`` is still the latest commit to the cell."
        current = self._inflight.get(coordinate)
        if current is None or current[0] is not mutation:
            return False
        del self._inflight[coordinate]
        return True

    ####################
    # ROWS & COLUMNS   #
    ####################

    def check_column_name(self, name, exclude=None):
        name = name.strip()
        if not name:
            raise ValidationError('Column name cannot be blank')
        folded = name.lower()
        for column in self.projection.columns:
            if column.key != exclude and column.name.lower() == folded:
                raise DuplicateNameError(name)
        return name

    async def add_column(self, name, column_type=ColumnType.TEXT, width=None):
        """
        Add a column at the end of the table. Raises ``DuplicateNameError`` or
        ``ValidationError`` before anything changes; returns the new column, or
        None when the entity store refused it.
        """
        name = self.check_column_name(name)
        if column_type not in ColumnType.values:
            raise ValidationError('Unknown column type "%s"' % column_type)
        increment = grid_setting('POSITION_INCREMENT')
        positions = [column.position for column in self.projection.columns]
        column = GridColumn(
            id=None,
            name=name,
            type=column_type,
            width=width or grid_setting('DEFAULT_COLUMN_WIDTH'),
            position=max(positions) + increment if positions else 0,
            status=MutationStatus.PENDING,
        )
        self.projection.add_column(column)
        mutation = self._begin('create_column', column.key)
        created = asyncio.get_running_loop().create_future()
        self._creating[column.key] = created
        try:
            persisted = None
            try:
                persisted = await self.gateway.create_column(self.table_id, name, column_type, column.position)
                column.id = persisted.id
                rows = [row for row in self.projection.rows if row.id is not None]
                cells = await _gather(
                    self.gateway.create_cell(row.id, persisted.id, '') for row in rows
                )
            except PersistenceError as e:
                self._remove_column(column.key)
                if persisted is not None:
                    await self._compensate('delete_column', self.gateway.delete_column, persisted.id)
                self._fail(mutation, e, 'Could not add the column "%s"' % name)
                created.set_result(False)
                return None
            for row, cell in zip(rows, cells):
                self._cell_ids[(row.key, column.key)] = cell.id
            column.status = MutationStatus.COMMITTED
            self._succeed(mutation)
            created.set_result(True)
            return column
        finally:
            self._creating.pop(column.key, None)
            if not created.done():
                created.set_result(False)

    async def add_row(self):
        """
        Append an empty row. Returns the row, or None when it could not be
        persisted together with all of its cells.
        """
        increment = grid_setting('POSITION_INCREMENT')
        row = GridRow(id=None, position=self.projection.row_count * increment, status=MutationStatus.PENDING)
        self.projection.add_row(row)
        mutation = self._begin('create_row', row.key)
        created = asyncio.get_running_loop().create_future()
        self._creating[row.key] = created
        try:
            persisted = None
            try:
                persisted = await self.gateway.create_row(self.table_id, row.position)
                row.id = persisted.id
                columns = [column for column in self.projection.columns if column.id is not None]
                cells = await _gather(
                    self.gateway.create_cell(persisted.id, column.id, '') for column in columns
                )
            except PersistenceError as e:
                self._remove_row(row.key)
                if persisted is not None:
                    await self._compensate('delete_row', self.gateway.delete_row, persisted.id)
                self._fail(mutation, e, 'Could not add a row')
                created.set_result(False)
                return None
            for column, cell in zip(columns, cells):
                self._cell_ids[(row.key, column.key)] = cell.id
            row.status = MutationStatus.COMMITTED
            self._succeed(mutation)
            created.set_result(True)
            return row
        finally:
            self._creating.pop(row.key, None)
            if not created.done():
                created.set_result(False)

    async def rename_column(self, column_index, name):
        column = self.projection.columns[column_index]
        name = self.check_column_name(name, exclude=column.key)
        if name == column.name:
            return column
        previous = column.name
        column.name = name
        mutation = self._begin('rename_column', column.key)
        if not await self._wait_created(column.key):
            mutation.status = MutationStatus.FAILED
            return None
        try:
            await self.gateway.rename_column(column.id, name)
        except PersistenceError as e:
            if column.name == name:
                column.name = previous
            self._fail(mutation, e, 'Could not rename "%s"' % previous)
            return None
        self._succeed(mutation)
        return column

    async def delete_column(self, column_index):
        column = self.projection.columns[column_index]
        anchor = self._anchor()
        index, column, removed_values = self.projection.remove_column(column.key)
        removed_cells = self._pop_cell_ids(lambda coordinate: coordinate[1] == column.key)
        self._reanchor(anchor)
        mutation = self._begin('delete_column', column.key)
        if not await self._wait_created(column.key):
            self._succeed(mutation)
            return True
        try:
            await self.gateway.delete_column(column.id)
        except PersistenceError as e:
            anchor = self._anchor()
            self.projection.insert_column(min(index, self.projection.column_count), column, removed_values)
            self._cell_ids.update(removed_cells)
            self._reanchor(anchor)
            self._fail(mutation, e, 'Could not delete "%s"' % column.name)
            return False
        self._succeed(mutation)
        return True

    async def delete_row(self, row_index):
        row = self.projection.rows[row_index]
        anchor = self._anchor()
        index, row, removed_values = self.projection.remove_row(row.key)
        removed_cells = self._pop_cell_ids(lambda coordinate: coordinate[0] == row.key)
        self._reanchor(anchor)
        mutation = self._begin('delete_row', row.key)
        if not await self._wait_created(row.key):
            self._succeed(mutation)
            return True
        try:
            await self.gateway.delete_row(row.id)
        except PersistenceError as e:
            anchor = self._anchor()
            self.projection.insert_row(min(index, self.projection.row_count), row, removed_values)
            self._cell_ids.update(removed_cells)
            self._reanchor(anchor)
            self._fail(mutation, e, 'Could not delete the row')
            return False
        self._succeed(mutation)
        return True

    def _remove_column(self, key):
        if self.projection.column_index(key) is None:
            return
        anchor = self._anchor()
        self.projection.remove_column(key)
        self._pop_cell_ids(lambda coordinate: coordinate[1] == key)
        self._inflight = {c: v for c, v in self._inflight.items() if c[1] != key}
        self._confirmed = {c: v for c, v in self._confirmed.items() if c[1] != key}
        self._reanchor(anchor)

    def _remove_row(self, key):
        if self.projection.row_index(key) is None:
            return
        anchor = self._anchor()
        self.projection.remove_row(key)
        self._pop_cell_ids(lambda coordinate: coordinate[0] == key)
        self._inflight = {c: v for c, v in self._inflight.items() if c[0] != key}
        self._confirmed = {c: v for c, v in self._confirmed.items() if c[0] != key}
        self._reanchor(anchor)

    def _pop_cell_ids(self, predicate):
        popped = {c: cell_id for c, cell_id in self._cell_ids.items() if predicate(c)}
        for coordinate in popped:
            del self._cell_ids[coordinate]
        self._cell_locks = {c: lock for c, lock in self._cell_locks.items() if not predicate(c)}
        return popped

    async def _wait_created(self, *keys):
        for key in keys:
            created = self._creating.get(key)
            if created is not None and not await created:
                return False
        return True

    async def _compensate(self, operation, call, entity_id):
        try:
            await call(entity_id)
        except PersistenceError as e:
            logger.error('%s(%s) failed after a rollback, the entity store keeps an orphan: %s',
                         operation, entity_id, e)

    ####################
    # BOOKKEEPING      #
    ####################

    def _spawn(self, loop, coroutine):
        task = loop.create_task(coroutine)
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    async def drain(self):
        "Wait for every persistence call started by the handlers."
        while self._tasks:
            await asyncio.gather(*list(self._tasks))

    async def _refresh_quietly(self):
        try:
            await self.refresh()
        except PersistenceError as e:
            logger.warning('Refreshing table %s failed: %s', self.table_id, e)
            self._notify(Notification('warning', 'Could not refresh the table'))

    def _begin(self, kind, target):
        mutation = Mutation(kind, target)
        self.mutations.append(mutation)
        return mutation

    def _succeed(self, mutation):
        mutation.status = MutationStatus.COMMITTED

    def _fail(self, mutation, error, message):
        mutation.status = MutationStatus.FAILED
        mutation.error = error
        logger.warning('%s: %s', message, error)
        self._notify(Notification('error', message, mutation))

    def _notify(self, notification):
        self.notifications.append(notification)
        if self.on_notify is not None:
            self.on_notify(notification)

    ####################
    # RENDERING        #
    ####################

    def display_value(self, row, column):
        return cell_values.format_display(
            self.projection.value_at(row, column),
            self.projection.columns[column].type,
        )

    def display_matrix(self):
        return [
            [self.display_value(row, column) for column in range(self.projection.column_count)]
            for row in range(self.projection.row_count)
        ]


async def _gather(calls):
    """
    Run ``calls`` concurrently and wait for all of them. The first failure is
    raised only after every call has finished.
    """
    results = await asyncio.gather(*calls, return_exceptions=True)
    for result in results:
        if isinstance(result, BaseException):
            raise result
    return results


def _merge(local, records, fields):
    """
    Combine entity store ``records`` with the local entities: local objects
    with a matching id are updated in place and kept, local entities still
    being created are carried over.
    """
    by_id = {entity.id: entity for entity in local if entity.id is not None}
    merged = []
    seen = set()
    for record in records:
        entity = by_id.get(record.id)
        if entity is None:
            entity = record
        else:
            for name in fields:
                setattr(entity, name, getattr(record, name))
        seen.add(record.id)
        merged.append(entity)
    for entity in local:
        if entity.status == MutationStatus.PENDING and entity.id not in seen:
            merged.append(entity)
    return merged
