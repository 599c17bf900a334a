"""
The calls the grid engine makes against the entity store.

``Gateway`` lists them, ``ModelGateway`` runs them on the Django models. Every
call is its own transaction; creating a row and its cells is several calls and
there is nothing tying them together.
"""
import abc
import logging

from asgiref.sync import sync_to_async
from django.core.exceptions import ObjectDoesNotExist
from django.db import DatabaseError, transaction

from .exceptions import PersistenceError
from .grid.records import GridCell, GridColumn, GridRow
from .models import Cell, Column, Row

logger = logging.getLogger(__name__)


class Gateway(abc.ABC):

    @abc.abstractmethod
    async def list_columns(self, table_id):
        pass

    @abc.abstractmethod
    async def create_column(self, table_id, name, column_type, position):
        pass

    @abc.abstractmethod
    async def rename_column(self, column_id, name):
        pass

    @abc.abstractmethod
    async def delete_column(self, column_id):
        pass

    @abc.abstractmethod
    async def list_rows(self, table_id):
        pass

    @abc.abstractmethod
    async def create_row(self, table_id, position):
        pass

    @abc.abstractmethod
    async def delete_row(self, row_id):
        pass

    @abc.abstractmethod
    async def list_cells_for_table(self, table_id):
        pass

    @abc.abstractmethod
    async def create_cell(self, row_id, column_id, value):
        pass

    @abc.abstractmethod
    async def update_cell(self, cell_id, value):
        pass

    @abc.abstractmethod
    async def delete_cell(self, cell_id):
        pass


def column_record(column):
    return GridColumn(
        id=column.pk,
        name=column.name,
        type=column.column_type,
        width=column.width,
        position=column.position,
    )


def row_record(row):
    return GridRow(id=row.pk, position=row.position)


def cell_record(cell):
    return GridCell(id=cell.pk, row_id=cell.row_id, column_id=cell.column_id, value=cell.value)


class ModelGateway(Gateway):
    """
    Gateway backed by the ORM. Database errors and missing objects come out
    as ``PersistenceError``.
    """

    async def _run(self, operation, *args):
        try:
            return await sync_to_async(operation)(*args)
        except (DatabaseError, ObjectDoesNotExist) as e:
            logger.debug('%s%r failed', operation.__name__, args, exc_info=True)
            raise PersistenceError(operation.__name__.lstrip('_'), e) from e

    ##########
    # COLUMN #
    ##########

    async def list_columns(self, table_id):
        return await self._run(_list_columns, table_id)

    async def create_column(self, table_id, name, column_type, position):
        return await self._run(_create_column, table_id, name, column_type, position)

    async def rename_column(self, column_id, name):
        return await self._run(_rename_column, column_id, name)

    async def delete_column(self, column_id):
        return await self._run(_delete_column, column_id)

    #######
    # ROW #
    #######

    async def list_rows(self, table_id):
        return await self._run(_list_rows, table_id)

    async def create_row(self, table_id, position):
        return await self._run(_create_row, table_id, position)

    async def delete_row(self, row_id):
        return await self._run(_delete_row, row_id)

    ########
    # CELL #
    ########

    async def list_cells_for_table(self, table_id):
        return await self._run(_list_cells_for_table, table_id)

    async def create_cell(self, row_id, column_id, value):
        return await self._run(_create_cell, row_id, column_id, value)

    async def update_cell(self, cell_id, value):
        return await self._run(_update_cell, cell_id, value)

    async def delete_cell(self, cell_id):
        return await self._run(_delete_cell, cell_id)


def _list_columns(table_id):
    return [column_record(column) for column in Column.objects.filter(table_id=table_id)]


@transaction.atomic
def _create_column(table_id, name, column_type, position):
    column = Column.objects.create(table_id=table_id, name=name, column_type=column_type, position=position)
    return column_record(column)


@transaction.atomic
def _rename_column(column_id, name):
    column = Column.objects.get(pk=column_id)
    column.name = name
    column.save(update_fields=['name'])
    return column_record(column)


@transaction.atomic
def _delete_column(column_id):
    column = Column.objects.get(pk=column_id)
    record = column_record(column)
    column.delete()
    return record


def _list_rows(table_id):
    return [row_record(row) for row in Row.objects.filter(table_id=table_id)]


@transaction.atomic
def _create_row(table_id, position):
    return row_record(Row.objects.create(table_id=table_id, position=position))


@transaction.atomic
def _delete_row(row_id):
    row = Row.objects.get(pk=row_id)
    record = row_record(row)
    row.delete()
    return record


def _list_cells_for_table(table_id):
    return [cell_record(cell) for cell in Cell.objects.filter(row__table_id=table_id)]


@transaction.atomic
def _create_cell(row_id, column_id, value):
    return cell_record(Cell.objects.create(row_id=row_id, column_id=column_id, value=value))


@transaction.atomic
def _update_cell(cell_id, value):
    cell = Cell.objects.get(pk=cell_id)
    cell.value = value
    cell.save(update_fields=['value'])
    return cell_record(cell)


@transaction.atomic
def _delete_cell(cell_id):
    cell = Cell.objects.get(pk=cell_id)
    record = cell_record(cell)
    cell.delete()
    return record
