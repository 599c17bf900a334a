from django.contrib.auth.models import User
from django.test import TestCase

from django_dynamic_grid.choices import ColumnType
from django_dynamic_grid.exceptions import PersistenceError
from django_dynamic_grid.gateway import ModelGateway
from django_dynamic_grid.grid import GridEngine, Selected
from django_dynamic_grid.models import Workspace, Base, Table, Column, Row, Cell


class ModelGatewayTests(TestCase):

    @classmethod
    def setUpTestData(cls):
        cls.user = User.objects.create_user(username='testuser1', password='12345')
        workspace = Workspace.objects.create(name='Workspace', created_by=cls.user)
        base = Base.objects.create(name='Base', workspace=workspace, created_by=cls.user)
        cls.table = Table.objects.create(name='People', base=base, created_by=cls.user)
        cls.name = Column.objects.create(table=cls.table, name='Name', position=0)
        cls.age = Column.objects.create(table=cls.table, name='Age', column_type=ColumnType.NUMBER, position=1000)
        cls.row = Row.objects.create(table=cls.table, position=0)
        cls.cell = Cell.objects.create(row=cls.row, column=cls.age, value='30')

    def setUp(self):
        self.gateway = ModelGateway()

    async def test_lists_table_contents(self):
        columns = await self.gateway.list_columns(self.table.pk)
        rows = await self.gateway.list_rows(self.table.pk)
        cells = await self.gateway.list_cells_for_table(self.table.pk)
        self.assertEqual([(c.id, c.name, c.type) for c in columns],
                         [(self.name.pk, 'Name', ColumnType.TEXT), (self.age.pk, 'Age', ColumnType.NUMBER)])
        self.assertEqual([r.id for r in rows], [self.row.pk])
        self.assertEqual([(c.row_id, c.column_id, c.value) for c in cells], [(self.row.pk, self.age.pk, '30')])

    async def test_create_and_update_cell(self):
        cell = await self.gateway.create_cell(self.row.pk, self.name.pk, 'Ada')
        await self.gateway.update_cell(cell.id, 'Ada L.')
        stored = await Cell.objects.aget(pk=cell.id)
        self.assertEqual(stored.value, 'Ada L.')

    async def test_duplicate_cell_is_a_persistence_error(self):
        with self.assertRaises(PersistenceError) as cm:
            await self.gateway.create_cell(self.row.pk, self.age.pk, '31')
        self.assertEqual(cm.exception.operation, 'create_cell')

    async def test_duplicate_column_name_is_a_persistence_error(self):
        with self.assertRaises(PersistenceError):
            await self.gateway.create_column(self.table.pk, 'AGE', ColumnType.TEXT, 2000)

    async def test_missing_entity_is_a_persistence_error(self):
        with self.assertRaises(PersistenceError):
            await self.gateway.update_cell(999999, 'x')
        with self.assertRaises(PersistenceError):
            await self.gateway.delete_row(999999)

    async def test_delete_row_removes_its_cells(self):
        await self.gateway.delete_row(self.row.pk)
        self.assertFalse(await Cell.objects.filter(pk=self.cell.pk).aexists())

    async def test_rename_column(self):
        column = await self.gateway.rename_column(self.name.pk, 'Full name')
        self.assertEqual(column.name, 'Full name')
        self.assertEqual((await Column.objects.aget(pk=self.name.pk)).name, 'Full name')


class EngineOnModelsTests(TestCase):

    @classmethod
    def setUpTestData(cls):
        user = User.objects.create_user(username='testuser1', password='12345')
        workspace = Workspace.objects.create(name='Workspace', created_by=user)
        base = Base.objects.create(name='Base', workspace=workspace, created_by=user)
        cls.table = Table.objects.create(name='People', base=base, created_by=user)
        cls.name = Column.objects.create(table=cls.table, name='Name', position=0)
        cls.age = Column.objects.create(table=cls.table, name='Age', column_type=ColumnType.NUMBER, position=1000)
        cls.row = Row.objects.create(table=cls.table, position=0)
        Cell.objects.create(row=cls.row, column=cls.age, value='30')

    async def test_edit_persists(self):
        engine = GridEngine(ModelGateway(), self.table.pk)
        await engine.load()
        engine.click(0, 1)
        engine.handle_key('5')
        engine.handle_key('Enter')
        self.assertEqual(engine.state, Selected(0, 1))
        await engine.drain()
        cell = await Cell.objects.aget(row=self.row, column=self.age)
        self.assertEqual(cell.value, '5')

    async def test_add_row_and_column(self):
        engine = GridEngine(ModelGateway(), self.table.pk)
        await engine.load()
        row = await engine.add_row()
        column = await engine.add_column('Notes')
        self.assertEqual(await Cell.objects.filter(row_id=row.id).acount(), 3)
        self.assertEqual(await Cell.objects.filter(column_id=column.id).acount(), 2)
        self.assertEqual((await Column.objects.aget(pk=column.id)).position, 2000)

        fresh = GridEngine(ModelGateway(), self.table.pk)
        await fresh.load()
        self.assertEqual(fresh.projection.as_matrix(), [['', 30, ''], ['', None, '']])
