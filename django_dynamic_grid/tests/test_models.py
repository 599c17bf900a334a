from django.contrib.auth.models import User
from django.db import IntegrityError, transaction
from django.test import TestCase

from django_dynamic_grid.choices import ColumnType
from django_dynamic_grid.models import Workspace, Base, Table, Column, Row, Cell, View
from django_dynamic_grid.pivot import table_grid


class DynamicGridModelTests(TestCase):

    def setUp(self):
        self.user = User.objects.create_user(username='testuser1', email='testuser1@dynamicgrid.xyz')
        self.workspace = Workspace.objects.create(name='Workspace', created_by=self.user)
        self.base = Base.objects.create(name='Base', workspace=self.workspace, created_by=self.user)
        self.table = Table.objects.create(name='testTable_1', base=self.base, created_by=self.user)

    def test_column_names_are_unique_per_table_ignoring_case(self):
        Column.objects.create(table=self.table, name='Status')
        with self.assertRaises(IntegrityError), transaction.atomic():
            Column.objects.create(table=self.table, name='status')
        other = Table.objects.create(name='testTable_2', base=self.base, created_by=self.user)
        Column.objects.create(table=other, name='status')

    def test_name_taken(self):
        column = Column.objects.create(table=self.table, name='Age')
        self.assertTrue(Column.objects.name_taken(self.table, 'AGE'))
        self.assertFalse(Column.objects.name_taken(self.table, 'AGE', exclude=column.pk))
        self.assertFalse(Column.objects.name_taken(self.table, 'Name'))

    def test_next_position(self):
        self.assertEqual(Column.objects.next_position(self.table, 1000), 0)
        Column.objects.create(table=self.table, name='Name', position=0)
        Column.objects.create(table=self.table, name='Age', position=1000)
        self.assertEqual(Column.objects.next_position(self.table, 1000), 2000)

    def test_one_cell_per_row_and_column(self):
        column = Column.objects.create(table=self.table, name='Name')
        row = Row.objects.create(table=self.table)
        Cell.objects.create(row=row, column=column, value='a')
        with self.assertRaises(IntegrityError), transaction.atomic():
            Cell.objects.create(row=row, column=column, value='b')

    def test_rows_and_columns_are_ordered_by_position(self):
        late = Column.objects.create(table=self.table, name='Late', position=2000)
        early = Column.objects.create(table=self.table, name='Early', position=0)
        second = Row.objects.create(table=self.table, position=1000)
        first = Row.objects.create(table=self.table, position=0)
        self.assertEqual(list(self.table.columns.all()), [early, late])
        self.assertEqual(list(self.table.rows.all()), [first, second])

    def test_deleting_a_table_deletes_everything_below_it(self):
        column = Column.objects.create(table=self.table, name='Name')
        row = Row.objects.create(table=self.table)
        Cell.objects.create(row=row, column=column, value='a')
        View.objects.create(table=self.table, name='Grid view')
        self.table.delete()
        self.assertFalse(Column.objects.exists())
        self.assertFalse(Row.objects.exists())
        self.assertFalse(Cell.objects.exists())
        self.assertFalse(View.objects.exists())

    def test_deleting_a_column_deletes_its_cells(self):
        name = Column.objects.create(table=self.table, name='Name')
        age = Column.objects.create(table=self.table, name='Age', position=1000)
        row = Row.objects.create(table=self.table)
        Cell.objects.create(row=row, column=name, value='a')
        Cell.objects.create(row=row, column=age, value='1')
        name.delete()
        self.assertEqual(list(Cell.objects.values_list('value', flat=True)), ['1'])

    def test_bases_list_most_recently_opened_first(self):
        other = Base.objects.create(name='Other', workspace=self.workspace, created_by=self.user)
        self.base.open()
        self.assertEqual(list(Base.objects.all()), [self.base, other])


class TableGridTests(TestCase):

    def setUp(self):
        user = User.objects.create_user(username='testuser1')
        workspace = Workspace.objects.create(name='Workspace', created_by=user)
        base = Base.objects.create(name='Base', workspace=workspace, created_by=user)
        self.table = Table.objects.create(name='People', base=base, created_by=user)
        self.name = Column.objects.create(table=self.table, name='Name', position=0)
        self.age = Column.objects.create(table=self.table, name='Age', column_type=ColumnType.NUMBER, position=1000)

        # 30 rows, Age filled on every other row
        for i in range(30):
            row = Row.objects.create(table=self.table, position=i * 1000)
            Cell.objects.create(row=row, column=self.name, value='person %d' % i)
            if i % 2 == 0:
                Cell.objects.create(row=row, column=self.age, value=str(i))

    def test_pivots_cells_into_rows(self):
        columns, rows = table_grid(self.table)
        self.assertEqual(columns, [self.name, self.age])
        self.assertEqual(len(rows), 30)
        self.assertEqual(rows[0]['values'], {str(self.name.pk): 'person 0', str(self.age.pk): 0})
        self.assertEqual(rows[1]['values'], {str(self.name.pk): 'person 1', str(self.age.pk): None})
        self.assertEqual([r['position'] for r in rows], sorted(r['position'] for r in rows))

    def test_table_without_columns(self):
        empty = Table.objects.create(name='Empty', base=self.table.base, created_by=self.table.created_by)
        Row.objects.create(table=empty)
        columns, rows = table_grid(empty)
        self.assertEqual(columns, [])
        self.assertEqual(rows[0]['values'], {})
