from django.db.models import Case, F, Max, When

from .grid import values as cell_values
from .models import Cell

"""

Cells are stored one per (row, column). To read a table back as rows we pivot
them in a single query: group the cells by row and annotate every column with a
conditional aggregate that only sees that column's cell.

    SELECT row_id,
    MAX(CASE WHEN column_id = 1 THEN value END) AS col_1,
    MAX(CASE WHEN column_id = 2 THEN value END) AS col_2,
    ...
    FROM "Cell" WHERE row.table_id = %s
    GROUP BY row_id;

There is at most one cell per (row, column), so MAX() just picks it out; rows
without a cell for a column get NULL.

"""


def column_alias(column):
    return 'col_%d' % column.pk


def get_custom_annotation(columns):
    return {
        column_alias(col): Max(Case(When(column_id=col.pk, then=F('value'))))
        for col in columns
    }


def pivot_queryset(table, columns):
    annotations = get_custom_annotation(columns)
    if not annotations:
        return Cell.objects.none()
    # values() + annotate() => GROUP BY row_id, order_by() drops any default ordering from the group by
    return Cell.objects.filter(row__table=table).values('row').annotate(**annotations).order_by()


def table_grid(table):
    """
    The table as ordered columns and rows, each row carrying a value for every
    column keyed by column id. Values are interpreted per column type.
    """
    columns = list(table.columns.all())
    rows = list(table.rows.all())
    pivoted = {entry['row']: entry for entry in pivot_queryset(table, columns)}
    grid_rows = []
    for row in rows:
        entry = pivoted.get(row.pk, {})
        grid_rows.append({
            'id': row.pk,
            'position': row.position,
            'values': {
                str(col.pk): cell_values.cell_value(entry.get(column_alias(col)), col.column_type)
                for col in columns
            },
        })
    return columns, grid_rows
