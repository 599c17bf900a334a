from . import values as cell_values


def _ordered(items):
    # sorted() is stable, entities sharing a position keep the order given
    return sorted(items, key=lambda item: item.position)


class GridProjection(object):
    """
    Dense rows x columns view of a table.

    ``values[i]`` maps ``column.key`` to the value of row ``i``. Every row holds
    a value for every column, missing cells resolve to the column type's empty
    value.
    """

    def __init__(self, columns=(), rows=(), values=None):
        self.columns = list(columns)
        self.rows = list(rows)
        self.values = values if values is not None else [
            {column.key: cell_values.empty_value(column.type) for column in self.columns}
            for row in self.rows
        ]

    @property
    def row_count(self):
        return len(self.rows)

    @property
    def column_count(self):
        return len(self.columns)

    def contains(self, row_index, column_index):
        return 0 <= row_index < self.row_count and 0 <= column_index < self.column_count

    def row_index(self, key):
        for index, row in enumerate(self.rows):
            if row.key == key:
                return index
        return None

    def column_index(self, key):
        for index, column in enumerate(self.columns):
            if column.key == key:
                return index
        return None

    def value_at(self, row_index, column_index):
        return self.values[row_index][self.columns[column_index].key]

    def set_value(self, row_index, column_index, value):
        self.values[row_index][self.columns[column_index].key] = value

    def column_widths(self):
        return [column.width for column in self.columns]

    def as_matrix(self):
        return [
            [row_values[column.key] for column in self.columns]
            for row_values in self.values
        ]

    # Optimistic structural changes

    def insert_column(self, index, column, column_values=None):
        """
        Insert ``column`` at ``index``. ``column_values`` maps row keys to values,
        rows it does not mention get the empty value.
        """
        column_values = column_values or {}
        empty = cell_values.empty_value(column.type)
        self.columns.insert(index, column)
        for row, row_values in zip(self.rows, self.values):
            row_values[column.key] = column_values.get(row.key, empty)

    def add_column(self, column):
        self.insert_column(self.column_count, column)

    def remove_column(self, key):
        "Remove the column and return ``(index, column, {row key: value})``."
        index = self.column_index(key)
        column = self.columns.pop(index)
        removed = {}
        for row, row_values in zip(self.rows, self.values):
            removed[row.key] = row_values.pop(key)
        return index, column, removed

    def insert_row(self, index, row, row_values=None):
        filled = {
            column.key: cell_values.empty_value(column.type)
            for column in self.columns
        }
        filled.update(row_values or {})
        self.rows.insert(index, row)
        self.values.insert(index, filled)

    def add_row(self, row):
        self.insert_row(self.row_count, row)

    def remove_row(self, key):
        "Remove the row and return ``(index, row, {column key: value})``."
        index = self.row_index(key)
        return index, self.rows.pop(index), self.values.pop(index)


def build_projection(columns, rows, cells):
    """
    Join ``cells`` onto their (row, column) coordinate.

    Columns and rows are ordered by position. Cells are matched on entity ids,
    so pending rows and columns (``id is None``) only ever hold empty values.
    """
    columns = _ordered(columns)
    rows = _ordered(rows)
    by_coordinate = {(cell.row_id, cell.column_id): cell.value for cell in cells}
    matrix = []
    for row in rows:
        matrix.append({
            column.key: cell_values.cell_value(by_coordinate.get((row.id, column.id)), column.type)
            for column in columns
        })
    return GridProjection(columns, rows, matrix)
