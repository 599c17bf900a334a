class Viewport(object):
    """
    The scrollable area the grid is drawn in.

    The header row and the row-number gutter stay put while the body scrolls,
    so the room left for cells is the viewport minus those two.
    """

    def __init__(self, width, height, row_height=32, header_height=40, gutter_width=32,
                 scroll_left=0, scroll_top=0):
        self.width = width
        self.height = height
        self.row_height = row_height
        self.header_height = header_height
        self.gutter_width = gutter_width
        self.scroll_left = scroll_left
        self.scroll_top = scroll_top

    @property
    def visible_width(self):
        return max(self.width - self.gutter_width, 0)

    @property
    def visible_height(self):
        return max(self.height - self.header_height, 0)

    def cell_rect(self, row, column, column_widths):
        "(left, top, right, bottom) of a cell in body coordinates."
        left = sum(column_widths[:column])
        top = row * self.row_height
        return left, top, left + column_widths[column], top + self.row_height

    def is_visible(self, row, column, column_widths):
        left, top, right, bottom = self.cell_rect(row, column, column_widths)
        return (left >= self.scroll_left and right <= self.scroll_left + self.visible_width
                and top >= self.scroll_top and bottom <= self.scroll_top + self.visible_height)

    def scroll_into_view(self, row, column, column_widths):
        """
        Scroll the least amount that brings the cell fully into view. Returns
        True when the offsets changed.
        """
        left, top, right, bottom = self.cell_rect(row, column, column_widths)
        scroll_left = _nearest(left, right, self.scroll_left, self.visible_width)
        scroll_top = _nearest(top, bottom, self.scroll_top, self.visible_height)
        changed = (scroll_left, scroll_top) != (self.scroll_left, self.scroll_top)
        self.scroll_left, self.scroll_top = scroll_left, scroll_top
        return changed


def _nearest(start, end, offset, extent):
    if start < offset:
        return start
    if end > offset + extent:
        # a cell wider than the viewport lines up with its leading edge
        return min(start, end - extent)
    return offset
