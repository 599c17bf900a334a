from django.conf import settings
from django.db import models
from django.db.models.functions import Lower
from django.utils import timezone

from .choices import ColumnType, FilterOperator, SortDirection



class Workspace(models.Model):

    name = models.CharField(max_length=100)
    created_by = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name='workspaces')
    created_at = models.DateTimeField(auto_now_add=True)

    def __str__(self):
        return self.name



class Base(models.Model):

    name = models.CharField(max_length=100)
    workspace = models.ForeignKey(Workspace, on_delete=models.CASCADE, related_name='bases')
    created_by = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name='bases')
    last_open_at = models.DateTimeField(default=timezone.now)

    class Meta:
        ordering = ('-last_open_at',)

    def __str__(self):
        return self.name

    def open(self):
        self.last_open_at = timezone.now()
        self.save(update_fields=['last_open_at'])



class Table(models.Model):

    name = models.CharField(max_length=100)
    base = models.ForeignKey(Base, on_delete=models.CASCADE, related_name='tables')
    created_by = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name='+')

    def __str__(self):
        return self.name



class ColumnQuerySet(models.QuerySet):

    def name_taken(self, table, name, exclude=None):
        qs = self.filter(table=table, name__iexact=name)
        if exclude is not None:
            qs = qs.exclude(pk=exclude)
        return qs.exists()

    def next_position(self, table, increment):
        last = self.filter(table=table).aggregate(models.Max('position'))['position__max']
        return 0 if last is None else last + increment



class Column(models.Model):

    name = models.CharField(max_length=100)
    table = models.ForeignKey(Table, on_delete=models.CASCADE, related_name='columns')
    column_type = models.CharField(max_length=10, choices=ColumnType.choices, default=ColumnType.TEXT)
    width = models.PositiveIntegerField(default=200)
    position = models.IntegerField(default=0)

    objects = ColumnQuerySet.as_manager()

    class Meta:
        ordering = ('position', 'id')
        constraints = [
            models.UniqueConstraint(Lower('name'), 'table', name='unique_column_name_per_table'),
        ]

    def __str__(self):
        return self.name



class Row(models.Model):

    table = models.ForeignKey(Table, on_delete=models.CASCADE, related_name='rows')
    position = models.IntegerField(default=0)

    class Meta:
        ordering = ('position', 'id')

    def __str__(self):
        return 'Row %s' % self.pk



class Cell(models.Model):

    row = models.ForeignKey(Row, on_delete=models.CASCADE)
    column = models.ForeignKey(Column, on_delete=models.CASCADE)
    value = models.CharField(max_length=500, blank=True, default='')

    class Meta:
        constraints = [
            models.UniqueConstraint(fields=['row', 'column'], name='unique_cell_per_row_column'),
        ]



class View(models.Model):

    name = models.CharField(max_length=100)
    table = models.ForeignKey(Table, on_delete=models.CASCADE, related_name='views')

    def __str__(self):
        return self.name



class Filter(models.Model):

    view = models.ForeignKey(View, on_delete=models.CASCADE, related_name='filters')
    column = models.ForeignKey(Column, on_delete=models.CASCADE, related_name='+')
    operator = models.CharField(max_length=20, choices=FilterOperator.choices, default=FilterOperator.CONTAINS)
    value = models.CharField(max_length=500, blank=True, default='')



class Sort(models.Model):

    view = models.ForeignKey(View, on_delete=models.CASCADE, related_name='sorts')
    column = models.ForeignKey(Column, on_delete=models.CASCADE, related_name='+')
    direction = models.CharField(max_length=4, choices=SortDirection.choices, default=SortDirection.ASC)
    position = models.IntegerField(default=0)

    class Meta:
        ordering = ('position', 'id')
