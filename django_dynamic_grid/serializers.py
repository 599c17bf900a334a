from django.db import IntegrityError, transaction
from rest_framework import serializers

from .conf import grid_setting
from .exceptions import DuplicateNameError, ValidationError as GridValidationError
from .grid import values as cell_values
from .models import Workspace, Base, Table, Column, Row, Cell, View, Filter, Sort



def _owned_by(obj_user_id, context):
    request = context.get('request')
    return request is None or obj_user_id == request.user.pk


class WorkspaceSerializer(serializers.ModelSerializer):

    class Meta:
        model = Workspace
        fields = ('id', 'name', 'created_at')
        read_only_fields = ('created_at',)


class BaseSerializer(serializers.ModelSerializer):

    class Meta:
        model = Base
        fields = ('id', 'name', 'workspace', 'last_open_at')
        read_only_fields = ('last_open_at',)

    def validate_workspace(self, workspace):
        if not _owned_by(workspace.created_by_id, self.context):
            raise serializers.ValidationError('Unknown workspace.')
        return workspace


class ColumnSerializer(serializers.ModelSerializer):

    class Meta:
        model = Column
        fields = ('id', 'name', 'column_type', 'width', 'position', 'table')
        read_only_fields = ('table',)
        # names are compared case-insensitively in validate_name()
        validators = []

    def validate_name(self, name):
        table = self.context.get('table') or getattr(self.instance, 'table', None)
        exclude = getattr(self.instance, 'pk', None)
        if table is not None and Column.objects.name_taken(table, name, exclude=exclude):
            raise serializers.ValidationError(str(DuplicateNameError(name)))
        return name

    def validate_column_type(self, column_type):
        if self.instance is not None and column_type != self.instance.column_type:
            raise serializers.ValidationError('The type of an existing column cannot be changed.')
        return column_type

    def create(self, validated_data):
        table = validated_data['table']
        if validated_data.get('position') is None:
            validated_data['position'] = Column.objects.next_position(table, grid_setting('POSITION_INCREMENT'))
        validated_data.setdefault('width', grid_setting('DEFAULT_COLUMN_WIDTH'))
        try:
            with transaction.atomic():
                return super(ColumnSerializer, self).create(validated_data)
        except IntegrityError:
            raise serializers.ValidationError({'name': [str(DuplicateNameError(validated_data['name']))]})

    def update(self, instance, validated_data):
        try:
            with transaction.atomic():
                return super(ColumnSerializer, self).update(instance, validated_data)
        except IntegrityError:
            raise serializers.ValidationError({'name': [str(DuplicateNameError(validated_data.get('name', instance.name)))]})


class TableSerializer(serializers.ModelSerializer):
    columns = ColumnSerializer(many=True, required=False)

    class Meta:
        model = Table
        fields = ('id', 'name', 'base', 'columns')
        read_only_fields = ('base',)

    def validate_columns(self, columns):
        seen = set()
        for col_data in columns:
            folded = col_data['name'].lower()
            if folded in seen:
                raise serializers.ValidationError(str(DuplicateNameError(col_data['name'])))
            seen.add(folded)
        return columns

    @transaction.atomic
    def create(self, validated_data):
        columns_data = validated_data.pop('columns', [])
        increment = grid_setting('POSITION_INCREMENT')
        table = Table.objects.create(**validated_data)
        for index, col_data in enumerate(columns_data):
            col_data.setdefault('position', index * increment)
            col_data.setdefault('width', grid_setting('DEFAULT_COLUMN_WIDTH'))
            Column.objects.create(table=table, **col_data)
        # every table opens on a default grid view
        View.objects.create(table=table, name=grid_setting('DEFAULT_VIEW_NAME'))
        return table

    def update(self, instance, validated_data):
        # columns are managed through their own endpoints
        validated_data.pop('columns', None)
        instance.name = validated_data.get('name', instance.name)
        instance.save()
        return instance


class RowSerializer(serializers.ModelSerializer):

    class Meta:
        model = Row
        fields = ('id', 'table', 'position')
        read_only_fields = ('table',)

    def create(self, validated_data):
        table = validated_data['table']
        if validated_data.get('position') is None:
            validated_data['position'] = table.rows.count() * grid_setting('POSITION_INCREMENT')
        return super(RowSerializer, self).create(validated_data)


class CellSerializer(serializers.ModelSerializer):

    class Meta:
        model = Cell
        fields = ('id', 'row', 'column', 'value')
        # one cell per (row, column) is checked in validate() with a readable message
        validators = []

    def validate(self, data):
        if self.instance is not None:
            # a cell never moves, only its value changes
            data.pop('row', None)
            data.pop('column', None)
            row, column = self.instance.row, self.instance.column
        else:
            row, column = data.get('row'), data.get('column')
            if row is None or column is None:
                raise serializers.ValidationError('A cell needs both a row and a column.')
            if not _owned_by(row.table.base.created_by_id, self.context):
                raise serializers.ValidationError({'row': ['Unknown row.']})
            if row.table_id != column.table_id:
                raise serializers.ValidationError('The row and the column belong to different tables.')
            if Cell.objects.filter(row=row, column=column).exists():
                raise serializers.ValidationError('A cell already exists for this row and column.')
        if 'value' in data:
            data['value'] = self.normalize_value(data['value'], column)
        return data

    @staticmethod
    def normalize_value(value, column):
        try:
            coerced = cell_values.coerce(value, column.column_type)
        except GridValidationError as e:
            raise serializers.ValidationError({'value': [str(e)]})
        return cell_values.to_storage(coerced, column.column_type)

    def create(self, validated_data):
        # a concurrent request may have created the cell since validate()
        try:
            with transaction.atomic():
                return super(CellSerializer, self).create(validated_data)
        except IntegrityError:
            raise serializers.ValidationError('A cell already exists for this row and column.')


class ViewSerializer(serializers.ModelSerializer):

    class Meta:
        model = View
        fields = ('id', 'name', 'table')
        read_only_fields = ('table',)


class _ViewColumnSerializer(serializers.ModelSerializer):

    def validate_column(self, column):
        view = self.context.get('view')
        if view is not None and column.table_id != view.table_id:
            raise serializers.ValidationError('The column does not belong to this view\'s table.')
        return column


class FilterSerializer(_ViewColumnSerializer):

    class Meta:
        model = Filter
        fields = ('id', 'view', 'column', 'operator', 'value')
        read_only_fields = ('view',)


class SortSerializer(_ViewColumnSerializer):

    class Meta:
        model = Sort
        fields = ('id', 'view', 'column', 'direction', 'position')
        read_only_fields = ('view',)


class NavigationSerializer(serializers.Serializer):
    selected_base_id = serializers.IntegerField(required=False, allow_null=True)
    base_id = serializers.IntegerField(required=False, allow_null=True)
    table_id = serializers.IntegerField(required=False, allow_null=True)
    view_id = serializers.IntegerField(required=False, allow_null=True)

    def validate(self, data):
        user = self.context['request'].user
        lookups = {
            'selected_base_id': Base.objects.filter(created_by=user),
            'base_id': Base.objects.filter(created_by=user),
            'table_id': Table.objects.filter(base__created_by=user),
            'view_id': View.objects.filter(table__base__created_by=user),
        }
        for name, queryset in lookups.items():
            pk = data.get(name)
            if pk is not None and not queryset.filter(pk=pk).exists():
                raise serializers.ValidationError({name: ['Unknown object.']})
        return data
