import logging

from django.http import Http404
from rest_framework import permissions, status
from rest_framework.views import APIView
from rest_framework.response import Response

from .context import NavigationContext
from .models import Workspace, Base, Table, Column, Row, Cell, View, Filter, Sort
from .pivot import table_grid
from .serializers import (
    WorkspaceSerializer, BaseSerializer, TableSerializer, ColumnSerializer, RowSerializer,
    CellSerializer, ViewSerializer, FilterSerializer, SortSerializer, NavigationSerializer,
)

logger = logging.getLogger(__name__)


class OwnedAPIView(APIView):
    """
    Every object is reached through the workspace/base it belongs to, and only
    the user who created that base can see it. Anything else is a 404.
    """
    permission_classes = (permissions.IsAuthenticated,)
    model = None
    owner_field = 'created_by'

    def get_object(self, pk, model=None, owner_field=None):
        model = model or self.model
        owner_field = owner_field or self.owner_field
        try:
            return model.objects.get(pk=pk, **{owner_field: self.request.user})
        except model.DoesNotExist:
            raise Http404

    def get_serializer_context(self, **extra):
        context = {'request': self.request}
        context.update(extra)
        return context

    def destroy(self, obj):
        logger.info('Deleting %s %s', obj.__class__.__name__, obj.pk)
        obj.delete()
        return Response(status=status.HTTP_204_NO_CONTENT)


#############
# WORKSPACE #
#############

class WorkspaceList(OwnedAPIView):

    def get(self, request, format=None):
        workspaces = Workspace.objects.filter(created_by=request.user)
        serializer = WorkspaceSerializer(workspaces, many=True)
        return Response(serializer.data)

    def post(self, request, format=None):
        serializer = WorkspaceSerializer(data=request.data)
        if serializer.is_valid():
            serializer.save(created_by=request.user)
            return Response(serializer.data, status=status.HTTP_201_CREATED)
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


class WorkspaceDetail(OwnedAPIView):
    model = Workspace

    def get(self, request, pk, format=None):
        serializer = WorkspaceSerializer(self.get_object(pk))
        return Response(serializer.data)

    def put(self, request, pk, format=None):
        serializer = WorkspaceSerializer(self.get_object(pk), data=request.data, partial=True)
        if serializer.is_valid():
            serializer.save()
            return Response(serializer.data)
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


########
# BASE #
########

class BaseList(OwnedAPIView):

    def get(self, request, format=None):
        bases = Base.objects.filter(created_by=request.user)
        workspace_id = request.query_params.get('workspace')
        if workspace_id:
            bases = bases.filter(workspace_id=workspace_id)
        serializer = BaseSerializer(bases, many=True)
        return Response(serializer.data)

    def post(self, request, format=None):
        serializer = BaseSerializer(data=request.data, context=self.get_serializer_context())
        if serializer.is_valid():
            serializer.save(created_by=request.user)
            return Response(serializer.data, status=status.HTTP_201_CREATED)
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


class BaseDetail(OwnedAPIView):
    model = Base

    def get(self, request, pk, format=None):
        serializer = BaseSerializer(self.get_object(pk))
        return Response(serializer.data)

    def put(self, request, pk, format=None):
        base = self.get_object(pk)
        serializer = BaseSerializer(base, data={'name': request.data.get('name')}, partial=True)
        if serializer.is_valid():
            serializer.save()
            base.open()
            return Response(BaseSerializer(base).data)
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

    def delete(self, request, pk, format=None):
        return self.destroy(self.get_object(pk))


class BaseOpen(OwnedAPIView):
    model = Base

    def post(self, request, pk, format=None):
        base = self.get_object(pk)
        base.open()
        return Response(BaseSerializer(base).data)


class BaseMove(OwnedAPIView):
    model = Base

    def post(self, request, pk, format=None):
        base = self.get_object(pk)
        serializer = BaseSerializer(
            base,
            data={'workspace': request.data.get('workspace')},
            partial=True,
            context=self.get_serializer_context(),
        )
        if serializer.is_valid():
            serializer.save()
            return Response(serializer.data)
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


#########
# TABLE #
#########

class TableList(OwnedAPIView):

    def get(self, request, base_id, format=None):
        base = self.get_object(base_id, model=Base)
        serializer = TableSerializer(base.tables.all(), many=True)
        return Response(serializer.data)

    def post(self, request, base_id, format=None):
        base = self.get_object(base_id, model=Base)
        serializer = TableSerializer(data=request.data)
        if serializer.is_valid():
            table = serializer.save(base=base, created_by=request.user)
            logger.info('Created table %s in base %s', table.pk, base.pk)
            return Response(serializer.data, status=status.HTTP_201_CREATED)
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


class TableDetail(OwnedAPIView):
    model = Table
    owner_field = 'base__created_by'

    def get(self, request, pk, format=None):
        table = self.get_object(pk)
        data = TableSerializer(table).data
        data['base'] = BaseSerializer(table.base).data
        return Response(data)

    def put(self, request, pk, format=None):
        serializer = TableSerializer(self.get_object(pk), data={'name': request.data.get('name')}, partial=True)
        if serializer.is_valid():
            serializer.save()
            return Response(serializer.data)
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

    def delete(self, request, pk, format=None):
        return self.destroy(self.get_object(pk))


##########
# COLUMN #
##########

class ColumnList(OwnedAPIView):
    model = Table
    owner_field = 'base__created_by'

    def get(self, request, table_id, format=None):
        table = self.get_object(table_id)
        serializer = ColumnSerializer(table.columns.all(), many=True)
        return Response(serializer.data)

    def post(self, request, table_id, format=None):
        table = self.get_object(table_id)
        serializer = ColumnSerializer(data=request.data, context=self.get_serializer_context(table=table))
        if serializer.is_valid():
            serializer.save(table=table)
            return Response(serializer.data, status=status.HTTP_201_CREATED)
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


class ColumnDetail(OwnedAPIView):
    model = Column
    owner_field = 'table__base__created_by'

    def put(self, request, pk, format=None):
        serializer = ColumnSerializer(self.get_object(pk), data=request.data, partial=True)
        if serializer.is_valid():
            serializer.save()
            return Response(serializer.data)
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

    def delete(self, request, pk, format=None):
        return self.destroy(self.get_object(pk))


#######
# ROW #
#######

class RowList(OwnedAPIView):
    model = Table
    owner_field = 'base__created_by'

    def get(self, request, table_id, format=None):
        serializer = RowSerializer(self.get_object(table_id).rows.all(), many=True)
        return Response(serializer.data)

    def post(self, request, table_id, format=None):
        table = self.get_object(table_id)
        serializer = RowSerializer(data=request.data)
        if serializer.is_valid():
            serializer.save(table=table)
            return Response(serializer.data, status=status.HTTP_201_CREATED)
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


class RowDetail(OwnedAPIView):
    model = Row
    owner_field = 'table__base__created_by'

    def delete(self, request, pk, format=None):
        return self.destroy(self.get_object(pk))


########
# CELL #
########

class TableCellList(OwnedAPIView):
    model = Table
    owner_field = 'base__created_by'

    def get(self, request, table_id, format=None):
        table = self.get_object(table_id)
        cells = Cell.objects.filter(row__table=table).select_related('row', 'column')
        serializer = CellSerializer(cells, many=True)
        return Response(serializer.data)


class RowCellList(OwnedAPIView):
    model = Row
    owner_field = 'table__base__created_by'

    def get(self, request, row_id, format=None):
        serializer = CellSerializer(self.get_object(row_id).cell_set.all(), many=True)
        return Response(serializer.data)


class CellList(OwnedAPIView):

    def post(self, request, format=None):
        serializer = CellSerializer(data=request.data, context=self.get_serializer_context())
        if serializer.is_valid():
            serializer.save()
            return Response(serializer.data, status=status.HTTP_201_CREATED)
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


class CellDetail(OwnedAPIView):
    model = Cell
    owner_field = 'row__table__base__created_by'

    def put(self, request, pk, format=None):
        serializer = CellSerializer(self.get_object(pk), data={'value': request.data.get('value', '')}, partial=True)
        if serializer.is_valid():
            serializer.save()
            return Response(serializer.data)
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

    def delete(self, request, pk, format=None):
        return self.destroy(self.get_object(pk))


########
# VIEW #
########

class ViewList(OwnedAPIView):
    model = Table
    owner_field = 'base__created_by'

    def get(self, request, table_id, format=None):
        serializer = ViewSerializer(self.get_object(table_id).views.all(), many=True)
        return Response(serializer.data)

    def post(self, request, table_id, format=None):
        table = self.get_object(table_id)
        serializer = ViewSerializer(data=request.data)
        if serializer.is_valid():
            serializer.save(table=table)
            return Response(serializer.data, status=status.HTTP_201_CREATED)
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


class ViewDetail(OwnedAPIView):
    model = View
    owner_field = 'table__base__created_by'

    def put(self, request, pk, format=None):
        serializer = ViewSerializer(self.get_object(pk), data=request.data, partial=True)
        if serializer.is_valid():
            serializer.save()
            return Response(serializer.data)
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

    def delete(self, request, pk, format=None):
        return self.destroy(self.get_object(pk))


class ViewGrid(OwnedAPIView):
    """
    The view's table as a dense grid. Filters and sorts are returned with it
    but not applied.
    """
    model = View
    owner_field = 'table__base__created_by'

    def get(self, request, pk, format=None):
        view = self.get_object(pk)
        columns, rows = table_grid(view.table)
        return Response({
            'view': ViewSerializer(view).data,
            'filters': FilterSerializer(view.filters.all(), many=True).data,
            'sorts': SortSerializer(view.sorts.all(), many=True).data,
            'columns': ColumnSerializer(columns, many=True).data,
            'rows': rows,
        })


class _ViewOptionList(OwnedAPIView):
    model = View
    owner_field = 'table__base__created_by'
    serializer_class = None
    related_name = None

    def get(self, request, view_id, format=None):
        view = self.get_object(view_id)
        serializer = self.serializer_class(getattr(view, self.related_name).all(), many=True)
        return Response(serializer.data)

    def post(self, request, view_id, format=None):
        view = self.get_object(view_id)
        serializer = self.serializer_class(data=request.data, context=self.get_serializer_context(view=view))
        if serializer.is_valid():
            serializer.save(view=view)
            return Response(serializer.data, status=status.HTTP_201_CREATED)
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


class FilterList(_ViewOptionList):
    serializer_class = FilterSerializer
    related_name = 'filters'


class SortList(_ViewOptionList):
    serializer_class = SortSerializer
    related_name = 'sorts'


class FilterDetail(OwnedAPIView):
    model = Filter
    owner_field = 'view__table__base__created_by'

    def delete(self, request, pk, format=None):
        return self.destroy(self.get_object(pk))


class SortDetail(OwnedAPIView):
    model = Sort
    owner_field = 'view__table__base__created_by'

    def delete(self, request, pk, format=None):
        return self.destroy(self.get_object(pk))


##############
# NAVIGATION #
##############

class Navigation(APIView):
    permission_classes = (permissions.IsAuthenticated,)

    def get(self, request, format=None):
        return Response(NavigationContext.load(request.session).as_dict())

    def put(self, request, format=None):
        serializer = NavigationSerializer(data=request.data, context={'request': request})
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
        context = NavigationContext.load(request.session)
        data = serializer.validated_data
        if 'selected_base_id' in data:
            context.select_base(data['selected_base_id'])
        if {'table_id', 'view_id', 'base_id'} & set(data):
            context.set_navigation(
                data.get('table_id', context.table_id),
                data.get('view_id', context.view_id),
                data.get('base_id', context.base_id),
            )
        context.save(request.session)
        return Response(context.as_dict())

    def delete(self, request, format=None):
        NavigationContext.clear(request.session)
        return Response(status=status.HTTP_204_NO_CONTENT)
