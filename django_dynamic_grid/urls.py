from django.urls import re_path

from .views import (
    WorkspaceList, WorkspaceDetail, BaseList, BaseDetail, BaseOpen, BaseMove,
    TableList, TableDetail, ColumnList, ColumnDetail, RowList, RowDetail,
    TableCellList, RowCellList, CellList, CellDetail, ViewList, ViewDetail, ViewGrid,
    FilterList, FilterDetail, SortList, SortDetail, Navigation,
)

app_name = 'django_dynamic_grid'

urlpatterns = [
    re_path(r'^workspaces/$', WorkspaceList.as_view(), name='workspaces'),
    re_path(r'^workspaces/(?P<pk>\d+)/$', WorkspaceDetail.as_view(), name='workspace-details'),

    re_path(r'^bases/$', BaseList.as_view(), name='bases'),
    re_path(r'^bases/(?P<pk>\d+)/$', BaseDetail.as_view(), name='base-details'),
    re_path(r'^bases/(?P<pk>\d+)/open/$', BaseOpen.as_view(), name='base-open'),
    re_path(r'^bases/(?P<pk>\d+)/move/$', BaseMove.as_view(), name='base-move'),
    re_path(r'^bases/(?P<base_id>\d+)/tables/$', TableList.as_view(), name='tables'),

    re_path(r'^tables/(?P<pk>\d+)/$', TableDetail.as_view(), name='table-details'),
    re_path(r'^tables/(?P<table_id>\d+)/columns/$', ColumnList.as_view(), name='table-columns'),
    re_path(r'^tables/(?P<table_id>\d+)/rows/$', RowList.as_view(), name='table-rows'),
    re_path(r'^tables/(?P<table_id>\d+)/cells/$', TableCellList.as_view(), name='table-cells'),
    re_path(r'^tables/(?P<table_id>\d+)/views/$', ViewList.as_view(), name='table-views'),

    re_path(r'^columns/(?P<pk>\d+)/$', ColumnDetail.as_view(), name='column-details'),
    re_path(r'^rows/(?P<pk>\d+)/$', RowDetail.as_view(), name='row-details'),
    re_path(r'^rows/(?P<row_id>\d+)/cells/$', RowCellList.as_view(), name='row-cells'),
    re_path(r'^cells/$', CellList.as_view(), name='cells'),
    re_path(r'^cells/(?P<pk>\d+)/$', CellDetail.as_view(), name='cell-details'),

    re_path(r'^views/(?P<pk>\d+)/$', ViewDetail.as_view(), name='view-details'),
    re_path(r'^views/(?P<pk>\d+)/grid/$', ViewGrid.as_view(), name='view-grid'),
    re_path(r'^views/(?P<view_id>\d+)/filters/$', FilterList.as_view(), name='view-filters'),
    re_path(r'^views/(?P<view_id>\d+)/sorts/$', SortList.as_view(), name='view-sorts'),
    re_path(r'^filters/(?P<pk>\d+)/$', FilterDetail.as_view(), name='filter-details'),
    re_path(r'^sorts/(?P<pk>\d+)/$', SortDetail.as_view(), name='sort-details'),

    re_path(r'^navigation/$', Navigation.as_view(), name='navigation'),
]
