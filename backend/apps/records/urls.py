from django.urls import path

from .views import (
    FilterPresetDetailView,
    FilterPresetListCreateView,
    RecordActivityListCreateView,
    RecordDetailView,
    RecordExportView,
    RecordListCreateView,
    RecordNoteListCreateView,
    RecordPdfView,
    RecordTaskListCreateView,
)

urlpatterns = [
    path('<str:module_name>/records/', RecordListCreateView.as_view(), name='record-list'),
    path('<str:module_name>/records/export/', RecordExportView.as_view(), name='record-export'),
    path('<str:module_name>/records/<str:record_id>/', RecordDetailView.as_view(), name='record-detail'),
    path('<str:module_name>/records/<str:record_id>/notes/', RecordNoteListCreateView.as_view(), name='record-notes'),
    path(
        '<str:module_name>/records/<str:record_id>/activities/',
        RecordActivityListCreateView.as_view(),
        name='record-activities',
    ),
    path('<str:module_name>/records/<str:record_id>/tasks/', RecordTaskListCreateView.as_view(), name='record-tasks'),
    path('<str:module_name>/records/<str:record_id>/pdf/', RecordPdfView.as_view(), name='record-pdf'),
    path('<str:module_name>/filters/presets/', FilterPresetListCreateView.as_view(), name='filter-presets'),
    path(
        '<str:module_name>/filters/presets/<int:preset_id>/',
        FilterPresetDetailView.as_view(),
        name='filter-preset-detail',
    ),
]
