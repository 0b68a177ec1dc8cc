from django.urls import path

from .views import (
    ModuleConfigActivateView,
    ModuleConfigView,
    ModuleListView,
    ModuleSequenceResetView,
    ModuleSequenceView,
    ModuleSettingsView,
)

urlpatterns = [
    path('', ModuleListView.as_view(), name='module-list'),
    path('<str:module_name>/config/', ModuleConfigView.as_view(), name='module-config'),
    path('<str:module_name>/config/<int:config_id>/activate/', ModuleConfigActivateView.as_view(), name='module-config-activate'),
    path('<str:module_name>/settings/', ModuleSettingsView.as_view(), name='module-settings'),
    path('<str:module_name>/sequence/', ModuleSequenceView.as_view(), name='module-sequence'),
    path('<str:module_name>/sequence/reset/', ModuleSequenceResetView.as_view(), name='module-sequence-reset'),
]
