from django.urls import path

from .views import PRToPOView

urlpatterns = [
    path('pr-to-po/', PRToPOView.as_view(), name='convert-pr-to-po'),
]
