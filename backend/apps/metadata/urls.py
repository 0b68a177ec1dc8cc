from django.urls import path

from .views import MetadataLibraryView

urlpatterns = [
    path('library/', MetadataLibraryView.as_view(), name='metadata-library'),
]
