from django.urls import path

from .views import GSTCalculateView, GSTRatesView

urlpatterns = [
    path('calculate/', GSTCalculateView.as_view(), name='gst-calculate'),
    path('rates/', GSTRatesView.as_view(), name='gst-rates'),
]
