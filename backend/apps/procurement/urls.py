from django.urls import path

from .views import GRNCreateView, GRNValidateView, PostBillView, SuggestedVendorsView

urlpatterns = [
    path('suggested-vendors/', SuggestedVendorsView.as_view(), name='procurement-suggested-vendors'),
    path('grn/', GRNCreateView.as_view(), name='procurement-grn'),
    path('grn/validate/', GRNValidateView.as_view(), name='procurement-grn-validate'),
    path('bills/<str:bill_id>/post/', PostBillView.as_view(), name='procurement-bill-post'),
]
