from django.urls import path

from .views import LeadToClientView, OrderToInvoiceView, QuotationToOrderView

urlpatterns = [
    path('lead-to-client/', LeadToClientView.as_view(), name='convert-lead-to-client'),
    path('quotation-to-order/', QuotationToOrderView.as_view(), name='convert-quotation-to-order'),
    path('order-to-invoice/', OrderToInvoiceView.as_view(), name='convert-order-to-invoice'),
]
