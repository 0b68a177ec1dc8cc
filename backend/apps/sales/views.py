from __future__ import annotations

from django.conf import settings
from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from apps.records.views import service_error_response
from shared.permissions import TenantScopedMixin
from .serializers import (
    GSTCalculateSerializer,
    LeadConversionSerializer,
    OrderConversionSerializer,
    QuotationConversionSerializer,
)
from .services.conversion import (
    convert_lead_to_client,
    convert_order_to_invoice,
    convert_quotation_to_order,
)
from .services.gst import (
    calculate_from_line_items,
    calculate_gst,
    generate_gst_summary,
    get_available_rates,
)


class ConversionView(TenantScopedMixin, APIView):
    serializer_class = None
    id_field = ""
    convert = None

    def post(self, request):
        serializer = self.serializer_class(data=request.data)
        serializer.is_valid(raise_exception=True)
        try:
            result = self.convert(
                self.get_tenant(), serializer.validated_data[self.id_field], user=request.user
            )
        except ValueError as exc:
            return service_error_response(exc)
        return Response(result, status=status.HTTP_201_CREATED)


class LeadToClientView(ConversionView):
    serializer_class = LeadConversionSerializer
    id_field = "leadId"
    convert = staticmethod(convert_lead_to_client)


class QuotationToOrderView(ConversionView):
    serializer_class = QuotationConversionSerializer
    id_field = "quotationId"
    convert = staticmethod(convert_quotation_to_order)


class OrderToInvoiceView(ConversionView):
    serializer_class = OrderConversionSerializer
    id_field = "orderId"
    convert = staticmethod(convert_order_to_invoice)


class GSTCalculateView(TenantScopedMixin, APIView):
    def post(self, request):
        serializer = GSTCalculateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        params = serializer.validated_data
        tenant = self.get_tenant()
        business_gstin = params["businessGstin"] or tenant.gstin or settings.BUSINESS_GSTIN
        if params.get("items"):
            result = calculate_from_line_items(
                params["items"], params["gstPercentage"], business_gstin, params["clientGstin"], params["applyGst"]
            )
        else:
            result = calculate_gst(
                params["subtotal"], params["gstPercentage"], business_gstin, params["clientGstin"], params["applyGst"]
            )
        return Response({"calculation": result.to_dict(), "summary": generate_gst_summary(result)})


class GSTRatesView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request):
        return Response({"rates": get_available_rates()})
