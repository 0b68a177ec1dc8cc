from __future__ import annotations

from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import APIView

from apps.records.views import service_error_response
from shared.permissions import TenantScopedMixin
from .serializers import GRNValidateSerializer, PRConversionSerializer, SuggestedVendorQuerySerializer
from .services import convert_pr_to_po, create_grn, get_suggested_vendors, post_bill_to_expense, validate_grn


class SuggestedVendorsView(TenantScopedMixin, APIView):
    def get(self, request):
        query = SuggestedVendorQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)
        vendors = get_suggested_vendors(
            self.get_tenant(), query.validated_data["itemCode"], query.validated_data["quantity"]
        )
        return Response({"vendors": vendors})


class PRToPOView(TenantScopedMixin, APIView):
    def post(self, request):
        serializer = PRConversionSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        params = serializer.validated_data
        try:
            po = convert_pr_to_po(
                self.get_tenant(),
                params["prId"],
                params["vendorId"],
                user=request.user,
                delivery_date=params.get("deliveryDate") or None,
                payment_terms=params.get("paymentTerms") or None,
                shipping_address=params.get("shippingAddress"),
                billing_address=params.get("billingAddress"),
            )
        except ValueError as exc:
            return service_error_response(exc)
        return Response(
            {
                "success": True,
                "message": f"Purchase Order {po.get('poNumber') or po['id']} created successfully",
                "poId": po["id"],
                "purchaseOrder": po,
            },
            status=status.HTTP_201_CREATED,
        )


class GRNValidateView(TenantScopedMixin, APIView):
    def post(self, request):
        serializer = GRNValidateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        try:
            result = validate_grn(self.get_tenant(), serializer.validated_data["poId"], serializer.validated_data["items"])
        except ValueError as exc:
            return service_error_response(exc)
        return Response(result)


class GRNCreateView(TenantScopedMixin, APIView):
    def post(self, request):
        serializer = GRNValidateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = {key: value for key, value in request.data.items() if key != "poId"}
        try:
            result = create_grn(self.get_tenant(), serializer.validated_data["poId"], data, user=request.user)
        except ValueError as exc:
            return service_error_response(exc)
        return Response(result, status=status.HTTP_201_CREATED)


class PostBillView(TenantScopedMixin, APIView):
    def post(self, request, bill_id: str):
        try:
            expense = post_bill_to_expense(self.get_tenant(), bill_id, user=request.user)
        except ValueError as exc:
            return service_error_response(exc)
        return Response({"success": True, "expenseId": expense["id"], "expense": expense}, status=status.HTTP_201_CREATED)
