from rest_framework import serializers

from .services.gst import VALID_GST_RATES


class LeadConversionSerializer(serializers.Serializer):
    leadId = serializers.CharField()


class QuotationConversionSerializer(serializers.Serializer):
    quotationId = serializers.CharField()


class OrderConversionSerializer(serializers.Serializer):
    orderId = serializers.CharField()


class LineItemSerializer(serializers.Serializer):
    quantity = serializers.DecimalField(max_digits=14, decimal_places=3)
    unitPrice = serializers.DecimalField(max_digits=14, decimal_places=2, required=False)
    rate = serializers.DecimalField(max_digits=14, decimal_places=2, required=False)


class GSTCalculateSerializer(serializers.Serializer):
    subtotal = serializers.DecimalField(max_digits=14, decimal_places=2, required=False)
    items = LineItemSerializer(many=True, required=False)
    gstPercentage = serializers.DecimalField(max_digits=5, decimal_places=2)
    businessGstin = serializers.CharField(required=False, allow_blank=True, default="")
    clientGstin = serializers.CharField(required=False, allow_blank=True, default="")
    applyGst = serializers.BooleanField(required=False, default=True)

    def validate_gstPercentage(self, value):
        if value not in VALID_GST_RATES:
            raise serializers.ValidationError(
                f"GST rate must be one of {', '.join(str(rate) for rate in VALID_GST_RATES)}"
            )
        return value

    def validate(self, attrs):
        if attrs.get("subtotal") is None and not attrs.get("items"):
            raise serializers.ValidationError("Provide either subtotal or items.")
        return attrs
