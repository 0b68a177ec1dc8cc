from rest_framework import serializers


class SuggestedVendorQuerySerializer(serializers.Serializer):
    itemCode = serializers.CharField()
    quantity = serializers.FloatField(required=False, default=1, min_value=0)


class PRConversionSerializer(serializers.Serializer):
    prId = serializers.CharField()
    vendorId = serializers.CharField()
    deliveryDate = serializers.CharField(required=False, allow_blank=True)
    paymentTerms = serializers.CharField(required=False, allow_blank=True)
    shippingAddress = serializers.JSONField(required=False)
    billingAddress = serializers.JSONField(required=False)


class GRNItemSerializer(serializers.Serializer):
    itemCode = serializers.CharField()
    receivedQty = serializers.FloatField(min_value=0)
    acceptedQty = serializers.FloatField(min_value=0)


class GRNValidateSerializer(serializers.Serializer):
    poId = serializers.CharField()
    items = serializers.ListField(child=serializers.DictField(), allow_empty=False)

    def validate_items(self, value):
        for item in value:
            row = GRNItemSerializer(data=item)
            row.is_valid(raise_exception=True)
        return value
