# purchases/api/serializers.py

from decimal import Decimal

from django.utils import timezone
from rest_framework import serializers

from core.api.serializers import AliasedInputMixin
from purchases.models import PaddyType, Purchase, Supplier


class SupplierSerializer(serializers.ModelSerializer):
    class Meta:
        model = Supplier
        fields = "__all__"
        read_only_fields = ("id", "created_at")


class PurchaseCreateSerializer(AliasedInputMixin, serializers.Serializer):
    aliases = {
        "supplierId": "supplier_id",
        "paddyType": "paddy_type",
        "qualityGrade": "quality_grade",
        "moisturePercent": "moisture_percent",
        "grossWeightKg": "gross_weight_kg",
        "tareKg": "tare_kg",
        "pricePerKg": "price_per_kg",
        "transportCost": "transport_cost",
        "unloadingCost": "unloading_cost",
        "storageBinId": "storage_bin_id",
        "receivedAt": "received_at",
    }

    supplier_id = serializers.UUIDField()
    paddy_type = serializers.ChoiceField(choices=PaddyType.choices)
    quality_grade = serializers.ChoiceField(choices=Purchase.GRADES)
    moisture_percent = serializers.DecimalField(
        max_digits=5,
        decimal_places=2,
        min_value=Decimal("0"),
        max_value=Decimal("100"),
        required=False,
        allow_null=True,
    )
    gross_weight_kg = serializers.DecimalField(
        max_digits=14, decimal_places=2, min_value=Decimal("0.01")
    )
    tare_kg = serializers.DecimalField(
        max_digits=14, decimal_places=2, min_value=Decimal("0"), required=False
    )
    price_per_kg = serializers.DecimalField(
        max_digits=12, decimal_places=2, min_value=Decimal("0")
    )
    transport_cost = serializers.DecimalField(
        max_digits=14, decimal_places=2, min_value=Decimal("0"), required=False
    )
    unloading_cost = serializers.DecimalField(
        max_digits=14, decimal_places=2, min_value=Decimal("0"), required=False
    )
    storage_bin_id = serializers.UUIDField(required=False, allow_null=True)
    received_at = serializers.DateTimeField(required=False)
    notes = serializers.CharField(required=False, allow_blank=True)

    def validate_received_at(self, value):
        if value is not None and value > timezone.now():
            raise serializers.ValidationError("received_at cannot be in the future")
        return value

    def validate(self, attrs):
        tare = attrs.get("tare_kg") or Decimal("0")
        if tare >= attrs["gross_weight_kg"]:
            raise serializers.ValidationError(
                {"tare_kg": "tare_kg must be less than gross_weight_kg"}
            )
        return attrs


class PurchaseSerializer(serializers.ModelSerializer):
    supplier_name = serializers.CharField(source="supplier.name", read_only=True)

    class Meta:
        model = Purchase
        fields = [
            "id",
            "po_number",
            "supplier",
            "supplier_name",
            "paddy_type",
            "quality_grade",
            "moisture_percent",
            "gross_weight_kg",
            "tare_kg",
            "net_weight_kg",
            "price_per_kg",
            "transport_cost",
            "unloading_cost",
            "total_amount",
            "status",
            "received_at",
            "notes",
            "created_at",
        ]
        read_only_fields = fields


class RawMaterialSummarySerializer(serializers.Serializer):
    id = serializers.UUIDField()
    sku = serializers.CharField()
    name = serializers.CharField()
    quantity_kg = serializers.DecimalField(max_digits=14, decimal_places=2)
    cost_per_unit = serializers.DecimalField(max_digits=12, decimal_places=2)
    status = serializers.CharField()
