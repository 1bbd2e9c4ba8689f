# inventory/api/serializers.py

from rest_framework import serializers

from core.api.serializers import AliasedInputMixin
from inventory.models import FinishedGoodsLot, RawMaterialLot, StockMovement, StorageBin


class StorageBinSerializer(serializers.ModelSerializer):
    class Meta:
        model = StorageBin
        fields = "__all__"
        read_only_fields = ("id", "created_at")


class RawMaterialLotSerializer(serializers.ModelSerializer):
    total_cost = serializers.DecimalField(max_digits=16, decimal_places=2, read_only=True)
    is_low_stock = serializers.BooleanField(read_only=True)

    class Meta:
        model = RawMaterialLot
        fields = "__all__"
        read_only_fields = fields


class FinishedGoodsLotSerializer(serializers.ModelSerializer):
    product_name = serializers.CharField(read_only=True)
    total_value = serializers.DecimalField(max_digits=16, decimal_places=2, read_only=True)

    class Meta:
        model = FinishedGoodsLot
        fields = "__all__"
        read_only_fields = fields


class StockMovementSerializer(serializers.ModelSerializer):
    source_bin_code = serializers.CharField(source="source_bin.code", read_only=True, default=None)
    destination_bin_code = serializers.CharField(
        source="destination_bin.code", read_only=True, default=None
    )

    class Meta:
        model = StockMovement
        fields = [
            "id",
            "movement_type",
            "product_sku",
            "quantity_kg",
            "source_bin",
            "source_bin_code",
            "destination_bin",
            "destination_bin_code",
            "reference_kind",
            "reference_id",
            "reason",
            "unit_cost",
            "total_cost",
            "created_by",
            "created_at",
        ]
        read_only_fields = fields


class StockAdjustmentSerializer(AliasedInputMixin, serializers.Serializer):
    aliases = {"deltaKg": "delta_kg"}

    sku = serializers.CharField(max_length=64)
    delta_kg = serializers.DecimalField(max_digits=14, decimal_places=2)
    reason = serializers.CharField(max_length=255)

    def validate_delta_kg(self, value):
        if value == 0:
            raise serializers.ValidationError("delta_kg must be a non-zero number")
        return value


class StockTransferSerializer(AliasedInputMixin, serializers.Serializer):
    aliases = {"destinationBinId": "destination_bin_id"}

    sku = serializers.CharField(max_length=64)
    destination_bin_id = serializers.UUIDField()
    reason = serializers.CharField(max_length=255, required=False, allow_blank=True)
