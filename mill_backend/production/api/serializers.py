# production/api/serializers.py

from decimal import Decimal

from rest_framework import serializers

from core.api.serializers import AliasedInputMixin
from inventory.models import FinishedGoodsLot
from inventory.models.finished_goods_lot import ALLOWED_BAG_WEIGHTS_KG
from production.models import ByProduct, Machine, ProductionBatch


def _kg(**kwargs):
    return serializers.DecimalField(max_digits=14, decimal_places=2, **kwargs)


class BatchStartSerializer(AliasedInputMixin, serializers.Serializer):
    aliases = {
        "inputQuantityKg": "input_quantity_kg",
        "inputPaddyKg": "input_quantity_kg",
        "input_paddy_kg": "input_quantity_kg",
        "rawMaterialId": "raw_material_id",
        "paddyType": "paddy_type",
        "paddyNaduKg": "paddy_nadu_kg",
        "paddySambaKg": "paddy_samba_kg",
        "operatorIds": "operator_ids",
        "machineIds": "machine_ids",
        "storageBinId": "storage_bin_id",
    }

    raw_material_id = serializers.UUIDField()
    input_quantity_kg = _kg(min_value=Decimal("0.01"))
    paddy_type = serializers.ChoiceField(
        choices=ProductionBatch.PaddyType.choices, required=False, allow_blank=True
    )
    paddy_breakdown = serializers.DictField(child=_kg(min_value=0), required=False)
    paddy_nadu_kg = _kg(min_value=0, required=False)
    paddy_samba_kg = _kg(min_value=0, required=False)
    operator_ids = serializers.ListField(child=serializers.UUIDField(), required=False)
    machine_ids = serializers.ListField(child=serializers.UUIDField(), required=False)
    storage_bin_id = serializers.UUIDField(required=False, allow_null=True)
    notes = serializers.CharField(required=False, allow_blank=True)

    def to_internal_value(self, data):
        if hasattr(data, "dict"):
            data = data.dict()
        else:
            data = dict(data)
        breakdown = data.pop("paddyBreakdown", None)
        if breakdown is not None and "paddy_breakdown" not in data:
            data["paddy_breakdown"] = breakdown
        return super().to_internal_value(data)

    def validate(self, attrs):
        breakdown = attrs.pop("paddy_breakdown", None) or {}
        if breakdown:
            unknown = set(breakdown) - {"nadu", "samba"}
            if unknown:
                raise serializers.ValidationError(
                    {"paddy_breakdown": f"Unknown paddy types: {', '.join(sorted(unknown))}"}
                )
            attrs.setdefault("paddy_nadu_kg", breakdown.get("nadu"))
            attrs.setdefault("paddy_samba_kg", breakdown.get("samba"))
        return attrs


class BatchCompleteSerializer(AliasedInputMixin, serializers.Serializer):
    aliases = {
        "riceWeightKg": "rice_kg",
        "outputRiceKg": "rice_kg",
        "rice_weight_kg": "rice_kg",
        "brokenRiceKg": "broken_kg",
        "brokenKg": "broken_kg",
        "broken_rice_kg": "broken_kg",
        "branKg": "bran_kg",
        "huskKg": "husk_kg",
        "impurityKg": "impurity_kg",
        "riceGrade": "rice_grade",
        "bagWeightKg": "bag_weight_kg",
        "bagCount": "bag_count",
        "expiryDate": "expiry_date",
        "pricePerKg": "price_per_kg",
        "storageBinId": "storage_bin_id",
    }

    rice_kg = _kg(min_value=0)
    broken_kg = _kg(min_value=0, required=False, default=0)
    bran_kg = _kg(min_value=0, required=False, default=0)
    husk_kg = _kg(min_value=0, required=False, default=0)
    impurity_kg = _kg(min_value=0, required=False, default=0)

    rice_grade = serializers.ChoiceField(
        choices=FinishedGoodsLot.RiceGrade.choices, required=False
    )
    bag_weight_kg = serializers.DecimalField(
        max_digits=6, decimal_places=2, required=False
    )
    bag_count = serializers.IntegerField(min_value=0, required=False)
    expiry_date = serializers.DateField(required=False)
    price_per_kg = serializers.DecimalField(
        max_digits=12, decimal_places=2, min_value=0, required=False
    )
    storage_bin_id = serializers.UUIDField(required=False, allow_null=True)
    notes = serializers.CharField(required=False, allow_blank=True)

    def validate_bag_weight_kg(self, value):
        if value is not None and value not in ALLOWED_BAG_WEIGHTS_KG:
            raise serializers.ValidationError("bag_weight_kg must be one of 1, 5, 10, 25, 50")
        return value


class BatchCancelSerializer(serializers.Serializer):
    reason = serializers.CharField(required=False, allow_blank=True, max_length=255)


class MachineSerializer(serializers.ModelSerializer):
    class Meta:
        model = Machine
        fields = "__all__"
        read_only_fields = ("id", "created_at")


class ProductionBatchSerializer(serializers.ModelSerializer):
    raw_material_sku = serializers.CharField(source="raw_material.sku", read_only=True)
    total_output_kg = serializers.SerializerMethodField()

    class Meta:
        model = ProductionBatch
        fields = [
            "id",
            "batch_number",
            "paddy_type",
            "paddy_nadu_kg",
            "paddy_samba_kg",
            "input_quantity_kg",
            "raw_material",
            "raw_material_sku",
            "storage_bin",
            "operators",
            "machines",
            "status",
            "rice_kg",
            "broken_kg",
            "bran_kg",
            "husk_kg",
            "impurity_kg",
            "total_output_kg",
            "yield_percentage",
            "started_at",
            "ended_at",
            "notes",
            "cancel_reason",
            "created_at",
        ]
        read_only_fields = fields

    def get_total_output_kg(self, obj):
        return str(obj.total_output_kg)


class FinishedGoodsSerializer(serializers.ModelSerializer):
    product_name = serializers.CharField(read_only=True)
    total_value = serializers.DecimalField(max_digits=16, decimal_places=2, read_only=True)

    class Meta:
        model = FinishedGoodsLot
        fields = [
            "id",
            "sku",
            "batch",
            "product_name",
            "paddy_type",
            "rice_grade",
            "weight_kg",
            "bag_count",
            "bag_weight_kg",
            "expiry_date",
            "price_per_kg",
            "total_value",
            "storage_bin",
            "status",
            "produced_at",
        ]
        read_only_fields = fields


class ByProductSerializer(serializers.ModelSerializer):
    stock_balance_kg = serializers.DecimalField(
        max_digits=14, decimal_places=2, read_only=True
    )

    class Meta:
        model = ByProduct
        fields = "__all__"
        read_only_fields = ("id", "status", "sold_quantity_kg", "sold_revenue", "created_at")


class ByProductSaleSerializer(serializers.Serializer):
    quantity_kg = _kg(min_value=Decimal("0.01"))
    price_per_kg = serializers.DecimalField(
        max_digits=12, decimal_places=2, min_value=0, required=False
    )
