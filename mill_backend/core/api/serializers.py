# core/api/serializers.py

from rest_framework import serializers


class AliasedInputMixin:
    """
    Accept legacy / camelCase request keys at the HTTP boundary only.

    `aliases` maps incoming key -> canonical field name. The first key
    present wins; the canonical name always beats an alias. Nothing past
    the serializer ever sees an alias.
    """

    aliases: dict = {}

    def to_internal_value(self, data):
        if hasattr(data, "dict"):
            data = data.dict()
        else:
            data = dict(data)

        for alias, canonical in self.aliases.items():
            if alias in data and canonical not in data:
                data[canonical] = data[alias]
            data.pop(alias, None)

        return super().to_internal_value(data)


class DomainErrorSerializer(serializers.Serializer):
    detail = serializers.CharField()


class MillConfigSerializer(serializers.Serializer):
    milling_recovery_rate = serializers.DecimalField(max_digits=6, decimal_places=4)
    owner_salary_pct = serializers.DecimalField(max_digits=6, decimal_places=4)
    target_profit_margin = serializers.DecimalField(max_digits=6, decimal_places=4)
    gst_rate = serializers.DecimalField(max_digits=5, decimal_places=2)
    production_tolerance_pct = serializers.DecimalField(max_digits=6, decimal_places=4)
    low_stock_threshold_kg = serializers.DecimalField(max_digits=12, decimal_places=2)
    default_bag_weight_kg = serializers.DecimalField(max_digits=6, decimal_places=2)
    default_expiry_days = serializers.IntegerField()
    default_rice_grade = serializers.CharField()
    raw_material_minimum_stock_kg = serializers.DecimalField(max_digits=12, decimal_places=2)
    invoice_due_days = serializers.IntegerField()
    currency = serializers.CharField()
    depreciation_scrap_pct = serializers.DecimalField(max_digits=6, decimal_places=4)
    depreciation_useful_life_years = serializers.IntegerField()
    purchase_prefix = serializers.CharField()
    invoice_prefix = serializers.CharField()
    batch_prefix = serializers.CharField()
    order_prefix = serializers.CharField()
    number_width = serializers.IntegerField()
