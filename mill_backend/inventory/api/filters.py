# inventory/api/filters.py

import django_filters

from inventory.models import StockMovement


class StockMovementFilter(django_filters.FilterSet):
    start = django_filters.IsoDateTimeFilter(field_name="created_at", lookup_expr="gte")
    end = django_filters.IsoDateTimeFilter(field_name="created_at", lookup_expr="lte")
    movement_type = django_filters.ChoiceFilter(choices=StockMovement.MovementType.choices)
    reference_kind = django_filters.ChoiceFilter(choices=StockMovement.ReferenceKind.choices)

    class Meta:
        model = StockMovement
        fields = ["start", "end", "movement_type", "reference_kind"]
