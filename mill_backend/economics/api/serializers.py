# economics/api/serializers.py

from rest_framework import serializers

from core.api.serializers import AliasedInputMixin

OPTION_FIELDS = (
    "target_rice_kg",
    "desired_margin_per_kg",
    "recovery_rate",
    "owner_salary_pct",
    "scrap_pct",
    "useful_life_years",
)


def _optional():
    return serializers.CharField(required=False, allow_blank=True)


class MillEconomicsQuerySerializer(AliasedInputMixin, serializers.Serializer):
    """
    Query string for the economics report. Values stay raw strings: the
    report validates the date range itself and treats unparsable numeric
    options as "use the mill default".
    """

    aliases = {
        "startDate": "start_date",
        "endDate": "end_date",
        "targetRiceKg": "target_rice_kg",
        "desiredMarginPerKg": "desired_margin_per_kg",
        "recoveryRate": "recovery_rate",
        "ownerSalaryPct": "owner_salary_pct",
        "scrapPct": "scrap_pct",
        "usefulLifeYears": "useful_life_years",
    }

    start_date = _optional()
    end_date = _optional()
    target_rice_kg = _optional()
    desired_margin_per_kg = _optional()
    recovery_rate = _optional()
    owner_salary_pct = _optional()
    scrap_pct = _optional()
    useful_life_years = _optional()

    def options(self) -> dict:
        return {name: self.validated_data.get(name) for name in OPTION_FIELDS}
