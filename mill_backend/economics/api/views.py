# economics/api/views.py

"""
PATH: economics/api/views.py

MILL ECONOMICS REPORT API VIEW

GET /api/economics/mill-economics/
    ?startDate=YYYY-MM-DD&endDate=YYYY-MM-DD
    &targetRiceKg=&desiredMarginPerKg=&recoveryRate=
    &ownerSalaryPct=&scrapPct=&usefulLifeYears=

Responses:
- 200 {filters, economics, salary_workflow}
- 400 {"detail": ...} invalid or inverted date range
- 500 {"detail": "Failed to compile mill economics report"}
"""

from __future__ import annotations

from drf_spectacular.utils import extend_schema
from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from core.api.errors import error_response
from core.services.mill_config import load_mill_config
from economics.api.serializers import MillEconomicsQuerySerializer
from economics.services.exceptions import InvalidReportRangeError, ReportCompilationError
from economics.services.mill_economics import compile_mill_economics


class MillEconomicsReportView(APIView):
    permission_classes = [IsAuthenticated]

    @extend_schema(tags=["economics"], parameters=[MillEconomicsQuerySerializer])
    def get(self, request):
        s = MillEconomicsQuerySerializer(data=request.query_params)
        s.is_valid(raise_exception=True)

        try:
            report = compile_mill_economics(
                start=s.validated_data.get("start_date"),
                end=s.validated_data.get("end_date"),
                options=s.options(),
                config=load_mill_config(),
            )
        except InvalidReportRangeError as exc:
            return error_response(exc)
        except ReportCompilationError as exc:
            return error_response(exc, http_status=status.HTTP_500_INTERNAL_SERVER_ERROR)

        return Response(report, status=status.HTTP_200_OK)
