# core/api/views.py

from drf_spectacular.utils import extend_schema
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from core.api.serializers import MillConfigSerializer
from core.services.mill_config import load_mill_config


class MillSettingsView(APIView):
    """
    Read-only view of the mill settings. Changes go through the admin.
    """

    permission_classes = [IsAuthenticated]

    @extend_schema(tags=["core"], responses=MillConfigSerializer)
    def get(self, request):
        return Response(MillConfigSerializer(load_mill_config()).data)
