# core/api/errors.py

from rest_framework import status
from rest_framework.response import Response


def error_response(exc, *, http_status=status.HTTP_400_BAD_REQUEST):
    """
    Canonical domain error payload: {"detail": message}.
    """
    return Response({"detail": str(exc)}, status=http_status)
