# accounting/api/query.py

"""
Shared helpers for report views: query-string validation and the
report-parameter error payload.
"""

from rest_framework import status
from rest_framework.response import Response


def validated_query(serializer_class, request):
    """
    Validate query params with a DRF serializer. A plain dict is passed
    so missing booleans fall back to their declared defaults.
    """
    serializer = serializer_class(data=request.query_params.dict())
    serializer.is_valid(raise_exception=True)
    return serializer


def parameter_error(exc) -> Response:
    payload = {"detail": str(exc)}
    field = getattr(exc, "field", None)
    if field:
        payload["field"] = field
    return Response(payload, status=status.HTTP_400_BAD_REQUEST)
