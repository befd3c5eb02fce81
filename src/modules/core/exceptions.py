"""Standard error envelope for every API response.

DRF's default handler produces a different body shape per exception
(``{"detail": ...}``, ``{"field": [...]}``, ...).  The storefront client
reads a single ``message`` string and an ``errors`` list, so every error
response is rewritten into::

    {
        "type": "validation_error",
        "message": "Field 'deliveryCityId' is required.",
        "errors": [{"code": "required", "detail": "...", "field": "deliveryCityId"}]
    }
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

import structlog
from django.http import Http404
from rest_framework import exceptions
from rest_framework.response import Response
from rest_framework.views import exception_handler

logger = structlog.get_logger(__name__)

_TYPE_BY_EXCEPTION = (
    (exceptions.ValidationError, "validation_error"),
    (exceptions.ParseError, "parse_error"),
    (exceptions.NotFound, "not_found"),
    (Http404, "not_found"),
    (exceptions.MethodNotAllowed, "method_not_allowed"),
    (exceptions.NotAuthenticated, "not_authenticated"),
    (exceptions.AuthenticationFailed, "authentication_failed"),
    (exceptions.PermissionDenied, "permission_denied"),
    (exceptions.Throttled, "throttled"),
    (exceptions.UnsupportedMediaType, "unsupported_media_type"),
)


def error_body(
    error_type: str,
    message: str,
    errors: Optional[List[Dict[str, Any]]] = None,
) -> Dict[str, Any]:
    """Build the envelope used by both the handler and the order views."""
    return {"type": error_type, "message": message, "errors": errors or []}


def _flatten(detail: Any, field: Optional[str] = None) -> List[Dict[str, Any]]:
    if isinstance(detail, dict):
        flat: List[Dict[str, Any]] = []
        for key, value in detail.items():
            # many=True serializers key child errors by list index
            if isinstance(key, int):
                prefixed = f"{field}[{key}]" if field is not None else str(key)
            elif key == "non_field_errors":
                prefixed = field
            else:
                prefixed = f"{field}.{key}" if field is not None else key
            flat.extend(_flatten(value, prefixed))
        return flat
    if isinstance(detail, list):
        flat = []
        for index, value in enumerate(detail):
            child = field
            if isinstance(value, dict) and field is not None:
                child = f"{field}[{index}]"
            flat.extend(_flatten(value, child))
        return flat

    entry: Dict[str, Any] = {
        "code": getattr(detail, "code", "error"),
        "detail": str(detail),
    }
    if field is not None:
        entry["field"] = field
    return [entry]


def _type_for(exc: Exception) -> str:
    for exc_class, name in _TYPE_BY_EXCEPTION:
        if isinstance(exc, exc_class):
            return name
    return "api_error"


def standard_exception_handler(exc: Exception, context: Dict[str, Any]) -> Optional[Response]:
    """DRF ``EXCEPTION_HANDLER`` producing the standard envelope.

    Returns ``None`` for non-API exceptions so Django's own 500 handling
    (and its logging) still applies.
    """
    response = exception_handler(exc, context)
    if response is None:
        return None

    errors = _flatten(response.data)
    message = errors[0]["detail"] if errors else "Request failed."
    if errors and errors[0].get("field"):
        message = f"{errors[0]['field']}: {message}"

    logger.info(
        "api.error_response",
        status_code=response.status_code,
        error_type=_type_for(exc),
    )
    response.data = error_body(_type_for(exc), message, errors)
    return response
