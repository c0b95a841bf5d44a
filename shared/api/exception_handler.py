"""DRF exception handler that understands ``shared.domain.exceptions``."""

from __future__ import annotations

import logging

from rest_framework import status  # type: ignore
from rest_framework.response import Response  # type: ignore
from rest_framework.views import exception_handler as drf_exception_handler  # type: ignore

from shared.domain.exceptions import (
    DomainError,
    ExternalServiceError,
    ForbiddenError,
    InvalidStateTransition,
    NotFoundError,
    ValidationError,
)

logger = logging.getLogger(__name__)

STATUS_BY_ERROR = (
    (ValidationError, status.HTTP_400_BAD_REQUEST),
    (NotFoundError, status.HTTP_404_NOT_FOUND),
    (ForbiddenError, status.HTTP_403_FORBIDDEN),
    (ExternalServiceError, status.HTTP_502_BAD_GATEWAY),
)


def domain_exception_handler(exc, context):
    """Map domain errors to responses, leave everything else to DRF."""

    if isinstance(exc, InvalidStateTransition):
        # Business flows never attempt illegal moves; reaching here is a bug.
        logger.error(f"Invalid state transition in {_view_name(context)}: {exc}", exc_info=exc)
        return Response(
            {"detail": "Internal error.", "code": exc.code},
            status=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )

    if isinstance(exc, DomainError):
        for error_class, http_status in STATUS_BY_ERROR:
            if isinstance(exc, error_class):
                if http_status >= 500:
                    logger.warning(f"{exc.__class__.__name__} in {_view_name(context)}: {exc}")
                return Response({"detail": exc.message, "code": exc.code}, status=http_status)
        logger.error(f"Unmapped domain error in {_view_name(context)}: {exc}", exc_info=exc)
        return Response(
            {"detail": "Internal error.", "code": exc.code},
            status=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )

    return drf_exception_handler(exc, context)


def _view_name(context) -> str:
    view = (context or {}).get("view")
    return view.__class__.__name__ if view is not None else "unknown view"
