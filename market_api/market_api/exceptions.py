import logging

from django.core.exceptions import ValidationError as DjangoValidationError
from django.db import IntegrityError
from rest_framework import status
from rest_framework.exceptions import APIException, ValidationError as DRFValidationError
from rest_framework.response import Response
from rest_framework.views import exception_handler

logger = logging.getLogger(__name__)


class WorkflowError(APIException):
    """
    A well formed request that the current state of a record does not allow
    (illegal status transition, duplicate bid, bid on a project that is not open).
    """
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "This action is not allowed in the current state."
    default_code = 'invalid_state'


def market_exception_handler(exc, context):
    """
    DRF exception handler that also turns Django ValidationError and
    IntegrityError raised by services into 400 responses.
    """
    if isinstance(exc, DjangoValidationError):
        if hasattr(exc, 'message_dict'):
            exc = DRFValidationError(exc.message_dict)
        else:
            exc = DRFValidationError({'detail': exc.messages[0] if len(exc.messages) == 1 else exc.messages})

    response = exception_handler(exc, context)
    if response is not None:
        return response

    if isinstance(exc, IntegrityError):
        view = context.get('view')
        logger.warning(f"Integrity error in {view.__class__.__name__ if view else 'unknown view'}: {exc}")
        return Response(
            {'detail': "The request conflicts with existing data."},
            status=status.HTTP_400_BAD_REQUEST,
        )

    return None
