import logging

from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import exception_handler

from apps.leasing import exceptions

logger = logging.getLogger(__name__)

STATUS_BY_ERROR = {
    exceptions.NotFound: status.HTTP_404_NOT_FOUND,
    exceptions.IneligibleSelection: status.HTTP_422_UNPROCESSABLE_ENTITY,
    exceptions.ReferentialIntegrityViolation: status.HTTP_409_CONFLICT,
    exceptions.MergeConflict: status.HTTP_409_CONFLICT,
    exceptions.DuplicateName: status.HTTP_409_CONFLICT,
}


def catalog_exception_handler(exc, context):
    """
    DRF exception handler that turns catalog engine errors into
    ``{"error": message, "code": kind}`` responses.
    """
    if isinstance(exc, exceptions.CatalogError):
        response_status = STATUS_BY_ERROR.get(type(exc), status.HTTP_400_BAD_REQUEST)
        view = context.get('view')
        logger.info(
            "%s rejected with %s: %s",
            view.__class__.__name__ if view else 'request', exc.code, exc.message,
        )
        return Response({'error': exc.message, 'code': exc.code}, status=response_status)

    return exception_handler(exc, context)
