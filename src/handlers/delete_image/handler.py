"""
Lambda handler responsible for image deletion.
"""

from typing import Any

from aws_lambda_powertools import Logger, Metrics, Tracer
from aws_lambda_powertools.metrics import MetricUnit
from aws_lambda_powertools.utilities.typing import LambdaContext

from core.models.errors import GalleryError
from core.services.provider import get_gallery_service
from core.utils.constants import METRICS_NAMESPACE
from core.utils.decorators import api_gateway_handler, domain_error_response
from core.utils.response import ResponseBuilder
from core.utils.validators import validate_request

from .models import DeleteImageRequest, DeleteImageResponse

logger = Logger(utc=True)
tracer = Tracer()
metrics = Metrics(namespace=METRICS_NAMESPACE)


@api_gateway_handler
@tracer.capture_lambda_handler
@metrics.log_metrics()
def handler(event: dict[str, Any], context: LambdaContext) -> dict[str, Any]:
    """
    Handle DELETE /images/{id}.

    The asset is removed from the media store first, then the record.

    Returns:
        200 with {id, deleted: true}; 404 if the image does not exist
    """
    request_id = getattr(context, "aws_request_id", None)
    path_params = event.get("pathParameters") or {}

    logger.info(
        "Received delete image request",
        extra={
            "http_method": event.get("httpMethod"),
            "path": event.get("path"),
            "request_id": request_id,
        },
    )

    is_valid, result = validate_request(
        DeleteImageRequest,
        {"id": path_params.get("id")},
        request_id=request_id,
    )
    if not is_valid:
        return result

    record_id = result.id

    try:
        deleted = get_gallery_service().delete_image(record_id)

    except GalleryError as exc:
        logger.exception(
            "Delete image failed",
            extra={"record_id": record_id, "error_code": exc.error_code},
        )
        return domain_error_response(
            exc,
            failure_message="Failed to delete image",
            request_id=request_id,
        )

    if not deleted:
        logger.warning("Record vanished before deletion", extra={"record_id": record_id})
        return ResponseBuilder.not_found(
            "Image not found",
            error="No image found with the provided ID",
            request_id=request_id,
        )

    metrics.add_metric(name="ImagesDeleted", unit=MetricUnit.Count, value=1)

    return ResponseBuilder.ok(
        "Image deleted successfully",
        data=DeleteImageResponse(id=record_id).model_dump(),
        request_id=request_id,
    )
