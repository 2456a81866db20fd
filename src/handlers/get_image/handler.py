"""
Lambda handler responsible for retrieving a single image record.
"""

from typing import Any

from aws_lambda_powertools import Logger, Metrics, Tracer
from aws_lambda_powertools.utilities.typing import LambdaContext

from core.models.errors import GalleryError
from core.services.provider import get_gallery_service
from core.utils.constants import METRICS_NAMESPACE
from core.utils.decorators import api_gateway_handler, domain_error_response
from core.utils.response import ResponseBuilder
from core.utils.validators import validate_request

from .models import GetImageRequest

logger = Logger(utc=True)
tracer = Tracer()
metrics = Metrics(namespace=METRICS_NAMESPACE)


@api_gateway_handler
@tracer.capture_lambda_handler
@metrics.log_metrics()
def handler(event: dict[str, Any], context: LambdaContext) -> dict[str, Any]:
    """
    Handle GET /images/{id}.

    Args:
        event: API Gateway event payload.
        context: AWS Lambda runtime context.

    Returns:
        200 with the image record, 404 when the id is malformed or unknown.
    """
    request_id = getattr(context, "aws_request_id", None)
    path_params = event.get("pathParameters") or {}

    logger.info(
        "Received get image request",
        extra={
            "http_method": event.get("httpMethod"),
            "path": event.get("path"),
            "request_id": request_id,
        },
    )

    is_valid, result = validate_request(
        GetImageRequest,
        {"id": path_params.get("id")},
        request_id=request_id,
    )
    if not is_valid:
        return result

    record_id = result.id

    try:
        record = get_gallery_service().get_image(record_id)

    except GalleryError as exc:
        logger.exception(
            "Get image failed",
            extra={"record_id": record_id, "error_code": exc.error_code},
        )
        return domain_error_response(
            exc,
            failure_message="Failed to retrieve image",
            request_id=request_id,
        )

    return ResponseBuilder.ok(
        "Image retrieved successfully",
        data=record.to_api(),
        request_id=request_id,
    )
