"""
Lambda handler responsible for updating image records and replacing assets.
"""

from typing import Any

from aws_lambda_powertools import Logger, Metrics, Tracer
from aws_lambda_powertools.metrics import MetricUnit
from aws_lambda_powertools.utilities.typing import LambdaContext

from core.models.errors import GalleryError
from core.services.provider import get_gallery_service
from core.utils.constants import METRICS_NAMESPACE
from core.utils.decorators import api_gateway_handler, domain_error_response
from core.utils.multipart import parse_multipart
from core.utils.response import ResponseBuilder
from core.utils.validators import validate_request

from .models import ImageUpdateRequest

logger = Logger(utc=True)
tracer = Tracer()
metrics = Metrics(namespace=METRICS_NAMESPACE)


@api_gateway_handler
@tracer.capture_lambda_handler
@metrics.log_metrics()
def handler(event: dict[str, Any], context: LambdaContext) -> dict[str, Any]:
    """
    Handle PUT /images/{id}.

    Form fields (all optional): file, title, description, tags, isPublic.
    When a file is supplied the asset is replaced under the same asset id
    and the derived metadata (url, format, dimensions, size) is refreshed.

    Returns:
        200 with the updated record; 404 if the image does not exist
    """
    request_id = getattr(context, "aws_request_id", None)
    path_params = event.get("pathParameters") or {}

    logger.info(
        "Received update image request",
        extra={
            "http_method": event.get("httpMethod"),
            "path": event.get("path"),
            "request_id": request_id,
        },
    )

    form = parse_multipart(event)

    is_valid, result = validate_request(
        ImageUpdateRequest,
        ImageUpdateRequest.from_form(path_params.get("id"), form),
        request_id=request_id,
    )
    if not is_valid:
        logger.warning("Update validation failed", extra={"fields": sorted(form.fields)})
        return result

    request: ImageUpdateRequest = result

    try:
        record = get_gallery_service().update_image(
            request.id,
            title=request.title,
            description=request.description,
            tags=request.tags,
            is_public=request.is_public,
            file_data=request.file.data if request.file else None,
            content_type=request.file.content_type if request.file else None,
        )

    except GalleryError as exc:
        logger.exception(
            "Update image failed",
            extra={"record_id": request.id, "error_code": exc.error_code},
        )
        return domain_error_response(
            exc,
            failure_message="Failed to update image",
            request_id=request_id,
        )

    metrics.add_metric(name="ImagesUpdated", unit=MetricUnit.Count, value=1)
    if request.file:
        metrics.add_metric(name="AssetsReplaced", unit=MetricUnit.Count, value=1)

    return ResponseBuilder.ok(
        "Image updated successfully",
        data=record.to_api(),
        request_id=request_id,
    )
