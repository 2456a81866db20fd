"""
Lambda handler responsible for image upload and record creation.
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

from .models import ImageUploadRequest

logger = Logger(utc=True)
tracer = Tracer()
metrics = Metrics(namespace=METRICS_NAMESPACE)


@api_gateway_handler
@tracer.capture_lambda_handler
@metrics.log_metrics()
def handler(event: dict[str, Any], context: LambdaContext) -> dict[str, Any]:
    """
    Handle POST /images/upload.

    Expected API Gateway event structure:
    {
        "headers": {"Content-Type": "multipart/form-data; boundary=..."},
        "body": "...",              # multipart body, possibly base64
        "isBase64Encoded": true
    }

    Form fields: file, title, description, tags (comma list), isPublic.

    Returns:
        201 with the created image record
    """
    request_id = getattr(context, "aws_request_id", None)

    logger.info(
        "Received image upload request",
        extra={
            "http_method": event.get("httpMethod"),
            "path": event.get("path"),
            "request_id": request_id,
            "function_name": getattr(context, "function_name", None),
            "remaining_time_ms": context.get_remaining_time_in_millis()
            if hasattr(context, "get_remaining_time_in_millis")
            else None,
        },
    )

    form = parse_multipart(event)

    is_valid, result = validate_request(
        ImageUploadRequest,
        ImageUploadRequest.from_form(form),
        request_id=request_id,
    )
    if not is_valid:
        logger.warning("Upload validation failed", extra={"fields": sorted(form.fields)})
        return result

    request: ImageUploadRequest = result

    try:
        service = get_gallery_service()
        record = service.create_image(
            file_data=request.file.data,
            content_type=request.file.content_type,
            title=request.title,
            description=request.description,
            tags=request.tags,
            is_public=request.is_public,
        )

    except GalleryError as exc:
        logger.exception(
            "Image upload failed",
            extra={"error_code": exc.error_code, "upload_filename": request.file.filename},
        )
        return domain_error_response(
            exc,
            failure_message="Failed to upload image",
            request_id=request_id,
        )

    metrics.add_metric(name="ImagesUploaded", unit=MetricUnit.Count, value=1)
    metrics.add_metric(name="UploadedBytes", unit=MetricUnit.Bytes, value=record.byte_size)

    return ResponseBuilder.created(
        "Image uploaded successfully",
        data=record.to_api(),
        request_id=request_id,
    )
