"""
Lambda handler responsible for gallery statistics.
"""

from typing import Any

from aws_lambda_powertools import Logger, Metrics, Tracer
from aws_lambda_powertools.utilities.typing import LambdaContext

from core.models.errors import GalleryError
from core.services.provider import get_gallery_service
from core.utils.constants import METRICS_NAMESPACE
from core.utils.decorators import api_gateway_handler, domain_error_response
from core.utils.response import ResponseBuilder

logger = Logger(utc=True)
tracer = Tracer()
metrics = Metrics(namespace=METRICS_NAMESPACE)


@api_gateway_handler
@tracer.capture_lambda_handler
@metrics.log_metrics()
def handler(event: dict[str, Any], context: LambdaContext) -> dict[str, Any]:
    """
    Handle GET /gallery/stats.

    Returns:
        totalImages, publicImages, privateImages, totalSize and averageSize
        (all zero for an empty gallery)
    """
    request_id = getattr(context, "aws_request_id", None)

    logger.info("Received gallery stats request", extra={"request_id": request_id})

    try:
        stats = get_gallery_service().get_stats()

    except GalleryError as exc:
        logger.exception("Gallery stats failed", extra={"error_code": exc.error_code})
        return domain_error_response(
            exc,
            failure_message="Failed to retrieve statistics",
            request_id=request_id,
        )

    return ResponseBuilder.ok(
        "Statistics retrieved successfully",
        data=stats.model_dump(by_alias=True),
        request_id=request_id,
    )
