"""
Lambda handler responsible for listing distinct image tags.
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
    """Handle GET /tags: every distinct tag, sorted lexicographically."""
    request_id = getattr(context, "aws_request_id", None)

    logger.info("Received list tags request", extra={"request_id": request_id})

    try:
        tags = get_gallery_service().get_all_tags()

    except GalleryError as exc:
        logger.exception("List tags failed", extra={"error_code": exc.error_code})
        return domain_error_response(
            exc,
            failure_message="Failed to retrieve tags",
            request_id=request_id,
        )

    return ResponseBuilder.ok(
        "Tags retrieved successfully",
        data=tags,
        request_id=request_id,
    )
