"""
Lambda handler responsible for listing and searching images with pagination.
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

from .models import ListImagesRequest

logger = Logger(utc=True)
tracer = Tracer()
metrics = Metrics(namespace=METRICS_NAMESPACE)


@api_gateway_handler
@tracer.capture_lambda_handler
@metrics.log_metrics()
def handler(event: dict[str, Any], context: LambdaContext) -> dict[str, Any]:
    """
    Handle GET /images.

    Query parameters:
        - page: Page number, default 1
        - limit: Page size (1-100), default 20
        - sortBy: createdAt | updatedAt | title, default createdAt
        - sortOrder: asc | desc, default desc
        - tags: Comma-separated tags (match any)
        - isPublic: "true" for public images, any other value for private
        - search: Free-text search; switches to relevance-aware search

    Returns:
        API Gateway response with the page of images and pagination block
    """
    request_id = getattr(context, "aws_request_id", None)
    query_params = event.get("queryStringParameters") or {}

    logger.info(
        "Received list images request",
        extra={
            "http_method": event.get("httpMethod"),
            "path": event.get("path"),
            "query_params": query_params,
            "request_id": request_id,
        },
    )

    params = {
        "page": query_params.get("page"),
        "limit": query_params.get("limit"),
        "sort_by": query_params.get("sortBy"),
        "sort_order": query_params.get("sortOrder"),
        "tags": query_params.get("tags"),
        "is_public": query_params.get("isPublic"),
        "search": query_params.get("search"),
    }
    # Absent or empty parameters fall back to model defaults
    params = {key: value for key, value in params.items() if value not in (None, "")}

    is_valid, result = validate_request(ListImagesRequest, params, request_id=request_id)
    if not is_valid:
        logger.warning("Request validation failed", extra={"params": params})
        return result

    query = result.to_query()
    is_search = query.search is not None

    try:
        service = get_gallery_service()
        if is_search:
            page = service.search_images(query.search, query)
        else:
            page = service.list_images(query)

    except GalleryError as exc:
        logger.exception(
            "List images failed",
            extra={"error_code": exc.error_code, "search": query.search},
        )
        return domain_error_response(
            exc,
            failure_message="Failed to search images" if is_search else "Failed to retrieve images",
            request_id=request_id,
        )

    logger.info(
        "Images listed successfully",
        extra={"count": len(page.images), "total": page.pagination.total_items},
    )

    return ResponseBuilder.ok(
        "Search completed successfully" if is_search else "Images retrieved successfully",
        data=[record.to_api() for record in page.images],
        pagination=page.pagination.model_dump(by_alias=True),
        request_id=request_id,
    )
