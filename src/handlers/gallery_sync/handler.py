"""
Lambda handler responsible for the record store / media store sync check.
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

logger = Logger(utc=True)
tracer = Tracer()
metrics = Metrics(namespace=METRICS_NAMESPACE)


@api_gateway_handler
@tracer.capture_lambda_handler
@metrics.log_metrics()
def handler(event: dict[str, Any], context: LambdaContext) -> dict[str, Any]:
    """
    Handle GET /gallery/sync.

    Reports inSync, recordCount, assetCount and one discrepancy message per
    asset id present in only one of the two stores. The storage listing is
    capped, so very large galleries are only partially compared.
    """
    request_id = getattr(context, "aws_request_id", None)

    logger.info("Received gallery sync request", extra={"request_id": request_id})

    try:
        status = get_gallery_service().sync_with_storage()

    except GalleryError as exc:
        logger.exception("Gallery sync failed", extra={"error_code": exc.error_code})
        return domain_error_response(
            exc,
            failure_message="Failed to retrieve synchronization status",
            request_id=request_id,
        )

    metrics.add_metric(
        name="SyncDiscrepancies",
        unit=MetricUnit.Count,
        value=len(status.discrepancies),
    )

    return ResponseBuilder.ok(
        "Synchronization status retrieved successfully",
        data=status.model_dump(by_alias=True),
        request_id=request_id,
    )
