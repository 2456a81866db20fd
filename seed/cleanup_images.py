#!/usr/bin/env python3
"""
Cleanup script to remove every gallery image via API endpoints.

Run:
    poetry run python seed/cleanup_images.py \
      --api-id <API-ID> \
      --api-key <API-KEY>
"""

import argparse
import sys
from typing import Any, cast

from aws_lambda_powertools import Logger
import requests

logger = Logger(service="cleanup")

BASE_API_URL = "http://localhost:4566/restapis/{0}/snd/_user_request_/v1"

PAGE_SIZE = 100


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Cleanup gallery images via Image Gallery API")

    parser.add_argument(
        "--api-id",
        required=True,
        help="API Gateway ID (LocalStack)",
    )
    parser.add_argument(
        "--api-key",
        default=None,
        help="API key for x-api-key header (optional for local)",
    )

    return parser.parse_args()


def collect_record_ids(base_url: str, headers: dict[str, str]) -> list[str]:
    """Page through GET /images and return every record id."""
    record_ids: list[str] = []
    page = 1

    while True:
        response = requests.get(
            f"{base_url}/images",
            headers=headers,
            params={"page": page, "limit": PAGE_SIZE},
            timeout=30,
        )

        if not response.ok:
            logger.error(
                "Failed to list images",
                extra={"status": response.status_code, "response": response.text},
            )
            sys.exit(1)

        response_json = cast(dict[str, Any], response.json())
        images = cast(list[dict[str, Any]], response_json.get("data", []))
        record_ids.extend(image["recordId"] for image in images)

        if not response_json.get("pagination", {}).get("hasNextPage"):
            return record_ids
        page += 1


def cleanup_images() -> None:
    try:
        args = parse_args()

        headers: dict[str, str] = {}
        if args.api_key:
            headers["x-api-key"] = args.api_key

        base_url = BASE_API_URL.format(args.api_id)

        logger.info(
            "Starting cleanup process",
            extra={"api_base_url": base_url},
        )

        record_ids = collect_record_ids(base_url, headers)

        if not record_ids:
            logger.info("No images found for cleanup")
            return

        for record_id in record_ids:
            delete_resp = requests.delete(
                f"{base_url}/images/{record_id}",
                headers=headers,
                timeout=30,
            )

            if delete_resp.ok:
                logger.info("Deleted image", extra={"record_id": record_id})
            else:
                logger.error(
                    "Failed to delete image",
                    extra={
                        "record_id": record_id,
                        "status": delete_resp.status_code,
                        "response": delete_resp.text,
                    },
                )

        sync_resp = requests.get(f"{base_url}/gallery/sync", headers=headers, timeout=30)
        logger.info(
            "Sync report after cleanup",
            extra={
                "status": sync_resp.status_code,
                "response": sync_resp.json() if sync_resp.ok else sync_resp.text,
            },
        )

        logger.info("Cleanup completed successfully")

    except Exception as exc:
        logger.exception("Cleanup failed", exc_info=exc)
        sys.exit(1)


if __name__ == "__main__":
    cleanup_images()
