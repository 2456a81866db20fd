#!/usr/bin/env python3
"""
Seed script to populate the gallery via API endpoints.

Generates solid-colour sample images with Pillow and uploads them as
multipart forms, then lists the gallery.

Run:
    poetry run python seed/seed_images.py \
      --api-id <API-ID> \
      --api-key <API-KEY>
"""

import argparse
from io import BytesIO
import sys
from typing import Any, cast

from aws_lambda_powertools import Logger
from PIL import Image
import requests

logger = Logger(service="seed")


BASE_API_URL = "http://localhost:4566/restapis/{0}/snd/_user_request_/v1"

SAMPLE_IMAGES: list[dict[str, Any]] = [
    {
        "title": "Sunset",
        "description": "Orange sky over the bay",
        "tags": "nature,sky",
        "color": (250, 120, 40),
        "is_public": True,
    },
    {
        "title": "Forest",
        "description": "Pine forest after the rain",
        "tags": "nature,trees",
        "color": (30, 110, 50),
        "is_public": True,
    },
    {
        "title": "Skyline",
        "description": "City skyline at night",
        "tags": "city,night",
        "color": (20, 20, 60),
        "is_public": False,
    },
    {
        "title": "Ocean",
        "description": "Calm blue ocean",
        "tags": "nature,water",
        "color": (20, 90, 200),
        "is_public": True,
    },
]


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Seed images via Image Gallery API")

    parser.add_argument(
        "--api-id",
        required=True,
        help="Base API ID (e.g. LocalStack API Gateway ID)",
    )
    parser.add_argument(
        "--api-key",
        default=None,
        help="API key for x-api-key header (optional for local)",
    )
    parser.add_argument(
        "--limit",
        type=int,
        default=len(SAMPLE_IMAGES),
        help="Number of images to seed",
    )

    return parser.parse_args()


def render_image(color: tuple[int, int, int], size: tuple[int, int] = (320, 200)) -> bytes:
    """Render a solid-colour PNG."""
    buffer = BytesIO()
    Image.new("RGB", size, color).save(buffer, format="PNG")
    return buffer.getvalue()


def seed_images() -> None:
    try:
        args = parse_args()

        headers: dict[str, str] = {}
        if args.api_key:
            headers["x-api-key"] = args.api_key

        base_url = BASE_API_URL.format(args.api_id)
        upload_url = f"{base_url}/images/upload"

        logger.info(
            "Starting seeding process",
            extra={"api_base_url": base_url},
        )

        for item in SAMPLE_IMAGES[: args.limit]:
            image_bytes = render_image(item["color"])
            filename = f"{item['title'].lower()}.png"

            response = requests.post(
                upload_url,
                headers=headers,
                files={"file": (filename, image_bytes, "image/png")},
                data={
                    "title": item["title"],
                    "description": item["description"],
                    "tags": item["tags"],
                    "isPublic": "true" if item["is_public"] else "false",
                },
                timeout=30,
            )

            response_json = cast(dict[str, Any], response.json())

            if response.status_code == 201:
                logger.info(
                    "Seeded image",
                    extra={
                        "title": item["title"],
                        "record_id": response_json.get("data", {}).get("recordId"),
                    },
                )
            else:
                logger.error(
                    "Failed to seed image",
                    extra={
                        "title": item["title"],
                        "status": response.status_code,
                        "response": response_json,
                    },
                )

        logger.info("Seeding completed")

        list_response = requests.get(
            f"{base_url}/images",
            headers=headers,
            params={"limit": 100},
            timeout=30,
        )

        logger.info(
            "List images response",
            extra={
                "status": list_response.status_code,
                "response": list_response.json() if list_response.ok else list_response.text,
            },
        )

    except Exception as exc:
        logger.exception("Seeding failed", exc_info=exc)
        sys.exit(1)


if __name__ == "__main__":
    seed_images()
