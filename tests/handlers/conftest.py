from collections.abc import Callable
from typing import Any

import pytest


@pytest.fixture
def upload_image_event(multipart_event, sample_image_binary) -> dict[str, Any]:
    return multipart_event(
        fields={
            "title": "Sunset",
            "description": "Orange sky",
            "tags": "nature,sky",
            "isPublic": "true",
        },
        files={"file": ("sunset.png", sample_image_binary, "image/png")},
    )


@pytest.fixture
def list_images_event() -> Callable[..., dict[str, Any]]:
    def _build(**query: str) -> dict[str, Any]:
        return {
            "httpMethod": "GET",
            "path": "/images",
            "queryStringParameters": query or None,
            "headers": {},
        }

    return _build


@pytest.fixture
def image_id_event() -> Callable[..., dict[str, Any]]:
    def _build(record_id: str | None, method: str = "GET") -> dict[str, Any]:
        return {
            "httpMethod": method,
            "path": f"/images/{record_id}",
            "pathParameters": {"id": record_id} if record_id is not None else None,
            "headers": {},
        }

    return _build


@pytest.fixture
def simple_get_event() -> Callable[[str], dict[str, Any]]:
    def _build(path: str) -> dict[str, Any]:
        return {
            "httpMethod": "GET",
            "path": path,
            "queryStringParameters": None,
            "headers": {},
        }

    return _build
