"""Tests for photo category detection."""

import asyncio

import pytest

from listing_creatives.domain.photos import PhotoCategory
from listing_creatives.services.categorizer import (
    CATEGORY_SCHEMA,
    PhotoCategorizer,
    parse_category,
)
from tests.conftest import FakeCategoryClient, png_bytes


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("fachada", PhotoCategory.FACADE),
        ("Sala", PhotoCategory.LIVING_ROOM),
        ("area-externa", PhotoCategory.EXTERIOR),
        ("garagem", PhotoCategory.GARAGE),
        ("kitchen", PhotoCategory.KITCHEN),
        ("living-room", PhotoCategory.LIVING_ROOM),
        ("piscina", PhotoCategory.OTHER),
        (None, PhotoCategory.OTHER),
        (3, PhotoCategory.OTHER),
    ],
)
def test_parse_category(raw, expected) -> None:  # type: ignore[no-untyped-def]
    assert parse_category(raw) is expected


def test_detect_sends_data_url_and_maps_tag() -> None:
    client = FakeCategoryClient(payload={"category": "quarto"})
    categorizer = PhotoCategorizer(client=client, model="gpt-4.1-mini")

    category = asyncio.run(categorizer.detect(png_bytes()))

    assert category is PhotoCategory.BEDROOM
    assert client.calls[0]["model"] == "gpt-4.1-mini"
    assert str(client.calls[0]["image_data_url"]).startswith("data:image/png;base64,")


def test_detect_falls_back_to_other_on_client_error() -> None:
    client = FakeCategoryClient(error=RuntimeError("OpenAI returned an empty response"))
    categorizer = PhotoCategorizer(client=client, model="gpt-4.1-mini")

    assert asyncio.run(categorizer.detect(b"\xff\xd8\xffjpeg")) is PhotoCategory.OTHER


def test_schema_lists_every_tag() -> None:
    tags = CATEGORY_SCHEMA["properties"]["category"]["enum"]  # type: ignore[index]

    assert "fachada" in tags
    assert "outros" in tags
    assert len(tags) == len(PhotoCategory)
