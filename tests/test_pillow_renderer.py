"""Tests for the Pillow slide renderer."""

import asyncio

import pytest

from listing_creatives.adapters.pillow_renderer import (
    BrandStyle,
    PillowSlideRenderer,
    layout_boxes,
    parse_color,
)
from listing_creatives.domain.listings import ManagementData, PropertyData
from listing_creatives.domain.photos import PhotoCategory
from listing_creatives.domain.slides import Format, LayoutVariant, Template
from listing_creatives.services.catalog import PhotoCatalog
from listing_creatives.services.sequence import (
    build_management_sequence,
    build_sequence,
)
from tests.conftest import FakeImageFetcher, make_photos


def _render_all(renderer: PillowSlideRenderer, slides, fmt: Format):  # type: ignore[no-untyped-def]
    async def scenario():  # type: ignore[no-untyped-def]
        return [await renderer.render(slide, fmt) for slide in slides]

    return asyncio.run(scenario())


@pytest.mark.parametrize("fmt", list(Format))
def test_renders_every_property_slide_at_format_size(fmt: Format) -> None:
    catalog = PhotoCatalog(
        make_photos(
            PhotoCategory.FACADE,
            PhotoCategory.LIVING_ROOM,
            PhotoCategory.BEDROOM,
            PhotoCategory.KITCHEN,
            PhotoCategory.BATHROOM,
            PhotoCategory.EXTERIOR,
            PhotoCategory.LIVING_ROOM,
            PhotoCategory.BEDROOM,
            PhotoCategory.OTHER,
        )
    )
    data = PropertyData(
        name="Residencial Aurora",
        neighborhood="Batel",
        city="Curitiba",
        price="R$ 750.000",
        bedrooms="3",
        has_view=True,
    )
    renderer = PillowSlideRenderer(fetcher=FakeImageFetcher())

    images = _render_all(renderer, build_sequence(data, catalog, fmt), fmt)

    assert images
    assert all(image.size == fmt.size for image in images)


def test_renders_management_slides() -> None:
    renderer = PillowSlideRenderer(fetcher=FakeImageFetcher())
    slides = build_management_sequence(
        ManagementData(years_experience="15", background_photo="https://img.test/bg.jpg")
    )

    images = _render_all(renderer, slides, Format.STORY)

    assert slides[0].render.template is Template.MANAGEMENT_INTRO
    assert all(image.size == Format.STORY.size for image in images)


def test_unreachable_photo_renders_placeholder() -> None:
    fetcher = FakeImageFetcher(failing={"https://img.test/0-facade.jpg"})
    renderer = PillowSlideRenderer(fetcher=fetcher)
    slides = build_sequence(
        PropertyData(), PhotoCatalog(make_photos(PhotoCategory.FACADE)), Format.FEED
    )

    image = asyncio.run(renderer.render(slides[0], Format.FEED))

    assert image.size == Format.FEED.size
    assert fetcher.fetched == ["https://img.test/0-facade.jpg"]


@pytest.mark.parametrize(
    ("variant", "count"),
    [
        (LayoutVariant.PLACEHOLDER, 1),
        (LayoutVariant.SINGLE, 1),
        (LayoutVariant.SPLIT, 2),
        (LayoutVariant.TRIANGLE, 3),
        (LayoutVariant.ROUNDED_BOXES, 3),
        (LayoutVariant.GRID, 4),
    ],
)
def test_layout_boxes_stay_inside_area(variant: LayoutVariant, count: int) -> None:
    area = (0, 100, 1080, 1080)

    boxes = layout_boxes(variant, area)

    assert len(boxes) == count
    for x0, y0, x1, y1 in boxes:
        assert area[0] <= x0 < x1 <= area[2]
        assert area[1] <= y0 < y1 <= area[3]


def test_parse_color() -> None:
    assert parse_color("#FF8000", (0, 0, 0)) == (255, 128, 0)
    assert parse_color("zzzzzz", (1, 2, 3)) == (1, 2, 3)
    assert parse_color("#123", (1, 2, 3)) == (1, 2, 3)


def test_brand_style_from_hex_keeps_defaults_for_bad_colors() -> None:
    style = BrandStyle.from_hex("#000000", "not-a-color")

    assert style.primary == (0, 0, 0)
    assert style.accent == BrandStyle().accent
