"""Tests for surface rasterization."""

import asyncio
import io

import pytest
from PIL import Image

from listing_creatives.domain.exports import RasterOptions
from listing_creatives.services.rasterizer import Rasterizer, RenderTargetUnavailable
from listing_creatives.services.rendering import RenderedSurface


def _decode(bitmap: bytes) -> Image.Image:
    return Image.open(io.BytesIO(bitmap))


def test_rasterize_scales_by_pixel_density() -> None:
    surface = RenderedSurface(
        slide_index=0, size=(20, 10), image=Image.new("RGB", (5, 5), "red")
    )

    bitmap = asyncio.run(
        Rasterizer().rasterize(surface, RasterOptions(quality=0.8, pixel_density=3))
    )

    image = _decode(bitmap)
    assert image.format == "PNG"
    assert image.size == (60, 30)


def test_rasterize_defaults_to_double_density() -> None:
    surface = RenderedSurface(
        slide_index=1, size=(12, 12), image=Image.new("RGB", (12, 12), "blue")
    )

    bitmap = asyncio.run(Rasterizer().rasterize(surface))

    assert _decode(bitmap).size == (24, 24)


def test_rasterize_missing_surface_raises() -> None:
    with pytest.raises(RenderTargetUnavailable) as excinfo:
        asyncio.run(Rasterizer().rasterize(None, slide_index=4))

    assert excinfo.value.slide_index == 4
    assert "slide 4" in str(excinfo.value)


def test_rasterize_detached_surface_raises() -> None:
    surface = RenderedSurface(
        slide_index=2, size=(10, 10), image=Image.new("RGB", (10, 10))
    )
    surface.detach()

    with pytest.raises(RenderTargetUnavailable):
        asyncio.run(Rasterizer().rasterize(surface))


def test_rasterize_waits_for_paint() -> None:
    async def scenario() -> tuple[bool, bytes]:
        surface = RenderedSurface(slide_index=0, size=(10, 10))
        task = asyncio.create_task(Rasterizer().rasterize(surface))
        await asyncio.sleep(0)
        waiting = not task.done()
        surface.paint(Image.new("RGB", (10, 10), "green"))
        return waiting, await task

    waiting, bitmap = asyncio.run(scenario())

    assert waiting
    assert _decode(bitmap).size == (20, 20)
