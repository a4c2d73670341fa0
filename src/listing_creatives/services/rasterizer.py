"""Rasterization of rendered slide surfaces into PNG bitmaps."""

import io
from dataclasses import dataclass

from PIL import Image

from listing_creatives.domain.exports import RasterOptions
from listing_creatives.services.rendering import RenderedSurface


class ListingCreativesError(Exception):
    """Base error for the creative engine."""


class RenderTargetUnavailable(ListingCreativesError):
    """Raised when a slide surface is missing or detached at capture time."""

    def __init__(self, slide_index: int | None) -> None:
        self.slide_index = slide_index
        label = "unknown slide" if slide_index is None else f"slide {slide_index}"
        super().__init__(f"Render target unavailable for {label}")


@dataclass
class Rasterizer:
    """Captures a painted surface at its template size times a density."""

    async def rasterize(
        self,
        surface: RenderedSurface | None,
        options: RasterOptions | None = None,
        slide_index: int | None = None,
    ) -> bytes:
        """Return PNG bytes for a surface."""
        resolved = options or RasterOptions()
        if surface is None:
            raise RenderTargetUnavailable(slide_index)
        await surface.wait_until_painted()
        image = surface.image
        if image is None:
            raise RenderTargetUnavailable(surface.slide_index)

        density = max(1, resolved.pixel_density)
        width, height = surface.size
        target = (width * density, height * density)
        bitmap = image.convert("RGB")
        if bitmap.size != target:
            bitmap = bitmap.resize(target, Image.Resampling.LANCZOS)

        buffer = io.BytesIO()
        bitmap.save(
            buffer, format="PNG", compress_level=_compress_level(resolved.quality)
        )
        return buffer.getvalue()


def _compress_level(quality: float) -> int:
    """Map quality in (0, 1] to a zlib level; PNG stays lossless either way."""
    clamped = min(max(quality, 0.0), 1.0)
    return 9 - round(clamped * 6)
