"""Render adapter interface and mounted visual surfaces."""

import asyncio
from dataclasses import dataclass, field
from typing import Protocol

from PIL import Image

from listing_creatives.domain.slides import Format, SlideDefinition


class RenderAdapter(Protocol):
    """Stateless template renderer: slide definition in, laid-out image out."""

    async def render(self, slide: SlideDefinition, fmt: Format) -> Image.Image:
        """Render a slide at the format's template size."""


@dataclass
class RenderedSurface:
    """A mounted slide surface that can be captured once painted."""

    slide_index: int
    size: tuple[int, int]
    image: Image.Image | None = None
    _painted: asyncio.Event = field(
        default_factory=asyncio.Event, init=False, repr=False
    )

    def __post_init__(self) -> None:
        if self.image is not None:
            self._painted.set()

    @property
    def attached(self) -> bool:
        """Whether the surface still holds a visual."""
        return self.image is not None

    def paint(self, image: Image.Image) -> None:
        """Attach a rendered image and signal paint completion."""
        self.image = image
        self._painted.set()

    def detach(self) -> None:
        """Drop the visual; later captures fail."""
        self.image = None
        self._painted.set()

    def snapshot(self) -> "RenderedSurface":
        """Copy of a painted surface that survives a later detach."""
        if self.image is None:
            return self
        return RenderedSurface(
            slide_index=self.slide_index, size=self.size, image=self.image
        )

    async def wait_until_painted(self) -> None:
        """Suspend until the surface reports paint completion."""
        await self._painted.wait()
