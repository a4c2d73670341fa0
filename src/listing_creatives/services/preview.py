"""Preview state for one creative: format, active slide and mounted surfaces."""

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field

from listing_creatives.domain.listings import ManagementData, PropertyData
from listing_creatives.domain.photos import CategorizedPhoto
from listing_creatives.domain.slides import Format, SlideDefinition, Subject
from listing_creatives.services.catalog import PhotoCatalog
from listing_creatives.services.rendering import RenderAdapter, RenderedSurface
from listing_creatives.services.sequence import (
    build_management_sequence,
    build_sequence,
)

logger = logging.getLogger(__name__)

PROPERTY_SUBJECT = "revenda"
MANAGEMENT_SUBJECT = "gestao"


@dataclass
class PreviewSession:
    """Holds the current slide snapshot for a subject and its rendered surfaces.

    The slide tuple is replaced, never mutated, so readers always see a
    complete sequence.
    """

    subject: str
    data: Subject
    catalog: PhotoCatalog
    format: Format = Format.FEED
    active_index: int = 0
    slides: tuple[SlideDefinition, ...] = ()
    surfaces: dict[int, RenderedSurface] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if not self.slides:
            self.slides = self._build()

    @classmethod
    def for_property(
        cls,
        data: PropertyData,
        photos: Iterable[CategorizedPhoto],
        fmt: Format = Format.FEED,
        subject: str = PROPERTY_SUBJECT,
    ) -> "PreviewSession":
        """Create a preview for a resale listing."""
        return cls(subject=subject, data=data, catalog=PhotoCatalog(photos), format=fmt)

    @classmethod
    def for_management(
        cls,
        data: ManagementData,
        fmt: Format = Format.FEED,
        subject: str = MANAGEMENT_SUBJECT,
    ) -> "PreviewSession":
        """Create a preview for the management service creative."""
        return cls(subject=subject, data=data, catalog=PhotoCatalog(), format=fmt)

    @property
    def current_slide(self) -> SlideDefinition | None:
        """The slide at the active index."""
        if 0 <= self.active_index < len(self.slides):
            return self.slides[self.active_index]
        return None

    def select_format(self, fmt: Format) -> None:
        """Switch format: rebuild slides, reset index and drop surfaces."""
        self.format = fmt
        self.slides = self._build()
        self.active_index = 0
        self.unmount_all()

    def go_to(self, index: int) -> bool:
        """Move the active index when it is within range."""
        if 0 <= index < len(self.slides):
            self.active_index = index
            return True
        return False

    async def mount(self, renderer: RenderAdapter) -> None:
        """Render every slide of the current snapshot into a surface."""
        self.unmount_all()
        slides = self.slides
        for index in range(len(slides)):
            surface = await self._render(renderer, slides, index)
            if slides is not self.slides:
                # Format changed while rendering; this snapshot is stale.
                return
            if surface is not None:
                self.surfaces[index] = surface

    async def mount_slide(
        self, renderer: RenderAdapter, index: int
    ) -> RenderedSurface | None:
        """Render only one slide; other mounted surfaces are left alone."""
        if not 0 <= index < len(self.slides):
            return None
        self.unmount(index)
        slides = self.slides
        surface = await self._render(renderer, slides, index)
        if surface is None or slides is not self.slides:
            return None
        self.surfaces[index] = surface
        return surface

    def surface(self, index: int) -> RenderedSurface | None:
        """Return the mounted surface for a slide, if any."""
        return self.surfaces.get(index)

    def unmount(self, index: int) -> None:
        """Detach the surface of one slide."""
        surface = self.surfaces.pop(index, None)
        if surface is not None:
            surface.detach()

    def unmount_all(self) -> None:
        """Detach every mounted surface."""
        for index in list(self.surfaces):
            self.unmount(index)

    async def _render(
        self,
        renderer: RenderAdapter,
        slides: tuple[SlideDefinition, ...],
        index: int,
    ) -> RenderedSurface | None:
        slide = slides[index]
        fmt = self.format
        try:
            image = await renderer.render(slide, fmt)
        except Exception:
            logger.exception("Failed to render slide %s (%s)", index, slide.name)
            return None
        surface = RenderedSurface(slide_index=index, size=fmt.size)
        surface.paint(image)
        return surface

    def _build(self) -> tuple[SlideDefinition, ...]:
        if isinstance(self.data, ManagementData):
            return build_management_sequence(self.data)
        return build_sequence(self.data, self.catalog, self.format)
