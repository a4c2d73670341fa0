"""Domain models for slide sequences."""

from dataclasses import dataclass
from enum import StrEnum

from listing_creatives.domain.listings import ManagementData, PropertyData
from listing_creatives.domain.photos import PhotoCategory


class Format(StrEnum):
    """Aspect class of a slide sequence."""

    FEED = "feed"
    STORY = "story"

    @property
    def size(self) -> tuple[int, int]:
        """Template size in CSS-equivalent pixels before density scaling."""
        if self is Format.FEED:
            return (1080, 1080)
        return (1080, 1920)


class Template(StrEnum):
    """Closed set of visual templates a slide can invoke."""

    COVER = "cover"
    PHOTO = "photo"
    MULTI_PHOTO = "multi_photo"
    FEATURES = "features"
    DESCRIPTION = "description"
    PRICING = "pricing"
    CONTACT = "contact"
    MANAGEMENT_INTRO = "management_intro"
    MANAGEMENT_BENEFITS = "management_benefits"
    MANAGEMENT_TRUST = "management_trust"
    MANAGEMENT_CONTACT = "management_contact"


class LayoutVariant(StrEnum):
    """Structural sub-layout of a photo slide."""

    PLACEHOLDER = "placeholder"
    SINGLE = "single"
    SPLIT = "split"
    TRIANGLE = "triangle"
    ROUNDED_BOXES = "rounded_boxes"
    GRID = "grid"


Subject = PropertyData | ManagementData


@dataclass(frozen=True)
class SlideRender:
    """A template reference together with its resolved inputs."""

    template: Template
    data: Subject
    photos: tuple[str, ...] = ()
    labels: tuple[str, ...] = ()
    variant: LayoutVariant = LayoutVariant.PLACEHOLDER
    caption: str | None = None

    @property
    def photo(self) -> str | None:
        """Primary photo, if any."""
        return self.photos[0] if self.photos else None


@dataclass(frozen=True)
class SlideDefinition:
    """One slide of a sequence."""

    name: str
    render: SlideRender
    source_category: PhotoCategory | None = None
