"""Domain models for exported creatives."""

from dataclasses import dataclass, field
from uuid import UUID

from listing_creatives.domain.slides import Format


@dataclass(frozen=True)
class RasterOptions:
    """Rasterization settings."""

    quality: float = 1.0
    pixel_density: int = 2


@dataclass(frozen=True)
class ExportResult:
    """A rasterized slide ready for download or archiving."""

    slide_index: int
    bitmap: bytes
    suggested_file_name: str


@dataclass(frozen=True)
class SlideOutcome:
    """Per-slide result of a full export: either a bitmap or an error."""

    slide_index: int
    file_name: str
    bitmap: bytes | None = None
    error: Exception | None = None

    @property
    def ok(self) -> bool:
        """Whether the slide rasterized successfully."""
        return self.bitmap is not None


@dataclass(frozen=True)
class ArchiveExport:
    """Outcome of exporting every slide of a sequence."""

    file_name: str
    archive: bytes | None
    outcomes: tuple[SlideOutcome, ...] = field(default_factory=tuple)

    @property
    def successes(self) -> list[ExportResult]:
        """Rasterized slides in slide order."""
        return [
            ExportResult(
                slide_index=outcome.slide_index,
                bitmap=outcome.bitmap,
                suggested_file_name=outcome.file_name,
            )
            for outcome in self.outcomes
            if outcome.bitmap is not None
        ]

    @property
    def failures(self) -> list[SlideOutcome]:
        """Slides that could not be rasterized."""
        return [outcome for outcome in self.outcomes if not outcome.ok]


@dataclass(frozen=True)
class CreativeRecord:
    """Persisted record of a full export."""

    user_id: UUID
    title: str
    property_data: dict[str, object]
    photos: list[str]
    thumbnail_url: str | None
    exported_images: list[str]
    format: Format
