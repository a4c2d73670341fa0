"""Domain models for listing photos."""

from dataclasses import dataclass
from enum import StrEnum


class PhotoCategory(StrEnum):
    """Semantic tag attached to an uploaded listing photo."""

    FACADE = "facade"
    LIVING_ROOM = "living-room"
    BEDROOM = "bedroom"
    KITCHEN = "kitchen"
    BATHROOM = "bathroom"
    EXTERIOR = "exterior"
    GARAGE = "garage"
    OTHER = "other"


CATEGORY_LABELS: dict[PhotoCategory, str] = {
    PhotoCategory.FACADE: "Fachada",
    PhotoCategory.LIVING_ROOM: "Sala",
    PhotoCategory.BEDROOM: "Quarto",
    PhotoCategory.KITCHEN: "Cozinha",
    PhotoCategory.BATHROOM: "Banheiro",
    PhotoCategory.EXTERIOR: "Área Externa",
    PhotoCategory.GARAGE: "Garagem",
    PhotoCategory.OTHER: "Outros",
}

GENERIC_ROOM_LABEL = "Ambiente"


@dataclass(frozen=True)
class CategorizedPhoto:
    """A photo URL tagged with a category and a display order."""

    url: str
    category: PhotoCategory
    order: int
    id: str | None = None

    @property
    def label(self) -> str:
        """Display label for the photo category."""
        return CATEGORY_LABELS[self.category]


def normalize_url(url: str) -> str:
    """Strip query string and fragment so signed or cache-busted URLs compare equal."""
    return url.split("#", 1)[0].split("?", 1)[0]
