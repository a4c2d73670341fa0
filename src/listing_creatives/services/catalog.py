"""Photo catalog resolution with per-slot fallbacks."""

from collections.abc import Iterable, Sequence
from dataclasses import dataclass

from listing_creatives.domain.photos import (
    GENERIC_ROOM_LABEL,
    CategorizedPhoto,
    PhotoCategory,
    normalize_url,
)


@dataclass(frozen=True)
class SlotRule:
    """Fallback chain used when a category has no tagged photo."""

    secondary: PhotoCategory | None = None
    position: int | None = None


SLOT_RULES: dict[PhotoCategory, SlotRule] = {
    PhotoCategory.FACADE: SlotRule(secondary=PhotoCategory.EXTERIOR, position=0),
    PhotoCategory.LIVING_ROOM: SlotRule(secondary=PhotoCategory.OTHER, position=1),
    PhotoCategory.BEDROOM: SlotRule(position=2),
    PhotoCategory.KITCHEN: SlotRule(position=3),
    PhotoCategory.BATHROOM: SlotRule(position=4),
}


class PhotoCatalog:
    """Immutable, order-sorted view over a set of categorized photos."""

    def __init__(self, photos: Iterable[CategorizedPhoto] = ()) -> None:
        indexed = list(enumerate(photos))
        indexed.sort(key=lambda pair: (pair[1].order, pair[0]))
        self._photos: tuple[CategorizedPhoto, ...] = tuple(
            photo for _, photo in indexed
        )
        labels: dict[str, str] = {}
        for photo in self._photos:
            labels.setdefault(normalize_url(photo.url), photo.label)
        self._labels = labels

    def __len__(self) -> int:
        return len(self._photos)

    @property
    def photos(self) -> tuple[CategorizedPhoto, ...]:
        """Photos sorted by order."""
        return self._photos

    @property
    def urls(self) -> list[str]:
        """Photo URLs sorted by order."""
        return [photo.url for photo in self._photos]

    def tagged(self, category: PhotoCategory) -> list[str]:
        """Return URLs tagged with a category, by order."""
        return [photo.url for photo in self._photos if photo.category == category]

    def first(self, category: PhotoCategory) -> str | None:
        """Return the first URL tagged with a category."""
        tagged = self.tagged(category)
        return tagged[0] if tagged else None

    def has(self, category: PhotoCategory) -> bool:
        """Whether any photo carries the category tag."""
        return any(photo.category == category for photo in self._photos)

    def at(self, position: int) -> str | None:
        """Return the URL at a position of the ordered catalog."""
        if 0 <= position < len(self._photos):
            return self._photos[position].url
        return None

    def resolve(self, category: PhotoCategory) -> str | None:
        """Return the best photo for a slot, or None for an empty match."""
        url = self.first(category)
        if url is not None:
            return url
        rule = SLOT_RULES.get(category)
        if rule is None:
            return None
        if rule.secondary is not None:
            url = self.first(rule.secondary)
            if url is not None:
                return url
        if rule.position is not None:
            return self.at(rule.position)
        return None

    def resolve_many(
        self, preferred: Sequence[PhotoCategory], count: int
    ) -> list[str]:
        """Pick up to ``count`` distinct photos, preferred categories first."""
        if count <= 0:
            return []
        chosen: list[str] = []
        seen: set[str] = set()

        def take(url: str) -> bool:
            key = normalize_url(url)
            if key in seen:
                return False
            seen.add(key)
            chosen.append(url)
            return True

        for category in preferred:
            if len(chosen) >= count:
                break
            for url in self.tagged(category):
                if take(url):
                    break
        for url in self.urls:
            if len(chosen) >= count:
                break
            take(url)
        return chosen

    def label_for(self, url: str | None) -> str:
        """Return the category label of a URL, ignoring its query string."""
        if not url:
            return GENERIC_ROOM_LABEL
        return self._labels.get(normalize_url(url), GENERIC_ROOM_LABEL)
