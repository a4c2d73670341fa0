"""Photo category detection using an LLM vision model."""

import base64
import logging
from dataclasses import dataclass
from typing import Protocol

from listing_creatives.domain.photos import PhotoCategory

logger = logging.getLogger(__name__)

CATEGORY_TAGS: dict[str, PhotoCategory] = {
    "fachada": PhotoCategory.FACADE,
    "sala": PhotoCategory.LIVING_ROOM,
    "quarto": PhotoCategory.BEDROOM,
    "cozinha": PhotoCategory.KITCHEN,
    "banheiro": PhotoCategory.BATHROOM,
    "area-externa": PhotoCategory.EXTERIOR,
    "garagem": PhotoCategory.GARAGE,
    "outros": PhotoCategory.OTHER,
}

CATEGORY_SCHEMA: dict[str, object] = {
    "type": "object",
    "properties": {
        "category": {"type": "string", "enum": list(CATEGORY_TAGS)},
    },
    "required": ["category"],
    "additionalProperties": False,
}

CATEGORY_PROMPT = (
    "Classifique esta foto de imóvel em exatamente uma categoria: "
    "fachada (frente do imóvel, vista externa do prédio ou casa), "
    "sala (sala de estar ou jantar), quarto, cozinha, banheiro, "
    "area-externa (piscina, jardim, varanda, churrasqueira, área de lazer), "
    "garagem, ou outros."
)


class CategoryClient(Protocol):
    """Interface for LLM photo classification."""

    async def classify(
        self,
        *,
        model: str,
        image_data_url: str,
        schema: dict[str, object],
        prompt: str,
    ) -> dict[str, object]:
        """Return the raw classification payload."""


@dataclass
class PhotoCategorizer:
    """Service that tags an uploaded photo with a category."""

    client: CategoryClient
    model: str

    async def detect(self, image_bytes: bytes) -> PhotoCategory:
        """Detect the category of a photo; unknown answers become `other`."""
        try:
            raw = await self.client.classify(
                model=self.model,
                image_data_url=_to_data_url(image_bytes),
                schema=CATEGORY_SCHEMA,
                prompt=CATEGORY_PROMPT,
            )
        except Exception:
            logger.exception("Photo category detection failed")
            return PhotoCategory.OTHER
        return parse_category(raw.get("category"))


def parse_category(value: object) -> PhotoCategory:
    """Map a Portuguese tag or an enum value to a category."""
    if not isinstance(value, str):
        return PhotoCategory.OTHER
    tag = value.strip().lower()
    if tag in CATEGORY_TAGS:
        return CATEGORY_TAGS[tag]
    try:
        return PhotoCategory(tag)
    except ValueError:
        logger.warning("Unknown photo category %r", value)
        return PhotoCategory.OTHER


def _to_data_url(image_bytes: bytes) -> str:
    """Convert bytes to a base64 data URL for image input."""
    mime_type = _detect_mime_type(image_bytes)
    encoded = base64.b64encode(image_bytes).decode("utf-8")
    return f"data:{mime_type};base64,{encoded}"


def _detect_mime_type(image_bytes: bytes) -> str:
    if image_bytes.startswith(b"\xff\xd8\xff"):
        return "image/jpeg"
    if image_bytes.startswith(b"\x89PNG\r\n\x1a\n"):
        return "image/png"
    if image_bytes[:4] == b"RIFF" and image_bytes[8:12] == b"WEBP":
        return "image/webp"
    return "image/jpeg"
