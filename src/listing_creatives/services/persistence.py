"""Persistence of exported creatives and CRM property stubs.

Everything here runs after the user already has their download, so no
failure is allowed to escape `CreativePersistenceBridge.persist`.
"""

import asyncio
import hashlib
import io
import logging
import re
import unicodedata
from collections.abc import Callable
from dataclasses import asdict, dataclass, field
from datetime import UTC, datetime
from typing import Protocol
from uuid import UUID

from PIL import Image

from listing_creatives.adapters.http_image_fetcher import ImageFetcher
from listing_creatives.domain.crm import CrmPropertyStub, CrmPropertyType
from listing_creatives.domain.exports import CreativeRecord, ExportResult
from listing_creatives.domain.listings import PropertyData
from listing_creatives.domain.slides import Format, Subject

logger = logging.getLogger(__name__)

PROPERTY_CODE_PREFIX = "REV-"

_TYPE_KEYWORDS: tuple[tuple[CrmPropertyType, tuple[str, ...]], ...] = (
    (
        CrmPropertyType.COMMERCIAL,
        ("comercial", "loja", "sala comercial", "galpao", "escritorio", "ponto"),
    ),
    (CrmPropertyType.RURAL, ("rural", "fazenda", "sitio", "chacara")),
    (CrmPropertyType.LAND, ("terreno", "lote")),
    (
        CrmPropertyType.APARTMENT,
        ("apartamento", "apto", "cobertura", "studio", "kitnet", "flat", "loft"),
    ),
    (CrmPropertyType.HOUSE, ("casa", "sobrado", "condominio")),
)


class AssetStorage(Protocol):
    """Interface for object storage of exported assets."""

    def upload(self, bucket: str, path: str, content: bytes, content_type: str) -> str:
        """Upload content and return its public URL."""


class CreativeRepository(Protocol):
    """Interface for creative record persistence."""

    def create_creative(self, record: CreativeRecord) -> UUID:
        """Create a creative record and return its id."""


class CrmPropertyRepository(Protocol):
    """Interface for CRM property persistence."""

    def find_by_code(self, code: str) -> UUID | None:
        """Return the id of the property with a code, if any."""

    def create_property(self, stub: CrmPropertyStub) -> UUID:
        """Create a property from a stub and return its id."""

    def refresh_property(
        self, property_id: UUID, cover_image_url: str, source_creative_id: UUID
    ) -> None:
        """Point an existing property at a newer creative."""


def _utc_now() -> datetime:
    return datetime.now(UTC)


@dataclass
class CreativePersistenceBridge:
    """Uploads exported bitmaps, records the creative and upserts the CRM."""

    storage: AssetStorage
    creatives: CreativeRepository
    crm: CrmPropertyRepository
    fetcher: ImageFetcher
    exports_bucket: str = "creative-exports"
    crm_bucket: str = "crm-documents"
    clock: Callable[[], datetime] = field(default=_utc_now)

    async def persist(  # noqa: PLR0913
        self,
        *,
        user_id: UUID,
        data: Subject,
        photos: list[str],
        fmt: Format,
        exports: list[ExportResult],
    ) -> UUID | None:
        """Run the whole chain; returns the creative id or None on failure."""
        try:
            return await self._persist(
                user_id=user_id, data=data, photos=photos, fmt=fmt, exports=exports
            )
        except Exception:
            logger.exception("Failed to persist creative for user %s", user_id)
            return None

    async def _persist(  # noqa: PLR0913
        self,
        *,
        user_id: UUID,
        data: Subject,
        photos: list[str],
        fmt: Format,
        exports: list[ExportResult],
    ) -> UUID | None:
        uploaded = await self._upload_exports(user_id, exports)
        if not uploaded:
            logger.warning("No exported image was uploaded; skipping persistence")
            return None

        record = CreativeRecord(
            user_id=user_id,
            title=data.title,
            property_data=asdict(data),
            photos=list(photos),
            thumbnail_url=uploaded[0],
            exported_images=uploaded,
            format=fmt,
        )
        creative_id = await asyncio.to_thread(self.creatives.create_creative, record)
        logger.info("Saved creative %s with %s images", creative_id, len(uploaded))

        if isinstance(data, PropertyData):
            try:
                await self._sync_crm(
                    data=data,
                    cover_url=uploaded[0],
                    creative_id=creative_id,
                    user_id=user_id,
                )
            except Exception:
                logger.exception("Failed to sync CRM property for %s", creative_id)
        return creative_id

    async def _upload_exports(
        self, user_id: UUID, exports: list[ExportResult]
    ) -> list[str]:
        timestamp = self._timestamp_ms()
        urls: list[str] = []
        for export in exports:
            path = f"{user_id}/{timestamp}-{export.slide_index + 1}.png"
            try:
                url = await asyncio.to_thread(
                    self.storage.upload,
                    self.exports_bucket,
                    path,
                    export.bitmap,
                    "image/png",
                )
            except Exception:
                logger.exception("Failed to upload %s", path)
                continue
            urls.append(url)
        return urls

    async def _sync_crm(
        self,
        *,
        data: PropertyData,
        cover_url: str,
        creative_id: UUID,
        user_id: UUID,
    ) -> UUID:
        code = property_code(data, creative_id)
        crm_cover = await self._copy_cover(code, cover_url)

        existing = await asyncio.to_thread(self.crm.find_by_code, code)
        if existing is not None:
            await asyncio.to_thread(
                self.crm.refresh_property, existing, crm_cover, creative_id
            )
            logger.info("Refreshed CRM property %s (%s)", code, existing)
            return existing

        stub = CrmPropertyStub(
            code=code,
            property_type=derive_property_type(data.type),
            city=data.city,
            state=data.state,
            sale_value=parse_price(data.price),
            cover_image_url=crm_cover,
            source_creative_id=creative_id,
            created_by_user_id=user_id,
            neighborhood=data.neighborhood or None,
            address=data.full_address or None,
        )
        property_id = await asyncio.to_thread(self.crm.create_property, stub)
        logger.info("Created CRM property %s (%s)", code, property_id)
        return property_id

    async def _copy_cover(self, code: str, cover_url: str) -> str:
        """Copy the cover into the CRM bucket; keep the source URL on failure."""
        path = f"covers/{code}-{self._timestamp_ms()}.jpg"
        try:
            content = await self.fetcher.fetch(cover_url)
            jpeg = to_jpeg(content)
            return await asyncio.to_thread(
                self.storage.upload, self.crm_bucket, path, jpeg, "image/jpeg"
            )
        except Exception:
            logger.exception("Failed to copy cover image to %s", path)
            return cover_url

    def _timestamp_ms(self) -> int:
        return int(self.clock().timestamp() * 1000)


def parse_price(price: str | None) -> float:
    """Strip every non-digit and read the rest as cents; empty yields 0.0."""
    digits = re.sub(r"\D", "", price or "")
    if not digits:
        return 0.0
    return int(digits) / 100


def derive_property_type(free_text: str | None) -> CrmPropertyType:
    """Map a free-text property type to the CRM enum by keyword."""
    text = _fold(free_text or "")
    for property_type, keywords in _TYPE_KEYWORDS:
        if any(keyword in text for keyword in keywords):
            return property_type
    return CrmPropertyType.OTHER


def property_code(data: PropertyData, creative_id: UUID) -> str:
    """Stable CRM code for a listing; the same listing maps to the same code."""
    identity = "|".join(
        _fold(part) for part in (data.name, data.full_address, data.city) if part
    )
    if identity:
        short_id = hashlib.sha1(identity.encode("utf-8")).hexdigest()[:8]
    else:
        short_id = creative_id.hex[:8]
    return f"{PROPERTY_CODE_PREFIX}{short_id.upper()}"


def to_jpeg(content: bytes, quality: int = 90) -> bytes:
    """Re-encode an image as JPEG."""
    with Image.open(io.BytesIO(content)) as image:
        buffer = io.BytesIO()
        image.convert("RGB").save(buffer, format="JPEG", quality=quality)
    return buffer.getvalue()


def _fold(text: str) -> str:
    normalized = unicodedata.normalize("NFKD", text)
    stripped = "".join(char for char in normalized if not unicodedata.combining(char))
    return " ".join(stripped.casefold().split())
