"""Shared test fixtures."""

import io
from dataclasses import dataclass, field
from uuid import UUID, uuid4

import pytest
from PIL import Image

from listing_creatives.config import Settings
from listing_creatives.containers import AppContainer
from listing_creatives.domain.crm import CrmPropertyStub
from listing_creatives.domain.exports import CreativeRecord, RasterOptions
from listing_creatives.domain.photos import CategorizedPhoto, PhotoCategory
from listing_creatives.domain.slides import Format, SlideDefinition
from listing_creatives.services.categorizer import CategoryClient, PhotoCategorizer
from listing_creatives.services.exports import ExportOrchestrator
from listing_creatives.services.persistence import (
    AssetStorage,
    CreativePersistenceBridge,
    CreativeRepository,
    CrmPropertyRepository,
)
from listing_creatives.services.rasterizer import Rasterizer
from listing_creatives.services.rendering import RenderAdapter


def png_bytes(
    size: tuple[int, int] = (8, 8), color: tuple[int, int, int] = (200, 120, 40)
) -> bytes:
    """Encode a solid-color PNG."""
    buffer = io.BytesIO()
    Image.new("RGB", size, color).save(buffer, format="PNG")
    return buffer.getvalue()


def make_photos(*categories: PhotoCategory) -> list[CategorizedPhoto]:
    """Build one photo per category, ordered as given."""
    return [
        CategorizedPhoto(
            url=f"https://img.test/{index}-{category.value}.jpg",
            category=category,
            order=index,
        )
        for index, category in enumerate(categories)
    ]


@dataclass
class FakeImageFetcher:
    """Image fetcher serving a static PNG, optionally failing some URLs."""

    content: bytes = field(default_factory=png_bytes)
    failing: set[str] = field(default_factory=set)
    fetched: list[str] = field(default_factory=list)

    async def fetch(self, url: str) -> bytes:
        self.fetched.append(url)
        if url in self.failing:
            raise RuntimeError(f"cannot fetch {url}")
        return self.content

    async def close(self) -> None:
        return None


@dataclass
class FakeRenderer(RenderAdapter):
    """Renderer returning small solid images; fails on chosen slide names."""

    failing: set[str] = field(default_factory=set)
    rendered: list[str] = field(default_factory=list)

    async def render(self, slide: SlideDefinition, fmt: Format) -> Image.Image:
        if slide.name in self.failing:
            raise RuntimeError(f"render failed for {slide.name}")
        self.rendered.append(slide.name)
        return Image.new("RGB", (fmt.size[0] // 10, fmt.size[1] // 10), (10, 20, 30))


@dataclass
class InMemoryAssetStorage(AssetStorage):
    """In-memory object storage for tests."""

    uploads: dict[str, tuple[bytes, str]] = field(default_factory=dict)
    failing_buckets: set[str] = field(default_factory=set)
    fail_all: bool = False

    def upload(self, bucket: str, path: str, content: bytes, content_type: str) -> str:
        if self.fail_all or bucket in self.failing_buckets:
            raise RuntimeError(f"upload to {bucket} failed")
        self.uploads[f"{bucket}/{path}"] = (content, content_type)
        return f"https://cdn.test/{bucket}/{path}"


@dataclass
class InMemoryCreativeRepository(CreativeRepository):
    """In-memory creative repository for tests."""

    records: dict[UUID, CreativeRecord] = field(default_factory=dict)

    def create_creative(self, record: CreativeRecord) -> UUID:
        creative_id = uuid4()
        self.records[creative_id] = record
        return creative_id


@dataclass
class InMemoryCrmPropertyRepository(CrmPropertyRepository):
    """In-memory CRM property repository for tests."""

    properties: dict[str, tuple[UUID, CrmPropertyStub]] = field(default_factory=dict)
    refreshed: list[tuple[UUID, str, UUID]] = field(default_factory=list)

    def find_by_code(self, code: str) -> UUID | None:
        entry = self.properties.get(code)
        return entry[0] if entry else None

    def create_property(self, stub: CrmPropertyStub) -> UUID:
        property_id = uuid4()
        self.properties[stub.code] = (property_id, stub)
        return property_id

    def refresh_property(
        self, property_id: UUID, cover_image_url: str, source_creative_id: UUID
    ) -> None:
        self.refreshed.append((property_id, cover_image_url, source_creative_id))


@dataclass
class FakeCategoryClient(CategoryClient):
    """Fake category client returning a fixed payload."""

    payload: dict[str, object] = field(default_factory=lambda: {"category": "sala"})
    error: Exception | None = None
    calls: list[dict[str, object]] = field(default_factory=list)

    async def classify(
        self,
        *,
        model: str,
        image_data_url: str,
        schema: dict[str, object],
        prompt: str,
    ) -> dict[str, object]:
        self.calls.append({"model": model, "image_data_url": image_data_url})
        if self.error is not None:
            raise self.error
        return self.payload


@pytest.fixture
def settings() -> Settings:
    return Settings(
        supabase_url="https://example.supabase.co",
        supabase_service_key="service-key",
        openai_api_key="openai-key",
    )


@pytest.fixture
def storage() -> InMemoryAssetStorage:
    return InMemoryAssetStorage()


@pytest.fixture
def creative_repository() -> InMemoryCreativeRepository:
    return InMemoryCreativeRepository()


@pytest.fixture
def crm_repository() -> InMemoryCrmPropertyRepository:
    return InMemoryCrmPropertyRepository()


@pytest.fixture
def image_fetcher() -> FakeImageFetcher:
    return FakeImageFetcher()


@pytest.fixture
def renderer() -> FakeRenderer:
    return FakeRenderer()


@pytest.fixture
def bridge(
    storage: InMemoryAssetStorage,
    creative_repository: InMemoryCreativeRepository,
    crm_repository: InMemoryCrmPropertyRepository,
    image_fetcher: FakeImageFetcher,
) -> CreativePersistenceBridge:
    return CreativePersistenceBridge(
        storage=storage,
        creatives=creative_repository,
        crm=crm_repository,
        fetcher=image_fetcher,
    )


@pytest.fixture
def category_client() -> FakeCategoryClient:
    return FakeCategoryClient()


@pytest.fixture
def container(
    settings: Settings,
    renderer: FakeRenderer,
    image_fetcher: FakeImageFetcher,
    bridge: CreativePersistenceBridge,
    category_client: FakeCategoryClient,
) -> AppContainer:
    orchestrator = ExportOrchestrator(
        rasterizer=Rasterizer(),
        options=RasterOptions(pixel_density=1),
        bridge=bridge,
    )

    async def close_resources() -> None:
        await orchestrator.drain()

    return AppContainer(
        settings=settings,
        image_fetcher=image_fetcher,
        renderer=renderer,
        export_orchestrator=orchestrator,
        persistence_bridge=bridge,
        photo_categorizer=PhotoCategorizer(
            client=category_client, model=settings.openai_model
        ),
        close_resources=close_resources,
    )
