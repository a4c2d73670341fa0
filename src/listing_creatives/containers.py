"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from supabase import create_client

from listing_creatives.adapters.http_image_fetcher import (
    HttpxImageFetcher,
    ImageFetcher,
)
from listing_creatives.adapters.openai_category_client import OpenAICategoryClient
from listing_creatives.adapters.pillow_renderer import BrandStyle, PillowSlideRenderer
from listing_creatives.adapters.supabase_creative_repository import (
    SupabaseCreativeRepository,
)
from listing_creatives.adapters.supabase_crm_repository import (
    SupabaseCrmPropertyRepository,
)
from listing_creatives.adapters.supabase_storage import SupabaseAssetStorage
from listing_creatives.config import Settings
from listing_creatives.services.categorizer import PhotoCategorizer
from listing_creatives.services.exports import ExportOrchestrator
from listing_creatives.services.persistence import CreativePersistenceBridge
from listing_creatives.services.rasterizer import Rasterizer
from listing_creatives.services.rendering import RenderAdapter


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    image_fetcher: ImageFetcher
    renderer: RenderAdapter
    export_orchestrator: ExportOrchestrator
    persistence_bridge: CreativePersistenceBridge
    photo_categorizer: PhotoCategorizer | None
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    supabase_client = create_client(
        resolved_settings.supabase_url, resolved_settings.supabase_service_key
    )
    image_fetcher = HttpxImageFetcher.create(resolved_settings.image_fetch_timeout)
    renderer = PillowSlideRenderer(
        fetcher=image_fetcher,
        brand=BrandStyle.from_hex(
            resolved_settings.brand_primary_color,
            resolved_settings.brand_accent_color,
            font_path=resolved_settings.brand_font_path,
        ),
    )
    persistence_bridge = CreativePersistenceBridge(
        storage=SupabaseAssetStorage(supabase_client),
        creatives=SupabaseCreativeRepository(supabase_client),
        crm=SupabaseCrmPropertyRepository(supabase_client),
        fetcher=image_fetcher,
        exports_bucket=resolved_settings.exports_bucket,
        crm_bucket=resolved_settings.crm_bucket,
    )
    export_orchestrator = ExportOrchestrator(
        rasterizer=Rasterizer(),
        options=resolved_settings.raster_options,
        bridge=persistence_bridge,
    )
    category_client = None
    photo_categorizer = None
    if resolved_settings.openai_api_key:
        category_client = OpenAICategoryClient.create(resolved_settings.openai_api_key)
        photo_categorizer = PhotoCategorizer(
            client=category_client, model=resolved_settings.openai_model
        )

    async def close_resources() -> None:
        await export_orchestrator.drain()
        await image_fetcher.close()
        if category_client is not None:
            await category_client.close()

    return AppContainer(
        settings=resolved_settings,
        image_fetcher=image_fetcher,
        renderer=renderer,
        export_orchestrator=export_orchestrator,
        persistence_bridge=persistence_bridge,
        photo_categorizer=photo_categorizer,
        close_resources=close_resources,
    )
