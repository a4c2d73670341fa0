"""Application configuration."""

import os

from pydantic_settings import BaseSettings, SettingsConfigDict

from listing_creatives.domain.exports import RasterOptions

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    supabase_url: str
    supabase_service_key: str
    openai_api_key: str | None = None
    openai_model: str = "gpt-4.1-mini"
    exports_bucket: str = "creative-exports"
    crm_bucket: str = "crm-documents"
    raster_quality: float = 1.0
    pixel_density: int = 2
    brand_primary_color: str = "#1E3A5F"
    brand_accent_color: str = "#C9A227"
    brand_font_path: str | None = None
    image_fetch_timeout: float = 20
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )

    @property
    def raster_options(self) -> RasterOptions:
        """Rasterization settings for exports."""
        return RasterOptions(quality=self.raster_quality, pixel_density=self.pixel_density)
