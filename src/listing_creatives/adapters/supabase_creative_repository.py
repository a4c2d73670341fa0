"""Supabase-backed creative repository."""

from dataclasses import dataclass
from uuid import UUID

from supabase import Client

from listing_creatives.domain.exports import CreativeRecord
from listing_creatives.services.persistence import CreativeRepository


@dataclass
class SupabaseCreativeRepository(CreativeRepository):
    """Supabase implementation for exported creative records."""

    client: Client

    def create_creative(self, record: CreativeRecord) -> UUID:
        """Insert a creative row and return its id."""
        response = (
            self.client.table("creatives")
            .insert(
                {
                    "user_id": str(record.user_id),
                    "title": record.title,
                    "property_data": record.property_data,
                    "photos": record.photos,
                    "thumbnail_url": record.thumbnail_url,
                    "exported_images": record.exported_images,
                    "format": record.format.value,
                }
            )
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to create creative")
        row = response.data[0]
        return UUID(row["id"])
