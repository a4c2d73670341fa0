"""Supabase Storage adapter for exported assets."""

from dataclasses import dataclass

from supabase import Client

from listing_creatives.services.persistence import AssetStorage


@dataclass
class SupabaseAssetStorage(AssetStorage):
    """Supabase implementation for object storage uploads."""

    client: Client

    def upload(self, bucket: str, path: str, content: bytes, content_type: str) -> str:
        """Upload bytes to a bucket and return the object's public URL."""
        storage = self.client.storage.from_(bucket)
        storage.upload(path, content, {"content-type": content_type})
        public_url = storage.get_public_url(path)
        if not public_url:
            raise RuntimeError(f"Failed to resolve public URL for {bucket}/{path}")
        return public_url
