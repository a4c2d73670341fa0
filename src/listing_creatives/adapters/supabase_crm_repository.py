"""Supabase-backed CRM property repository."""

from dataclasses import dataclass
from uuid import UUID

from supabase import Client

from listing_creatives.domain.crm import (
    COMMISSION_PERCENTAGE,
    INITIAL_STAGE,
    CrmPropertyStub,
)
from listing_creatives.services.persistence import CrmPropertyRepository


@dataclass
class SupabaseCrmPropertyRepository(CrmPropertyRepository):
    """Supabase implementation for CRM property stubs."""

    client: Client

    def find_by_code(self, code: str) -> UUID | None:
        """Return the id of the property with a code, if present."""
        response = (
            self.client.table("crm_properties")
            .select("id")
            .eq("code", code)
            .limit(1)
            .execute()
        )
        if response.data:
            return UUID(response.data[0]["id"])
        return None

    def create_property(self, stub: CrmPropertyStub) -> UUID:
        """Insert a property in the first pipeline stage."""
        commission_value = round(stub.sale_value * COMMISSION_PERCENTAGE / 100, 2)
        response = (
            self.client.table("crm_properties")
            .insert(
                {
                    "code": stub.code,
                    "property_type": stub.property_type.value,
                    "address": stub.address,
                    "neighborhood": stub.neighborhood,
                    "city": stub.city,
                    "state": stub.state,
                    "sale_value": stub.sale_value,
                    "commission_percentage": COMMISSION_PERCENTAGE,
                    "commission_value": commission_value,
                    "current_stage": INITIAL_STAGE,
                    "cover_image_url": stub.cover_image_url,
                    "source_creative_id": str(stub.source_creative_id),
                    "has_creatives": True,
                    "created_by_user_id": str(stub.created_by_user_id),
                }
            )
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to create CRM property")
        return UUID(response.data[0]["id"])

    def refresh_property(
        self, property_id: UUID, cover_image_url: str, source_creative_id: UUID
    ) -> None:
        """Point an existing property at a newer creative and cover."""
        self.client.table("crm_properties").update(
            {
                "cover_image_url": cover_image_url,
                "source_creative_id": str(source_creative_id),
                "has_creatives": True,
            }
        ).eq("id", str(property_id)).execute()
