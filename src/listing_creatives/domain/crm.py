"""CRM domain models."""

from dataclasses import dataclass
from enum import StrEnum
from uuid import UUID


class CrmPropertyType(StrEnum):
    """Property types accepted by the CRM."""

    HOUSE = "casa"
    APARTMENT = "apartamento"
    LAND = "terreno"
    COMMERCIAL = "comercial"
    RURAL = "rural"
    OTHER = "outro"


@dataclass(frozen=True)
class CrmPropertyStub:
    """Minimal CRM property derived from an exported creative."""

    code: str
    property_type: CrmPropertyType
    city: str
    state: str
    sale_value: float
    cover_image_url: str
    source_creative_id: UUID
    created_by_user_id: UUID
    neighborhood: str | None = None
    address: str | None = None


COMMISSION_PERCENTAGE = 5.0
INITIAL_STAGE = "em_anuncio"
