"""Pydantic models for the creatives HTTP API."""

from typing import Self

from pydantic import BaseModel, Field, model_validator

from listing_creatives.domain.listings import ManagementData, PropertyData
from listing_creatives.domain.photos import CategorizedPhoto, PhotoCategory
from listing_creatives.domain.slides import Format, LayoutVariant, Template


class PhotoPayload(BaseModel):
    """A categorized listing photo."""

    url: str
    category: PhotoCategory = PhotoCategory.OTHER
    order: int = 0
    id: str | None = None

    def to_domain(self) -> CategorizedPhoto:
        """Convert to the domain photo."""
        return CategorizedPhoto(
            url=self.url, category=self.category, order=self.order, id=self.id
        )


class PropertyPayload(BaseModel):
    """Resale listing fields."""

    name: str = ""
    type: str = "Apartamento"
    neighborhood: str = ""
    city: str = ""
    state: str = ""
    full_address: str = ""
    bedrooms: str = ""
    bathrooms: str = ""
    suites: str = ""
    garage_spaces: str = ""
    area: str = ""
    price: str = ""
    condominium_fee: str = ""
    iptu: str = ""
    financing_note: str = ""
    down_payment_note: str = ""
    floor_or_type: str = ""
    has_natural_light: bool = False
    has_balcony: bool = False
    has_view: bool = False
    has_good_layout: bool = False
    features: list[str] = Field(default_factory=list)
    differentials: list[str] = Field(default_factory=list)
    leisure_items: list[str] = Field(default_factory=list)
    description: str = ""
    contact_name: str = ""
    contact_phone: str = ""
    creci: str = ""
    facebook_url: str = ""
    site_url: str = ""
    zip_code: str = ""

    def to_domain(self) -> PropertyData:
        """Convert to the domain listing."""
        values = self.model_dump()
        values["features"] = tuple(self.features)
        values["differentials"] = tuple(self.differentials)
        values["leisure_items"] = tuple(self.leisure_items)
        return PropertyData(**values)


class ManagementPayload(BaseModel):
    """Rental management service fields; omitted fields keep their defaults."""

    headline: str | None = None
    subheadline: str | None = None
    benefits: list[str] | None = None
    years_experience: str = ""
    properties_managed: str = ""
    background_photo: str | None = None
    contact_name: str = ""
    contact_phone: str = ""
    creci: str = ""

    def to_domain(self) -> ManagementData:
        """Convert to the domain management record."""
        values = self.model_dump(exclude_none=True)
        if self.benefits is not None:
            values["benefits"] = tuple(self.benefits)
        return ManagementData(**values)


class CreativeRequest(BaseModel):
    """Input of every creative endpoint: one subject, its photos, a format."""

    format: Format = Format.FEED
    property: PropertyPayload | None = None
    management: ManagementPayload | None = None
    photos: list[PhotoPayload] = Field(default_factory=list)

    @model_validator(mode="after")
    def _one_subject(self) -> Self:
        if (self.property is None) == (self.management is None):
            raise ValueError("Provide exactly one of 'property' or 'management'")
        return self


class SlideSummary(BaseModel):
    """A built slide as exposed to clients."""

    index: int
    name: str
    template: Template
    variant: LayoutVariant
    source_category: PhotoCategory | None = None
    photos: list[str] = Field(default_factory=list)
    labels: list[str] = Field(default_factory=list)
    caption: str | None = None


class PreviewResponse(BaseModel):
    """Slide sequence for a creative request."""

    subject: str
    format: Format
    slides: list[SlideSummary]
    caption: str | None = None


class CategoryResponse(BaseModel):
    """Detected photo category."""

    category: PhotoCategory
    label: str
