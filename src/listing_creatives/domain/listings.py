"""Domain models for the subjects advertised by a creative."""

from dataclasses import dataclass


@dataclass(frozen=True)
class PropertyData:
    """Resale listing details used to fill slide templates."""

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
    features: tuple[str, ...] = ()
    differentials: tuple[str, ...] = ()
    leisure_items: tuple[str, ...] = ()
    description: str = ""
    contact_name: str = ""
    contact_phone: str = ""
    creci: str = ""
    facebook_url: str = ""
    site_url: str = ""
    zip_code: str = ""

    @property
    def title(self) -> str:
        """Headline for the listing, falling back to type and neighborhood."""
        if self.name:
            return self.name
        if self.neighborhood:
            return f"{self.type} em {self.neighborhood}"
        return self.type

    @property
    def location(self) -> str:
        """Neighborhood, city and state joined for display."""
        parts = [self.neighborhood, self.city, self.state]
        return ", ".join(part for part in parts if part)


@dataclass(frozen=True)
class ManagementData:
    """Institutional data for the rental management service creative."""

    headline: str = "Gestão Profissional de Locação"
    subheadline: str = "Você recebe o aluguel. Nós cuidamos do resto."
    benefits: tuple[str, ...] = (
        "Administração completa do imóvel",
        "Busca e seleção de inquilinos",
        "Garantia de recebimento",
        "Manutenção e vistorias",
    )
    years_experience: str = ""
    properties_managed: str = ""
    background_photo: str | None = None
    contact_name: str = ""
    contact_phone: str = ""
    creci: str = ""

    @property
    def title(self) -> str:
        """Headline used as the creative title."""
        return self.headline
