"""Text resolved into slide templates."""

from listing_creatives.domain.listings import ManagementData, PropertyData

PRICE_PLACEHOLDER = "Consulte"
MISSING_VALUE = "—"
MAX_FEATURE_LINES = 4
MAX_CAPTION_FEATURES = 5

_DEFAULT_FEATURES = (
    "Pronto para morar",
    "Ambientes arejados",
    "Ótima distribuição",
)


def price_text(data: PropertyData) -> str:
    """Return the listing price or the ask-for-price placeholder."""
    return data.price.strip() or PRICE_PLACEHOLDER


def feature_lines(data: PropertyData) -> list[str]:
    """Highlights for the features slide, flags first then listed features."""
    lines: list[str] = []
    if data.has_natural_light:
        lines.append("Excelente iluminação natural")
    if data.has_balcony:
        lines.append("Varanda espaçosa")
    if data.has_view:
        lines.append("Vista privilegiada")
    if data.has_good_layout:
        lines.append("Ambientes bem distribuídos")
    for feature in (*data.differentials, *data.features):
        if len(lines) >= MAX_FEATURE_LINES:
            break
        if feature and feature not in lines:
            lines.append(feature)
    if not lines:
        return list(_DEFAULT_FEATURES)
    return lines[:MAX_FEATURE_LINES]


def description_text(data: PropertyData) -> str:
    """Free description, or a generated one built from the listing fields."""
    if data.description.strip():
        return data.description.strip()

    kind = (data.type or "imóvel").lower()
    neighborhood = data.neighborhood or "localização privilegiada"
    parts: list[str] = []
    if data.name:
        parts.append(
            f"{data.name} é mais que um endereço, é o lugar onde sua história "
            "vai acontecer."
        )
    else:
        parts.append(
            f"Este {kind} em {neighborhood} é mais que um endereço, é o lugar "
            "onde sua história vai acontecer."
        )
    if data.has_natural_light:
        parts.append(
            "Imagine acordar todos os dias com a luz natural entrando pelas janelas."
        )
    if data.has_balcony:
        parts.append("Uma varanda perfeita para seus momentos de paz.")
    if data.has_view:
        parts.append("A vista privilegiada transforma cada dia em uma experiência única.")
    if data.has_good_layout:
        parts.append("Ambientes bem distribuídos para o conforto do dia a dia.")

    bedrooms = _leading_int(data.bedrooms)
    if bedrooms is not None and bedrooms >= 3:
        parts.append("Espaço generoso para toda a família crescer junta.")
    elif bedrooms is not None:
        parts.append(
            "O espaço ideal para quem valoriza qualidade de vida sem abrir mão "
            "do conforto."
        )
    area = _leading_int(data.area)
    if area is not None and area >= 100:
        parts.append(f"São {data.area}m² pensados para você viver com amplitude.")

    parts.append(f"Localizado em {neighborhood}, perto de tudo que importa.")
    parts.append("Agende sua visita.")
    return " ".join(parts)


def spec_lines(data: PropertyData) -> list[str]:
    """Size and layout facts that are present on the listing."""
    lines: list[str] = []
    if data.bedrooms:
        lines.append(f"{data.bedrooms} quartos")
    if data.suites:
        lines.append(f"{data.suites} suítes")
    if data.bathrooms:
        lines.append(f"{data.bathrooms} banheiros")
    if data.garage_spaces:
        lines.append(f"{data.garage_spaces} vagas")
    if data.area:
        lines.append(f"{data.area} m²")
    return lines


def cost_lines(data: PropertyData) -> list[str]:
    """Recurring costs and financing conditions."""
    lines: list[str] = []
    if data.condominium_fee:
        lines.append(f"Condomínio: {data.condominium_fee}")
    if data.iptu:
        lines.append(f"IPTU: {data.iptu}")
    if data.financing_note:
        lines.append(data.financing_note)
    return lines


def trust_lines(data: ManagementData) -> list[str]:
    """Credibility figures for the management creative."""
    lines: list[str] = []
    if data.years_experience:
        lines.append(f"{data.years_experience} anos de experiência")
    if data.properties_managed:
        lines.append(f"{data.properties_managed} imóveis administrados")
    if not lines:
        lines.append("Atendimento próximo e transparente")
    return lines


def contact_lines(data: PropertyData | ManagementData) -> list[str]:
    """Contact block shared by every contact slide."""
    lines: list[str] = []
    if data.contact_phone:
        lines.append(data.contact_phone)
    if data.contact_name:
        lines.append(f"Fale com {data.contact_name}")
    if data.creci:
        lines.append(data.creci)
    if not lines:
        lines.append("Entre em contato")
    return lines


def caption_text(data: PropertyData) -> str:
    """Fixed-structure social media caption for a resale listing.

    Missing fields read as a dash; leisure items fall back to the first
    listed features.
    """
    bedrooms = data.bedrooms or MISSING_VALUE
    neighborhood = data.neighborhood or MISSING_VALUE
    condition = data.financing_note or "Aceita financiamento"
    if data.leisure_items:
        leisure = ", ".join(data.leisure_items)
    else:
        leisure = (
            ", ".join(data.features[:MAX_CAPTION_FEATURES]) or "Área de lazer completa"
        )
    address = data.full_address or f"{data.neighborhood}, {data.city} - {data.state}"
    creci = data.creci.replace("CRECI ", "", 1) or MISSING_VALUE

    lines = [
        f"📣 {data.title} {bedrooms} quartos – {neighborhood}",
        "",
        f"💰 Valor de Venda: {price_text(data)} – {condition}",
    ]
    if data.down_payment_note:
        lines.append(f"💰 {data.down_payment_note}")
    lines += [
        "",
        f"☑️ {bedrooms} quartos",
        f"☑️ {data.floor_or_type or data.type or MISSING_VALUE} – "
        f"{data.area or MISSING_VALUE} m²",
        f"☑️ {data.garage_spaces or MISSING_VALUE} vaga(s) de garagem",
        "",
        f"☑️ Lazer completo incluindo: {leisure}",
        "",
        f"🔜 Localização: {address}",
        "",
        f"👨‍💼 {data.contact_name or MISSING_VALUE} | Corretor de Imóveis – CRECI {creci}",
        f"📱 {data.contact_phone or MISSING_VALUE}",
    ]
    lines += [
        extra for extra in (data.facebook_url, data.site_url, data.zip_code) if extra
    ]
    return "\n".join(lines)


def _leading_int(text: str) -> int | None:
    digits = ""
    for char in text.strip():
        if not char.isdigit():
            break
        digits += char
    return int(digits) if digits else None
