"""Slide sequence building for feed and story formats.

Every builder here is a total function: missing data or photos degrade to
placeholder variants or skipped optional slides, never to an exception.
"""

from collections.abc import Iterable
from dataclasses import dataclass

from listing_creatives.domain.listings import ManagementData, PropertyData
from listing_creatives.domain.photos import PhotoCategory
from listing_creatives.domain.slides import (
    Format,
    LayoutVariant,
    SlideDefinition,
    SlideRender,
    Subject,
    Template,
)
from listing_creatives.services.catalog import PhotoCatalog
from listing_creatives.services.copy import description_text, price_text

SPARSE_CATALOG_THRESHOLD = 5
MULTI_PHOTO_THRESHOLD = 8
GRID_THRESHOLD = 10
FEED_MAX_SLIDES = 8
STORY_MULTI_PHOTO_COUNT = 3


@dataclass(frozen=True)
class _InteriorSlot:
    category: PhotoCategory
    preferred: tuple[PhotoCategory, ...]
    min_catalog_size: int
    single_name: str
    multi_name: str
    caption: str


_LIVING_SLOT = _InteriorSlot(
    category=PhotoCategory.LIVING_ROOM,
    preferred=(
        PhotoCategory.LIVING_ROOM,
        PhotoCategory.LIVING_ROOM,
        PhotoCategory.BEDROOM,
    ),
    min_catalog_size=1,
    single_name="Sala",
    multi_name="Ambientes",
    caption="Interiores",
)

_BEDROOM_SLOT = _InteriorSlot(
    category=PhotoCategory.BEDROOM,
    preferred=(
        PhotoCategory.BEDROOM,
        PhotoCategory.BEDROOM,
        PhotoCategory.KITCHEN,
        PhotoCategory.BATHROOM,
    ),
    min_catalog_size=2,
    single_name="Quarto",
    multi_name="Quartos",
    caption="Acomodações",
)


def choose_variant(photo_count: int, catalog_size: int) -> LayoutVariant:
    """Pick the layout variant for a slide from its distinct photo count."""
    if photo_count <= 0:
        return LayoutVariant.PLACEHOLDER
    if photo_count == 1:
        return LayoutVariant.SINGLE
    if photo_count == 2:  # noqa: PLR2004
        return LayoutVariant.SPLIT
    if catalog_size >= GRID_THRESHOLD:
        return LayoutVariant.GRID
    return LayoutVariant.TRIANGLE


def multi_box_capacity(catalog_size: int) -> int:
    """Number of photos a multi-box slide holds for a catalog size."""
    return 4 if catalog_size >= GRID_THRESHOLD else 3


def build_sequence(
    data: PropertyData, catalog: PhotoCatalog, fmt: Format
) -> tuple[SlideDefinition, ...]:
    """Build the ordered slides of a property creative."""
    if fmt is Format.STORY:
        return _story_slides(data, catalog)
    return _feed_slides(data, catalog)


def build_management_sequence(data: ManagementData) -> tuple[SlideDefinition, ...]:
    """Build the ordered slides of the management service creative.

    Feed and story share the same four-slide arc; only the canvas differs.
    """
    photos = (data.background_photo,) if data.background_photo else ()
    variant = LayoutVariant.SINGLE if photos else LayoutVariant.PLACEHOLDER
    arc = (
        ("Introdução", Template.MANAGEMENT_INTRO),
        ("Serviços", Template.MANAGEMENT_BENEFITS),
        ("Credibilidade", Template.MANAGEMENT_TRUST),
        ("Contato", Template.MANAGEMENT_CONTACT),
    )
    return tuple(
        SlideDefinition(
            name=name,
            render=SlideRender(
                template=template, data=data, photos=photos, variant=variant
            ),
        )
        for name, template in arc
    )


def _feed_slides(
    data: PropertyData, catalog: PhotoCatalog
) -> tuple[SlideDefinition, ...]:
    total = len(catalog)
    slides: list[SlideDefinition] = [
        SlideDefinition(
            name="Capa",
            render=_photo_render(
                Template.COVER, data, catalog, [catalog.resolve(PhotoCategory.FACADE)]
            ),
            source_category=PhotoCategory.FACADE,
        )
    ]

    for slot in (_LIVING_SLOT, _BEDROOM_SLOT):
        if catalog.resolve(slot.category) is not None or total > slot.min_catalog_size:
            slides.append(_interior_slide(data, catalog, slot))

    if catalog.has(PhotoCategory.KITCHEN) or total > 3:  # noqa: PLR2004
        slides.append(
            SlideDefinition(
                name="Cozinha",
                render=_photo_render(
                    Template.PHOTO,
                    data,
                    catalog,
                    [catalog.resolve(PhotoCategory.KITCHEN)],
                ),
                source_category=PhotoCategory.KITCHEN,
            )
        )

    has_exterior = catalog.has(PhotoCategory.EXTERIOR)
    has_bathroom = catalog.has(PhotoCategory.BATHROOM)
    if has_exterior or has_bathroom or total >= SPARSE_CATALOG_THRESHOLD:
        if has_exterior:
            name, category = "Área Externa", PhotoCategory.EXTERIOR
        else:
            name, category = "Banheiro", PhotoCategory.BATHROOM
        slides.append(
            SlideDefinition(
                name=name,
                render=_photo_render(
                    Template.PHOTO, data, catalog, [catalog.resolve(category)]
                ),
                source_category=category,
            )
        )

    slides.append(
        SlideDefinition(
            name="Diferenciais",
            render=_photo_render(
                Template.FEATURES,
                data,
                catalog,
                [
                    catalog.first(PhotoCategory.BEDROOM)
                    or catalog.first(PhotoCategory.KITCHEN)
                ],
            ),
        )
    )
    slides.append(
        SlideDefinition(
            name="Descrição",
            render=_photo_render(
                Template.DESCRIPTION,
                data,
                catalog,
                [catalog.resolve(PhotoCategory.LIVING_ROOM)],
                caption=description_text(data),
            ),
        )
    )
    slides.append(
        SlideDefinition(
            name="Contato",
            render=_photo_render(
                Template.CONTACT,
                data,
                catalog,
                [catalog.resolve(PhotoCategory.FACADE)],
            ),
        )
    )
    return tuple(slides[:FEED_MAX_SLIDES])


def _story_slides(
    data: PropertyData, catalog: PhotoCatalog
) -> tuple[SlideDefinition, ...]:
    tour = catalog.resolve_many(
        (PhotoCategory.LIVING_ROOM, PhotoCategory.BEDROOM, PhotoCategory.KITCHEN),
        STORY_MULTI_PHOTO_COUNT,
    )
    ambient = catalog.resolve_many(
        (PhotoCategory.KITCHEN, PhotoCategory.BATHROOM, PhotoCategory.EXTERIOR),
        STORY_MULTI_PHOTO_COUNT,
    )
    details_photo = (
        catalog.first(PhotoCategory.KITCHEN)
        or catalog.first(PhotoCategory.BATHROOM)
        or catalog.resolve(PhotoCategory.FACADE)
    )
    return (
        SlideDefinition(
            name="Introdução",
            render=_photo_render(
                Template.COVER, data, catalog, [catalog.resolve(PhotoCategory.FACADE)]
            ),
            source_category=PhotoCategory.FACADE,
        ),
        SlideDefinition(
            name="Tour",
            render=_multi_render(
                data, catalog, tour, LayoutVariant.TRIANGLE, caption="Conheça"
            ),
            source_category=PhotoCategory.LIVING_ROOM,
        ),
        SlideDefinition(
            name="Ambientes",
            render=_multi_render(
                data, catalog, ambient, LayoutVariant.ROUNDED_BOXES, caption="Ambientes"
            ),
            source_category=PhotoCategory.KITCHEN,
        ),
        SlideDefinition(
            name="Detalhes",
            render=_photo_render(
                Template.PRICING,
                data,
                catalog,
                [details_photo],
                caption=price_text(data),
            ),
        ),
        SlideDefinition(
            name="Contato",
            render=_photo_render(
                Template.CONTACT,
                data,
                catalog,
                [catalog.resolve(PhotoCategory.FACADE)],
            ),
        ),
    )


def _interior_slide(
    data: PropertyData, catalog: PhotoCatalog, slot: _InteriorSlot
) -> SlideDefinition:
    photos = _interior_photos(catalog, slot)
    variant = choose_variant(len(photos), len(catalog))
    if variant in {LayoutVariant.PLACEHOLDER, LayoutVariant.SINGLE}:
        return SlideDefinition(
            name=slot.single_name,
            render=_photo_render(Template.PHOTO, data, catalog, photos),
            source_category=slot.category,
        )
    return SlideDefinition(
        name=slot.multi_name,
        render=SlideRender(
            template=Template.MULTI_PHOTO,
            data=data,
            photos=tuple(photos),
            labels=tuple(catalog.label_for(url) for url in photos),
            variant=variant,
            caption=slot.caption,
        ),
        source_category=slot.category,
    )


def _interior_photos(catalog: PhotoCatalog, slot: _InteriorSlot) -> list[str]:
    capacity = multi_box_capacity(len(catalog))
    if len(catalog) >= MULTI_PHOTO_THRESHOLD:
        return catalog.resolve_many(slot.preferred, capacity)
    tagged = catalog.tagged(slot.category)[:capacity]
    if tagged:
        return tagged
    fallback = catalog.resolve(slot.category)
    return [fallback] if fallback else []


def _photo_render(
    template: Template,
    data: Subject,
    catalog: PhotoCatalog,
    photos: Iterable[str | None],
    caption: str | None = None,
) -> SlideRender:
    resolved = tuple(url for url in photos if url)[:1]
    return SlideRender(
        template=template,
        data=data,
        photos=resolved,
        labels=tuple(catalog.label_for(url) for url in resolved),
        variant=LayoutVariant.SINGLE if resolved else LayoutVariant.PLACEHOLDER,
        caption=caption,
    )


def _multi_render(
    data: PropertyData,
    catalog: PhotoCatalog,
    photos: list[str],
    full_variant: LayoutVariant,
    caption: str,
) -> SlideRender:
    variant = choose_variant(len(photos), len(catalog))
    if variant in {LayoutVariant.TRIANGLE, LayoutVariant.GRID}:
        variant = full_variant
    return SlideRender(
        template=Template.MULTI_PHOTO,
        data=data,
        photos=tuple(photos),
        labels=tuple(catalog.label_for(url) for url in photos),
        variant=variant,
        caption=caption,
    )
