"""Pillow implementation of the slide render adapter."""

import io
import logging
from dataclasses import dataclass, field
from pathlib import Path

from PIL import Image, ImageDraw, ImageFont, ImageOps

from listing_creatives.adapters.http_image_fetcher import ImageFetcher
from listing_creatives.domain.listings import ManagementData, PropertyData
from listing_creatives.domain.slides import (
    Format,
    LayoutVariant,
    SlideDefinition,
    SlideRender,
    Template,
)
from listing_creatives.services.copy import (
    contact_lines,
    cost_lines,
    feature_lines,
    price_text,
    spec_lines,
    trust_lines,
)
from listing_creatives.services.rendering import RenderAdapter

logger = logging.getLogger(__name__)

RGB = tuple[int, int, int]
Box = tuple[int, int, int, int]

PLACEHOLDER_TEXT = "Foto em breve"

_SYSTEM_FONTS = (
    "/usr/share/fonts/truetype/dejavu/DejaVuSans.ttf",
    "/usr/share/fonts/truetype/liberation/LiberationSans-Regular.ttf",
    "/System/Library/Fonts/Helvetica.ttc",
    "/Library/Fonts/Arial.ttf",
    "C:/Windows/Fonts/arial.ttf",
)


@dataclass(frozen=True)
class BrandStyle:
    """Brand colors and font used by every template."""

    primary: RGB = (30, 58, 95)
    accent: RGB = (201, 162, 39)
    text: RGB = (255, 255, 255)
    muted: RGB = (214, 219, 226)
    background: RGB = (15, 23, 42)
    font_path: str | None = None

    @classmethod
    def from_hex(
        cls, primary: str, accent: str, font_path: str | None = None
    ) -> "BrandStyle":
        """Build a style from hex brand colors."""
        defaults = cls()
        return cls(
            primary=parse_color(primary, defaults.primary),
            accent=parse_color(accent, defaults.accent),
            font_path=font_path,
        )


@dataclass
class PillowSlideRenderer(RenderAdapter):
    """Lays out slide templates on a Pillow canvas at the format size."""

    fetcher: ImageFetcher
    brand: BrandStyle = field(default_factory=BrandStyle)

    async def render(self, slide: SlideDefinition, fmt: Format) -> Image.Image:
        """Fetch the slide photos and compose the template."""
        photos = [await self._load_photo(url) for url in slide.render.photos]
        return self.compose(slide, fmt, photos)

    def compose(
        self,
        slide: SlideDefinition,
        fmt: Format,
        photos: list[Image.Image | None],
    ) -> Image.Image:
        """Compose a slide from already decoded photos."""
        width, height = fmt.size
        canvas = Image.new("RGB", (width, height), self.brand.background)
        render = slide.render
        data = render.data

        match render.template:
            case Template.COVER:
                self._paint_photos(canvas, render, photos, (0, 0, width, height))
                canvas = _bottom_gradient(canvas, 0.5)
                self._cover_text(canvas, data)
            case Template.PHOTO:
                self._paint_photos(canvas, render, photos, (0, 0, width, height))
                canvas = _bottom_gradient(canvas, 0.3)
                label = render.labels[0] if render.labels else slide.name
                self._footer(canvas, [label])
            case Template.MULTI_PHOTO:
                header = _scaled(height, 0.12)
                self._paint_photos(canvas, render, photos, (0, header, width, height))
                self._header(canvas, render.caption or slide.name, header)
            case Template.FEATURES:
                split = height // 2
                self._paint_photos(canvas, render, photos, (0, 0, width, split))
                lines = feature_lines(data) if isinstance(data, PropertyData) else []
                self._panel(canvas, "Diferenciais", lines, split)
            case Template.DESCRIPTION:
                self._paint_photos(canvas, render, photos, (0, 0, width, height))
                canvas = _dim(canvas)
                self._paragraph(canvas, render.caption or "")
            case Template.PRICING:
                self._paint_photos(canvas, render, photos, (0, 0, width, height))
                canvas = _bottom_gradient(canvas, 0.6)
                lines = (
                    spec_lines(data) + cost_lines(data)
                    if isinstance(data, PropertyData)
                    else []
                )
                self._price_block(canvas, render.caption or price_text(data), lines)
            case Template.CONTACT | Template.MANAGEMENT_CONTACT:
                self._paint_photos(canvas, render, photos, (0, 0, width, height))
                canvas = _dim(canvas)
                self._centered(canvas, data.title, contact_lines(data))
            case Template.MANAGEMENT_INTRO:
                self._paint_photos(canvas, render, photos, (0, 0, width, height))
                canvas = _dim(canvas)
                subheadline = (
                    [data.subheadline] if isinstance(data, ManagementData) else []
                )
                self._centered(canvas, data.title, subheadline)
            case Template.MANAGEMENT_BENEFITS:
                lines = list(data.benefits) if isinstance(data, ManagementData) else []
                self._panel(canvas, "Serviços", lines, 0)
            case Template.MANAGEMENT_TRUST:
                lines = trust_lines(data) if isinstance(data, ManagementData) else []
                self._centered(canvas, "Credibilidade", lines)
        return canvas

    async def _load_photo(self, url: str) -> Image.Image | None:
        try:
            content = await self.fetcher.fetch(url)
            with Image.open(io.BytesIO(content)) as image:
                return image.convert("RGB")
        except Exception:
            logger.warning("Could not load photo %s", url, exc_info=True)
            return None

    def _paint_photos(
        self,
        canvas: Image.Image,
        render: SlideRender,
        photos: list[Image.Image | None],
        area: Box,
    ) -> None:
        boxes = layout_boxes(render.variant, area)
        rounded = render.variant is LayoutVariant.ROUNDED_BOXES
        for index, box in enumerate(boxes):
            photo = photos[index] if index < len(photos) else None
            if photo is None:
                self._placeholder(canvas, box)
            else:
                _paste_fit(canvas, photo, box, rounded=rounded)
            if len(boxes) > 1 and index < len(render.labels):
                self._label(canvas, render.labels[index], box)

    def _placeholder(self, canvas: Image.Image, box: Box) -> None:
        draw = ImageDraw.Draw(canvas)
        draw.rectangle(box, fill=self.brand.primary)
        font = self._font(_scaled(box[3] - box[1], 0.06, minimum=18))
        text_width = draw.textlength(PLACEHOLDER_TEXT, font=font)
        x = box[0] + (box[2] - box[0] - text_width) / 2
        y = (box[1] + box[3]) / 2
        draw.text((x, y), PLACEHOLDER_TEXT, font=font, fill=self.brand.muted)

    def _label(self, canvas: Image.Image, label: str, box: Box) -> None:
        draw = ImageDraw.Draw(canvas)
        font = self._font(_scaled(canvas.height, 0.018, minimum=14))
        padding = 10
        text_width = draw.textlength(label, font=font)
        text_height = font.getbbox(label)[3]
        x0, y0 = box[0] + 16, box[3] - text_height - 2 * padding - 16
        draw.rounded_rectangle(
            (x0, y0, x0 + text_width + 2 * padding, y0 + text_height + 2 * padding),
            radius=(text_height + 2 * padding) // 2,
            fill=self.brand.accent,
        )
        draw.text((x0 + padding, y0 + padding), label, font=font, fill=self.brand.text)

    def _cover_text(self, canvas: Image.Image, data: PropertyData | ManagementData) -> None:
        draw = ImageDraw.Draw(canvas)
        width, height = canvas.size
        margin = _scaled(width, 0.07)
        y = int(height * 0.62)
        y = _draw_text_block(
            draw,
            data.title,
            self._font(_scaled(width, 0.07)),
            width - 2 * margin,
            (margin, y),
            self.brand.text,
        )
        if isinstance(data, PropertyData):
            if data.location:
                y = _draw_text_block(
                    draw,
                    data.location,
                    self._font(_scaled(width, 0.035)),
                    width - 2 * margin,
                    (margin, y + 8),
                    self.brand.muted,
                )
            self._pill(draw, price_text(data), (margin, y + 24), _scaled(width, 0.04))

    def _header(self, canvas: Image.Image, title: str, height: int) -> None:
        draw = ImageDraw.Draw(canvas)
        draw.rectangle((0, 0, canvas.width, height), fill=self.brand.primary)
        font = self._font(_scaled(height, 0.45))
        margin = _scaled(canvas.width, 0.07)
        text_height = font.getbbox(title)[3]
        draw.text(
            (margin, (height - text_height) // 2), title, font=font, fill=self.brand.text
        )

    def _footer(self, canvas: Image.Image, lines: list[str]) -> None:
        draw = ImageDraw.Draw(canvas)
        margin = _scaled(canvas.width, 0.07)
        font = self._font(_scaled(canvas.width, 0.06))
        y = canvas.height - margin - len(lines) * (font.getbbox("Ag")[3] + 12)
        for line in lines:
            y = _draw_text_block(
                draw, line, font, canvas.width - 2 * margin, (margin, y), self.brand.text
            )

    def _panel(
        self, canvas: Image.Image, title: str, lines: list[str], top: int
    ) -> None:
        draw = ImageDraw.Draw(canvas)
        draw.rectangle((0, top, canvas.width, canvas.height), fill=self.brand.primary)
        margin = _scaled(canvas.width, 0.07)
        max_width = canvas.width - 2 * margin
        y = top + margin
        y = _draw_text_block(
            draw,
            title,
            self._font(_scaled(canvas.width, 0.06)),
            max_width,
            (margin, y),
            self.brand.accent,
        )
        body = self._font(_scaled(canvas.width, 0.035))
        for line in lines:
            y = _draw_text_block(
                draw, f"• {line}", body, max_width, (margin, y + 14), self.brand.text
            )

    def _paragraph(self, canvas: Image.Image, text: str) -> None:
        draw = ImageDraw.Draw(canvas)
        margin = _scaled(canvas.width, 0.09)
        _draw_text_block(
            draw,
            text,
            self._font(_scaled(canvas.width, 0.036)),
            canvas.width - 2 * margin,
            (margin, _scaled(canvas.height, 0.2)),
            self.brand.text,
            line_spacing=14,
        )

    def _price_block(self, canvas: Image.Image, price: str, lines: list[str]) -> None:
        draw = ImageDraw.Draw(canvas)
        margin = _scaled(canvas.width, 0.07)
        max_width = canvas.width - 2 * margin
        y = int(canvas.height * 0.55)
        y = _draw_text_block(
            draw,
            price,
            self._font(_scaled(canvas.width, 0.08)),
            max_width,
            (margin, y),
            self.brand.accent,
        )
        body = self._font(_scaled(canvas.width, 0.035))
        for line in lines:
            y = _draw_text_block(
                draw, line, body, max_width, (margin, y + 10), self.brand.text
            )

    def _centered(self, canvas: Image.Image, title: str, lines: list[str]) -> None:
        draw = ImageDraw.Draw(canvas)
        width, height = canvas.size
        title_font = self._font(_scaled(width, 0.065))
        body_font = self._font(_scaled(width, 0.038))
        y = int(height * 0.35)
        for text, font, fill in [(title, title_font, self.brand.text)] + [
            (line, body_font, self.brand.muted) for line in lines
        ]:
            text_width = draw.textlength(text, font=font)
            x = max((width - text_width) / 2, 0)
            draw.text((x, y), text, font=font, fill=fill)
            y += font.getbbox(text)[3] + 24

    def _pill(
        self, draw: ImageDraw.ImageDraw, text: str, origin: tuple[int, int], size: int
    ) -> None:
        font = self._font(size)
        padding_x, padding_y = 24, 12
        text_width = draw.textlength(text, font=font)
        box_height = font.getbbox(text)[3] + 2 * padding_y
        x0, y0 = origin
        draw.rounded_rectangle(
            (x0, y0, x0 + text_width + 2 * padding_x, y0 + box_height),
            radius=box_height // 2,
            fill=self.brand.accent,
        )
        draw.text((x0 + padding_x, y0 + padding_y), text, font=font, fill=self.brand.text)

    def _font(self, size: int) -> ImageFont.FreeTypeFont | ImageFont.ImageFont:
        return load_font(self.brand.font_path, size)


def layout_boxes(variant: LayoutVariant, area: Box) -> list[Box]:
    """Split a photo area into the boxes of a layout variant."""
    x0, y0, x1, y1 = area
    width, height = x1 - x0, y1 - y0
    gap = 8
    landscape = width >= height
    match variant:
        case LayoutVariant.PLACEHOLDER | LayoutVariant.SINGLE:
            return [area]
        case LayoutVariant.SPLIT:
            if landscape:
                middle = x0 + width // 2
                return [(x0, y0, middle - gap // 2, y1), (middle + gap // 2, y0, x1, y1)]
            middle = y0 + height // 2
            return [(x0, y0, x1, middle - gap // 2), (x0, middle + gap // 2, x1, y1)]
        case LayoutVariant.TRIANGLE:
            if landscape:
                main = x0 + int(width * 0.6)
                middle = y0 + height // 2
                return [
                    (x0, y0, main - gap // 2, y1),
                    (main + gap // 2, y0, x1, middle - gap // 2),
                    (main + gap // 2, middle + gap // 2, x1, y1),
                ]
            main = y0 + int(height * 0.55)
            middle = x0 + width // 2
            return [
                (x0, y0, x1, main - gap // 2),
                (x0, main + gap // 2, middle - gap // 2, y1),
                (middle + gap // 2, main + gap // 2, x1, y1),
            ]
        case LayoutVariant.ROUNDED_BOXES:
            margin = int(min(width, height) * 0.05)
            inner_height = height - 2 * margin - 2 * gap * 2
            row = inner_height // 3
            return [
                (
                    x0 + margin,
                    y0 + margin + index * (row + 2 * gap),
                    x1 - margin,
                    y0 + margin + index * (row + 2 * gap) + row,
                )
                for index in range(3)
            ]
        case LayoutVariant.GRID:
            mid_x = x0 + width // 2
            mid_y = y0 + height // 2
            return [
                (x0, y0, mid_x - gap // 2, mid_y - gap // 2),
                (mid_x + gap // 2, y0, x1, mid_y - gap // 2),
                (x0, mid_y + gap // 2, mid_x - gap // 2, y1),
                (mid_x + gap // 2, mid_y + gap // 2, x1, y1),
            ]


def parse_color(value: str, default: RGB) -> RGB:
    """Parse '#RRGGBB' into an RGB tuple, returning the default when malformed."""
    hex_value = value.strip().lstrip("#")
    if len(hex_value) != 6:  # noqa: PLR2004
        return default
    try:
        return (
            int(hex_value[0:2], 16),
            int(hex_value[2:4], 16),
            int(hex_value[4:6], 16),
        )
    except ValueError:
        return default


def load_font(
    font_path: str | None, size: int
) -> ImageFont.FreeTypeFont | ImageFont.ImageFont:
    """Load a TrueType font, falling back to common system fonts."""
    candidates = [font_path] if font_path else []
    candidates.extend(path for path in _SYSTEM_FONTS if Path(path).exists())
    for candidate in candidates:
        try:
            return ImageFont.truetype(candidate, size=size)
        except OSError:
            logger.debug("Font %s unavailable", candidate)
    return ImageFont.load_default(size=size)


def _paste_fit(
    canvas: Image.Image, photo: Image.Image, box: Box, *, rounded: bool = False
) -> None:
    size = (max(box[2] - box[0], 1), max(box[3] - box[1], 1))
    fitted = ImageOps.fit(photo, size, Image.Resampling.LANCZOS)
    mask = None
    if rounded:
        mask = Image.new("L", size, 0)
        ImageDraw.Draw(mask).rounded_rectangle(
            (0, 0, size[0], size[1]), radius=min(size) // 8, fill=255
        )
    canvas.paste(fitted, (box[0], box[1]), mask)


def _bottom_gradient(canvas: Image.Image, share: float) -> Image.Image:
    width, height = canvas.size
    overlay = Image.new("RGBA", (width, height), (0, 0, 0, 0))
    draw = ImageDraw.Draw(overlay)
    gradient_height = max(int(height * share), 1)
    for offset in range(gradient_height):
        alpha = int(220 * (offset / gradient_height))
        y = height - gradient_height + offset
        draw.line([(0, y), (width, y)], fill=(0, 0, 0, alpha))
    return Image.alpha_composite(canvas.convert("RGBA"), overlay).convert("RGB")


def _dim(canvas: Image.Image, alpha: int = 150) -> Image.Image:
    overlay = Image.new("RGBA", canvas.size, (0, 0, 0, alpha))
    return Image.alpha_composite(canvas.convert("RGBA"), overlay).convert("RGB")


def _draw_text_block(  # noqa: PLR0913
    draw: ImageDraw.ImageDraw,
    text: str,
    font: ImageFont.FreeTypeFont | ImageFont.ImageFont,
    max_width: int,
    origin: tuple[int, int],
    fill: RGB,
    line_spacing: int = 8,
) -> int:
    x, y = origin
    for line in _wrap_text(draw, text, font, max_width):
        draw.text((x, y), line, font=font, fill=fill)
        y += font.getbbox(line)[3] + line_spacing
    return y


def _wrap_text(
    draw: ImageDraw.ImageDraw,
    text: str,
    font: ImageFont.FreeTypeFont | ImageFont.ImageFont,
    max_width: int,
) -> list[str]:
    lines: list[str] = []
    current = ""
    for word in text.split():
        candidate = f"{current} {word}".strip()
        if not current or draw.textlength(candidate, font=font) <= max_width:
            current = candidate
        else:
            lines.append(current)
            current = word
    if current:
        lines.append(current)
    return lines


def _scaled(reference: int, share: float, minimum: int = 12) -> int:
    return max(int(reference * share), minimum)
