from __future__ import annotations

import io
import logging
import math
import time
from dataclasses import dataclass
from functools import lru_cache
from typing import Sequence

import arabic_reshaper
from bidi.algorithm import get_display
from PIL import Image, ImageDraw, ImageFont

from .records import Quote, UNKNOWN_AUTHOR

logger = logging.getLogger(__name__)

# Logical poster geometry (pixels before scaling)
WIDTH, HEIGHT = 1080, 1920
PADDING = 80
MAX_TEXT_WIDTH = 920
TEXT_SIZE = 56
TEXT_LINE_HEIGHT = 1.2
AUTHOR_SIZE = 28
AUTHOR_GAP = 30
SCALE = 2

GRADIENT_ANGLE = 135
GRADIENT_FROM = (0xFE, 0xF3, 0xC7)
GRADIENT_TO = (0xFB, 0xCF, 0xE8)
TEXT_COLOR = (0x11, 0x18, 0x27)
AUTHOR_COLOR = (0x37, 0x41, 0x51)

REGULAR_FONTS = (
    "/usr/share/fonts/truetype/noto/NotoNaskhArabic-Regular.ttf",
    "/usr/share/fonts/truetype/noto/NotoSansArabic-Regular.ttf",
    "/usr/share/fonts/truetype/dejavu/DejaVuSans.ttf",
    "/usr/share/fonts/TTF/DejaVuSans.ttf",
)
BOLD_FONTS = (
    "/usr/share/fonts/truetype/noto/NotoNaskhArabic-Bold.ttf",
    "/usr/share/fonts/truetype/noto/NotoSansArabic-Bold.ttf",
    "/usr/share/fonts/truetype/dejavu/DejaVuSans-Bold.ttf",
    "/usr/share/fonts/TTF/DejaVuSans-Bold.ttf",
)


@lru_cache(maxsize=32)
def load_font(size: int, bold: bool = False, path: str = ''):
    """Return the first usable font at ``size``; Pillow's bundled font last."""
    candidates = ([path] if path else []) + list(BOLD_FONTS if bold else REGULAR_FONTS)
    # Text arrives already shaped and in visual order; Raqm must not reorder it.
    for fp in candidates:
        try:
            return ImageFont.truetype(fp, size, layout_engine=ImageFont.Layout.BASIC)
        except OSError:
            continue
    logger.warning("No Arabic-capable font found; poster text uses Pillow's default font")
    return ImageFont.load_default(size=size)


def _configured_font(bold: bool) -> str:
    from django.conf import settings
    from django.core.exceptions import ImproperlyConfigured
    name = 'QUOTES_POSTER_BOLD_FONT' if bold else 'QUOTES_POSTER_FONT'
    try:
        return getattr(settings, name, '') or ''
    except ImproperlyConfigured:
        return ''


def font(size: int, bold: bool = False):
    return load_font(size, bold, _configured_font(bold))


def shape(text: str) -> str:
    """Join Arabic letter forms and reorder to visual (display) order."""
    return get_display(arabic_reshaper.reshape(text))


def wrap(text: str, fnt, max_width: float) -> list[str]:
    """Greedy word wrap in logical order, measuring the shaped line."""
    lines: list[str] = []
    for para in text.splitlines() or ['']:
        current: list[str] = []
        for word in para.split():
            candidate = ' '.join(current + [word])
            if current and fnt.getlength(shape(candidate)) > max_width:
                lines.append(' '.join(current))
                current = [word]
            else:
                current.append(word)
        lines.append(' '.join(current))
    return lines


@dataclass(frozen=True)
class PosterLine:
    text: str  # visual order, ready to draw
    top: float
    size: int
    bold: bool
    color: tuple
    width: float


@dataclass(frozen=True)
class PosterLayout:
    """Fully positioned poster in logical pixels.

    The content box is centred on the poster; lines are right-aligned within
    it.
    """

    quote: Quote
    width: int
    height: int
    box: tuple  # (left, top, right, bottom)
    lines: Sequence[PosterLine]

    @classmethod
    def build(cls, quote: Quote) -> "PosterLayout":
        text_font = font(TEXT_SIZE, bold=True)
        author_font = font(AUTHOR_SIZE)
        text_lines = [shape(ln) for ln in wrap(quote.text, text_font, MAX_TEXT_WIDTH)]
        author_line = shape(f"— {quote.author or UNKNOWN_AUTHOR}")

        text_step = TEXT_SIZE * TEXT_LINE_HEIGHT
        author_step = AUTHOR_SIZE * TEXT_LINE_HEIGHT
        widths = [text_font.getlength(ln) for ln in text_lines]
        author_width = author_font.getlength(author_line)
        box_w = min(MAX_TEXT_WIDTH, max(widths + [author_width]))
        box_h = text_step * len(text_lines) + AUTHOR_GAP + author_step

        left = (WIDTH - box_w) / 2
        top = max(PADDING, (HEIGHT - box_h) / 2)
        lines: list[PosterLine] = []
        y = top
        for ln, w in zip(text_lines, widths):
            lines.append(PosterLine(ln, y + (text_step - TEXT_SIZE) / 2, TEXT_SIZE, True, TEXT_COLOR, w))
            y += text_step
        y += AUTHOR_GAP
        lines.append(PosterLine(author_line, y + (author_step - AUTHOR_SIZE) / 2, AUTHOR_SIZE, False, AUTHOR_COLOR, author_width))
        return cls(quote=quote, width=WIDTH, height=HEIGHT, box=(left, top, left + box_w, top + box_h), lines=lines)


def gradient(size: tuple, start: tuple, end: tuple, angle: float = GRADIENT_ANGLE) -> Image.Image:
    """CSS-style linear gradient. Computed on a coarse grid and scaled up."""
    w, h = size
    gw, gh = max(2, w // 16), max(2, h // 16)
    rad = math.radians(angle)
    dx, dy = math.sin(rad), -math.cos(rad)
    span = abs(gw * dx) + abs(gh * dy)
    pixels = []
    for y in range(gh):
        for x in range(gw):
            t = ((x + 0.5 - gw / 2) * dx + (y + 0.5 - gh / 2) * dy) / span + 0.5
            t = min(1.0, max(0.0, t))
            pixels.append(tuple(int(round(s + (e - s) * t)) for s, e in zip(start, end)))
    img = Image.new('RGB', (gw, gh))
    img.putdata(pixels)
    return img.resize((w, h), Image.BILINEAR)


def rasterize(layout: PosterLayout, scale: int = SCALE) -> Image.Image:
    img = gradient((layout.width * scale, layout.height * scale), GRADIENT_FROM, GRADIENT_TO)
    draw = ImageDraw.Draw(img)
    right = layout.box[2] * scale
    for line in layout.lines:
        fnt = font(line.size * scale, bold=line.bold)
        draw.text((right, line.top * scale), line.text, font=fnt, fill=line.color, anchor='ra')
    return img


@dataclass(frozen=True)
class Poster:
    data: bytes
    filename: str
    content_type: str = 'image/png'


def poster_filename(now: float | None = None) -> str:
    millis = int((time.time() if now is None else now) * 1000)
    return f"quote-{millis}.png"


def render_poster(quote: Quote, now: float | None = None, scale: int = SCALE) -> Poster:
    """Lay out the poster for ``quote``, then rasterize it to PNG bytes."""
    layout = PosterLayout.build(quote)
    img = rasterize(layout, scale=scale)
    buf = io.BytesIO()
    img.save(buf, format='PNG')
    return Poster(data=buf.getvalue(), filename=poster_filename(now))
