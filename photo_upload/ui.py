"""UI composition utilities for the upload page.

Uses Pillow to compose the single page (header, chosen image, upload button and
status text) and returns a PIL Image object. The same layout drives hit-testing
so taps on the window map back to the image area or the upload button.
"""
from dataclasses import dataclass
from typing import Dict, Optional, Tuple
from pathlib import Path

from PIL import Image, ImageDraw, ImageFont

from photo_upload.config import DEFAULT_TEXTS
from photo_upload.controls import CHOOSE, UPLOAD

# default display size for composition (portrait phone-like page)
DISPLAY_W = 480
DISPLAY_H = 800

FONT_PATHS = [
    "/usr/share/fonts/truetype/dejavu/DejaVuSans-Bold.ttf",
    "/System/Library/Fonts/Supplemental/Arial.ttf",
    "C:/Windows/Fonts/arial.ttf",
]

# Base font size relative to the shorter display dimension
DEFAULT_BASE_FONT_RATIO = 0.05

DISABLED_GREY = 160

Rect = Tuple[int, int, int, int]


@dataclass
class PageView:
    """What the page needs to draw; built by UploadPage from its state."""
    preview: Optional[Image.Image] = None
    upload_enabled: bool = False
    message_visible: bool = False
    error_visible: bool = False


def _choose_font_path():
    for p in FONT_PATHS:
        try:
            if Path(p).exists():
                return p
        except Exception:
            continue
    return None


def _load_font(size: int):
    font_path = _choose_font_path()
    if font_path:
        try:
            return ImageFont.truetype(font_path, size)
        except OSError:
            pass
    return ImageFont.load_default()


def _text_size(draw: ImageDraw.ImageDraw, text: str, font, fallback_size: int) -> Tuple[int, int]:
    # Compute text width/height in a way compatible with multiple Pillow versions
    if hasattr(draw, 'textbbox'):
        bbox = draw.textbbox((0, 0), text, font=font)
        return bbox[2] - bbox[0], bbox[3] - bbox[1]
    if hasattr(draw, 'textsize'):
        return draw.textsize(text, font=font)
    return len(text) * fallback_size // 2, fallback_size


def _base_font_size(full_screen: Tuple[int, int]) -> int:
    return max(12, int(min(full_screen) * DEFAULT_BASE_FONT_RATIO))


def page_layout(full_screen: Tuple[int, int] = (DISPLAY_W, DISPLAY_H)) -> Dict[str, Rect]:
    """Return the page regions as (x0, y0, x1, y1) rectangles.

    Keys: 'header', 'image', 'button', 'message'. Regions are stacked top to
    bottom and never overlap.
    """
    w, h = full_screen
    base = _base_font_size(full_screen)
    margin = max(8, int(min(w, h) * 0.03))

    header_h = margin + int(base * 0.9) + int(base * 2.0) + margin
    message_h = int(base * 2.5)
    button_h = int(base * 2.4)

    button_y1 = h - message_h - margin
    button_y0 = button_y1 - button_h
    image_y1 = max(header_h + 1, button_y0 - margin)

    return {
        "header": (0, 0, w, header_h),
        "image": (margin, header_h, w - margin, image_y1),
        "button": (int(w * 0.2), button_y0, int(w * 0.8), button_y1),
        "message": (0, h - message_h, w, h),
    }


def _inside(point: Tuple[int, int], rect: Rect) -> bool:
    x, y = point
    return rect[0] <= x < rect[2] and rect[1] <= y < rect[3]


def hit_test(point: Tuple[int, int], full_screen: Tuple[int, int] = (DISPLAY_W, DISPLAY_H)) -> Optional[str]:
    """Map a tap to a control event name, or None when it lands outside any control."""
    layout = page_layout(full_screen)
    if _inside(point, layout["image"]):
        return CHOOSE
    if _inside(point, layout["button"]):
        return UPLOAD
    return None


def _draw_centered(draw, rect: Rect, text: str, font, font_size: int, fill: int):
    tw, th = _text_size(draw, text, font, font_size)
    x = rect[0] + (rect[2] - rect[0] - tw) // 2
    y = rect[1] + (rect[3] - rect[1] - th) // 2
    draw.text((x, y), text, font=font, fill=fill)


def compose_page(view: PageView, full_screen: Tuple[int, int] = (DISPLAY_W, DISPLAY_H), texts: Dict[str, str] = None) -> Image.Image:
    """Compose the upload page for the given view state.

    Returns an L-mode PIL Image sized to full_screen.
    """
    texts = {**DEFAULT_TEXTS, **(texts or {})}
    w, h = full_screen
    img = Image.new("L", (w, h), color=255)
    draw = ImageDraw.Draw(img)

    base = _base_font_size(full_screen)
    small_font = _load_font(int(base * 0.9))
    title_font = _load_font(int(base * 2.0))
    item_font = _load_font(base)
    layout = page_layout(full_screen)

    # Header: application name over the page title
    margin = layout["image"][0]
    draw.text((margin, margin), texts["app_title"], font=small_font, fill=0)
    draw.text((margin, margin + int(base * 1.1)), texts["page_title"], font=title_font, fill=0)

    # Image area: chosen photo scaled to fit, or a tap hint
    ix0, iy0, ix1, iy1 = layout["image"]
    if view.preview is not None:
        thumb = view.preview.convert("L")
        thumb.thumbnail((max(1, ix1 - ix0), max(1, iy1 - iy0)), Image.LANCZOS)
        px = ix0 + (ix1 - ix0 - thumb.width) // 2
        py = iy0 + (iy1 - iy0 - thumb.height) // 2
        img.paste(thumb, (px, py))
    else:
        draw.rectangle(layout["image"], outline=0, width=2)
        _draw_centered(draw, layout["image"], texts["hint"], item_font, base, fill=0)

    # Upload button: filled when enabled, grey outline when disabled
    if view.upload_enabled:
        draw.rectangle(layout["button"], fill=0)
        _draw_centered(draw, layout["button"], texts["upload"], item_font, base, fill=255)
    else:
        draw.rectangle(layout["button"], outline=DISABLED_GREY, width=3)
        _draw_centered(draw, layout["button"], texts["upload"], item_font, base, fill=DISABLED_GREY)

    # Status text below the button
    if view.error_visible:
        _draw_centered(draw, layout["message"], texts["error"], item_font, base, fill=0)
    elif view.message_visible:
        _draw_centered(draw, layout["message"], texts["uploaded"], item_font, base, fill=0)

    return img


def compose_message(message: str, full_screen: Tuple[int, int] = (DISPLAY_W, DISPLAY_H)) -> Image.Image:
    """Compose a large centered message (used for startup / shutdown screens).

    Returns an L-mode PIL Image sized to full_screen.
    """
    w, h = full_screen
    img = Image.new("L", (w, h), color=255)
    draw = ImageDraw.Draw(img)

    msg_font_size = max(24, int(min(w, h) * 0.08))
    font = _load_font(msg_font_size)
    _draw_centered(draw, (0, 0, w, h), message, font, msg_font_size, fill=0)
    return img


if __name__ == "__main__":
    # quick visual smoke test
    img = compose_page(PageView(upload_enabled=True, message_visible=True), full_screen=(480, 800))
    img.save("/tmp/photo_upload_page.png")
    print("Wrote /tmp/photo_upload_page.png")
