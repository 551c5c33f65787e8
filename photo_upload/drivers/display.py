"""Display adapter for the photo_upload application.

Wraps a single global screen (window or simulated) behind module-level
functions so the page only deals with composed images.
"""
from pathlib import Path
from typing import Callable, Optional
import logging

from PIL import Image
from .screen import create_display, OUT_DIR

logger = logging.getLogger(__name__)

# Global display instance
_display = None


def init(width=480, height=800, force_simulation=False, on_click: Optional[Callable[[int, int], None]] = None, output_dir: Path = OUT_DIR):
    """Initialize display adapter.

    Args:
        width: Page width in pixels
        height: Page height in pixels
        force_simulation: Force simulation mode for testing
        on_click: Callback receiving (x, y) for taps on the window

    Returns:
        True if initialization successful
    """
    global _display
    try:
        # If an existing display exists, close it first
        try:
            if _display:
                _display.close()
        except Exception:
            logger.debug("Existing display close during init failed; continuing")

        _display = create_display(
            width=width,
            height=height,
            force_simulation=force_simulation,
            on_click=on_click,
            output_dir=output_dir,
        )
        logger.info(f"Display initialized ({type(_display).__name__} {width}x{height})")
        return True
    except Exception as e:
        logger.error(f"Display initialization failed: {e}")
        _display = None
        return False


def blit(full_bitmap: Image.Image, file_label: str = "frame") -> bool:
    """Show a full-page bitmap. Returns False (and logs) when it could not be shown."""
    if _display is None:
        logger.warning("No display available - image not shown (in-memory only)")
        return False
    try:
        _display.display_image(full_bitmap)
        logger.debug(f"Display update completed: {file_label}")
        return True
    except Exception as e:
        logger.error(f"Display update failed ({file_label}): {e}")
        return False


def pump():
    """Process pending window events (clicks, close button). No-op for the simulator."""
    if _display:
        try:
            _display.update()
        except Exception as e:
            logger.error(f"Display event pump failed: {e}")


def is_closed() -> bool:
    """True once the user closed the window. Running without a display never closes."""
    return bool(getattr(_display, 'closed', False))


def get_root():
    """Return the Tk root of a window display, or None."""
    return getattr(_display, 'root', None)


def clear_display():
    """Clear the display to white."""
    if _display:
        try:
            _display.clear()
            logger.info("Display cleared")
            return True
        except Exception as e:
            logger.error(f"Display clear failed: {e}")
            return False
    return True


def close():
    """Close display and cleanup."""
    global _display
    if _display:
        try:
            _display.close()
        except Exception as e:
            logger.error(f"Display close failed: {e}")
        finally:
            _display = None


def get_display_size() -> Optional[tuple]:
    """Return (width, height) of the initialized display, or None if no display."""
    if _display:
        w = getattr(_display, 'width', None)
        h = getattr(_display, 'height', None)
        if w and h:
            return (int(w), int(h))
    return None
