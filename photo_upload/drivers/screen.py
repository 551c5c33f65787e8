"""Screens the upload page can be shown on.

:class:`WindowDisplay` opens a Tk window and shows each composed frame in it;
clicks on the window are forwarded to an ``on_click(x, y)`` callback.
:class:`SimulatedDisplay` keeps the frame in memory and saves every update as a
PNG, for headless machines and tests.
"""
from pathlib import Path
from typing import Callable, Optional, Union
import logging

from PIL import Image

logger = logging.getLogger(__name__)

OUT_DIR = Path("/tmp/photo_upload_display")


class WindowDisplay:
    """Tk window sized to the page. Events are processed by `update()`, not mainloop."""

    def __init__(self, width=480, height=800, title="Photo upload", on_click: Optional[Callable[[int, int], None]] = None):
        import tkinter
        from PIL import ImageTk

        self._ImageTk = ImageTk
        self.width = width
        self.height = height
        self.root = tkinter.Tk()
        self.root.title(title)
        self.root.resizable(False, False)
        self.closed = False
        self.root.protocol("WM_DELETE_WINDOW", self._on_close)
        self.label = tkinter.Label(self.root, borderwidth=0)
        self.label.pack()
        if on_click is not None:
            self.label.bind("<Button-1>", lambda event: on_click(event.x, event.y))
        self.frame_buf = Image.new('L', (width, height), 0xFF)
        self._photo = None
        self.display_image(self.frame_buf)

    def _on_close(self):
        self.closed = True

    def clear(self):
        self.display_image(Image.new('L', (self.width, self.height), 0xFF))

    def display_image(self, image: Image.Image, mode='auto'):
        self.frame_buf = image.copy()
        # keep a reference; Tk drops images that are garbage collected
        self._photo = self._ImageTk.PhotoImage(self.frame_buf)
        self.label.configure(image=self._photo)
        self.update()

    def update(self):
        if not self.closed:
            self.root.update()

    def close(self):
        try:
            self.root.destroy()
        finally:
            self.closed = True
        logger.info("Window display closed")


class SimulatedDisplay:
    """Simulated display for development."""

    def __init__(self, width=480, height=800, output_dir: Path = OUT_DIR):
        self.width = width
        self.height = height
        self.closed = False
        self.frame_buf = Image.new('L', (width, height), 0xFF)
        self.output_dir = Path(output_dir)
        self.output_dir.mkdir(parents=True, exist_ok=True)
        self.frame_count = 0

    def clear(self):
        logger.info("Simulated: Clearing display")
        self.frame_buf = Image.new('L', (self.width, self.height), 0xFF)
        self._save_frame("clear")

    def display_image(self, image: Union[Image.Image, str], mode='auto'):
        if isinstance(image, str):
            img = Image.open(image)
        else:
            img = image.copy()

        if img.mode != 'L':
            img = img.convert('L')

        img.thumbnail((self.width, self.height), Image.LANCZOS)
        prepared = Image.new('L', (self.width, self.height), 0xFF)
        x = (self.width - img.width) // 2
        y = (self.height - img.height) // 2
        prepared.paste(img, (x, y))

        self.frame_buf = prepared
        self._save_frame(f"display_{mode}")

    def _save_frame(self, label="frame"):
        filename = self.output_dir / f"{label}_{self.frame_count:04d}.png"
        self.frame_buf.save(filename)
        self.frame_count += 1
        logger.debug(f"Saved simulated frame to {filename}")

    def update(self):
        pass

    def close(self):
        self.closed = True
        logger.info("Simulated: Display closed")


def create_display(width=480, height=800, force_simulation=False, on_click=None, output_dir: Path = OUT_DIR):
    """Create the best available display instance.

    Args:
        width: Page width in pixels
        height: Page height in pixels
        force_simulation: Force simulation mode
        on_click: Optional callback receiving (x, y) for taps on the window
        output_dir: Where the simulated display writes its frames

    Returns:
        Display instance
    """
    if force_simulation:
        logger.info("Creating simulated display")
        return SimulatedDisplay(width, height, output_dir=output_dir)

    try:
        logger.info(f"Creating window display {width}x{height}")
        return WindowDisplay(width=width, height=height, on_click=on_click)
    except Exception as e:
        # no tkinter or no GUI session ($DISPLAY unset, TclError)
        logger.warning(f"Window display failed: {e} - falling back to simulation")
        return SimulatedDisplay(width, height, output_dir=output_dir)
