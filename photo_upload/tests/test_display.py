"""Tests for the display adapter and the simulated screen."""
from unittest.mock import MagicMock, patch

import pytest
from PIL import Image

import photo_upload.drivers.display as display
from photo_upload.drivers.screen import SimulatedDisplay, create_display


@pytest.fixture(autouse=True)
def reset_display():
    display._display = None
    yield
    display.close()


def test_simulated_display_saves_frames(tmp_path):
    assert display.init(width=120, height=200, force_simulation=True, output_dir=tmp_path) is True
    assert display.get_display_size() == (120, 200)
    assert display.is_closed() is False
    assert display.get_root() is None

    assert display.blit(Image.new("L", (120, 200), 0), "page") is True
    frames = sorted(tmp_path.glob("*.png"))
    assert len(frames) == 1
    with Image.open(frames[0]) as saved:
        assert saved.size == (120, 200)
        assert saved.getpixel((60, 100)) == 0


def test_simulated_display_letterboxes_other_sizes(tmp_path):
    screen = SimulatedDisplay(100, 100, output_dir=tmp_path)
    screen.display_image(Image.new("RGB", (50, 20), (0, 0, 0)))
    assert screen.frame_buf.size == (100, 100)
    assert screen.frame_buf.getpixel((0, 0)) == 255
    assert screen.frame_buf.getpixel((50, 50)) == 0


def test_blit_without_display_returns_false():
    assert display.blit(Image.new("L", (10, 10)), "page") is False
    assert display.is_closed() is False


def test_blit_failure_is_logged_not_raised():
    broken = MagicMock()
    broken.display_image.side_effect = RuntimeError("screen gone")
    display._display = broken
    assert display.blit(Image.new("L", (10, 10)), "page") is False


def test_window_failure_falls_back_to_simulation(tmp_path):
    with patch("photo_upload.drivers.screen.WindowDisplay", side_effect=RuntimeError("no $DISPLAY")):
        screen = create_display(80, 60, output_dir=tmp_path)
    assert isinstance(screen, SimulatedDisplay)


def test_close_clears_global(tmp_path):
    display.init(width=50, height=50, force_simulation=True, output_dir=tmp_path)
    display.close()
    assert display.get_display_size() is None


def test_clear_display_writes_blank_frame(tmp_path):
    display.init(width=40, height=30, force_simulation=True, output_dir=tmp_path)
    display.blit(Image.new("L", (40, 30), 0), "page")
    assert display.clear_display() is True
    frames = sorted(tmp_path.glob("clear_*.png"))
    assert len(frames) == 1
    with Image.open(frames[0]) as saved:
        assert saved.getpixel((20, 15)) == 255
