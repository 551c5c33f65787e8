"""CLI runner for the photo upload app.

Provides --config, --url and --photo options. With --photo the native file
dialog is replaced by a simulated chooser that hands out the given files in
order; with --force-simulation the page is written to PNG frames instead of a
window.
"""
import argparse
import asyncio
import atexit
import logging
import sys
import time

from photo_upload.chooser import DialogPhotoChooser, SimulatedPhotoChooser
from photo_upload.config import check_upload_url, load_config
from photo_upload.controls import ConsoleControls
from photo_upload.core import UploadPage
from photo_upload.drivers import display
from photo_upload.ui import compose_message, hit_test

logger = logging.getLogger(__name__)


def configure_logging(verbose: bool = False):
    logging.basicConfig(
        level=logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=[
            logging.StreamHandler(sys.stdout)
        ]
    )
    if verbose:
        logging.getLogger().setLevel(logging.DEBUG)
        logger.info("Debug logging enabled")


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(description="Choose a photo and upload it as a multipart form")
    p.add_argument("--config", help="Path to config JSON (defaults to photo_upload/sample_config.json)")
    p.add_argument("--url", help="Upload endpoint, e.g. http://192.168.1.10:8080/fileupload")
    p.add_argument("--photo", action="append", default=[],
                   help="Photo handed out by the chooser instead of opening a dialog (repeatable)")
    p.add_argument("--display-w", type=int, default=None)
    p.add_argument("--display-h", type=int, default=None)
    p.add_argument("--force-simulation", action="store_true", help="Write frames as PNG instead of opening a window")
    p.add_argument("--run-seconds", type=float, default=None, help="Exit after this many seconds")
    p.add_argument("--verbose", action="store_true", help="Enable debug logging")
    return p


def main(argv=None):
    args = build_parser().parse_args(argv)
    configure_logging(args.verbose)

    try:
        cfg = load_config(args.config)
    except (OSError, ValueError) as e:
        logger.error(f"Failed to load config: {e}")
        return 1

    upload = dict(cfg["upload"])
    if args.url:
        try:
            upload["url"] = check_upload_url(args.url)
        except ValueError as e:
            logger.error(f"Bad --url: {e}")
            return 1

    display_size = (
        args.display_w or cfg["display"]["width"],
        args.display_h or cfg["display"]["height"],
    )
    logger.info(f"Starting photo upload - endpoint {upload['url']}")

    controls = ConsoleControls()

    def on_click(x, y):
        controls.press(hit_test((x, y), display_size))

    if not display.init(width=display_size[0], height=display_size[1],
                        force_simulation=args.force_simulation, on_click=on_click):
        logger.warning("Display initialization failed - continuing without a screen")

    if args.photo:
        chooser = SimulatedPhotoChooser()
        try:
            for path in args.photo:
                chooser.queue_file(path)
        except FileNotFoundError as e:
            logger.error(str(e))
            return 1
    else:
        chooser = DialogPhotoChooser(parent=display.get_root())

    page = UploadPage(
        chooser,
        controls,
        upload=upload,
        texts=cfg["texts"],
        display_size=display_size,
        poll_hz=cfg["display"]["poll_hz"],
    )

    def _cleanup_display():
        """Best-effort cleanup for display on normal exit or atexit."""
        logger.info('Running display cleanup at exit')
        controls.close()
        display.clear_display()
        display.close()

    atexit.register(_cleanup_display)

    display.blit(compose_message("Starting...", full_screen=display_size), "starting")
    time.sleep(0.5)
    logger.info("Ready - tap the image (or type c) to choose, tap upload (or type u), q to quit")
    controls.start()

    try:
        asyncio.run(page.run(run_seconds=args.run_seconds))
        return 0
    except KeyboardInterrupt:
        logger.info('Stopping photo upload application...')
        return 0
    except Exception as e:
        logger.error(f"Main loop error: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
