"""Page state and event loop for the photo_upload application.

This module is intentionally simple: it polls the controls for taps, routes them
to the page handlers (choose a photo, upload it), and re-composes the page after
every state change. The upload itself is the only suspendable operation; it runs
as a fire-and-forget task on the same asyncio loop.
"""
import asyncio
import io
import logging
import time
from typing import Dict, Optional, Tuple

import httpx
from PIL import Image, UnidentifiedImageError

from photo_upload.chooser import PhotoChooserTask, PhotoResult, TaskResult
from photo_upload.config import DEFAULT_DISPLAY, DEFAULT_TEXTS, DEFAULT_UPLOAD
from photo_upload.controls import CHOOSE, QUIT, UPLOAD, Controls
from photo_upload.drivers.display import blit, is_closed, pump
from photo_upload.ui import PageView, compose_page
from photo_upload.upload_client import upload_file

logger = logging.getLogger(__name__)


class UploadPage:
    def __init__(self, chooser: PhotoChooserTask, controls: Controls, upload: Dict = None, texts: Dict = None,
                 display_size: Tuple[int, int] = (DEFAULT_DISPLAY["width"], DEFAULT_DISPLAY["height"]),
                 poll_hz: int = DEFAULT_DISPLAY["poll_hz"], transport: Optional[httpx.AsyncBaseTransport] = None):
        self.chooser = chooser
        self.controls = controls
        self.upload = {**DEFAULT_UPLOAD, **(upload or {})}
        self.texts = {**DEFAULT_TEXTS, **(texts or {})}
        self.display_size = display_size
        self.interval = 1.0 / max(1, poll_hz)
        # passed through to the http client; None means a real network transport
        self.transport = transport

        # image buffer of the chosen photo and its original file name
        self.photo_stream: Optional[io.BytesIO] = None
        self.file_name: Optional[str] = None
        self.preview: Optional[Image.Image] = None

        self.upload_enabled = False
        self.message_visible = False
        self.error_visible = False

        self._upload_task: Optional[asyncio.Task] = None
        self.running = False

        self.chooser.subscribe(self.on_photo_chooser_completed)

    # -- event handlers ---------------------------------------------------

    def on_choose_picture(self):
        """Launch the photo chooser; the result arrives in on_photo_chooser_completed.

        Ignored while an upload is in flight: a dialog chooser is modal and would
        block the loop thread until it closes.
        """
        if self.upload_in_progress:
            logger.info("Upload in progress; ignoring choose tap")
            return
        logger.info("Choose picture tapped")
        self.chooser.show()

    def on_photo_chooser_completed(self, result: PhotoResult):
        # Hide text messages
        self.message_visible = False
        self.error_visible = False

        if result.task_result == TaskResult.OK and result.chosen_photo is not None:
            stream = io.BytesIO(result.chosen_photo.read())
            preview = self._decode_preview(stream, result.original_file_name)
            if preview is not None:
                self.photo_stream = stream
                self.file_name = result.original_file_name
                self.preview = preview
                self.upload_enabled = True
                logger.info(f"Photo chosen: {self.file_name} ({len(stream.getvalue())} bytes)")
                self.refresh()
                return

        # if result is not ok, make sure user can't upload
        logger.info("No photo chosen; upload disabled")
        self.upload_enabled = False
        self.refresh()

    def _decode_preview(self, stream: io.BytesIO, name: Optional[str]) -> Optional[Image.Image]:
        if not stream.getvalue():
            logger.warning(f"Chosen photo {name!r} is empty")
            return None
        try:
            with Image.open(stream) as img:
                img.load()
                preview = img.copy()
        except (UnidentifiedImageError, OSError) as e:
            logger.warning(f"Chosen file {name!r} is not a readable image: {e}")
            return None
        finally:
            stream.seek(0)
        return preview

    def on_upload(self) -> Optional[asyncio.Task]:
        """Start the upload without waiting for it. Returns the task, or None when ignored."""
        if not self.upload_enabled or self.photo_stream is None:
            logger.debug("Upload tapped while disabled; ignoring")
            return None
        if self.upload_in_progress:
            logger.info("Upload already in progress; ignoring tap")
            return None
        self._upload_task = asyncio.get_running_loop().create_task(self.upload_file())
        return self._upload_task

    @property
    def upload_in_progress(self) -> bool:
        return self._upload_task is not None and not self._upload_task.done()

    async def upload_file(self) -> bool:
        """POST the buffered photo and flip the page to the success or error state."""
        if self.photo_stream is None or not self.photo_stream.getvalue():
            logger.warning("Nothing to upload")
            return False

        # rewind so the full buffer is sent
        self.photo_stream.seek(0)
        try:
            await upload_file(
                self.upload["url"],
                self.photo_stream.read(),
                self.file_name,
                field_name=self.upload["field_name"],
                timeout=self.upload["timeout"],
                transport=self.transport,
            )
        except httpx.HTTPError as e:
            logger.warning(f"Upload of {self.file_name} failed: {e}")
            self._show_error()
            return False
        except Exception:
            # invalid url and anything else the client raises; cancellation still propagates
            logger.exception(f"Upload of {self.file_name} failed")
            self._show_error()
            return False

        self.upload_enabled = False
        self.preview = None
        self.photo_stream = None
        self.file_name = None
        self.error_visible = False
        self.message_visible = True
        self.refresh()
        return True

    def _show_error(self):
        self.message_visible = False
        self.error_visible = True
        self.refresh()

    # -- rendering ----------------------------------------------------------

    def view(self) -> PageView:
        return PageView(
            preview=self.preview,
            upload_enabled=self.upload_enabled,
            message_visible=self.message_visible,
            error_visible=self.error_visible,
        )

    def refresh(self):
        """Compose the page for the current state and send it to the display."""
        try:
            img = compose_page(self.view(), full_screen=self.display_size, texts=self.texts)
        except Exception:
            logger.exception("Failed to compose page")
            return
        blit(img, "page")

    # -- loop ---------------------------------------------------------------

    async def loop_once(self):
        pump()
        for event in self.controls.read_events():
            logger.debug(f"Control event: {event}")
            if event == CHOOSE:
                self.on_choose_picture()
            elif event == UPLOAD:
                self.on_upload()
            elif event == QUIT:
                self.running = False
        if is_closed():
            self.running = False

    async def run(self, run_seconds: float = None):
        self.running = True
        start = time.time()
        self.refresh()
        try:
            while self.running:
                await self.loop_once()
                if run_seconds is not None and (time.time() - start) >= run_seconds:
                    break
                await asyncio.sleep(self.interval)
        finally:
            self.running = False
            if self._upload_task is not None and not self._upload_task.done():
                logger.info("Waiting for the pending upload to finish")
                await asyncio.gather(self._upload_task, return_exceptions=True)
