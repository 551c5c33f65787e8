"""Photo chooser tasks for photo_upload.

A chooser is launched with :meth:`PhotoChooserTask.show` and reports back
through its ``completed`` subscribers with a :class:`PhotoResult`:

* ``TaskResult.OK`` with an open binary stream and the original file name
* ``TaskResult.CANCEL`` with no stream when the user backed out

Provides :class:`DialogPhotoChooser` (native file dialog via tkinter) and
:class:`SimulatedPhotoChooser` for development, headless runs and tests.
"""
from __future__ import annotations

import abc
import collections
import io
import logging
from dataclasses import dataclass
from enum import Enum, auto
from pathlib import Path
from typing import BinaryIO, Callable, Deque, List, Optional

logger = logging.getLogger(__name__)

IMAGE_FILETYPES = [
    ("Images", "*.jpg *.jpeg *.png *.gif *.bmp"),
    ("All files", "*"),
]


class TaskResult(Enum):
    OK = auto()
    CANCEL = auto()


@dataclass
class PhotoResult:
    task_result: TaskResult
    chosen_photo: Optional[BinaryIO] = None
    original_file_name: Optional[str] = None


CANCELLED = PhotoResult(TaskResult.CANCEL)


class PhotoChooserTask(abc.ABC):
    """Abstract chooser: keeps the completion subscribers and fans results out to them.

    Subclasses implement show(), which must end in exactly one _complete() call.
    """

    def __init__(self) -> None:
        self.completed: List[Callable[[PhotoResult], None]] = []

    def subscribe(self, callback: Callable[[PhotoResult], None]) -> None:
        self.completed.append(callback)

    @abc.abstractmethod
    def show(self) -> None:
        """Launch the chooser. Blocks until the user picks or cancels."""

    def _complete(self, result: PhotoResult) -> None:
        for callback in list(self.completed):
            callback(result)


class DialogPhotoChooser(PhotoChooserTask):
    """Native open-file dialog filtered to image types.

    ``parent`` is an optional Tk widget to own the dialog (the window display's
    root). Without one a hidden root is created for the lifetime of the dialog.
    """

    def __init__(self, parent=None, initial_dir: Optional[str] = None) -> None:
        super().__init__()
        self.parent = parent
        self.initial_dir = initial_dir

    def _ask_path(self) -> str:
        import tkinter
        from tkinter import filedialog

        owner = self.parent
        hidden_root = None
        if owner is None:
            hidden_root = tkinter.Tk()
            hidden_root.withdraw()
            owner = hidden_root
        try:
            return filedialog.askopenfilename(
                parent=owner,
                title="Choose a photo",
                initialdir=self.initial_dir,
                filetypes=IMAGE_FILETYPES,
            )
        finally:
            if hidden_root is not None:
                hidden_root.destroy()

    def show(self) -> None:
        path = self._ask_path()
        if not path:
            logger.info("Photo chooser cancelled")
            self._complete(CANCELLED)
            return
        try:
            stream = open(path, "rb")
        except OSError as e:
            logger.warning(f"Could not open chosen photo {path}: {e}")
            self._complete(CANCELLED)
            return
        with stream:
            self._complete(PhotoResult(TaskResult.OK, stream, Path(path).name))


class SimulatedPhotoChooser(PhotoChooserTask):
    """Chooser that replays queued results instead of opening a dialog.

    Usage: queue_photo(name, data) / queue_file(path) / queue_cancel(), then
    show() pops the oldest queued result. show() on an empty queue cancels.
    """

    def __init__(self) -> None:
        super().__init__()
        self._pending: Deque[PhotoResult] = collections.deque()

    def queue_photo(self, name: str, data: bytes) -> None:
        self._pending.append(PhotoResult(TaskResult.OK, io.BytesIO(data), name))

    def queue_file(self, path: str) -> None:
        p = Path(path)
        if not p.is_file():
            raise FileNotFoundError(f"Photo not found: {p}")
        self.queue_photo(p.name, p.read_bytes())

    def queue_cancel(self) -> None:
        self._pending.append(CANCELLED)

    @property
    def pending(self) -> int:
        return len(self._pending)

    def show(self) -> None:
        result = self._pending.popleft() if self._pending else CANCELLED
        logger.debug(f"Simulated chooser completing with {result.task_result.name}")
        self._complete(result)
