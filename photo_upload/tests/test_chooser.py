import pytest

from photo_upload.chooser import DialogPhotoChooser, PhotoChooserTask, SimulatedPhotoChooser, TaskResult


def test_simulated_chooser_replays_queue_in_order(tmp_path):
    photo = tmp_path / "beach.jpg"
    photo.write_bytes(b"\xff\xd8fake")
    chooser = SimulatedPhotoChooser()
    results = []
    chooser.subscribe(results.append)

    chooser.queue_file(str(photo))
    chooser.queue_cancel()
    assert chooser.pending == 2

    chooser.show()
    chooser.show()
    # empty queue behaves like the user backing out
    chooser.show()

    assert [r.task_result for r in results] == [TaskResult.OK, TaskResult.CANCEL, TaskResult.CANCEL]
    assert results[0].original_file_name == "beach.jpg"
    assert results[0].chosen_photo.read() == b"\xff\xd8fake"
    assert results[1].chosen_photo is None


def test_queue_file_missing_raises(tmp_path):
    with pytest.raises(FileNotFoundError):
        SimulatedPhotoChooser().queue_file(str(tmp_path / "missing.png"))


def test_dialog_chooser_cancel_when_no_path(monkeypatch):
    chooser = DialogPhotoChooser()
    monkeypatch.setattr(chooser, "_ask_path", lambda: "")
    results = []
    chooser.subscribe(results.append)
    chooser.show()
    assert results[0].task_result is TaskResult.CANCEL


def test_dialog_chooser_reports_stream_and_base_name(tmp_path, monkeypatch):
    photo = tmp_path / "IMG_0001.png"
    photo.write_bytes(b"png-bytes")
    chooser = DialogPhotoChooser()
    monkeypatch.setattr(chooser, "_ask_path", lambda: str(photo))
    seen = []
    # the stream is closed after completion, so read inside the callback
    chooser.subscribe(lambda r: seen.append((r.task_result, r.original_file_name, r.chosen_photo.read())))
    chooser.show()
    assert seen == [(TaskResult.OK, "IMG_0001.png", b"png-bytes")]


def test_base_chooser_is_abstract():
    with pytest.raises(TypeError):
        PhotoChooserTask()
