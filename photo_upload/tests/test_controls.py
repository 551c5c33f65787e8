import io

import pytest

from photo_upload.controls import CHOOSE, QUIT, UPLOAD, ConsoleControls, Controls, parse_command


def test_press_and_drain_in_order():
    controls = Controls()
    controls.press(CHOOSE)
    controls.press(None)
    controls.press(UPLOAD)
    assert controls.read_events() == [CHOOSE, UPLOAD]
    assert controls.read_events() == []


def test_unknown_event_rejected():
    with pytest.raises(KeyError):
        Controls().press("GO")


def test_parse_command():
    assert parse_command(" C \n") == CHOOSE
    assert parse_command("upload") == UPLOAD
    assert parse_command("q") == QUIT
    assert parse_command("hello") is None


def test_console_reader_skips_unknown_and_quits_on_eof():
    controls = ConsoleControls(stream=io.StringIO("c\nbogus\nu\n"))
    controls.start()
    controls._thread.join(timeout=2.0)
    assert not controls._thread.is_alive()
    assert controls.read_events() == [CHOOSE, UPLOAD, QUIT]
