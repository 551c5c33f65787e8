import json

from photo_upload.run_app import build_parser, main


def test_parser_defaults():
    args = build_parser().parse_args([])
    assert args.photo == []
    assert args.url is None
    assert args.force_simulation is False


def test_parser_repeatable_photo():
    args = build_parser().parse_args(["--photo", "a.jpg", "--photo", "b.png", "--url", "http://h:1/fileupload"])
    assert args.photo == ["a.jpg", "b.png"]
    assert args.url == "http://h:1/fileupload"


def test_bad_config_exits_with_error(tmp_path):
    cfg = tmp_path / "bad.json"
    cfg.write_text(json.dumps({"upload": {"url": "not-a-url"}}), encoding="utf-8")
    assert main(["--config", str(cfg)]) == 1


def test_missing_config_exits_with_error(tmp_path):
    assert main(["--config", str(tmp_path / "missing.json")]) == 1


def test_bad_url_flag_exits_with_error():
    assert main(["--url", "ftp://host/fileupload"]) == 1


def test_placeholder_url_flag_exits_with_error():
    assert main(["--url", "http://<address>:<port>/fileupload"]) == 1
