"""Default configuration loader for photo_upload.

This module exposes a small `load_config` helper that reads a JSON configuration
(upload endpoint, on-screen texts, display size) and returns a validated dict
ready for the page and the CLI.
"""

from pathlib import Path
import copy
import json
import os
from typing import Dict, Any

import httpx

DEFAULT_SAMPLE = Path(__file__).with_name("sample_config.json")

# Environment override for the upload endpoint
URL_ENV_VAR = "PHOTO_UPLOAD_URL"

# make sure the server accepts network IP-based requests on this address and port
DEFAULT_UPLOAD = {
    "url": "http://127.0.0.1:8080/fileupload",
    "field_name": "file",
    "timeout": 100.0,  # seconds, same as a stock HttpClient
}

DEFAULT_TEXTS = {
    "app_title": "FILE UPLOAD SAMPLE",
    "page_title": "choose photo",
    "hint": "Tap here to choose a photo",
    "upload": "upload",
    "uploaded": "File uploaded successfully.",
    "error": "Error uploading the file.",
}

DEFAULT_DISPLAY = {
    "width": 480,
    "height": 800,
    "poll_hz": 30,
}

DEFAULT_CONFIG = {
    "upload": DEFAULT_UPLOAD,
    "texts": DEFAULT_TEXTS,
    "display": DEFAULT_DISPLAY,
}


def _merge(base: Dict[str, Any], overrides: Dict[str, Any]) -> Dict[str, Any]:
    out = copy.deepcopy(base)
    for key, value in overrides.items():
        if isinstance(value, dict) and isinstance(out.get(key), dict):
            out[key] = _merge(out[key], value)
        else:
            out[key] = value
    return out


def check_upload_url(url) -> str:
    """Raise ValueError unless `url` is an absolute http(s) URL with a host and a valid port."""
    if not isinstance(url, str):
        raise ValueError(f"Upload url must be a string, got {url!r}")
    try:
        parsed = httpx.URL(url)
    except httpx.InvalidURL as e:
        raise ValueError(f"Upload url is not a valid URL: {url!r} ({e})") from e
    if parsed.scheme not in ("http", "https"):
        raise ValueError(f"Upload url must be an http(s) URL, got {url!r}")
    if not parsed.host:
        raise ValueError(f"Upload url has no host: {url!r}")
    if parsed.port is not None and not 0 < parsed.port <= 65535:
        raise ValueError(f"Upload url port out of range: {url!r}")
    return url


def validate_config(data: Dict[str, Any]) -> Dict[str, Any]:
    """Raise ValueError when a merged config is unusable; return it unchanged otherwise."""
    for section in DEFAULT_CONFIG:
        if not isinstance(data.get(section), dict):
            raise ValueError(f"Config section '{section}' must be an object")

    upload = data["upload"]
    check_upload_url(upload.get("url"))
    field_name = upload.get("field_name")
    if not isinstance(field_name, str) or not field_name.strip():
        raise ValueError("Upload 'field_name' must be a non-empty string")
    timeout = upload.get("timeout")
    if isinstance(timeout, bool) or not isinstance(timeout, (int, float)) or timeout <= 0:
        raise ValueError(f"Upload 'timeout' must be a positive number, got {timeout!r}")

    for key, value in data["texts"].items():
        if not isinstance(value, str):
            raise ValueError(f"Text '{key}' must be a string")

    display = data["display"]
    for key in ("width", "height", "poll_hz"):
        value = display.get(key)
        if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
            raise ValueError(f"Display '{key}' must be a positive integer, got {value!r}")

    return data


def load_config(path: str = None) -> Dict[str, Any]:
    """Load and validate a config JSON. If `path` is None, use the bundled sample file.

    Values from the file are merged over the module defaults, then the
    PHOTO_UPLOAD_URL environment variable (if set) replaces the upload url.
    """
    p = Path(path) if path else DEFAULT_SAMPLE
    if not p.exists():
        raise FileNotFoundError(f"Config not found: {p}")

    with p.open("r", encoding="utf-8") as f:
        data = json.load(f)
    if not isinstance(data, dict):
        raise ValueError(f"Config root must be an object: {p}")

    merged = _merge(DEFAULT_CONFIG, data)
    env_url = os.getenv(URL_ENV_VAR)
    if env_url:
        merged["upload"]["url"] = env_url

    return validate_config(merged)


if __name__ == "__main__":
    # Quick smoke test when run directly
    import sys
    path = sys.argv[1] if len(sys.argv) > 1 else None
    cfg = load_config(path)
    print("Upload url:", cfg["upload"]["url"])
