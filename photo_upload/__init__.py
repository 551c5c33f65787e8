"""Photo upload package init.

Single-screen sample app: pick an existing photo, then upload it to a web
service as a multipart form via HTTP POST.
"""

__all__ = [
    "config",
    "chooser",
    "controls",
    "ui",
    "upload_client",
    "core",
]
