import logging
import mimetypes
from typing import Optional

import httpx

from photo_upload.config import DEFAULT_UPLOAD

logger = logging.getLogger(__name__)

DEFAULT_CONTENT_TYPE = "application/octet-stream"


def guess_content_type(file_name: Optional[str]) -> str:
    content_type, _ = mimetypes.guess_type(file_name or "")
    return content_type or DEFAULT_CONTENT_TYPE


async def upload_file(
    url: str,
    data: bytes,
    file_name: str,
    field_name: str = DEFAULT_UPLOAD["field_name"],
    content_type: Optional[str] = None,
    timeout: float = DEFAULT_UPLOAD["timeout"],
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> httpx.Response:
    """POST `data` as a single multipart/form-data part named `field_name`.

    Returns the response for any 2xx status. Raises httpx.HTTPStatusError for
    other statuses and an httpx.HTTPError subclass on transport failures.
    """
    if not data:
        raise ValueError("Refusing to upload an empty file")

    files = {field_name: (file_name, data, content_type or guess_content_type(file_name))}
    logger.info(f"Uploading {file_name} ({len(data)} bytes) to {url}")
    async with httpx.AsyncClient(timeout=timeout, transport=transport) as client:
        response = await client.post(url, files=files)
        response.raise_for_status()
    logger.info(f"Upload of {file_name} finished with HTTP {response.status_code}")
    return response
