"""Tests for the multipart upload client against an in-process httpx transport."""
import httpx
import pytest

from photo_upload.upload_client import guess_content_type, upload_file

URL = "http://127.0.0.1:8080/fileupload"


def _recording_transport(status_code=200, seen=None):
    def handler(request: httpx.Request) -> httpx.Response:
        if seen is not None:
            seen.append(request)
        return httpx.Response(status_code, text="ok")

    return httpx.MockTransport(handler)


@pytest.mark.asyncio
async def test_posts_single_file_part():
    seen = []
    resp = await upload_file(URL, b"\x89PNG-data", "IMG_0042.png", transport=_recording_transport(seen=seen))

    assert resp.status_code == 200
    assert len(seen) == 1
    request = seen[0]
    assert request.method == "POST"
    assert str(request.url) == URL
    assert request.headers["content-type"].startswith("multipart/form-data; boundary=")

    body = request.content
    assert body.count(b"Content-Disposition: form-data;") == 1
    assert b'name="file"; filename="IMG_0042.png"' in body
    assert b"Content-Type: image/png" in body
    assert b"\x89PNG-data" in body


@pytest.mark.asyncio
async def test_custom_field_name():
    seen = []
    await upload_file(URL, b"data", "a.jpg", field_name="photo", transport=_recording_transport(seen=seen))
    assert b'name="photo"; filename="a.jpg"' in seen[0].content


@pytest.mark.asyncio
async def test_any_2xx_is_success():
    resp = await upload_file(URL, b"data", "a.jpg", transport=_recording_transport(status_code=201))
    assert resp.status_code == 201


@pytest.mark.asyncio
@pytest.mark.parametrize("status_code", [302, 404, 500])
async def test_non_2xx_raises_status_error(status_code):
    with pytest.raises(httpx.HTTPStatusError):
        await upload_file(URL, b"data", "a.jpg", transport=_recording_transport(status_code=status_code))


@pytest.mark.asyncio
async def test_transport_failure_raises_http_error():
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(httpx.HTTPError):
        await upload_file(URL, b"data", "a.jpg", transport=httpx.MockTransport(handler))


@pytest.mark.asyncio
async def test_empty_data_refused_before_request():
    seen = []
    with pytest.raises(ValueError):
        await upload_file(URL, b"", "a.jpg", transport=_recording_transport(seen=seen))
    assert seen == []


def test_guess_content_type():
    assert guess_content_type("photo.jpg") == "image/jpeg"
    assert guess_content_type("noext") == "application/octet-stream"
    assert guess_content_type(None) == "application/octet-stream"
