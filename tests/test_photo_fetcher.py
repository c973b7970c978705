import asyncio
import logging
import typing

import httpx
import pytest

from config.settings import settings
from services.photo_fetcher import Photo, PhotoFetcher, prefetch_photos, sniff_image_type
from services.report_errors import PhotoFetchError

PNG = b"\x89PNG\r\n\x1a\n" + b"\x00" * 16
JPEG = b"\xff\xd8\xff\xe0" + b"\x00" * 16


@pytest.mark.parametrize("data, expected", [
    (PNG, "image/png"),
    (JPEG, "image/jpeg"),
    (b"GIF89a" + b"\x00" * 8, "image/gif"),
    (b"RIFF\x00\x00\x00\x00WEBPVP8 ", "image/webp"),
    (b"<html>not found</html>", None),
    (b"", None),
])
def test_sniff_image_type(data, expected):
    assert sniff_image_type(data) == expected


def test_prefetch_skips_failures_and_keeps_other_students(make_student, caplog):
    students = [
        make_student(id=1, photo_url="https://img.example/ok.png"),
        make_student(id=2, photo_url="https://img.example/missing.png"),
        make_student(id=3, photo_url="https://img.example/page.html"),
        make_student(id=4, photo_url="https://img.example/ok.jpg"),
    ]
    responses = {
        "https://img.example/ok.png": PNG,
        "https://img.example/page.html": b"<html></html>",
        "https://img.example/ok.jpg": JPEG,
    }

    async def fake_fetch(url):
        if url not in responses:
            raise PhotoFetchError(f"404 for {url}")
        return responses[url]

    with caplog.at_level(logging.WARNING, logger="services.photo_fetcher"):
        photos = asyncio.run(prefetch_photos(students, fake_fetch))

    assert photos == {1: Photo(PNG, "image/png"), 4: Photo(JPEG, "image/jpeg")}
    assert "student_id=2" in caplog.text
    assert "student_id=3" in caplog.text


def test_prefetch_only_fetches_students_with_urls(make_student):
    calls = []

    async def fake_fetch(url):
        calls.append(url)
        return PNG

    students = [make_student(id=1), make_student(id=2, photo_url="https://img.example/a.png")]

    photos = asyncio.run(prefetch_photos(students, fake_fetch))

    assert calls == ["https://img.example/a.png"]
    assert list(photos) == [2]


def test_prefetch_with_no_photo_urls_does_no_work(make_student):
    async def fail_fetch(url):
        raise AssertionError("should not be called")

    assert asyncio.run(prefetch_photos([make_student()], fail_fetch)) == {}


def test_prefetch_tolerates_unexpected_errors(make_student):
    async def broken_fetch(url):
        raise RuntimeError("connection reset")

    students = [make_student(id=1, photo_url="https://img.example/a.png")]

    assert asyncio.run(prefetch_photos(students, broken_fetch)) == {}


def _fetcher(handler, **kwargs):
    return PhotoFetcher(timeout=1.0, transport=httpx.MockTransport(handler), **kwargs)


def test_fetcher_returns_body():
    fetcher = _fetcher(lambda request: httpx.Response(200, content=PNG))

    assert asyncio.run(fetcher.fetch_binary("https://img.example/a.png")) == PNG


def test_fetcher_raises_on_http_error_status():
    fetcher = _fetcher(lambda request: httpx.Response(404))

    with pytest.raises(PhotoFetchError):
        asyncio.run(fetcher.fetch_binary("https://img.example/missing.png"))


def test_fetcher_raises_on_network_error():
    def handler(request):
        raise httpx.ConnectError("unreachable", request=request)

    with pytest.raises(PhotoFetchError):
        asyncio.run(_fetcher(handler).fetch_binary("https://img.example/a.png"))


def test_fetcher_rejects_oversized_body():
    fetcher = _fetcher(lambda request: httpx.Response(200, content=PNG * 10), max_bytes=50)

    with pytest.raises(PhotoFetchError):
        asyncio.run(fetcher.fetch_binary("https://img.example/big.png"))


def test_fetcher_rejects_non_http_url():
    fetcher = _fetcher(lambda request: httpx.Response(200, content=PNG))

    with pytest.raises(PhotoFetchError):
        asyncio.run(fetcher.fetch_binary("file:///etc/passwd"))


def test_fetcher_stops_reading_streamed_body_at_limit():
    sent = []

    async def endless_body():
        while True:
            sent.append(1024)
            yield b"\x00" * 1024

    fetcher = _fetcher(lambda request: httpx.Response(200, content=endless_body()), max_bytes=4096)

    with pytest.raises(PhotoFetchError):
        asyncio.run(fetcher.fetch_binary("https://img.example/endless.png"))
    assert sum(sent) <= 4096 + 1024


def test_fetcher_rejects_declared_length_before_reading_body():
    read = []

    async def body():
        read.append(True)
        yield PNG

    def handler(request):
        return httpx.Response(200, headers={"Content-Length": str(10 * 1024 * 1024)}, content=body())

    with pytest.raises(PhotoFetchError):
        asyncio.run(_fetcher(handler, max_bytes=1024).fetch_binary("https://img.example/huge.png"))
    assert read == []


def test_fetcher_joins_chunked_body():
    async def body():
        yield PNG[:8]
        yield PNG[8:]

    fetcher = _fetcher(lambda request: httpx.Response(200, content=body()))

    assert asyncio.run(fetcher.fetch_binary("https://img.example/a.png")) == PNG


def test_optional_limits_fall_back_to_settings():
    hints = typing.get_type_hints(PhotoFetcher.__init__)
    assert hints["timeout"] == typing.Optional[float]
    assert hints["max_bytes"] == typing.Optional[int]
    assert typing.get_type_hints(prefetch_photos)["concurrency"] == typing.Optional[int]

    fetcher = PhotoFetcher()
    assert fetcher.timeout == settings.PHOTO_FETCH_TIMEOUT
    assert fetcher.max_bytes == settings.PHOTO_MAX_MB * 1024 * 1024
