# services/photo_fetcher.py
"""
학생 사진 사전 다운로드 (보고서 레이아웃 전에 한 번에 수행)

- 실패(네트워크 오류, 404, 지원하지 않는 형식)는 경고 로그만 남기고 해당 학생은 사진 없이 출력
- fetch_binary는 주입 가능 (테스트에서는 가짜 함수 사용)
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import Awaitable, Callable, Dict, Iterable, Optional

import httpx

from config.settings import settings
from schemas.students import Student
from services.report_errors import PhotoFetchError

logger = logging.getLogger(__name__)

FetchBinary = Callable[[str], Awaitable[bytes]]


@dataclass(frozen=True)
class Photo:
    data: bytes
    mime_type: str


def sniff_image_type(data: bytes) -> Optional[str]:
    """매직 바이트로 이미지 형식 판별 (PNG, JPEG, GIF, WebP)"""
    if data.startswith(b"\x89PNG\r\n\x1a\n"):
        return "image/png"
    if data.startswith(b"\xff\xd8\xff"):
        return "image/jpeg"
    if data[:6] in (b"GIF87a", b"GIF89a"):
        return "image/gif"
    if data[:4] == b"RIFF" and data[8:12] == b"WEBP":
        return "image/webp"
    return None


class PhotoFetcher:
    def __init__(self, timeout: Optional[float] = None, max_bytes: Optional[int] = None,
                 transport: Optional[httpx.AsyncBaseTransport] = None):
        self.timeout = timeout if timeout is not None else settings.PHOTO_FETCH_TIMEOUT
        self.max_bytes = max_bytes if max_bytes is not None else settings.PHOTO_MAX_MB * 1024 * 1024
        self.transport = transport

    def _too_large(self, url: str, size: int) -> PhotoFetchError:
        return PhotoFetchError(f"사진 용량 초과: {url} ({size} bytes > {self.max_bytes})")

    async def fetch_binary(self, url: str) -> bytes:
        if not url.startswith(("http://", "https://")):
            raise PhotoFetchError(f"지원하지 않는 URL: {url}")
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport,
                                         follow_redirects=True) as client:
                async with client.stream("GET", url) as r:
                    r.raise_for_status()
                    length = r.headers.get("Content-Length", "")
                    if length.isdigit() and int(length) > self.max_bytes:
                        raise self._too_large(url, int(length))

                    # 본문은 상한까지만 읽는다
                    chunks, total = [], 0
                    async for chunk in r.aiter_bytes():
                        total += len(chunk)
                        if total > self.max_bytes:
                            raise self._too_large(url, total)
                        chunks.append(chunk)
        except httpx.HTTPError as e:
            raise PhotoFetchError(f"사진 다운로드 실패: {url} ({e})") from e
        return b"".join(chunks)


async def _fetch_one(student: Student, fetch_binary: FetchBinary,
                     semaphore: asyncio.Semaphore) -> Optional[Photo]:
    async with semaphore:
        try:
            data = await fetch_binary(student.photo_url)
            mime_type = sniff_image_type(data)
            if mime_type is None:
                raise PhotoFetchError(f"지원하지 않는 이미지 형식: {student.photo_url}")
            return Photo(data, mime_type)
        except Exception as e:
            # 사진 하나 실패로 보고서 전체를 중단하지 않음
            logger.warning(f"학생 사진 생략: student_id={student.id} - {e}")
            return None


async def prefetch_photos(students: Iterable[Student], fetch_binary: Optional[FetchBinary] = None,
                          concurrency: Optional[int] = None) -> Dict[int, Photo]:
    """photo_url이 있는 학생들의 사진을 병렬로 받아 {student_id: Photo} 반환 (실패한 학생은 제외)"""
    targets = [s for s in students if s.photo_url]
    if not targets:
        return {}
    if fetch_binary is None:
        fetch_binary = PhotoFetcher().fetch_binary
    semaphore = asyncio.Semaphore(concurrency or settings.PHOTO_FETCH_CONCURRENCY)

    results = await asyncio.gather(*(_fetch_one(s, fetch_binary, semaphore) for s in targets))

    photos = {s.id: photo for s, photo in zip(targets, results) if photo is not None}
    logger.info(f"학생 사진 사전 다운로드: 요청={len(targets)}, 성공={len(photos)}")
    return photos
