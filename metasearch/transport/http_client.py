"""공유 HTTP 클라이언트 (curl_cffi)

- 요청마다 AsyncSession을 만들면 TLS/커넥션 오버헤드가 커져서
  엔진 타임아웃이 악화될 수 있어 프로세스 단위로 세션을 재사용합니다.
- 세션은 응답 쿠키를 저장하지 않습니다 (discard_cookies). 업스트림이 심은
  쿠키가 다른 사용자의 요청에 실려 나가면 안 됩니다.
- 앱 종료 시 close()로 정리합니다.
"""

from __future__ import annotations

import asyncio
from typing import Optional

from curl_cffi.requests import AsyncSession

from metasearch.core.config import settings
from metasearch.core.exceptions import NetworkFailure
from metasearch.core.logging import logger
from metasearch.engines.base import OutboundRequest


class SharedHttpClient:
    def __init__(self, impersonate: Optional[str] = None, max_clients: Optional[int] = None) -> None:
        self._lock = asyncio.Lock()
        self._session: Optional[AsyncSession] = None
        self._impersonate = impersonate or settings.http_impersonate
        self._max_clients = max_clients or settings.http_max_clients

    async def _ensure_session(self) -> AsyncSession:
        async with self._lock:
            if self._session is not None:
                return self._session
            self._session = AsyncSession(
                impersonate=self._impersonate,
                allow_redirects=True,
                max_clients=self._max_clients,
                trust_env=False,
                discard_cookies=True,
            )
            return self._session

    async def fetch(self, request: OutboundRequest, *, timeout_s: float) -> tuple[int, bytes]:
        """업스트림 요청 1회 실행

        Args:
            request: 어댑터가 만든 요청
            timeout_s: 요청 타임아웃 (초)

        Returns:
            (HTTP 상태 코드, 응답 본문)

        Raises:
            NetworkFailure: 연결/전송 오류
        """
        sess = await self._ensure_session()
        try:
            resp = await sess.request(
                request.method,
                request.url,
                headers=request.headers,
                data=request.data,
                cookies=request.cookies or None,
                timeout=timeout_s,
            )
        except asyncio.CancelledError:
            raise
        except Exception as e:
            logger.info(f"[HTTP_CLIENT] {request.method} {request.engine.value} failed: {type(e).__name__}: {e!r}")
            raise NetworkFailure(request.engine.value, f"{type(e).__name__}: {e}") from e

        status = getattr(resp, "status_code", 0) or 0
        content = getattr(resp, "content", b"") or b""
        return status, content

    async def close(self) -> None:
        async with self._lock:
            if self._session is None:
                return
            try:
                await self._session.close()
            except Exception as e:
                logger.debug(f"[HTTP_CLIENT] close failed: {type(e).__name__}: {e}")
            self._session = None


_shared_http_client: Optional[SharedHttpClient] = None


def get_shared_http_client() -> SharedHttpClient:
    global _shared_http_client
    if _shared_http_client is None:
        _shared_http_client = SharedHttpClient()
    return _shared_http_client


async def shutdown_shared_http_client() -> None:
    if _shared_http_client is not None:
        await _shared_http_client.close()
