"""공유 HTTP 클라이언트 (curl_cffi)

- 주문 상세를 배치로 동시에 조회하므로 요청마다 AsyncSession을 만들면
  TLS/커넥션 오버헤드가 커집니다. 프로세스 단위로 세션을 재사용합니다.
- 앱 종료 시 close()로 정리합니다.
"""

from __future__ import annotations

import asyncio
import json
from typing import Any, Dict, Optional

from curl_cffi.requests import AsyncSession
from curl_cffi.requests.exceptions import RequestException, Timeout

from src.core.config import settings
from src.core.exceptions import OrderApiException, OrderApiTimeoutException
from src.core.logging import logger, sanitize_for_log


class SharedHttpClient:
    def __init__(self) -> None:
        self._lock = asyncio.Lock()
        self._session: Optional[AsyncSession] = None

    async def _ensure_session(self) -> AsyncSession:
        async with self._lock:
            if self._session is not None:
                return self._session
            self._session = AsyncSession(
                headers=self.default_headers(),
                allow_redirects=True,
                max_clients=int(settings.http_max_clients),
                trust_env=False,
            )
            return self._session

    def default_headers(self) -> Dict[str, str]:
        return {
            "User-Agent": settings.http_user_agent,
            "Accept": "application/json",
            "Content-Type": "application/json",
        }

    async def get_json(
        self,
        url: str,
        *,
        timeout_s: float,
        params: Optional[Dict[str, Any]] = None,
        headers: Optional[Dict[str, str]] = None,
    ) -> Any:
        """GET 요청 후 JSON 본문 반환

        None 값 파라미터는 전송하지 않습니다. 빈 본문은 빈 dict로 취급합니다.

        Raises:
            OrderApiTimeoutException: timeout_s 초과
            OrderApiException: non-2xx, 전송 오류, JSON 파싱 오류
        """
        sess = await self._ensure_session()
        query = {k: v for k, v in (params or {}).items() if v is not None}
        timeout_ms = int(timeout_s * 1000)

        try:
            # curl 자체 타임아웃 + 이벤트 루프 하드 캡
            resp = await asyncio.wait_for(
                sess.get(url, params=query or None, headers=headers, timeout=timeout_s),
                timeout=timeout_s,
            )
        except (asyncio.TimeoutError, Timeout) as e:
            raise OrderApiTimeoutException(operation=f"GET {_path_of(url)}", timeout_ms=timeout_ms) from e
        except RequestException as e:
            logger.info(f"[HTTP_CLIENT] GET {_path_of(url)} failed: {type(e).__name__}: {sanitize_for_log(repr(e), 300)}")
            raise OrderApiException(f"Transport error: {type(e).__name__}: {e}") from e

        status = getattr(resp, "status_code", 0) or 0
        text = getattr(resp, "text", "") or ""
        if not 200 <= status < 300:
            raise OrderApiException(
                f"VTEX API Error: {status} - {text[:300]}",
                status_code=status,
            )

        if not text.strip():
            return {}
        try:
            return json.loads(text)
        except ValueError as e:
            raise OrderApiException(f"Invalid JSON body (len={len(text)})", status_code=status) from e

    async def close(self) -> None:
        async with self._lock:
            if self._session is None:
                return
            try:
                await self._session.close()
            except Exception as e:
                logger.debug(f"[HTTP_CLIENT] close failed: {type(e).__name__}: {e}")
            self._session = None


def _path_of(url: str) -> str:
    # 로그/에러 메시지에 호스트(계정명)를 남기지 않음
    idx = url.find("/api/")
    return url[idx:] if idx >= 0 else url


_shared_http_client = SharedHttpClient()


def get_shared_http_client() -> SharedHttpClient:
    return _shared_http_client


async def shutdown_shared_http_client() -> None:
    await _shared_http_client.close()
