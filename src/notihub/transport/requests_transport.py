"""
Requests Transport - HTTP 传输

使用 requests.Session 发送请求，非 2xx 响应视为失败。
"""

import logging
from typing import Optional

import requests

from src.notihub.errors import TransportError
from src.notihub.request_builder import HubRequest
from src.notihub.transport.base import HubTransport

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 10.0


class RequestsTransport(HubTransport):
    """基于 requests 的 HTTP 传输

    使用方式：
        transport = RequestsTransport(timeout=5)
        body = transport.execute(request)
    """

    def __init__(
        self,
        session: Optional[requests.Session] = None,
        timeout: float = DEFAULT_TIMEOUT,
    ) -> None:
        """初始化传输

        Args:
            session: 复用的 requests.Session，默认新建
            timeout: 默认超时（秒）
        """
        self._session = session if session is not None else requests.Session()
        self._timeout = timeout

    @property
    def name(self) -> str:
        return "requests"

    @property
    def timeout(self) -> float:
        return self._timeout

    def execute(
        self,
        request: HubRequest,
        timeout: Optional[float] = None,
    ) -> bytes:
        effective_timeout = timeout if timeout is not None else self._timeout

        logger.debug(f"{request.method} {request.url} timeout={effective_timeout}")

        try:
            response = self._session.request(
                request.method,
                request.url,
                headers=request.headers,
                data=request.body,
                timeout=effective_timeout,
            )
        except requests.Timeout as e:
            raise TransportError(f"Request timeout: {e}") from e
        except requests.RequestException as e:
            raise TransportError(f"Request failed: {e}") from e

        if not 200 <= response.status_code < 300:
            raise TransportError(f"HTTP {response.status_code}: {response.text[:500]}")

        return response.content

    def close(self) -> None:
        self._session.close()
