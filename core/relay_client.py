# core/relay_client.py
import logging
from typing import Mapping, Optional
from urllib.parse import urlsplit
import httpx
from config.settings import settings
from util.errors import UpstreamError
from util.timing import timed

logger = logging.getLogger(__name__)


def _default_timeout() -> httpx.Timeout:
    return httpx.Timeout(
        settings.RELAY_TIMEOUT_SECONDS, connect=settings.RELAY_CONNECT_TIMEOUT_SECONDS
    )


def _where(url: str) -> str:
    # host/path only; query strings may carry credentials
    parts = urlsplit(url)
    return f"{parts.netloc}{parts.path}"


class RelayClient:
    """
    Issues one outbound request per call, no retries.

    Only transport failures raise; a non-2xx answer is logged and its body
    returned, status handling belongs to the caller. Cancelling the awaiting
    task abandons the in-flight request.
    """

    def __init__(
        self,
        timeout: Optional[httpx.Timeout] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._client = httpx.AsyncClient(
            timeout=timeout or _default_timeout(),
            transport=transport,
            follow_redirects=False,
        )

    async def send(
        self, url: str, method: str, headers: Mapping[str, str], body: bytes
    ) -> bytes:
        try:
            with timed(logger, "relay.http", method=method, to=_where(url)):
                res = await self._client.request(
                    method, url, headers=dict(headers), content=body
                )
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            logger.error(
                "relay.http.error method=%s to=%s err=%s",
                method,
                _where(url),
                type(e).__name__,
            )
            raise UpstreamError(f"{method} {_where(url)} failed: {e}") from e

        if res.status_code // 100 != 2:
            logger.warning(
                "relay.http.status method=%s to=%s status=%d",
                method,
                _where(url),
                res.status_code,
            )
        return res.content

    async def aclose(self) -> None:
        await self._client.aclose()
