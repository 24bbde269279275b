"""
HTTP configuration store.

Fetches the configuration with a GET request using aiohttp. The request
timeout is the store's own concern; the engine never cancels a fetch.
"""

import logging
from typing import Any, Dict, Optional

import aiohttp

from ...core.interfaces.stores import IConfigStore

logger = logging.getLogger(__name__)


class HttpConfigStore(IConfigStore):
    """GET-based configuration store."""

    def __init__(
        self,
        host: str,
        port: int = 80,
        path: str = "/",
        timeout: float = 3.0,
        follow_redirects: bool = False,
        headers: Optional[Dict[str, Any]] = None,
        ssl: bool = False
    ) -> None:
        if not host:
            raise ValueError("The http store requires a 'host'")

        self.host = host
        self.port = port
        self.path = path if path.startswith('/') else f"/{path}"
        self.timeout = timeout
        self.follow_redirects = follow_redirects
        self.headers = {
            key: str(value) for key, value in (headers or {}).items() if value is not None
        }
        self.ssl = ssl
        self._session: Optional[aiohttp.ClientSession] = None

    @classmethod
    def from_config(cls, config: Dict[str, Any]) -> 'HttpConfigStore':
        return cls(
            host=config.get('host', ''),
            port=int(config.get('port', 80)),
            path=config.get('path', '/'),
            timeout=float(config.get('timeout', 3.0)),
            follow_redirects=bool(config.get('follow_redirects', False)),
            headers=config.get('headers'),
            ssl=bool(config.get('ssl', False)),
        )

    @property
    def url(self) -> str:
        scheme = 'https' if self.ssl else 'http'
        return f"{scheme}://{self.host}:{self.port}{self.path}"

    def _get_session(self) -> aiohttp.ClientSession:
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(
                timeout=aiohttp.ClientTimeout(total=self.timeout),
                headers=self.headers
            )
        return self._session

    async def get(self) -> bytes:
        session = self._get_session()
        async with session.get(self.url, allow_redirects=self.follow_redirects) as response:
            if not 200 <= response.status < 300:
                raise aiohttp.ClientResponseError(
                    response.request_info,
                    response.history,
                    status=response.status,
                    message=f"Unexpected status {response.status} from {self.url}"
                )
            return await response.read()

    async def close(self) -> None:
        if self._session is not None and not self._session.closed:
            await self._session.close()
        self._session = None
        logger.debug(f"Closed HTTP configuration store for {self.url}")
