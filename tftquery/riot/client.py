# riot/client.py

import logging
from typing import Any, Optional

import aiohttp

from tftquery.riot.routes import Resource

log = logging.getLogger(__name__)


class RiotAPIError(Exception):
    """Raised when a Riot API call fails (non-2xx status, network error, bad body)."""

    def __init__(self, message: str, status: Optional[int] = None, url: Optional[str] = None):
        self.status = status
        self.url = url
        super().__init__(message)


class RiotClient:
    """Async Riot API transport: GET a resource with the session's credential."""

    def __init__(self, api_key: str, timeout: float = 10):
        self.api_key = api_key
        self.timeout = timeout
        self._session: Optional[aiohttp.ClientSession] = None

    async def _get_session(self) -> aiohttp.ClientSession:
        """Get or create aiohttp session."""
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(
                headers={"X-Riot-Token": self.api_key},
                timeout=aiohttp.ClientTimeout(total=self.timeout)
            )
        return self._session

    async def close(self):
        """Close the aiohttp session."""
        if self._session and not self._session.closed:
            await self._session.close()

    async def __aenter__(self):
        """Context manager entry."""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Context manager exit."""
        await self.close()

    async def fetch(self, resource: Resource) -> Any:
        """
        GET a resource and return its parsed JSON body.

        Args:
            resource: The request target built by one of the route classes

        Returns:
            JSON response from the API

        Raises:
            RiotAPIError: For any non-2xx status, network error or malformed body
        """
        session = await self._get_session()
        log.debug(f"GET {resource.name}: {resource.url}")

        try:
            async with session.get(resource.url) as resp:
                if resp.status >= 400:
                    raise RiotAPIError(
                        f"API error {resp.status} on {resource.name}",
                        status=resp.status,
                        url=resource.url,
                    )
                return await resp.json()
        except (aiohttp.ContentTypeError, ValueError) as e:
            raise RiotAPIError(f"Malformed body on {resource.name}: {e}", url=resource.url) from e
        except aiohttp.ClientResponseError as e:
            raise RiotAPIError(f"API error {e.status}: {e.message}", status=e.status, url=resource.url) from e
        except aiohttp.ClientError as e:
            raise RiotAPIError(f"Network error on {resource.name}: {e}", url=resource.url) from e
