"""HTTP implementation of CandidateFetcher.

Every source is fetched concurrently. A source that fails (network error,
timeout, bad status, non-image content type, size out of bounds, unknown
signature) is logged and dropped; only the all-failed case is raised.
"""

import asyncio
import logging

import httpx

from logo_agent.config import settings
from logo_agent.entities import FetchCandidate
from logo_agent.errors import AllSourcesFailed, SourceFetchFailed
from logo_agent.utils import MAX_LOGO_BYTES, MIN_LOGO_BYTES, detect_image_format


logger = logging.getLogger(__name__)


class HttpLogoFetcher:
    """httpx-based implementation of the CandidateFetcher protocol.

    This class satisfies the CandidateFetcher protocol through structural
    typing - no explicit inheritance needed.

    Example:
        ```python
        fetcher = HttpLogoFetcher.create()

        candidates = await fetcher.fetch(
            ["https://example.com/logo.png", "https://cdn.example.com/logo.png"],
            per_source_timeout=7.5,
        )
        await fetcher.aclose()
        ```
    """

    def __init__(
        self,
        client: httpx.AsyncClient | None = None,
        user_agent: str | None = None,
        max_connections: int | None = None,
    ) -> None:
        """Initialize the fetcher.

        Args:
            client: Preconfigured async client (e.g. with a mock transport).
                    If None, one is created lazily and owned by the fetcher.
            user_agent: Client identity header. Defaults to settings.
            max_connections: Connection pool size. Defaults to settings.
        """
        self._client = client
        self._owns_client = client is None
        self._user_agent = user_agent or settings.user_agent
        self._max_connections = settings.max_connections if max_connections is None else max_connections

    @classmethod
    def create(
        cls,
        user_agent: str | None = None,
        max_connections: int | None = None,
    ) -> "HttpLogoFetcher":
        """Factory method to create HttpLogoFetcher with defaults.

        Args:
            user_agent: Client identity header. If None, uses settings.
            max_connections: Connection pool size. If None, uses settings.

        Returns:
            Configured HttpLogoFetcher
        """
        return cls(user_agent=user_agent, max_connections=max_connections)

    @property
    def client(self) -> httpx.AsyncClient:
        """Lazy-load the async HTTP client.

        Returns:
            The httpx.AsyncClient instance
        """
        if self._client is None:
            self._client = httpx.AsyncClient(
                follow_redirects=True,
                limits=httpx.Limits(
                    max_connections=self._max_connections,
                    max_keepalive_connections=self._max_connections,
                ),
            )
        return self._client

    @property
    def headers(self) -> dict[str, str]:
        return {
            "User-Agent": self._user_agent,
            "Accept": "image/*",
        }

    async def fetch(
        self,
        sources: list[str],
        per_source_timeout: float,
    ) -> list[FetchCandidate]:
        """Fetch all sources concurrently and return the valid candidates.

        Args:
            sources: Candidate URLs
            per_source_timeout: Seconds allowed for each individual source

        Returns:
            Valid candidates (unordered)

        Raises:
            AllSourcesFailed: If no source produced a valid candidate
        """
        results = await asyncio.gather(
            *(self._fetch_guarded(url, per_source_timeout) for url in sources)
        )
        candidates = [candidate for candidate in results if candidate is not None]

        if not candidates:
            raise AllSourcesFailed(None, len(sources))

        logger.debug("Fetched %d/%d valid candidates", len(candidates), len(sources))
        return candidates

    async def _fetch_guarded(self, url: str, timeout: float) -> FetchCandidate | None:
        try:
            return await asyncio.wait_for(self.fetch_one(url, timeout), timeout=timeout)
        except asyncio.TimeoutError:
            logger.warning("Timeout fetching logo from %s after %.1fs", url, timeout)
        except SourceFetchFailed as e:
            logger.warning("Skipping source %s: %s", url, e.reason)
        return None

    async def fetch_one(self, url: str, timeout: float) -> FetchCandidate:
        """Fetch and validate a single source.

        Args:
            url: Source URL
            timeout: httpx timeout in seconds

        Returns:
            The validated candidate

        Raises:
            SourceFetchFailed: On any network or validation failure
        """
        try:
            async with self.client.stream(
                "GET", url, headers=self.headers, timeout=timeout
            ) as response:
                if not response.is_success:
                    raise SourceFetchFailed(
                        url, f"HTTP {response.status_code}: {response.reason_phrase}"
                    )

                content_type = response.headers.get("content-type", "")
                if not content_type.startswith("image/"):
                    raise SourceFetchFailed(url, f"invalid content type: {content_type or 'none'}")

                declared = response.headers.get("content-length")
                if declared and declared.isdigit() and int(declared) > MAX_LOGO_BYTES:
                    raise SourceFetchFailed(url, f"too large ({declared} bytes declared)")

                body = bytearray()
                async for chunk in response.aiter_bytes():
                    body.extend(chunk)
                    if len(body) > MAX_LOGO_BYTES:
                        raise SourceFetchFailed(url, f"too large (over {MAX_LOGO_BYTES} bytes)")
        except httpx.InvalidURL as e:
            raise SourceFetchFailed(url, "invalid url") from e
        except httpx.TimeoutException as e:
            raise SourceFetchFailed(url, "timeout") from e
        except httpx.HTTPError as e:
            raise SourceFetchFailed(url, f"http error: {e}") from e

        data = bytes(body)
        if len(data) < MIN_LOGO_BYTES:
            raise SourceFetchFailed(url, f"too small ({len(data)} bytes)")

        if detect_image_format(data) is None:
            raise SourceFetchFailed(url, "unrecognized image signature")

        return FetchCandidate(data=data, source=url)

    async def aclose(self) -> None:
        """Close the HTTP client if this fetcher created it."""
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None
