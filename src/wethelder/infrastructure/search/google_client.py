"""Google Custom Search JSON API client implementation."""

from __future__ import annotations

import logging
import time
from typing import Any, Dict, List, Optional

from httpx import AsyncClient, HTTPStatusError, TransportError
from pydantic import ValidationError
from tenacity import (
    AsyncRetrying,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from ...domain.exceptions import MissingCredentialsError, SearchProviderError
from ...domain.models import RawSearchRecord

logger = logging.getLogger(__name__)


class GoogleSearchClient:
    """Site-restricted search through Google Programmable Search.

    Transport errors (connection resets, read timeouts) are retried with
    exponential backoff; HTTP error statuses and malformed payloads are raised
    to the caller untouched.

    Usage:
        ```python
        client = GoogleSearchClient(
            api_key="your-key",
            search_engine_id="your-cx",
            http_client=async_client,
        )
        records = await client.search("site:wetten.overheid.nl rijbewijs")
        ```
    """

    BASE_URL = "https://www.googleapis.com/customsearch/v1"
    MAX_RESULTS = 10

    def __init__(
        self,
        api_key: Optional[str],
        search_engine_id: Optional[str],
        http_client: AsyncClient,
        language: str = "lang_nl",
        country: str = "nl",
        interface_language: str = "nl",
        max_attempts: int = 2,
        backoff_multiplier: float = 0.5,
    ) -> None:
        """Initialize Google search client.

        Args:
            api_key: Google API key. If None, every search raises
                MissingCredentialsError.
            search_engine_id: Programmable Search Engine id (``cx``).
            http_client: HTTP client for making requests.
            language: Document language restriction (``lr``).
            country: Geolocation hint (``gl``).
            interface_language: Interface language hint (``hl``).
            max_attempts: Attempts per search on transport errors.
            backoff_multiplier: Multiplier for the exponential backoff in seconds.
        """
        self.api_key = api_key
        self.search_engine_id = search_engine_id
        self._client = http_client
        self.language = language
        self.country = country
        self.interface_language = interface_language
        self.max_attempts = max(1, int(max_attempts))
        self.backoff_multiplier = backoff_multiplier

    @property
    def configured(self) -> bool:
        return bool(self.api_key and self.search_engine_id)

    def _params(self, query: str, count: int) -> Dict[str, Any]:
        params: Dict[str, Any] = {
            "key": self.api_key,
            "cx": self.search_engine_id,
            "q": query,
            "num": max(1, min(count, self.MAX_RESULTS)),
        }
        if self.language:
            params["lr"] = self.language
        if self.country:
            params["gl"] = self.country
        if self.interface_language:
            params["hl"] = self.interface_language
        return params

    async def search(self, query: str, count: int = 10) -> List[RawSearchRecord]:
        """Perform one search and return the raw records in upstream order.

        Args:
            query: Full query string, including any ``site:`` restriction.
            count: Number of results to request (capped at 10).

        Returns:
            List of RawSearchRecord objects; empty when nothing matched.

        Raises:
            MissingCredentialsError: If the API key or engine id is missing.
            HTTPStatusError: If the API responds with a non-2xx status.
            TransportError: If the request keeps failing at transport level.
            SearchProviderError: If the response body is not a JSON object.
        """
        if not self.configured:
            raise MissingCredentialsError("Google Custom Search credentials not configured")

        start = time.time()
        params = self._params(query, count)

        retrying = AsyncRetrying(
            reraise=True,
            stop=stop_after_attempt(self.max_attempts),
            wait=wait_exponential(multiplier=self.backoff_multiplier, min=0, max=5),
            retry=retry_if_exception_type(TransportError),
        )
        try:
            async for attempt in retrying:
                with attempt:
                    resp = await self._client.get(self.BASE_URL, params=params)
                    resp.raise_for_status()
        except HTTPStatusError as e:
            logger.warning(
                "HTTP %s from Google Custom Search for '%s'", e.response.status_code, query
            )
            raise

        try:
            data = resp.json()
        except ValueError as e:
            raise SearchProviderError(f"invalid JSON from search provider: {e}") from e
        if not isinstance(data, dict):
            raise SearchProviderError("unexpected payload from search provider")

        records: List[RawSearchRecord] = []
        for item in data.get("items") or []:
            if not isinstance(item, dict):
                continue
            try:
                records.append(
                    RawSearchRecord(
                        title=item.get("title") or "",
                        link=item.get("link") or "",
                        snippet=item.get("snippet") or "",
                        display_link=item.get("displayLink"),
                        formatted_url=item.get("formattedUrl"),
                    )
                )
            except ValidationError:
                logger.warning("Skipping malformed search result item", extra={"item": item})
                continue

        logger.debug(
            "Google search '%s' returned %d results in %.2fs",
            query,
            len(records),
            time.time() - start,
        )
        return records
