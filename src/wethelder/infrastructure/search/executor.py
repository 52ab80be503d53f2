"""One site-restricted search against one domain."""

import asyncio
import logging
from typing import Dict, List, Mapping, Optional, Protocol, Tuple

from ...domain.freshness import FreshnessValidator
from ...domain.models import RawSearchRecord, SearchResult, SourceTag
from .cache import ResultCache
from .expansion import QueryExpansion, merge_records
from .limiter import ConcurrencyLimiter

logger = logging.getLogger(__name__)


class SearchProvider(Protocol):
    """Anything that can run a raw web search query."""

    async def search(self, query: str, count: int = 10) -> List[RawSearchRecord]: ...


def site_query(domain: str, query: str) -> str:
    """Restrict ``query`` to a single domain."""
    return f"site:{domain} {query}"


class DomainSearchExecutor:
    """Searches one domain through the shared limiter and cache.

    Failures never escape ``search``: a timeout, transport error, error
    status or malformed payload yields an empty list for that domain, so one
    broken upstream only lowers recall of the aggregate query. Records that
    cannot be turned into results are skipped one by one.

    Concurrent searches for the same (domain, query) share one fetch, so a
    domain listed under several tags costs a single upstream call.

    Args:
        search_client: Upstream provider.
        cache: Shared cache of raw records.
        limiter: Shared concurrency gate.
        validator: Freshness validator applied to every record.
        timeout_seconds: Time budget for each upstream call. None disables it.
        result_count: Results requested per upstream call.
        expansions: Per-domain search strategies. Domains not listed get a
            single plain ``site:`` query.
    """

    def __init__(
        self,
        search_client: SearchProvider,
        cache: ResultCache,
        limiter: ConcurrencyLimiter,
        validator: FreshnessValidator,
        timeout_seconds: Optional[float] = 15.0,
        result_count: int = 10,
        expansions: Optional[Mapping[str, QueryExpansion]] = None,
    ) -> None:
        self.search_client = search_client
        self.cache = cache
        self.limiter = limiter
        self.validator = validator
        self.timeout_seconds = timeout_seconds
        self.result_count = result_count
        self.expansions: Dict[str, QueryExpansion] = dict(expansions or {})
        self._pending: Dict[str, "asyncio.Task[List[RawSearchRecord]]"] = {}

    def _to_results(self, records: List[RawSearchRecord], tag: SourceTag) -> List[SearchResult]:
        results: List[SearchResult] = []
        for raw in records:
            try:
                validation = self.validator.validate(raw.snippet, raw.title)
                results.append(SearchResult.from_raw(raw, tag, validation))
            except ValueError as e:
                logger.warning("Skipping unusable result %r: %s", raw.link, e)
        return results

    async def search(self, query: str, domain: str, tag: SourceTag) -> List[SearchResult]:
        """Return validated results for ``query`` on ``domain``, labeled ``tag``."""
        key = self.cache.key(domain, query)
        task = self._pending.get(key)
        if task is None:
            task = asyncio.ensure_future(self._shared_fetch(key, query, domain))
            self._pending[key] = task
        else:
            logger.debug("Joining in-flight search for %s '%s'", domain, query)
        records = await asyncio.shield(task)
        return self._to_results(records, tag)

    async def _shared_fetch(self, key: str, query: str, domain: str) -> List[RawSearchRecord]:
        try:
            return await self.limiter.run(self._fetch, query, domain)
        finally:
            self._pending.pop(key, None)

    async def _fetch(self, query: str, domain: str) -> List[RawSearchRecord]:
        cached = self.cache.get(domain, query)
        if cached is not None:
            logger.debug("Cache hit for %s '%s'", domain, query)
            return cached

        expansion = self.expansions.get(domain)
        try:
            if expansion is None:
                records = await self._call(site_query(domain, query))
                complete = True
            else:
                records, complete = await self._expanded(query, domain, expansion)
        except asyncio.TimeoutError:
            logger.warning("Search on %s timed out after %ss", domain, self.timeout_seconds)
            return []
        except Exception as e:
            logger.warning("Search on %s failed: %s", domain, e)
            return []

        if complete:
            self.cache.set(domain, query, records)
        return records

    async def _call(self, full_query: str) -> List[RawSearchRecord]:
        return await asyncio.wait_for(
            self.search_client.search(full_query, count=self.result_count),
            timeout=self.timeout_seconds,
        )

    async def _expanded(
        self, query: str, domain: str, expansion: QueryExpansion
    ) -> Tuple[List[RawSearchRecord], bool]:
        """Run the first expanded call, then its follow-ups, and merge by link.

        A failing first call fails the domain. A failing follow-up is logged
        and the partial merge is returned with ``complete`` set to False so it
        is not cached.
        """
        first = await self._call(site_query(domain, expansion.expand(query)))
        batches = [first]
        complete = True
        for followup in expansion.followup_queries(query, len(first)):
            try:
                batches.append(await self._call(site_query(domain, expansion.expand(followup))))
            except asyncio.TimeoutError:
                logger.warning("Follow-up search on %s timed out", domain)
                complete = False
            except Exception as e:
                logger.warning("Follow-up search on %s failed: %s", domain, e)
                complete = False
        records = merge_records(batches)
        logger.debug(
            "Expanded search on %s merged %d batches into %d results",
            domain,
            len(batches),
            len(records),
        )
        return records, complete
