"""Verified source aggregation - fan-out search, freshness filtering and merging."""

import asyncio
import logging
import time
from datetime import datetime, timezone
from typing import Dict, Iterable, List, Optional

from ..domain.freshness import FreshnessValidator
from ..domain.models import AggregatedResultSet, SearchMetrics, SearchResult, SourceTag
from ..domain.sites import SiteGroupRegistry
from ..infrastructure.search.executor import DomainSearchExecutor
from ..utils.sanitization import sanitize_query
from .formatter import EvidenceFormatter

logger = logging.getLogger(__name__)


def calculate_metrics(results: Iterable[SearchResult]) -> SearchMetrics:
    """Count total, current-year and outdated results in a single pass."""
    total = current = 0
    for result in results:
        total += 1
        if result.is_current_year:
            current += 1
    return SearchMetrics(total=total, current_year=current, outdated=total - current)


def dedupe_by_link(results: Iterable[SearchResult]) -> List[SearchResult]:
    """Drop repeated URLs, keeping the first occurrence."""
    seen = set()
    unique: List[SearchResult] = []
    for result in results:
        if result.link in seen:
            continue
        seen.add(result.link)
        unique.append(result)
    return unique


class VerifiedSourceAggregator:
    """Answers one query with freshness-filtered evidence from all source tags.

    Every (tag, domain) pair is searched concurrently through the executor;
    the shared limiter inside the executor bounds how many upstream calls are
    in flight. Results are merged in registry order, so the outcome does not
    depend on which domain answered first.
    """

    def __init__(
        self,
        executor: DomainSearchExecutor,
        registry: SiteGroupRegistry,
        validator: FreshnessValidator,
        formatter: EvidenceFormatter,
    ) -> None:
        """Initialize the aggregator.

        Args:
            executor: Per-domain search executor (owns cache and limiter).
            registry: Source tag to domain registry.
            validator: Freshness validator used for the historical-query check.
            formatter: Renders the evidence bundle.
        """
        self.executor = executor
        self.registry = registry
        self.validator = validator
        self.formatter = formatter

    async def run(
        self, query: str, tags: Optional[Iterable[SourceTag]] = None
    ) -> AggregatedResultSet:
        """Search all configured domains and build the evidence bundle.

        Args:
            query: Natural-language question.
            tags: Restrict the search to these source categories. None searches all.

        Returns:
            AggregatedResultSet with counts and the rendered evidence text.

        Raises:
            ValueError: If the query is empty after sanitization.
        """
        clean_query = sanitize_query(query)
        if not clean_query:
            raise ValueError("query must not be empty")

        start = time.time()
        timestamp = datetime.now(timezone.utc)
        is_historical = self.validator.is_historical_query(clean_query)
        pairs = self.registry.pairs(tags)
        tags_searched = list(dict.fromkeys(tag for tag, _ in pairs))

        logger.info(
            "Searching %d domains across %d source tags for '%s' (historical=%s)",
            len(pairs),
            len(tags_searched),
            clean_query,
            is_historical,
        )

        batches = await asyncio.gather(
            *(self.executor.search(clean_query, domain, tag) for tag, domain in pairs)
        )
        found = dedupe_by_link(result for batch in batches for result in batch)

        per_tag: Dict[SourceTag, List[SearchResult]] = {}
        for result in found:
            per_tag.setdefault(result.source, []).append(result)

        metrics = calculate_metrics(found)
        if is_historical:
            selected = found
        else:
            selected = [r for r in found if r.is_current_year]

        withheld = not is_historical and metrics.total > 0 and not selected
        if withheld:
            reason = (
                f"geen van de {metrics.total} gevonden bronnen is actueel voor "
                f"{self.validator.current_year}"
            )
            evidence = self.formatter.outdated_notice(reason)
        else:
            evidence = self.formatter.format(selected)

        logger.info(
            "Search completed in %.2fs: %d results, %d current year, %d selected",
            time.time() - start,
            metrics.total,
            metrics.current_year,
            len(selected),
        )

        return AggregatedResultSet(
            query=clean_query,
            is_historical_query=is_historical,
            results=selected,
            per_tag_results=per_tag,
            total_count=metrics.total,
            current_year_count=metrics.current_year,
            outdated_count=metrics.outdated,
            combined_evidence_text=evidence,
            evidence_withheld=withheld,
            search_terms=[clean_query],
            tags_searched=tags_searched,
            timestamp=timestamp,
        )
