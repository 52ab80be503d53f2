"""Shared fixtures: pinned year, manual clock and a small two-tag pipeline."""

from typing import Callable, Dict, Optional

import pytest

from wethelder.application.aggregator import VerifiedSourceAggregator
from wethelder.application.formatter import EvidenceFormatter
from wethelder.domain.freshness import FreshnessValidator
from wethelder.domain.models import SourceTag
from wethelder.domain.sites import SiteGroupRegistry
from wethelder.infrastructure.search.cache import ResultCache
from wethelder.infrastructure.search.executor import DomainSearchExecutor
from wethelder.infrastructure.search.limiter import ConcurrencyLimiter

from tests.fakes import YEAR, FakeSearchProvider, ManualClock, MutableYear


@pytest.fixture(autouse=True)
def _env(monkeypatch):
    # Keep a developer's real credentials out of the tests.
    for name in (
        "GOOGLE_API_KEY",
        "GOOGLE_CSE_ID",
        "OPENAI_API_KEY",
        "LLM_BASE_URL",
        "SEARCH_QUERY_EXPANSION",
    ):
        monkeypatch.delenv(name, raising=False)
    yield


@pytest.fixture
def year() -> MutableYear:
    return MutableYear(YEAR)


@pytest.fixture
def validator(year) -> FreshnessValidator:
    return FreshnessValidator(year_provider=year)


@pytest.fixture
def clock() -> ManualClock:
    return ManualClock()


@pytest.fixture
def cache(clock) -> ResultCache:
    return ResultCache(clock=clock)


@pytest.fixture
def registry() -> SiteGroupRegistry:
    return SiteGroupRegistry(
        {
            SourceTag.WETTEN: ["wetten.overheid.nl", "lokaleregelgeving.overheid.nl"],
            SourceTag.RECHTSPRAAK: ["rechtspraak.nl"],
        },
        require_all_tags=False,
    )


@pytest.fixture
def make_aggregator(validator, cache, registry, year) -> Callable[..., VerifiedSourceAggregator]:
    """Build an aggregator around a fake upstream provider."""

    def _make(
        provider: FakeSearchProvider,
        capacity: int = 5,
        timeout_seconds: Optional[float] = 1.0,
        groups: Optional[Dict[SourceTag, list]] = None,
    ) -> VerifiedSourceAggregator:
        executor = DomainSearchExecutor(
            search_client=provider,
            cache=cache,
            limiter=ConcurrencyLimiter(capacity),
            validator=validator,
            timeout_seconds=timeout_seconds,
        )
        reg = registry if groups is None else SiteGroupRegistry(groups, require_all_tags=False)
        return VerifiedSourceAggregator(
            executor=executor,
            registry=reg,
            validator=validator,
            formatter=EvidenceFormatter(year_provider=year),
        )

    return _make
