import asyncio

import pytest

from wethelder.domain.models import RawSearchRecord, SourceTag
from wethelder.infrastructure.search.executor import DomainSearchExecutor
from wethelder.infrastructure.search.expansion import QueryExpansion
from wethelder.infrastructure.search.limiter import ConcurrencyLimiter

from tests.fakes import YEAR, FakeSearchProvider, record

DOMAIN = "wetten.overheid.nl"


def _executor(provider, cache, validator, timeout_seconds=1.0) -> DomainSearchExecutor:
    return DomainSearchExecutor(
        search_client=provider,
        cache=cache,
        limiter=ConcurrencyLimiter(2),
        validator=validator,
        timeout_seconds=timeout_seconds,
    )


@pytest.mark.asyncio
async def test_miss_queries_upstream_and_caches_raw_records(cache, validator):
    raw = [record("Regeling", f"https://{DOMAIN}/r", f"Geldig vanaf {YEAR}")]
    provider = FakeSearchProvider({DOMAIN: raw})

    results = await _executor(provider, cache, validator).search("rijbewijs", DOMAIN, SourceTag.WETTEN)

    assert provider.calls == [f"site:{DOMAIN} rijbewijs"]
    assert cache.get(DOMAIN, "rijbewijs") == raw
    assert len(results) == 1
    result = results[0]
    assert result.source is SourceTag.WETTEN
    assert result.is_current_year is True
    assert result.validation.extracted_years == (YEAR,)
    assert result.display_link == DOMAIN
    assert result.formatted_url == f"https://{DOMAIN}/r"


@pytest.mark.asyncio
async def test_hit_skips_upstream(cache, validator):
    cache.set(DOMAIN, "rijbewijs", [record("Cached", f"https://{DOMAIN}/c", "2023")])
    provider = FakeSearchProvider()

    results = await _executor(provider, cache, validator).search("rijbewijs", DOMAIN, SourceTag.WETTEN)

    assert provider.calls == []
    assert [r.title for r in results] == ["Cached"]
    assert results[0].is_current_year is False


@pytest.mark.asyncio
async def test_freshness_is_recomputed_from_cached_snippets(cache, validator, year):
    cache.set(DOMAIN, "tarief", [record("Tarief", f"https://{DOMAIN}/t", f"Tarief {YEAR}")])
    executor = _executor(FakeSearchProvider(), cache, validator)

    first = await executor.search("tarief", DOMAIN, SourceTag.WETTEN)
    year.year = YEAR + 1
    second = await executor.search("tarief", DOMAIN, SourceTag.WETTEN)

    assert first[0].is_current_year is True
    assert second[0].is_current_year is False


@pytest.mark.asyncio
async def test_upstream_failure_degrades_to_empty_and_is_not_cached(cache, validator):
    provider = FakeSearchProvider({DOMAIN: RuntimeError("403 Forbidden")})
    executor = _executor(provider, cache, validator)

    assert await executor.search("boete", DOMAIN, SourceTag.WETTEN) == []
    assert cache.get(DOMAIN, "boete") is None

    assert await executor.search("boete", DOMAIN, SourceTag.WETTEN) == []
    assert len(provider.calls) == 2


@pytest.mark.asyncio
async def test_timeout_degrades_to_empty(cache, validator):
    provider = FakeSearchProvider(
        {DOMAIN: [record("Traag", f"https://{DOMAIN}/s", "2025")]}, default_delay=1.0
    )
    executor = _executor(provider, cache, validator, timeout_seconds=0.05)

    assert await executor.search("traag", DOMAIN, SourceTag.WETTEN) == []
    assert cache.get(DOMAIN, "traag") is None


@pytest.mark.asyncio
async def test_empty_success_is_cached(cache, validator):
    provider = FakeSearchProvider()
    executor = _executor(provider, cache, validator)

    await executor.search("niets", DOMAIN, SourceTag.WETTEN)
    await executor.search("niets", DOMAIN, SourceTag.WETTEN)

    assert len(provider.calls) == 1


@pytest.mark.asyncio
async def test_display_link_falls_back_to_host(cache, validator):
    provider = FakeSearchProvider({"rdw.nl": [record("APK", "https://www.rdw.nl/apk?x=1")]})
    results = await _executor(provider, cache, validator).search("apk", "rdw.nl", SourceTag.OVERHEID)
    assert results[0].display_link == "www.rdw.nl"


def _broken(title: str = "Kapot") -> RawSearchRecord:
    # Bypasses link validation, as a stale cache entry or a lenient provider could.
    return RawSearchRecord.model_construct(title=title, link="http://[broken", snippet=f"{YEAR}")


class ScriptedProvider:
    """Answers calls in order from a script of record lists or exceptions."""

    def __init__(self, *script) -> None:
        self.script = list(script)
        self.calls = []

    async def search(self, query: str, count: int = 10):
        self.calls.append(query)
        response = self.script.pop(0) if self.script else []
        if isinstance(response, Exception):
            raise response
        return list(response)


@pytest.mark.asyncio
async def test_unusable_record_is_skipped_not_fatal(cache, validator):
    good = record("Regeling", f"https://{DOMAIN}/r", f"{YEAR}")
    provider = FakeSearchProvider({DOMAIN: [_broken(), good]})
    executor = _executor(provider, cache, validator)

    first = await executor.search("rijbewijs", DOMAIN, SourceTag.WETTEN)
    second = await executor.search("rijbewijs", DOMAIN, SourceTag.WETTEN)

    assert [r.link for r in first] == [good.link]
    assert [r.link for r in second] == [good.link]
    assert len(provider.calls) == 1


@pytest.mark.asyncio
async def test_concurrent_identical_searches_share_one_call(cache, validator):
    provider = FakeSearchProvider(
        {"overheid.nl": [record("Regeling", "https://overheid.nl/r", f"{YEAR}")]},
        default_delay=0.02,
    )
    executor = _executor(provider, cache, validator)

    cao, overheid = await asyncio.gather(
        executor.search("verlof", "overheid.nl", SourceTag.CAO),
        executor.search("verlof", "overheid.nl", SourceTag.OVERHEID),
    )

    assert provider.calls == ["site:overheid.nl verlof"]
    assert [r.source for r in cao] == [SourceTag.CAO]
    assert [r.source for r in overheid] == [SourceTag.OVERHEID]


@pytest.mark.asyncio
async def test_expansion_adds_legal_terms_and_broader_search(cache, validator):
    hit = record("Huurtoeslag", f"https://{DOMAIN}/h", f"{YEAR}")
    provider = ScriptedProvider([hit], [hit, record("Besluit", f"https://{DOMAIN}/b", f"{YEAR}")])
    executor = _executor(provider, cache, validator)
    executor.expansions = {DOMAIN: QueryExpansion()}

    results = await executor.search("huurtoeslag", DOMAIN, SourceTag.WETTEN)

    legal = "(wet OR artikel OR wetboek OR reglement OR besluit OR ministeriële OR koninklijk)"
    assert provider.calls == [
        f"site:{DOMAIN} huurtoeslag {legal}",
        f"site:{DOMAIN} huurtoeslag wetgeving regelgeving {legal}",
    ]
    assert [r.title for r in results] == ["Huurtoeslag", "Besluit"]
    assert [r.link for r in cache.get(DOMAIN, "huurtoeslag")] == [hit.link, f"https://{DOMAIN}/b"]


@pytest.mark.asyncio
async def test_vehicle_query_gets_regulation_followup(cache, validator):
    hits = [record(f"Art {i}", f"https://{DOMAIN}/{i}", f"{YEAR}") for i in range(3)]
    provider = ScriptedProvider(hits, [])
    executor = _executor(provider, cache, validator)
    executor.expansions = {DOMAIN: QueryExpansion()}

    results = await executor.search("rijbewijs kwijt", DOMAIN, SourceTag.WETTEN)

    assert len(provider.calls) == 2
    vehicle = " OR ".join(QueryExpansion().topic_terms)
    assert provider.calls[0] == f"site:{DOMAIN} rijbewijs kwijt ({vehicle})"
    assert "rijbewijs kwijt (wegenverkeerswet OR voertuigreglement OR wegenwet) (" in provider.calls[1]
    assert len(results) == 3


@pytest.mark.asyncio
async def test_failed_followup_keeps_results_but_skips_cache(cache, validator):
    hit = record("Wet", f"https://{DOMAIN}/w", f"{YEAR}")
    provider = ScriptedProvider([hit], RuntimeError("quota"))
    executor = _executor(provider, cache, validator)
    executor.expansions = {DOMAIN: QueryExpansion()}

    results = await executor.search("erfpacht", DOMAIN, SourceTag.WETTEN)

    assert [r.title for r in results] == ["Wet"]
    assert cache.get(DOMAIN, "erfpacht") is None


@pytest.mark.asyncio
async def test_expansion_only_applies_to_its_domain(cache, validator):
    provider = FakeSearchProvider()
    executor = _executor(provider, cache, validator)
    executor.expansions = {DOMAIN: QueryExpansion()}

    await executor.search("uitspraak", "rechtspraak.nl", SourceTag.RECHTSPRAAK)

    assert provider.calls == ["site:rechtspraak.nl uitspraak"]
