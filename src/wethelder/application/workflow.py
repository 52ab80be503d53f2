"""Complete search workflow: verified sources, prompt assembly and answering."""

import logging
from datetime import datetime, timezone
from functools import lru_cache
from importlib import resources
from typing import Iterable, Optional

from ..config.settings import Settings
from ..domain.freshness import FreshnessValidator
from ..domain.models import AggregatedResultSet, SourceTag, WorkflowResult
from ..domain.sites import SiteGroupRegistry
from ..infrastructure.http.client import get_async_client
from ..infrastructure.llm.client import LLMClient
from ..infrastructure.search.cache import CacheTTLPolicy, ResultCache
from ..infrastructure.search.executor import DomainSearchExecutor
from ..infrastructure.search.expansion import default_expansions
from ..infrastructure.search.google_client import GoogleSearchClient
from ..infrastructure.search.limiter import ConcurrencyLimiter
from .aggregator import VerifiedSourceAggregator
from .formatter import EvidenceFormatter

logger = logging.getLogger(__name__)

FALLBACK_PROMPT = """Je bent een Nederlandse juridische AI-assistent die uitsluitend baseert op geverifieerde bronnen.

STRIKTE REGELS:
1. Gebruik ALLEEN informatie uit de beschikbare bronnen
2. Vermeld bij elke bewering de exacte bron (URL)
3. Als informatie niet in de bronnen staat, zeg dan "Deze informatie is niet beschikbaar in de geraadpleegde bronnen"
4. Geef wetsartikelen exact weer zoals vermeld in de bronnen
5. Voeg GEEN eigen kennis of interpretaties toe"""


@lru_cache(maxsize=1)
def load_legal_prompt() -> str:
    """Load the packaged answer template, falling back to a built-in one."""
    try:
        return (
            resources.files("wethelder")
            .joinpath("prompts/legal_answer.md")
            .read_text(encoding="utf-8")
            .strip()
        )
    except (FileNotFoundError, OSError):
        logger.warning("Could not load legal prompt template, using fallback")
        return FALLBACK_PROMPT


def build_answer_prompt(question: str, results: AggregatedResultSet) -> str:
    """Assemble the full prompt for the answer-generation model."""
    return f"""{load_legal_prompt()}

## VRAAG:
{question}

## BESCHIKBARE BRONNEN:
{results.combined_evidence_text}

## ZOEKSTATISTIEKEN:
- Totaal resultaten: {results.total_count}
- Actuele resultaten: {results.current_year_count}
- Verouderde resultaten: {results.outdated_count}
- Historische vraag: {"ja" if results.is_historical_query else "nee"}
- Timestamp: {results.timestamp.isoformat()}

Geef een compleet antwoord volgens de bovenstaande structuur."""


class VerifiedSearchWorkflow:
    """Runs the aggregator and prepares (optionally sends) the model prompt."""

    def __init__(
        self,
        aggregator: VerifiedSourceAggregator,
        llm_client: Optional[LLMClient] = None,
    ) -> None:
        self.aggregator = aggregator
        self.llm_client = llm_client

    async def execute(
        self, question: str, tags: Optional[Iterable[SourceTag]] = None
    ) -> WorkflowResult:
        """Search and build the prompt. Failures are reported, never raised."""
        try:
            results = await self.aggregator.run(question, tags=tags)
            return WorkflowResult(
                search_results=results,
                prompt=build_answer_prompt(question, results),
            )
        except Exception as e:
            logger.exception("Search workflow failed")
            empty = AggregatedResultSet(
                query=question,
                is_historical_query=False,
                combined_evidence_text="",
                search_terms=[question],
                timestamp=datetime.now(timezone.utc),
            )
            return WorkflowResult(search_results=empty, prompt="", success=False, error=str(e))

    async def answer(
        self, question: str, tags: Optional[Iterable[SourceTag]] = None
    ) -> tuple[WorkflowResult, Optional[str]]:
        """Run the workflow and ask the language model for an answer.

        Returns:
            Tuple of (workflow result, answer). The answer is None when the
            workflow failed or no language model is configured.

        Raises:
            Exception: If the language model call fails.
        """
        outcome = await self.execute(question, tags=tags)
        if not outcome.success or self.llm_client is None:
            return outcome, None
        return outcome, await self.llm_client.answer(outcome.prompt)


def build_workflow(settings: Settings) -> VerifiedSearchWorkflow:
    """Wire the full pipeline from settings (composition root)."""
    validator = FreshnessValidator()
    limiter = ConcurrencyLimiter(settings.search_concurrency)
    http_client = get_async_client(
        settings.http_timeout_seconds, max_connections=max(10, settings.search_concurrency)
    )
    search_client = GoogleSearchClient(
        api_key=settings.google_api_key,
        search_engine_id=settings.google_cse_id,
        http_client=http_client,
        language=settings.search_language,
        country=settings.search_country,
        interface_language=settings.search_interface_language,
        max_attempts=settings.search_retry_attempts,
    )
    cache = ResultCache(
        ttl_policy=CacheTTLPolicy(
            statutes=settings.cache_ttl_statutes,
            case_law=settings.cache_ttl_case_law,
            policy=settings.cache_ttl_policy,
            default=settings.cache_ttl_default,
        ),
        max_entries=settings.cache_max_entries,
    )
    executor = DomainSearchExecutor(
        search_client=search_client,
        cache=cache,
        limiter=limiter,
        validator=validator,
        timeout_seconds=settings.search_timeout_seconds,
        result_count=settings.search_result_count,
        expansions=default_expansions() if settings.search_query_expansion else None,
    )
    aggregator = VerifiedSourceAggregator(
        executor=executor,
        registry=SiteGroupRegistry(),
        validator=validator,
        formatter=EvidenceFormatter(),
    )
    llm_client = None
    if settings.openai_api_key:
        llm_client = LLMClient(
            api_key=settings.openai_api_key,
            model=settings.llm_model,
            base_url=settings.llm_base_url,
        )
    return VerifiedSearchWorkflow(aggregator, llm_client=llm_client)
