"""Extra search strategies for domains whose plain site search under-delivers."""

from dataclasses import dataclass
from typing import Dict, Iterable, List, Tuple

from ...domain.models import RawSearchRecord

STATUTE_DOMAIN = "wetten.overheid.nl"

VEHICLE_TERMS: Tuple[str, ...] = (
    "voertuig",
    "auto",
    "motor",
    "fiets",
    "regelement",
    "verkeer",
    "rdw",
    "kenteken",
    "rijbewijs",
)


@dataclass(frozen=True)
class QueryExpansion:
    """How to search one domain with more than a single plain query.

    The first call appends ``general_terms`` as an OR-clause, or
    ``topic_terms`` when the query mentions one of ``topic_keywords``.
    Follow-up calls run a broader search when fewer than ``min_results``
    came back, plus a topic-specific search for topic queries. Every
    follow-up is expanded the same way as the first call.
    """

    general_terms: Tuple[str, ...] = (
        "wet",
        "artikel",
        "wetboek",
        "reglement",
        "besluit",
        "ministeriële",
        "koninklijk",
    )
    topic_keywords: Tuple[str, ...] = VEHICLE_TERMS + ("wegenverkeer",)
    topic_terms: Tuple[str, ...] = (
        "wegenverkeerswet",
        "voertuigreglement",
        "wegenwet",
        "rdw",
        "verkeerswet",
        "motorvoertuig",
        "kenteken",
        "rijbewijs",
    )
    topic_followup_terms: Tuple[str, ...] = (
        "wegenverkeerswet",
        "voertuigreglement",
        "wegenwet",
    )
    broader_suffix: str = "wetgeving regelgeving"
    min_results: int = 3

    def is_topic_query(self, query: str) -> bool:
        q = query.lower()
        return any(term in q for term in self.topic_keywords)

    def expand(self, query: str) -> str:
        """Append the OR-clause of legal terms matching the query."""
        terms = self.topic_terms if self.is_topic_query(query) else self.general_terms
        return f"{query} ({' OR '.join(terms)})"

    def followup_queries(self, query: str, found: int) -> List[str]:
        """Unexpanded follow-up queries given ``found`` first-call results."""
        queries = []
        if found < self.min_results:
            queries.append(f"{query} {self.broader_suffix}")
        if self.is_topic_query(query):
            queries.append(f"{query} ({' OR '.join(self.topic_followup_terms)})")
        return queries


def default_expansions() -> Dict[str, QueryExpansion]:
    """Expansion strategies used by the application, keyed by domain."""
    return {STATUTE_DOMAIN: QueryExpansion()}


def merge_records(batches: Iterable[Iterable[RawSearchRecord]]) -> List[RawSearchRecord]:
    """Concatenate record batches, keeping the first record per link."""
    seen = set()
    merged: List[RawSearchRecord] = []
    for batch in batches:
        for record in batch:
            if record.link in seen:
                continue
            seen.add(record.link)
            merged.append(record)
    return merged

