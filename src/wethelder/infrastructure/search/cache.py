"""In-memory TTL cache for raw per-domain search results."""

import logging
import time
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Sequence, Tuple

from ...domain.models import RawSearchRecord

logger = logging.getLogger(__name__)

Clock = Callable[[], float]

# Substring markers per domain class, checked from longest TTL to shortest.
STATUTE_DOMAINS: Sequence[str] = (
    "wetten.overheid.nl",
    "lokaleregelgeving.overheid.nl",
    "zoekservice.overheid.nl",
    "officielebekendmakingen.nl",
    "cvdr.nl",
)
CASE_LAW_DOMAINS: Sequence[str] = (
    "rechtspraak.nl",
    "tuchtrecht.overheid.nl",
)
POLICY_DOMAINS: Sequence[str] = (
    "belastingdienst.nl",
    "rijksoverheid.nl",
    "boetebase.om.nl",
)


@dataclass(frozen=True)
class CacheTTLPolicy:
    """TTL in seconds chosen by a static classification of the domain name."""

    statutes: float = 4 * 60 * 60
    case_law: float = 2 * 60 * 60
    policy: float = 60 * 60
    default: float = 30 * 60

    def ttl_for(self, domain: str) -> float:
        name = domain.lower()
        classes: Tuple[Tuple[Sequence[str], float], ...] = (
            (STATUTE_DOMAINS, self.statutes),
            (CASE_LAW_DOMAINS, self.case_law),
            (POLICY_DOMAINS, self.policy),
        )
        for markers, ttl in classes:
            if any(marker in name for marker in markers):
                return ttl
        return self.default


@dataclass(frozen=True)
class CacheEntry:
    data: List[RawSearchRecord]
    stored_at: float
    ttl: float

    def is_expired(self, now: float) -> bool:
        return now - self.stored_at > self.ttl


class ResultCache:
    """Key-value store of raw upstream records keyed by (domain, query).

    Expired entries are treated as absent and evicted when read. Concurrent
    writers for one key simply overwrite each other: every value for a key
    comes from the same upstream query.

    Args:
        ttl_policy: Per-domain TTL classification.
        clock: Source of the current time in seconds. Defaults to ``time.time``.
        max_entries: Size above which expired entries are purged on write.
    """

    def __init__(
        self,
        ttl_policy: Optional[CacheTTLPolicy] = None,
        clock: Clock = time.time,
        max_entries: int = 1000,
    ) -> None:
        self.ttl_policy = ttl_policy or CacheTTLPolicy()
        self._clock = clock
        self.max_entries = max_entries
        self._entries: Dict[str, CacheEntry] = {}

    @staticmethod
    def key(domain: str, query: str) -> str:
        """Cache key for ``query`` on ``domain``; equivalent queries share one key."""
        normalized = " ".join(query.lower().split())
        return f"search:{domain.lower()}:{normalized}"

    def get(self, domain: str, query: str) -> Optional[List[RawSearchRecord]]:
        """Return cached records, or None when absent or expired."""
        key = self.key(domain, query)
        entry = self._entries.get(key)
        if entry is None:
            return None
        if entry.is_expired(self._clock()):
            self._entries.pop(key, None)
            logger.debug("Cache entry expired for %s", key)
            return None
        return list(entry.data)

    def set(self, domain: str, query: str, data: List[RawSearchRecord]) -> None:
        """Store records with the TTL of the domain's class."""
        key = self.key(domain, query)
        self._entries[key] = CacheEntry(
            data=list(data),
            stored_at=self._clock(),
            ttl=self.ttl_policy.ttl_for(domain),
        )
        if len(self._entries) > self.max_entries:
            self._cleanup()

    def _cleanup(self) -> None:
        now = self._clock()
        expired = [k for k, e in self._entries.items() if e.is_expired(now)]
        for key in expired:
            self._entries.pop(key, None)
        overflow = len(self._entries) - self.max_entries
        if overflow > 0:
            oldest = sorted(self._entries, key=lambda k: self._entries[k].stored_at)
            for key in oldest[:overflow]:
                self._entries.pop(key, None)
        logger.debug(
            "Cache cleanup removed %d expired and %d overflow entries",
            len(expired),
            max(overflow, 0),
        )

    def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)
