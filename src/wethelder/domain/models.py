"""Core domain models for the verified-source pipeline."""

from datetime import datetime
from enum import Enum
from typing import Dict, List, Optional, Tuple
from urllib.parse import urlparse

from pydantic import BaseModel, ConfigDict, Field, field_validator


class SourceTag(str, Enum):
    """Category of legal authority a domain belongs to.

    Declaration order is the display order used when results are grouped.
    """

    WETTEN = "wetten"
    RECHTSPRAAK = "rechtspraak"
    TUCHTRECHT = "tuchtrecht"
    BOETES = "boetes"
    APV = "apv"
    CAO = "cao"
    POLITIEBOND = "politiebond"
    VAKBOND = "vakbond"
    OVERHEID = "overheid"
    OFFICIEEL = "officieel"

    @property
    def label(self) -> str:
        """Human readable (Dutch) name of the category."""
        return _TAG_LABELS[self]


_TAG_LABELS: Dict[SourceTag, str] = {
    SourceTag.WETTEN: "Wet- en regelgeving",
    SourceTag.RECHTSPRAAK: "Jurisprudentie",
    SourceTag.TUCHTRECHT: "Tuchtrecht",
    SourceTag.BOETES: "Boetebase",
    SourceTag.APV: "Gemeentelijke verordeningen (APV)",
    SourceTag.CAO: "Cao en arbeidsvoorwaarden",
    SourceTag.POLITIEBOND: "Politiebond",
    SourceTag.VAKBOND: "Vakbonden",
    SourceTag.OVERHEID: "Rijksoverheid",
    SourceTag.OFFICIEEL: "Officiële instanties",
}


class FreshnessVerdict(BaseModel):
    """Temporal validity of a single document, fixed when it is created."""

    model_config = ConfigDict(frozen=True)

    is_current_year: bool
    has_valid_date: bool
    extracted_years: Tuple[int, ...] = ()
    reason: str


class RawSearchRecord(BaseModel):
    """One upstream hit exactly as the search provider returned it.

    This is the form stored in the result cache; freshness is derived from it
    again on every access.
    """

    model_config = ConfigDict(frozen=True)

    title: str = ""
    link: str
    snippet: str = ""
    display_link: Optional[str] = None
    formatted_url: Optional[str] = None

    @field_validator("link")
    @classmethod
    def link_is_url(cls, v: str) -> str:
        """Ensure the link, which is the identity of a result, is an absolute URL."""
        if not v or not v.strip():
            raise ValueError("link must not be empty")
        v = v.strip()
        parsed = urlparse(v)
        if not parsed.scheme or not parsed.hostname:
            raise ValueError(f"link is not an absolute URL: {v!r}")
        return v


class SearchResult(BaseModel):
    """A validated upstream hit labeled with the category it was found under."""

    model_config = ConfigDict(frozen=True)

    title: str
    link: str
    snippet: str = ""
    display_link: str
    formatted_url: str
    source: SourceTag
    validation: FreshnessVerdict

    @property
    def is_current_year(self) -> bool:
        return self.validation.is_current_year

    @classmethod
    def from_raw(
        cls, raw: RawSearchRecord, tag: SourceTag, validation: FreshnessVerdict
    ) -> "SearchResult":
        """Build a result from a raw upstream record and its verdict."""
        return cls(
            title=raw.title,
            link=raw.link,
            snippet=raw.snippet,
            display_link=raw.display_link or urlparse(raw.link).hostname or raw.link,
            formatted_url=raw.formatted_url or raw.link,
            source=tag,
            validation=validation,
        )


class SearchMetrics(BaseModel):
    """Freshness counts over a list of results."""

    total: int = 0
    current_year: int = 0
    outdated: int = 0


class AggregatedResultSet(BaseModel):
    """Outcome of one aggregated query; built per request and never persisted."""

    query: str
    is_historical_query: bool
    results: List[SearchResult] = Field(default_factory=list)
    per_tag_results: Dict[SourceTag, List[SearchResult]] = Field(default_factory=dict)
    total_count: int = 0
    current_year_count: int = 0
    outdated_count: int = 0
    combined_evidence_text: str
    evidence_withheld: bool = False
    search_terms: List[str] = Field(default_factory=list)
    tags_searched: List[SourceTag] = Field(default_factory=list)
    timestamp: datetime

    def summary(self) -> Dict[str, object]:
        """Counts handed to the answer-generation step alongside the evidence."""
        return {
            "totalResults": self.total_count,
            "currentYearResults": self.current_year_count,
            "outdatedResults": self.outdated_count,
            "isHistoricalQuery": self.is_historical_query,
        }


class WorkflowResult(BaseModel):
    """Search results plus the assembled prompt for the language model."""

    search_results: AggregatedResultSet
    prompt: str
    success: bool = True
    error: Optional[str] = None
