"""Freshness validation of legal sources.

Inspects snippet text for year mentions and known-superseded legal terms and
decides whether a source reflects the law as it stands in the current year.
All checks read the current year from an injected provider so results are
deterministic under test.
"""

import re
from datetime import date
from typing import Callable, Iterable, List, Optional, Pattern, Sequence

from .models import FreshnessVerdict

YearProvider = Callable[[], int]

# Lowest year considered a meaningful date; smaller numbers are mostly
# article or statute numbers.
MIN_YEAR = 2020

# Legal concepts that have been abolished or superseded.
OUTDATED_TERMS: Sequence[str] = (
    "jubelton",
    "jubeltoeslag",
    "afgeschaft per 2023",
    "tot en met 2022",
    "geldig tot 2022",
    "vervallen per 2023",
)

# Phrases signalling interest in a past state of the law.
HISTORICAL_INDICATORS: Sequence[str] = (
    "wat was",
    "hoe was het",
    "in het verleden",
    "vroeger",
    "destijds",
    "toen",
    "geschiedenis van",
    "ontwikkeling van",
    "what was",
    "in the past",
    "back then",
    "history of",
)

HISTORICAL_PATTERNS: Sequence[str] = (
    r"\bin (?:19|20)\d{2}\b",
)

_YEAR_RE = re.compile(r"\b(\d{4})\b")


def current_year() -> int:
    """Default year provider: the calendar year of the local clock."""
    return date.today().year


def _phrase_pattern(phrase: str) -> Pattern[str]:
    return re.compile(r"\b" + re.escape(phrase.lower()) + r"\b")


class FreshnessValidator:
    """Classifies documents as current, outdated or undated.

    Args:
        year_provider: Callable returning the current year.
        outdated_terms: Deny-list of superseded legal terms.
        historical_indicators: Phrases marking a retrospective question.
        historical_patterns: Regular expressions marking a retrospective question.
    """

    def __init__(
        self,
        year_provider: YearProvider = current_year,
        outdated_terms: Iterable[str] = OUTDATED_TERMS,
        historical_indicators: Iterable[str] = HISTORICAL_INDICATORS,
        historical_patterns: Iterable[str] = HISTORICAL_PATTERNS,
    ) -> None:
        self._year_provider = year_provider
        self.outdated_terms = tuple(outdated_terms)
        self.historical_indicators = tuple(historical_indicators)
        self._historical_res: List[Pattern[str]] = [
            _phrase_pattern(p) for p in self.historical_indicators
        ] + [re.compile(p) for p in historical_patterns]

    @property
    def current_year(self) -> int:
        return self._year_provider()

    def extract_years(self, text: str, year: Optional[int] = None) -> List[int]:
        """Return the unique plausible years in ``text``, newest first."""
        upper = (year if year is not None else self.current_year) + 1
        found = {int(m) for m in _YEAR_RE.findall(text)}
        return sorted((y for y in found if MIN_YEAR <= y <= upper), reverse=True)

    def detect_outdated_references(self, text: str) -> List[str]:
        """Return the deny-listed terms that occur in ``text``."""
        lowered = text.lower()
        return [term for term in self.outdated_terms if term.lower() in lowered]

    def validate(self, text: str, title: str = "") -> FreshnessVerdict:
        """Classify a document by its title and snippet."""
        year = self.current_year
        combined = f"{title} {text}"
        years = tuple(self.extract_years(combined, year))

        outdated = self.detect_outdated_references(combined)
        if outdated:
            return FreshnessVerdict(
                is_current_year=False,
                has_valid_date=False,
                extracted_years=years,
                reason=f"contains outdated reference: {', '.join(outdated)}",
            )

        if not years:
            return FreshnessVerdict(
                is_current_year=False,
                has_valid_date=False,
                extracted_years=(),
                reason="no valid year found",
            )

        most_recent = max(years)
        if most_recent < year:
            return FreshnessVerdict(
                is_current_year=False,
                has_valid_date=True,
                extracted_years=years,
                reason=f"source dates to {most_recent}, current year is {year}",
            )

        return FreshnessVerdict(
            is_current_year=True,
            has_valid_date=True,
            extracted_years=years,
            reason=f"current source ({most_recent})",
        )

    def is_historical_query(self, query: str) -> bool:
        """Heuristic: does the question ask about a past state of the law?"""
        lowered = query.lower()
        return any(pattern.search(lowered) for pattern in self._historical_res)
