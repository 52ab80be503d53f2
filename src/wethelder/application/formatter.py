"""Evidence bundle rendering for the answer-generation model."""

from typing import Dict, List, Sequence

from ..domain.freshness import YearProvider, current_year
from ..domain.models import SearchResult, SourceTag

NO_RESULTS_MESSAGE = "Geen relevante informatie gevonden in officiële bronnen."

OUTDATED_NOTICE_HEADER = "**Deze informatie is mogelijk verouderd.**"

_INSTRUCTIONS = """=== INSTRUCTIES ===
- Het huidige jaar is {year}.
- Gebruik UITSLUITEND informatie uit de bovenstaande bronnen. Voeg geen eigen kennis toe.
- Vermeld bij elke bewering het nummer en de URL van de bron.
- Is een bron niet van {year}, vermeld dat dan expliciet en geef aan dat de regel mogelijk is vervangen of vervallen.
- Staat het antwoord niet in de bronnen, zeg dan: "Deze informatie is niet beschikbaar in de geraadpleegde bronnen."
"""

_OUTDATED_NOTICE = """{header}

**Reden:** {reason}

Ik kan dit pas beantwoorden met een actuele bron uit {year}. Voor betrouwbare en actuele informatie raadpleeg je:

- **Belastingdienst.nl** voor fiscale zaken
- **Wetten.overheid.nl** voor wetgeving
- **Rechtspraak.nl** voor jurisprudentie

**Let op:** Gebruik alleen bronnen die expliciet vermelden dat ze geldig zijn voor {year}."""


def group_by_tag(results: Sequence[SearchResult]) -> Dict[SourceTag, List[SearchResult]]:
    """Group results per tag in ``SourceTag`` order, keeping order within a tag."""
    grouped: Dict[SourceTag, List[SearchResult]] = {}
    for tag in SourceTag:
        items = [r for r in results if r.source == tag]
        if items:
            grouped[tag] = items
    return grouped


class EvidenceFormatter:
    """Renders filtered results plus a fixed instruction block.

    The formatter does no filtering of its own; it prints exactly what it is
    given.
    """

    def __init__(self, year_provider: YearProvider = current_year) -> None:
        self._year_provider = year_provider

    def instructions(self) -> str:
        return _INSTRUCTIONS.format(year=self._year_provider())

    def format(self, results: Sequence[SearchResult]) -> str:
        if not results:
            return NO_RESULTS_MESSAGE

        lines: List[str] = []
        number = 0
        for tag, items in group_by_tag(results).items():
            lines.append(f"=== {tag.label.upper()} ({tag.value}) ===")
            lines.append("")
            for result in items:
                number += 1
                verdict = result.validation
                years = ", ".join(str(y) for y in verdict.extracted_years) or "geen"
                lines.append(f"{number}. {result.title}")
                lines.append(f"   URL: {result.link}")
                lines.append(f"   Fragment: {result.snippet}")
                lines.append(f"   Actualiteit: {verdict.reason}")
                lines.append(f"   Jaartallen: {years}")
                lines.append("")

        lines.append(self.instructions())
        return "\n".join(lines)

    def outdated_notice(self, reason: str) -> str:
        """Notice shown instead of evidence when nothing current was found."""
        return _OUTDATED_NOTICE.format(
            header=OUTDATED_NOTICE_HEADER, reason=reason, year=self._year_provider()
        )
