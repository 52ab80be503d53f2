"""Registry of the authoritative domains searched per source category."""

from typing import Dict, Iterable, Iterator, List, Mapping, Optional, Sequence, Tuple

from .exceptions import ConfigurationError
from .models import SourceTag

SITE_GROUPS: Mapping[SourceTag, Sequence[str]] = {
    SourceTag.WETTEN: (
        "wetten.overheid.nl",
        "lokaleregelgeving.overheid.nl",
        "zoekservice.overheid.nl",
        "cvdr.nl",
        "officielebekendmakingen.nl",
    ),
    SourceTag.RECHTSPRAAK: (
        "uitspraken.rechtspraak.nl",
        "rechtspraak.nl",
    ),
    SourceTag.TUCHTRECHT: ("tuchtrecht.overheid.nl",),
    SourceTag.BOETES: (
        "boetebase.om.nl",
        "om.nl",
    ),
    SourceTag.APV: (
        "amsterdam.nl",
        "rotterdam.nl",
        "denhaag.nl",
        "utrecht.nl",
        "eindhoven.nl",
        "tilburg.nl",
        "groningen.nl",
        "almere.nl",
        "breda.nl",
        "nijmegen.nl",
        "enschede.nl",
        "haarlem.nl",
        "arnhem.nl",
        "zaanstad.nl",
        "haarlemmermeer.nl",
    ),
    SourceTag.CAO: (
        "cao-politie.nl",
        "arbeidsvoorwaarden.overheid.nl",
        "overheid.nl",
    ),
    SourceTag.POLITIEBOND: (
        "politiebond.nl",
        "politie.nl",
    ),
    SourceTag.VAKBOND: (
        "fnv.nl",
        "cnv.nl",
        "vcp.nl",
    ),
    SourceTag.OVERHEID: (
        "overheid.nl",
        "rijksoverheid.nl",
        "minvenj.nl",
        "minbzk.nl",
        "belastingdienst.nl",
        "cbr.nl",
        "rdw.nl",
        "igj.nl",
        "acm.nl",
        "afm.nl",
        "ienw.nl",
        "ilent.nl",
        "minbza.nl",
    ),
    SourceTag.OFFICIEEL: (
        "advocatenorde.nl",
        "kbn.nl",
        "notaris.nl",
        "veiligheidsregio.nl",
        "nctv.nl",
        "wodc.nl",
    ),
}


class SiteGroupRegistry:
    """Static mapping from source tag to an ordered list of domains.

    Validation happens once at construction: every tag needs at least one
    domain and domains must be unique within a tag.

    Args:
        groups: Mapping of tag to domains. Defaults to ``SITE_GROUPS``.
        require_all_tags: If True, every ``SourceTag`` must be present.
    """

    def __init__(
        self,
        groups: Optional[Mapping[SourceTag, Sequence[str]]] = None,
        require_all_tags: bool = True,
    ) -> None:
        source = SITE_GROUPS if groups is None else groups
        self._groups: Dict[SourceTag, Tuple[str, ...]] = {}

        for tag, domains in source.items():
            tag = SourceTag(tag)
            cleaned = tuple(d.strip().lower() for d in domains)
            if not cleaned or any(not d for d in cleaned):
                raise ConfigurationError(f"source tag '{tag.value}' has no domains")
            if len(set(cleaned)) != len(cleaned):
                raise ConfigurationError(
                    f"source tag '{tag.value}' lists a domain more than once"
                )
            self._groups[tag] = cleaned

        if require_all_tags:
            missing = [t.value for t in SourceTag if t not in self._groups]
            if missing:
                raise ConfigurationError(
                    f"no domains configured for source tags: {', '.join(missing)}"
                )

    @property
    def tags(self) -> List[SourceTag]:
        """Configured tags in ``SourceTag`` declaration order."""
        return [t for t in SourceTag if t in self._groups]

    def domains_for(self, tag: SourceTag) -> Tuple[str, ...]:
        try:
            return self._groups[SourceTag(tag)]
        except KeyError:
            raise ConfigurationError(f"unknown source tag '{tag}'") from None

    def pairs(self, tags: Optional[Iterable[SourceTag]] = None) -> List[Tuple[SourceTag, str]]:
        """All (tag, domain) pairs for the requested tags, in registry order."""
        if tags is None:
            selected = self.tags
        else:
            selected = list(dict.fromkeys(SourceTag(t) for t in tags))
        return [(tag, domain) for tag in selected for domain in self.domains_for(tag)]

    def __iter__(self) -> Iterator[SourceTag]:
        return iter(self.tags)

    def __len__(self) -> int:
        return len(self._groups)
