from wethelder.application.formatter import (
    NO_RESULTS_MESSAGE,
    OUTDATED_NOTICE_HEADER,
    EvidenceFormatter,
    group_by_tag,
)
from wethelder.domain.models import SearchResult, SourceTag

from tests.fakes import YEAR, record


def _result(validator, tag, title, link, snippet) -> SearchResult:
    raw = record(title, link, snippet)
    return SearchResult.from_raw(raw, tag, validator.validate(raw.snippet, raw.title))


def test_empty_results_render_fixed_sentence():
    assert EvidenceFormatter(year_provider=lambda: YEAR).format([]) == NO_RESULTS_MESSAGE


def test_groups_by_tag_and_numbers_items(validator):
    results = [
        _result(validator, SourceTag.RECHTSPRAAK, "Uitspraak", "https://rechtspraak.nl/u", f"ECLI {YEAR}"),
        _result(validator, SourceTag.WETTEN, "Wet A", "https://wetten.overheid.nl/a", f"{YEAR} en 2023"),
        _result(validator, SourceTag.WETTEN, "Wet B", "https://wetten.overheid.nl/b", f"{YEAR}"),
    ]

    text = EvidenceFormatter(year_provider=lambda: YEAR).format(results)

    assert text.index("(wetten)") < text.index("(rechtspraak)")
    assert "1. Wet A" in text
    assert "2. Wet B" in text
    assert "3. Uitspraak" in text
    assert "URL: https://wetten.overheid.nl/a" in text
    assert f"Actualiteit: current source ({YEAR})" in text
    assert f"Jaartallen: {YEAR}, 2023" in text
    assert f"Het huidige jaar is {YEAR}." in text
    assert "UITSLUITEND" in text


def test_formatter_does_not_filter(validator):
    stale = _result(validator, SourceTag.BOETES, "Oud", "https://om.nl/oud", "Zonder datum")

    text = EvidenceFormatter(year_provider=lambda: YEAR).format([stale])

    assert "1. Oud" in text
    assert "Jaartallen: geen" in text
    assert "Actualiteit: no valid year found" in text


def test_outdated_notice_names_reason_and_year():
    notice = EvidenceFormatter(year_provider=lambda: YEAR).outdated_notice("alles is oud")
    assert notice.startswith(OUTDATED_NOTICE_HEADER)
    assert "**Reden:** alles is oud" in notice
    assert f"actuele bron uit {YEAR}" in notice


def test_group_by_tag_preserves_order_within_tag(validator):
    a = _result(validator, SourceTag.APV, "A", "https://amsterdam.nl/a", "")
    b = _result(validator, SourceTag.CAO, "B", "https://cao-politie.nl/b", "")
    c = _result(validator, SourceTag.APV, "C", "https://utrecht.nl/c", "")

    grouped = group_by_tag([b, a, c])

    assert list(grouped) == [SourceTag.APV, SourceTag.CAO]
    assert [r.title for r in grouped[SourceTag.APV]] == ["A", "C"]
