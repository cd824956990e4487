from contextpack.models import SourceRecord
from contextpack.stages.filters import filter_by_url, is_boilerplate, is_structured_data, keep_snippet
from contextpack.stages.sanitize import sanitize_snippet


def test_structured_data_keys_and_long_json():
    assert is_structured_data('{"@graph": [{"@type":"Organization","name":"Example"}]}')
    assert is_structured_data('x "@CONTEXT": "https://schema.org"')
    assert is_structured_data("[" + "1," * 100 + "1]")
    assert not is_structured_data('{"short": true}')
    assert not is_structured_data("Bananas contain potassium.")


def test_boilerplate_signals():
    assert is_boilerplate("Table of Contents (click to expand)")
    assert is_boilerplate("Home » Fruit » Bananas")
    assert is_boilerplate("Read our Privacy Policy")
    assert not is_boilerplate("Bananas are berries.")


def test_classification_is_idempotent():
    raw = [
        "## Ripening\nBananas turn yellow as they ripen.",
        "Share on Facebook",
        "Starch converts to sugar over several days.",
    ]
    kept = [t for t in (sanitize_snippet(s) for s in raw) if keep_snippet(t)]
    again = [t for t in (sanitize_snippet(s) for s in kept) if keep_snippet(t)]
    assert kept == again
    assert len(kept) == 2
    assert not keep_snippet("")


def test_filter_by_url_exact_match():
    recs = [
        SourceRecord(title="A", url="https://example.com/a"),
        SourceRecord(title="B", url="https://example.com/A"),
    ]
    assert [r.title for r in filter_by_url(recs, "https://example.com/a")] == ["A"]
    assert filter_by_url(recs, "https://example.com/a/") == []
    assert len(filter_by_url(recs, None)) == 2
