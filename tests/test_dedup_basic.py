from contextpack.stages.dedup import dedup_exact, is_near_duplicate, normalize_for_compare

BASE = "Bananas turn yellow when chlorophyll degrades and yellow pigments become visible."


def test_normalize_for_compare():
    assert normalize_for_compare("Hello,  World!! ") == "hello world"
    assert normalize_for_compare("snake_case--value") == "snake case value"
    assert normalize_for_compare("") == ""


def test_dedup_exact_first_wins():
    out = dedup_exact(["Hello World!", "hello   world", "Completely different"])
    assert [c.text for c in out] == ["Hello World!", "Completely different"]
    assert out[0].norm == "hello world"


def test_near_duplicate_containment_floor():
    short = normalize_for_compare(BASE)
    longer = normalize_for_compare(BASE + " Ethylene speeds this up.")
    assert len(short) >= 80
    assert is_near_duplicate(short, longer)
    assert is_near_duplicate(longer, short)
    # containment below the floor does not count
    assert not is_near_duplicate("bananas are yellow", "ripe bananas are yellow")
    assert is_near_duplicate("same text", "same text")
