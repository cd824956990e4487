from contextpack.stages.sanitize import sanitize_snippet


def test_sanitize_strips_image_markers():
    raw = "*[Image: Banana ripeness]* Bananas turn yellow."
    assert sanitize_snippet(raw) == "Bananas turn yellow."


def test_sanitize_headings_and_nbsp():
    raw = "## Why bananas ripen\nEthylene&nbsp;drives ripening.\n\n###### Notes\tand more"
    assert sanitize_snippet(raw) == "Why bananas ripen Ethylene drives ripening. Notes and more"


def test_sanitize_keeps_inline_hashes():
    assert sanitize_snippet("Issue #42 is fixed") == "Issue #42 is fixed"


def test_sanitize_empty_inputs():
    assert sanitize_snippet("") == ""
    assert sanitize_snippet("   \n\t ") == ""
    assert sanitize_snippet("![logo](https://x/y.png)") == ""


def test_sanitize_lone_heading_marker_line():
    assert sanitize_snippet("#\nBananas ripen.") == "Bananas ripen."
    assert sanitize_snippet("####### not a heading") == "####### not a heading"
