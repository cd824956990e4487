import json

import pytest

import cli
from contextpack.utils import load_config

PAYLOAD = {
    "grounding": {
        "generic": [
            {
                "title": "Banana science",
                "url": "https://example.com/banana",
                "snippets": ["Bananas turn yellow as chlorophyll breaks down.", "Share on Facebook"],
            },
        ]
    },
    "sources": {},
}


def test_cli_replay_compact(tmp_path, capsys):
    path = tmp_path / "resp.json"
    path.write_text(json.dumps(PAYLOAD), encoding="utf-8")
    cli.main(["--input", str(path), "--query", "why are bananas yellow"])
    out = capsys.readouterr().out.strip()
    assert json.loads(out)["snippets"] == ["Bananas turn yellow as chlorophyll breaks down."]


def test_cli_config_and_overrides(tmp_path):
    resp = tmp_path / "resp.json"
    resp.write_text(json.dumps(PAYLOAD), encoding="utf-8")
    cfg = tmp_path / "cfg.yaml"
    cfg.write_text("request:\n  query: bananas\n  response_mode: compact\n", encoding="utf-8")
    text = cli.run_once(str(cfg), input_path=str(resp), overrides={"response_mode": "full"})
    assert json.loads(text)["snippets"][1] == "Share on Facebook"


def test_config_validation(tmp_path):
    cfg = tmp_path / "bad.yaml"
    cfg.write_text("request:\n  bogus: 1\n", encoding="utf-8")
    with pytest.raises(ValueError, match="Config validation error"):
        load_config(str(cfg))
    assert load_config(None) == {}


def test_cli_requires_query(tmp_path):
    resp = tmp_path / "resp.json"
    resp.write_text(json.dumps(PAYLOAD), encoding="utf-8")
    with pytest.raises(ValueError, match="query required"):
        cli.run_once(None, input_path=str(resp))
