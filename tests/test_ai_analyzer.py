import json

import httpx
import openai
import pytest

from resume_screener.utils import (
    AIAnalyzer,
    analysis_from_response,
    build_analysis_prompt,
    parse_ai_json,
)

from conftest import FakeAIClient


def test_prompt_is_limited_to_configured_length():
    prompt = build_analysis_prompt("x" * 5000, max_chars=3000)
    assert "x" * 3000 in prompt
    assert "x" * 3001 not in prompt


def test_parse_ai_json_strips_markdown_fence():
    assert parse_ai_json('```json\n{"name": "Ann Lee"}\n```') == {"name": "Ann Lee"}


def test_parse_ai_json_rejects_garbage():
    assert parse_ai_json("not json") is None
    assert parse_ai_json("[1, 2]") is None
    assert parse_ai_json(None) is None


def test_invalid_fields_become_not_provided():
    analysis = analysis_from_response({
        "name": "Not Found",
        "yearsOfExperience": "ten",
        "skills": "Python",
        "email": 42,
        "projects": [{"description": "no name"}],
    })
    assert analysis.name is None
    assert analysis.years_of_experience is None
    assert analysis.skills == []
    assert analysis.email is None
    assert analysis.projects == []


def test_numeric_strings_and_negative_years():
    assert analysis_from_response({"yearsOfExperience": "6.8"}).years_of_experience == 6
    assert analysis_from_response({"yearsOfExperience": -2}).years_of_experience is None


@pytest.mark.parametrize("value", [float("inf"), float("-inf"), float("nan"), "1e999", "Infinity"])
def test_non_finite_years_are_dropped(value):
    assert analysis_from_response({"yearsOfExperience": value}).years_of_experience is None


def test_infinite_years_in_json_keep_other_fields():
    client = FakeAIClient(content='{"yearsOfExperience": Infinity, "name": "Ann Lee"}')
    analysis = AIAnalyzer(client, model="m", cache_file=None).analyze("text")
    assert analysis.name == "Ann Lee"
    assert analysis.years_of_experience is None


def test_mapping_error_falls_back(monkeypatch, ai_client):
    def broken(data):
        raise ValueError("bad payload")

    monkeypatch.setattr("resume_screener.utils.analysis_from_response", broken)
    assert AIAnalyzer(ai_client, model="m", cache_file=None).analyze("text") is None


def test_analyze_maps_payload(ai_client, ai_payload):
    analyzer = AIAnalyzer(ai_client, model="test-model", cache_file=None)
    analysis = analyzer.analyze("resume text " * 10)

    assert analysis.name == "John Doe"
    assert analysis.years_of_experience == 7
    assert analysis.skills == ai_payload["skills"]
    assert analysis.projects[0].name == "Billing API"
    call = ai_client.completions.calls[0]
    assert call["model"] == "test-model"
    assert call["response_format"] == {"type": "json_object"}


def test_analyze_returns_none_on_api_error():
    request = httpx.Request("POST", "https://api.openai.com/v1/chat/completions")
    client = FakeAIClient(error=openai.APITimeoutError(request=request))
    assert AIAnalyzer(client, model="m", cache_file=None).analyze("text") is None


def test_analyze_returns_none_on_malformed_json():
    client = FakeAIClient(content="Sorry, I cannot help with that.")
    assert AIAnalyzer(client, model="m", cache_file=None).analyze("text") is None


def test_analyze_uses_cache(tmp_path, ai_payload):
    cache_file = tmp_path / "cache.json"
    client = FakeAIClient(content=json.dumps(ai_payload))
    analyzer = AIAnalyzer(client, model="m", cache_file=cache_file)

    first = analyzer.analyze("text", cache_key="abc")
    second = analyzer.analyze("text", cache_key="abc")

    assert first == second
    assert len(client.completions.calls) == 1
    assert "abc" in json.loads(cache_file.read_text(encoding="utf-8"))
