"""Tests for loading the routing policy."""

import json

import pytest

from local_router import ConfigUnavailable, RouteDecision, RoutingPolicy, load_policy
from local_router.config import DEFAULT_COMMAND_STARTERS, RoutingRules, parse_policy, read_policy

FULL = {
    "enabled": True,
    "ollama": {
        "baseUrl": "http://localhost:11434",
        "timeoutMs": 15000,
        "models": {"simple": "llama3.2:3b", "general": "llama3.1:8b", "reasoning": "qwen2.5:14b"},
    },
    "routing": {
        "maxWordsForSimple": 12,
        "privacyKeywords": ["password", "social security"],
        "simpleStarters": ["What", "who", "define"],
    },
}


def write(tmp_path, data) -> str:
    path = tmp_path / "llm-routing.json"
    path.write_text(data if isinstance(data, str) else json.dumps(data), encoding="utf-8")
    return str(path)


def test_parse_full_config():
    policy = parse_policy(FULL)
    assert policy.enabled
    assert policy.ollama.base_url == "http://localhost:11434"
    assert policy.ollama.timeout_ms == 15000
    assert policy.ollama.models.reasoning == "qwen2.5:14b"
    assert policy.routing.max_words_for_simple == 12
    assert policy.routing.privacy_keywords == ("password", "social security")
    assert policy.routing.simple_starters == ("what", "who", "define")
    assert policy.routing.command_starters == DEFAULT_COMMAND_STARTERS


def test_command_starters_can_be_configured():
    raw = json.loads(json.dumps(FULL))
    raw["routing"]["commandStarters"] = ["Define", "summarise"]
    assert parse_policy(raw).routing.command_starters == ("define", "summarise")


def test_disabled_needs_no_other_fields():
    assert parse_policy({"enabled": False}) == RoutingPolicy.disabled()
    assert parse_policy({}) == RoutingPolicy.disabled()


@pytest.mark.parametrize("mutate", [
    lambda raw: raw.pop("ollama"),
    lambda raw: raw["ollama"].update(timeoutMs="30s"),
    lambda raw: raw["ollama"].update(timeoutMs=0),
    lambda raw: raw["ollama"]["models"].pop("general"),
    lambda raw: raw["routing"].update(maxWordsForSimple=True),
    lambda raw: raw["routing"].update(privacyKeywords="password"),
    lambda raw: raw.update(enabled="yes"),
    lambda raw: raw["ollama"].update(baseUrl="http://ollama.test:abc"),
    lambda raw: raw["ollama"].update(baseUrl="localhost:11434"),
    lambda raw: raw["ollama"].update(baseUrl=""),
])
def test_invalid_shapes_raise(mutate):
    raw = json.loads(json.dumps(FULL))
    mutate(raw)
    with pytest.raises(ConfigUnavailable):
        parse_policy(raw)


def test_read_policy_bad_json(tmp_path):
    with pytest.raises(ConfigUnavailable):
        read_policy(write(tmp_path, "{not json"))


def test_load_policy_from_file(tmp_path):
    assert load_policy(write(tmp_path, FULL)) == parse_policy(FULL)


def test_load_policy_missing_file_is_disabled(tmp_path):
    policy = load_policy(tmp_path / "nope.json")
    assert not policy.enabled


def test_load_policy_invalid_file_is_disabled(tmp_path):
    assert not load_policy(write(tmp_path, "[1, 2")).enabled
    assert not load_policy(write(tmp_path, {"enabled": True})).enabled


def test_load_policy_defaults_to_cwd(tmp_path, monkeypatch):
    write(tmp_path, FULL)
    monkeypatch.chdir(tmp_path)
    assert load_policy().enabled


def test_model_for():
    policy = parse_policy(FULL)
    assert policy.model_for(RouteDecision.SIMPLE_LOCAL) == "llama3.2:3b"
    assert policy.model_for(RouteDecision.FORCED_LOCAL) == "llama3.1:8b"
    assert policy.model_for(RouteDecision.PRIVACY_LOCAL) == "llama3.1:8b"


def test_routing_rules_lowercase_starters():
    rules = RoutingRules(simple_starters=("What", "DEFINE"), command_starters=("Define",))
    assert rules.simple_starters == ("what", "define")
    assert rules.command_starters == ("define",)
