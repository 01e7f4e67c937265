"""Routing policy: the shape of llm-routing.json and how it is loaded.

The policy is read once at startup and handed to :class:`LocalRouter` by
reference. Any problem reading it (missing file, bad JSON, wrong field types)
turns routing off instead of failing the process.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import httpx
from loguru import logger

from local_router.errors import ConfigUnavailable
from local_router.models import RouteDecision

DEFAULT_CONFIG_FILE = "llm-routing.json"

# Starters that don't need a trailing '?' (imperative lookups)
DEFAULT_COMMAND_STARTERS = ("define", "explain")


@dataclass(frozen=True)
class ModelTiers:
    """Ollama model names keyed by intent tier."""

    simple: str = ""
    general: str = ""
    reasoning: str = ""  # configured, not selected by any current route


@dataclass(frozen=True)
class OllamaSettings:
    base_url: str = "http://localhost:11434"
    timeout_ms: int = 30000
    models: ModelTiers = field(default_factory=ModelTiers)


@dataclass(frozen=True)
class RoutingRules:
    max_words_for_simple: int = 0
    privacy_keywords: tuple[str, ...] = ()
    simple_starters: tuple[str, ...] = ()
    command_starters: tuple[str, ...] = DEFAULT_COMMAND_STARTERS

    def __post_init__(self):
        # starters are compared against a lower-cased first word
        object.__setattr__(self, "simple_starters", tuple(s.lower() for s in self.simple_starters))
        object.__setattr__(self, "command_starters", tuple(s.lower() for s in self.command_starters))


@dataclass(frozen=True)
class RoutingPolicy:
    """Everything the classifier and dispatcher need to know."""

    enabled: bool = False
    ollama: OllamaSettings = field(default_factory=OllamaSettings)
    routing: RoutingRules = field(default_factory=RoutingRules)

    @classmethod
    def disabled(cls) -> RoutingPolicy:
        return cls(enabled=False)

    def model_for(self, decision: RouteDecision) -> str:
        """Pick the model tier for a local decision.

        Short questions use the ``simple`` tier; forced and privacy routes
        use ``general``.
        """
        if decision is RouteDecision.SIMPLE_LOCAL:
            return self.ollama.models.simple
        return self.ollama.models.general


def _section(raw: dict[str, Any], key: str) -> dict[str, Any]:
    value = raw.get(key)
    if not isinstance(value, dict):
        raise ConfigUnavailable(f"'{key}' must be an object")
    return value


def _string(raw: dict[str, Any], key: str) -> str:
    value = raw.get(key)
    if not isinstance(value, str):
        raise ConfigUnavailable(f"'{key}' must be a string")
    return value


def _base_url(raw: dict[str, Any], key: str) -> str:
    value = _string(raw, key)
    try:
        url = httpx.URL(value)
    except httpx.InvalidURL as e:
        raise ConfigUnavailable(f"'{key}' is not a valid URL: {e}") from e
    if url.scheme not in ("http", "https") or not url.host:
        raise ConfigUnavailable(f"'{key}' must be an http(s) URL with a host")
    return value


def _int(raw: dict[str, Any], key: str, minimum: int = 0) -> int:
    value = raw.get(key)
    # bool is an int subclass; reject it explicitly
    if isinstance(value, bool) or not isinstance(value, int) or value < minimum:
        raise ConfigUnavailable(f"'{key}' must be an integer >= {minimum}")
    return value


def _strings(raw: dict[str, Any], key: str, default: tuple[str, ...] | None = None) -> tuple[str, ...]:
    value = raw.get(key)
    if value is None and default is not None:
        return default
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        raise ConfigUnavailable(f"'{key}' must be a list of strings")
    return tuple(value)


def parse_policy(raw: Any) -> RoutingPolicy:
    """Build a :class:`RoutingPolicy` from the decoded JSON document.

    Raises:
        ConfigUnavailable: If a required field is missing or has the wrong type.
    """
    if not isinstance(raw, dict):
        raise ConfigUnavailable("config root must be an object")

    enabled = raw.get("enabled", False)
    if not isinstance(enabled, bool):
        raise ConfigUnavailable("'enabled' must be a boolean")
    if not enabled:
        return RoutingPolicy.disabled()

    ollama = _section(raw, "ollama")
    models = _section(ollama, "models")
    routing = _section(raw, "routing")

    return RoutingPolicy(
        enabled=True,
        ollama=OllamaSettings(
            base_url=_base_url(ollama, "baseUrl"),
            timeout_ms=_int(ollama, "timeoutMs", minimum=1),
            models=ModelTiers(
                simple=_string(models, "simple"),
                general=_string(models, "general"),
                reasoning=_string(models, "reasoning"),
            ),
        ),
        routing=RoutingRules(
            max_words_for_simple=_int(routing, "maxWordsForSimple"),
            privacy_keywords=_strings(routing, "privacyKeywords"),
            simple_starters=_strings(routing, "simpleStarters"),
            command_starters=_strings(routing, "commandStarters", DEFAULT_COMMAND_STARTERS),
        ),
    )


def read_policy(path: str | Path) -> RoutingPolicy:
    """Read and validate a config file. Raises ConfigUnavailable on any problem."""
    try:
        raw = json.loads(Path(path).read_text(encoding="utf-8"))
    except (OSError, ValueError) as e:
        raise ConfigUnavailable(f"cannot read {path}: {e}") from e
    return parse_policy(raw)


def load_policy(path: str | Path | None = None) -> RoutingPolicy:
    """Load the routing policy, degrading to disabled routing on failure.

    ``path`` defaults to ``llm-routing.json`` in the current working directory.
    """
    config_path = Path(path) if path is not None else Path.cwd() / DEFAULT_CONFIG_FILE
    try:
        policy = read_policy(config_path)
    except ConfigUnavailable as e:
        logger.warning(f"LLM routing config not found or invalid, routing disabled ({config_path}): {e}")
        return RoutingPolicy.disabled()
    logger.info(f"LLM routing config loaded from {config_path} (enabled={policy.enabled})")
    return policy
