import pytest

from local_router.config import ModelTiers, OllamaSettings, RoutingPolicy, RoutingRules


@pytest.fixture
def policy() -> RoutingPolicy:
    return RoutingPolicy(
        enabled=True,
        ollama=OllamaSettings(
            base_url="http://ollama.test:11434",
            timeout_ms=2000,
            models=ModelTiers(simple="tiny", general="medium", reasoning="large"),
        ),
        routing=RoutingRules(
            max_words_for_simple=6,
            privacy_keywords=("social security", "password", "ssn"),
            simple_starters=("what", "who", "when", "define", "explain"),
        ),
    )
