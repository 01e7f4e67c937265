"""LocalRouter — answer cheap or private messages with Ollama, hand the rest back."""

from collections.abc import Awaitable, Callable, Sequence
from pathlib import Path

from loguru import logger

from local_router.config import RoutingPolicy, load_policy
from local_router.errors import BackendError
from local_router.heuristics import classify, extract_bare_text
from local_router.models import Message, RouteDecision, RouteOutcome
from local_router.ollama import generate as ollama_generate

PRIVATE_INDICATOR = "🔒 [Private]"
LOCAL_INDICATOR = "🤖 [Local]"

# (prompt, model, base_url, timeout_ms) -> text
GenerateFn = Callable[[str, str, str, int], Awaitable[str]]


class LocalRouter:
    """Decides per message whether the local model answers it.

    A route that is declined or fails is not an error: the caller gets
    ``None`` from :meth:`try_local_route` and uses the remote assistant.
    The policy is never mutated, so one router can serve concurrent callers.
    No retries are made; a failed local call falls back exactly once.
    """

    def __init__(self, policy: RoutingPolicy, generate: GenerateFn = ollama_generate):
        self._policy = policy
        self._generate = generate

    @classmethod
    def from_config(
        cls, path: str | Path | None = None, generate: GenerateFn = ollama_generate,
    ) -> "LocalRouter":
        """Load the policy once (startup) and build a router around it."""
        return cls(load_policy(path), generate=generate)

    @property
    def policy(self) -> RoutingPolicy:
        return self._policy

    async def route(self, messages: Sequence[Message], group_name: str) -> RouteOutcome:
        cfg = self._policy
        if not cfg.enabled:
            return RouteOutcome(RouteDecision.REMOTE)

        decision = classify(messages, cfg)
        if decision is RouteDecision.REMOTE:
            logger.debug(f"LLM router: remote (group={group_name})")
            return RouteOutcome(decision)

        model = cfg.model_for(decision)
        query = extract_bare_text(messages)
        logger.info(
            f"LLM router: Ollama (group={group_name}, decision={decision.value}, "
            f"model={model}) query={query[:120]!r}"
        )

        try:
            response = await self._generate(
                query, model, cfg.ollama.base_url, cfg.ollama.timeout_ms,
            )
        except BackendError as e:
            logger.warning(
                f"Ollama failed, falling back to remote (group={group_name}, "
                f"decision={decision.value}, model={model}): {type(e).__name__}: {e}"
            )
            return RouteOutcome(decision, model=model, error=e)

        indicator = PRIVATE_INDICATOR if decision is RouteDecision.PRIVACY_LOCAL else LOCAL_INDICATOR
        logger.info(f"Ollama response received (group={group_name}, decision={decision.value}, model={model})")
        return RouteOutcome(decision, model=model, text=f"{indicator} {response}")

    async def try_local_route(self, messages: Sequence[Message], group_name: str) -> str | None:
        """Formatted local answer, or None meaning "use the remote assistant"."""
        outcome = await self.route(messages, group_name)
        return outcome.text
