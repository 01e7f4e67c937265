"""Core data models for local-router."""

from dataclasses import dataclass
from enum import Enum

from local_router.errors import BackendError


@dataclass(frozen=True)
class Message:
    """One turn in a chat conversation."""
    content: str
    is_from_me: bool = False      # sent by this automation
    is_bot_message: bool = False  # sent by some other bot account


class RouteDecision(str, Enum):
    """Result of routing classification."""
    FORCED_LOCAL = "forced-local"    # user typed !local
    PRIVACY_LOCAL = "privacy-local"  # privacy keyword somewhere in the conversation
    SIMPLE_LOCAL = "simple-local"    # short factual question
    REMOTE = "remote"

    @property
    def is_local(self) -> bool:
        return self is not RouteDecision.REMOTE


@dataclass(frozen=True)
class RouteOutcome:
    """What the dispatcher did with one conversation.

    ``text`` is set only when the local backend answered. Otherwise the
    caller should use the remote assistant; ``error`` says why a local
    attempt was abandoned, if one was made.
    """
    decision: RouteDecision
    model: str | None = None
    text: str | None = None
    error: BackendError | None = None

    @property
    def handled(self) -> bool:
        return self.text is not None
