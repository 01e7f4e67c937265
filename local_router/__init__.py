"""local-router: keep simple or private chat messages on a local Ollama model."""

from local_router.config import RoutingPolicy, load_policy
from local_router.errors import (
    BackendError,
    BackendHTTPError,
    BackendMalformedResponse,
    BackendTimeout,
    BackendUnreachable,
    ClassifierPrecondition,
    ConfigUnavailable,
)
from local_router.heuristics import classify
from local_router.models import Message, RouteDecision, RouteOutcome
from local_router.router import LocalRouter

__all__ = [
    "Message",
    "RouteDecision",
    "RouteOutcome",
    "RoutingPolicy",
    "load_policy",
    "classify",
    "LocalRouter",
    "BackendError",
    "BackendHTTPError",
    "BackendMalformedResponse",
    "BackendTimeout",
    "BackendUnreachable",
    "ClassifierPrecondition",
    "ConfigUnavailable",
]
