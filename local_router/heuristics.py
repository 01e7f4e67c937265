"""Lexical routing heuristics.

classify() decides, from the conversation text alone, whether a message can
be answered by the local model. It does no I/O and never mutates its input.

Precedence (first match wins):
  1. ``!local`` prefix     -> forced-local
  2. privacy keyword       -> privacy-local
  3. short simple question -> simple-local
  4. otherwise             -> remote
"""

from __future__ import annotations

import re
from collections.abc import Sequence

from local_router.config import RoutingPolicy
from local_router.errors import ClassifierPrecondition
from local_router.models import Message, RouteDecision

_MENTION = re.compile(r"^@\S+\s*")
_LOCAL_DIRECTIVE = re.compile(r"^!local\b\s*", re.IGNORECASE)
# Word runs and single punctuation marks; whitespace only separates tokens.
_TOKEN = re.compile(r"\w+|[^\w\s]")
_NON_LETTERS = re.compile(r"[^a-z]")


def subject_message(conversation: Sequence[Message]) -> Message:
    """Newest message written by a human, else the newest message."""
    if not conversation:
        raise ClassifierPrecondition("cannot classify an empty conversation")
    for message in reversed(conversation):
        if not message.is_from_me and not message.is_bot_message:
            return message
    return conversation[-1]


def strip_mention(text: str) -> str:
    """Drop a leading ``@name`` trigger."""
    return _MENTION.sub("", text, count=1).strip()


def extract_bare_text(conversation: Sequence[Message]) -> str:
    """Subject message text without the ``@name`` trigger or ``!local`` prefix."""
    text = strip_mention(subject_message(conversation).content)
    return _LOCAL_DIRECTIVE.sub("", text, count=1).strip()


def has_local_directive(conversation: Sequence[Message]) -> bool:
    text = strip_mention(subject_message(conversation).content)
    return _LOCAL_DIRECTIVE.match(text) is not None


def tokenize(text: str) -> list[str]:
    return _TOKEN.findall(text.lower())


def _contains_phrase(tokens: Sequence[str], phrase: Sequence[str]) -> bool:
    n = len(phrase)
    first = phrase[0]
    for i in range(len(tokens) - n + 1):
        if tokens[i] == first and tuple(tokens[i:i + n]) == tuple(phrase):
            return True
    return False


def has_privacy_keyword(conversation: Sequence[Message], keywords: Sequence[str]) -> bool:
    """True if any keyword appears as a whole word or phrase anywhere in the conversation.

    Matching is done on token sequences, so keywords are never interpreted
    as patterns and multi-word keywords match across any run of whitespace.
    """
    phrases = [p for p in (tokenize(kw) for kw in keywords) if p]
    if not phrases:
        return False
    tokens = tokenize(" ".join(m.content for m in conversation))
    return any(_contains_phrase(tokens, phrase) for phrase in phrases)


def is_simple_question(
    text: str,
    max_words: int,
    simple_starters: Sequence[str],
    command_starters: Sequence[str],
) -> bool:
    """Starters are expected lower-case, as RoutingRules stores them."""
    words = text.split()
    if not words or len(words) > max_words:
        return False
    first = _NON_LETTERS.sub("", words[0].lower())
    if first not in simple_starters:
        return False
    # define/explain read as lookups even without a '?'
    return first in command_starters or "?" in text


def classify(conversation: Sequence[Message], policy: RoutingPolicy) -> RouteDecision:
    """Pick a route for the newest message in ``conversation``.

    Raises:
        ClassifierPrecondition: If ``conversation`` is empty.
    """
    if not conversation:
        raise ClassifierPrecondition("cannot classify an empty conversation")
    if not policy.enabled:
        return RouteDecision.REMOTE

    rules = policy.routing

    if has_local_directive(conversation):
        return RouteDecision.FORCED_LOCAL

    if has_privacy_keyword(conversation, rules.privacy_keywords):
        return RouteDecision.PRIVACY_LOCAL

    if is_simple_question(
        extract_bare_text(conversation),
        rules.max_words_for_simple,
        rules.simple_starters,
        rules.command_starters,
    ):
        return RouteDecision.SIMPLE_LOCAL

    return RouteDecision.REMOTE
