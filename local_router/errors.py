"""Exceptions raised by local-router."""


class RoutingError(Exception):
    """Base class for every local-router error."""


class ConfigUnavailable(RoutingError):
    """The routing config file is missing or does not have the expected shape."""


class ClassifierPrecondition(RoutingError, ValueError):
    """classify() was called with an empty conversation."""


class BackendError(RoutingError):
    """The local inference backend did not produce an answer."""


class BackendUnreachable(BackendError):
    """Connection-level failure talking to the backend."""


class BackendHTTPError(BackendError):
    def __init__(self, status_code: int, reason: str = ""):
        self.status_code = status_code
        self.reason = reason
        message = f"Ollama HTTP {status_code}"
        if reason:
            message += f": {reason}"
        super().__init__(message)


class BackendMalformedResponse(BackendError):
    """Body was not JSON, not marked done, or had no text response."""


class BackendTimeout(BackendError):
    def __init__(self, timeout_ms: int):
        self.timeout_ms = timeout_ms
        super().__init__(f"Ollama timed out after {timeout_ms}ms")
