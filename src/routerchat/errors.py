"""Exception types shared across routerchat.

Completion errors are raised by LLM providers and converted into relay
failures by the dispatcher; they never reach the interaction loop.
"""


class ConfigError(Exception):
    """Missing or invalid configuration (fatal at startup)."""


class CompletionError(Exception):
    """Base class for a failed completion exchange."""


class TransportError(CompletionError):
    """Connection, timeout or other HTTP-layer failure."""

    def __init__(self, message: str):
        super().__init__(f"Transport error: {message}")


class ResponseStatusError(CompletionError):
    """The endpoint answered with a non-success status."""

    def __init__(self, status_code: int, body: str = ""):
        super().__init__(f"Request failed with status: {status_code}")
        self.status_code = status_code
        self.body = body


class ResponseDecodeError(CompletionError):
    """The response body could not be decoded into a completion."""

    def __init__(self, message: str, raw: str = ""):
        super().__init__(f"Failed to parse response: {message}")
        self.raw = raw
