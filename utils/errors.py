"""Exception hierarchy for the connect hub."""

from typing import Optional


UNREACHABLE_MESSAGE = "Could not reach the server."
GENERIC_MESSAGE = "Something went wrong. Please try again."


class ConnectHubError(Exception):
    """Base exception for all connect hub errors."""

    default_message = GENERIC_MESSAGE

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class Unreachable(ConnectHubError):
    """Transport-level failure, no response from the remote API."""

    default_message = UNREACHABLE_MESSAGE


class BusinessError(ConnectHubError):
    """Remote API answered with a non-2xx status."""

    def __init__(self, message: Optional[str] = None, status_code: Optional[int] = None):
        self.status_code = status_code
        super().__init__(message)


class ProviderError(BusinessError):
    """The authorization-code exchange was rejected."""

    default_message = "Something went wrong."


class IncorrectCredentials(ConnectHubError):
    """Login rejected by the host platform."""

    default_message = "Incorrect email or password."


class ExpiredSession(ConnectHubError):
    """Host-platform session is no longer valid (HTTP 401)."""

    default_message = "Your session has expired. Please sign in again."


class UnknownProvider(ConnectHubError):
    """No enabled provider is registered under the given name."""

    def __init__(self, provider: str):
        self.provider = provider
        super().__init__(f"Provider '{provider}' not found or not enabled")
