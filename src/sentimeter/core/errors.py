"""Exception types raised inside sentimeter."""

from typing import Optional


class SentimeterError(Exception):
    """Base exception for sentimeter errors."""


class ProviderError(SentimeterError):
    """A remote provider returned something we could not use."""

    def __init__(self, provider: str, message: str):
        super().__init__(message)
        self.provider = provider


class ProviderStatusError(ProviderError):
    """Transport succeeded but the provider answered with a non-success status."""

    def __init__(self, provider: str, status_code: int, body: Optional[str] = None):
        super().__init__(provider, f"{provider} answered with HTTP {status_code}")
        self.status_code = status_code
        self.body = body


class RegistrationError(ProviderError):
    """Setup call (task type, configuration) failed before any document was sent."""


class UnknownProviderError(SentimeterError, KeyError):
    """No executor is registered under the requested name."""

    def __str__(self):
        return str(self.args[0]) if self.args else "unknown provider"


class ReportFormatError(SentimeterError, ValueError):
    """A report file does not have the expected column layout."""
