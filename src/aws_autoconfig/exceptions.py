"""Exceptions raised by aws-autoconfig."""

from typing import Optional, Sequence, Tuple


class AWSAutoconfigError(Exception):
    """Base class for all aws-autoconfig errors."""


class CredentialsError(AWSAutoconfigError):
    """Raised when a credentials provider cannot produce credentials."""

    def __init__(self, provider: str, message: Optional[str] = None):
        self.provider = provider
        super().__init__(message or f"Unable to load credentials from {provider}")


class CredentialsNotFoundError(CredentialsError):
    """Raised when a provider looked for credentials and found none."""

    def __init__(self, provider: str, detail: Optional[str] = None):
        message = f"No credentials found by {provider}"
        if detail:
            message += f": {detail}"
        super().__init__(provider, message)


class NoCredentialsAvailableError(CredentialsError):
    """Raised by a provider chain when every member failed."""

    def __init__(self, errors: Sequence[Tuple[str, Exception]]):
        self.errors = list(errors)
        lines = ["Unable to load credentials from any of the providers in the chain:"]
        for name, error in self.errors:
            lines.append(f"  {name}: {error}")
        super().__init__("CredentialsProviderChain", "\n".join(lines))


class RegionNotFoundError(AWSAutoconfigError):
    """Raised when no AWS region could be determined."""
