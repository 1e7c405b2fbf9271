"""Configuration values for credentials provider resolution."""

from pathlib import Path
from typing import Annotated, Optional

from pydantic import BaseModel, BeforeValidator, ConfigDict


def _blank_to_none(value):
    # An empty env var or YAML value would otherwise become Path(".")
    if isinstance(value, str) and not value.strip():
        return None
    return value


OptionalPath = Annotated[Optional[Path], BeforeValidator(_blank_to_none)]


class Profile(BaseModel):
    """Named profile to load credentials from.

    When ``path`` is not set the default profile files are used
    (``~/.aws/credentials`` and ``~/.aws/config``, or the locations given by
    ``AWS_SHARED_CREDENTIALS_FILE`` and ``AWS_CONFIG_FILE``).
    """

    model_config = ConfigDict(frozen=True)

    name: Optional[str] = None
    path: OptionalPath = None


class StsProperties(BaseModel):
    """Settings for STS web identity token federation.

    Any field left as ``None`` is read by the provider from
    ``AWS_ROLE_ARN``, ``AWS_WEB_IDENTITY_TOKEN_FILE`` and
    ``AWS_ROLE_SESSION_NAME``, which is how EKS injects them into pods.
    """

    model_config = ConfigDict(frozen=True)

    enabled: bool = False
    role_arn: Optional[str] = None
    web_identity_token_file: OptionalPath = None
    # Refresh credentials on a background thread instead of on the caller's.
    async_credentials_update: bool = False
    role_session_name: Optional[str] = None


class CredentialsProperties(BaseModel):
    """Credentials related settings."""

    model_config = ConfigDict(frozen=True)

    access_key: Optional[str] = None
    secret_key: Optional[str] = None
    instance_profile: bool = False
    profile: Optional[Profile] = None
    sts: Optional[StsProperties] = None
