"""Credential providers for AWS authentication."""

import logging
import os
import threading
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any, Iterable, Optional, Tuple, Union

import botocore.session
from botocore.credentials import (
    ConfigProvider,
    Credentials,
    DeferredRefreshableCredentials,
    InstanceMetadataProvider,
    SharedCredentialProvider,
    create_credential_resolver,
)
from botocore.exceptions import BotoCoreError, ClientError
from botocore.utils import InstanceMetadataFetcher

from ..exceptions import (
    CredentialsError,
    CredentialsNotFoundError,
    NoCredentialsAvailableError,
)

logger = logging.getLogger(__name__)

PathLike = Union[str, os.PathLike]


def default_credentials_file() -> Path:
    """Location of the shared credentials file."""
    return Path(
        os.environ.get("AWS_SHARED_CREDENTIALS_FILE", Path.home() / ".aws" / "credentials")
    ).expanduser()


def default_config_file() -> Path:
    """Location of the shared config file."""
    return Path(
        os.environ.get("AWS_CONFIG_FILE", Path.home() / ".aws" / "config")
    ).expanduser()


@dataclass(frozen=True)
class AWSCredentials:
    """AWS credentials container."""
    access_key_id: str
    secret_access_key: str = field(repr=False)
    session_token: Optional[str] = field(default=None, repr=False)
    expiration: Optional[datetime] = None
    provider_name: Optional[str] = None


class CredentialsProvider(ABC):
    """Base class for credential providers.

    Providers are safe to share between threads. Callers own the provider
    they created and should ``close()`` it on shutdown.
    """

    @abstractmethod
    def resolve_credentials(self) -> AWSCredentials:
        """Return current credentials.

        Raises:
            CredentialsError: when no credentials can be produced.
        """
        pass

    @property
    def name(self) -> str:
        return self.__class__.__name__

    def close(self) -> None:
        """Release background resources held by the provider."""

    def __enter__(self):
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def __repr__(self) -> str:
        return f"{self.name}()"


class StaticCredentialsProvider(CredentialsProvider):
    """Provider for a fixed access key / secret key pair."""

    def __init__(
        self,
        access_key_id: str,
        secret_access_key: str,
        session_token: Optional[str] = None,
    ):
        if not (access_key_id and secret_access_key):
            raise ValueError("access_key_id and secret_access_key are required")
        self._credentials = AWSCredentials(
            access_key_id=access_key_id,
            secret_access_key=secret_access_key,
            session_token=session_token,
            provider_name=self.name,
        )

    def resolve_credentials(self) -> AWSCredentials:
        return self._credentials

    def __repr__(self) -> str:
        return f"{self.name}(access_key_id={self._credentials.access_key_id!r})"


class _BotocoreCredentialsProvider(CredentialsProvider):
    """Shared plumbing for providers backed by botocore credential sources.

    The botocore credentials object is loaded once and kept; refreshable
    credentials then renew themselves when they get close to expiring.
    """

    def __init__(self):
        self._credentials: Optional[Credentials] = None
        self._lock = threading.Lock()

    @abstractmethod
    def _load(self) -> Optional[Credentials]:
        """Load credentials from the botocore source, ``None`` if absent."""
        pass

    def _get_botocore_credentials(self) -> Credentials:
        # Caller holds self._lock
        if self._credentials is None:
            logger.debug(f"Looking for credentials via {self!r}")
            try:
                credentials = self._load()
            except (BotoCoreError, ClientError, OSError) as e:
                raise CredentialsError(self.name, f"{self.name} failed to load credentials: {e}") from e
            if credentials is None:
                raise CredentialsNotFoundError(self.name)
            self._credentials = credentials
        return self._credentials

    def resolve_credentials(self) -> AWSCredentials:
        # Keys and expiry must come from the same refresh
        with self._lock:
            credentials = self._get_botocore_credentials()
            try:
                frozen = credentials.get_frozen_credentials()
            except (BotoCoreError, ClientError, OSError) as e:
                raise CredentialsError(self.name, f"{self.name} failed to refresh credentials: {e}") from e
            # botocore keeps the expiry of refreshable credentials private
            expiration = getattr(credentials, "_expiry_time", None)
        if not (frozen.access_key and frozen.secret_key):
            raise CredentialsNotFoundError(self.name, "credentials are incomplete")
        return AWSCredentials(
            access_key_id=frozen.access_key,
            secret_access_key=frozen.secret_key,
            session_token=frozen.token,
            expiration=expiration,
            provider_name=self.name,
        )


class InstanceProfileCredentialsProvider(_BotocoreCredentialsProvider):
    """Provider for IAM role credentials from the EC2 instance metadata service."""

    def __init__(
        self,
        timeout: float = 1,
        num_attempts: int = 1,
        fetcher: Optional[InstanceMetadataFetcher] = None,
    ):
        super().__init__()
        if fetcher is None:
            fetcher = InstanceMetadataFetcher(timeout=timeout, num_attempts=num_attempts)
        self._provider = InstanceMetadataProvider(iam_role_fetcher=fetcher)

    def _load(self) -> Optional[Credentials]:
        return self._provider.load()


class ProfileCredentialsProvider(_BotocoreCredentialsProvider):
    """Provider for a named profile in a shared credentials file.

    With an explicit ``path`` only that file is read, as a credentials file.
    Without one the default credentials file is read first and the default
    config file second.
    """

    def __init__(self, profile_name: str, path: Optional[PathLike] = None):
        super().__init__()
        if not profile_name:
            raise ValueError("profile_name is required")
        self.profile_name = profile_name
        if isinstance(path, str) and not path.strip():
            path = None
        self.path = Path(path).expanduser() if path is not None else None

    def _load(self) -> Optional[Credentials]:
        if self.path is not None:
            if not self.path.is_file():
                raise CredentialsError(self.name, f"Profile file {self.path} does not exist")
            sources = [SharedCredentialProvider(str(self.path), self.profile_name)]
        else:
            sources = [
                SharedCredentialProvider(str(default_credentials_file()), self.profile_name),
                ConfigProvider(str(default_config_file()), self.profile_name),
            ]

        for source in sources:
            credentials = source.load()
            if credentials is not None:
                logger.info(f"Found credentials for profile '{self.profile_name}' via {source.METHOD}")
                return credentials
        return None

    def __repr__(self) -> str:
        location = str(self.path) if self.path is not None else "default"
        return f"{self.name}(profile_name={self.profile_name!r}, path={location!r})"


class StsWebIdentityCredentialsProvider(_BotocoreCredentialsProvider):
    """Provider exchanging a web identity token file for temporary credentials.

    ``role_arn``, ``web_identity_token_file`` and ``role_session_name`` fall
    back to ``AWS_ROLE_ARN``, ``AWS_WEB_IDENTITY_TOKEN_FILE`` and
    ``AWS_ROLE_SESSION_NAME`` when not given. The STS client must be created
    with unsigned requests since AssumeRoleWithWebIdentity is not signed.

    With ``async_credential_update`` a daemon thread renews the credentials
    ahead of expiry so callers never block on STS; ``close()`` stops it.
    """

    METHOD = "assume-role-with-web-identity"
    _ENV_VARS = {
        "role_arn": "AWS_ROLE_ARN",
        "web_identity_token_file": "AWS_WEB_IDENTITY_TOKEN_FILE",
        "role_session_name": "AWS_ROLE_SESSION_NAME",
    }

    def __init__(
        self,
        sts_client: Any,
        role_arn: Optional[str] = None,
        web_identity_token_file: Optional[PathLike] = None,
        role_session_name: Optional[str] = None,
        async_credential_update: bool = False,
        refresh_interval: float = 60,
    ):
        super().__init__()
        self._sts_client = sts_client
        self.role_arn = role_arn
        self.web_identity_token_file = web_identity_token_file
        self.role_session_name = role_session_name
        self.async_credential_update = async_credential_update
        self._refresh_interval = refresh_interval
        self._stop = threading.Event()
        self._refresher: Optional[threading.Thread] = None
        if async_credential_update:
            self._refresher = threading.Thread(
                target=self._refresh_loop,
                name="sts-web-identity-refresh",
                daemon=True,
            )
            self._refresher.start()

    def _get_config(self, key: str) -> Optional[str]:
        value = getattr(self, key)
        if value is not None:
            return str(value)
        return os.environ.get(self._ENV_VARS[key])

    def _client_creator(self, *args, **kwargs):
        return self._sts_client

    def _load(self) -> Optional[Credentials]:
        # Imported here so the package still loads on botocore releases
        # without web identity support; the resolver then skips this provider.
        from botocore.credentials import AssumeRoleWithWebIdentityCredentialFetcher
        from botocore.utils import FileWebIdentityTokenLoader

        token_file = self._get_config("web_identity_token_file")
        if not token_file:
            raise CredentialsNotFoundError(
                self.name, "no web identity token file configured (AWS_WEB_IDENTITY_TOKEN_FILE)"
            )
        role_arn = self._get_config("role_arn")
        if not role_arn:
            raise CredentialsError(
                self.name, "A web identity token file is configured but no role ARN (AWS_ROLE_ARN)"
            )

        extra_args = {}
        role_session_name = self._get_config("role_session_name")
        if role_session_name is not None:
            extra_args["RoleSessionName"] = role_session_name

        fetcher = AssumeRoleWithWebIdentityCredentialFetcher(
            client_creator=self._client_creator,
            web_identity_token_loader=FileWebIdentityTokenLoader(token_file),
            role_arn=role_arn,
            extra_args=extra_args,
        )
        # Nothing is fetched until the credentials are first used.
        return DeferredRefreshableCredentials(
            method=self.METHOD,
            refresh_using=fetcher.fetch_credentials,
        )

    def _refresh_loop(self) -> None:
        while not self._stop.wait(self._refresh_interval):
            try:
                self.resolve_credentials()
            except CredentialsError as e:
                logger.warning(f"Background refresh of STS credentials failed: {e}")

    def close(self) -> None:
        self._stop.set()
        if self._refresher is not None and self._refresher is not threading.current_thread():
            self._refresher.join(timeout=5)
            self._refresher = None

    def __repr__(self) -> str:
        return (
            f"{self.name}(role_arn={self.role_arn!r}, "
            f"web_identity_token_file={self.web_identity_token_file!r}, "
            f"role_session_name={self.role_session_name!r}, "
            f"async_credential_update={self.async_credential_update})"
        )


class DefaultCredentialsProvider(_BotocoreCredentialsProvider):
    """The SDK's default lookup chain.

    Environment variables, shared credentials and config files, container
    credentials and instance metadata, in botocore's order.
    """

    def __init__(self, session: Optional[botocore.session.Session] = None):
        super().__init__()
        self._session = session

    def _load(self) -> Optional[Credentials]:
        session = self._session or botocore.session.get_session()
        return create_credential_resolver(session).load_credentials()


class CredentialsProviderChain(CredentialsProvider):
    """Tries each provider in order and returns the first credentials found.

    The chain holds no selection state: every call starts again from the
    first provider.
    """

    def __init__(self, providers: Iterable[CredentialsProvider]):
        self.providers: Tuple[CredentialsProvider, ...] = tuple(providers)
        if not self.providers:
            raise ValueError("A credentials provider chain needs at least one provider")

    def resolve_credentials(self) -> AWSCredentials:
        errors = []
        for provider in self.providers:
            logger.debug(f"Trying provider {provider!r}")
            try:
                credentials = provider.resolve_credentials()
            except Exception as e:
                logger.debug(f"Provider {provider.name} returned no credentials: {e}")
                errors.append((provider.name, e))
                continue
            logger.info(f"Got credentials from {provider.name}")
            return credentials

        raise NoCredentialsAvailableError(errors)

    def close(self) -> None:
        for provider in self.providers:
            provider.close()

    def __repr__(self) -> str:
        members = ", ".join(repr(provider) for provider in self.providers)
        return f"{self.name}([{members}])"
