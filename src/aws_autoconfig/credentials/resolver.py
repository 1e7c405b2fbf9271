"""Resolve the effective credentials provider from configuration."""

import importlib
import logging
from typing import Any, Callable, List, Optional

import boto3
from botocore import UNSIGNED
from botocore.config import Config

from ..region import RegionProvider
from .properties import CredentialsProperties, Profile, StsProperties
from .providers import (
    CredentialsProvider,
    CredentialsProviderChain,
    DefaultCredentialsProvider,
    InstanceProfileCredentialsProvider,
    ProfileCredentialsProvider,
    StaticCredentialsProvider,
    StsWebIdentityCredentialsProvider,
)

logger = logging.getLogger(__name__)

# Must be importable for the STS web identity provider to be created.
STS_WEB_IDENTITY_CREDENTIALS_FETCHER = (
    "botocore.credentials.AssumeRoleWithWebIdentityCredentialFetcher"
)


def is_present(qualified_name: str) -> bool:
    """Check whether ``package.module.attribute`` can be imported."""
    module_name, _, attribute = qualified_name.rpartition(".")
    try:
        module = importlib.import_module(module_name)
    except ImportError:
        return False
    return hasattr(module, attribute)


def _has_text(value: Optional[str]) -> bool:
    return value is not None and value.strip() != ""


def create_sts_client(region_name: str) -> Any:
    """Create an STS client for AssumeRoleWithWebIdentity calls.

    The operation is called without credentials, so requests are unsigned.
    """
    return boto3.client(
        "sts",
        region_name=region_name,
        config=Config(signature_version=UNSIGNED),
    )


class CredentialsProviderResolver:
    """Turns :class:`CredentialsProperties` into a single credentials provider.

    Sources are added in a fixed order, which is also the precedence of the
    resulting chain: static keys, instance profile, named profile, STS web
    identity. No source configured gives the SDK default chain, exactly one
    is returned as is.

    Args:
        sts_available: Whether STS web identity support can be used. Detected
            from the installed botocore when ``None``.
        sts_client_factory: Creates the STS client for a region name.
    """

    def __init__(
        self,
        sts_available: Optional[bool] = None,
        sts_client_factory: Callable[[str], Any] = create_sts_client,
    ):
        self._sts_available = sts_available
        self._sts_client_factory = sts_client_factory

    def resolve(
        self,
        properties: CredentialsProperties,
        region_provider: RegionProvider,
    ) -> CredentialsProvider:
        providers: List[CredentialsProvider] = []

        if _has_text(properties.access_key) and _has_text(properties.secret_key):
            providers.append(self._create_static_provider(properties))

        if properties.instance_profile:
            providers.append(InstanceProfileCredentialsProvider())

        profile = properties.profile
        if profile is not None and _has_text(profile.name):
            providers.append(self._create_profile_provider(profile))

        sts = properties.sts
        if sts is not None and self._should_create_sts_provider() and sts.enabled:
            providers.append(self._create_sts_provider(sts, region_provider))

        if not providers:
            return DefaultCredentialsProvider()
        if len(providers) == 1:
            return providers[0]
        return CredentialsProviderChain(providers)

    @staticmethod
    def _create_static_provider(properties: CredentialsProperties) -> StaticCredentialsProvider:
        return StaticCredentialsProvider(properties.access_key, properties.secret_key)

    @staticmethod
    def _create_profile_provider(profile: Profile) -> ProfileCredentialsProvider:
        return ProfileCredentialsProvider(profile.name, path=profile.path)

    def _should_create_sts_provider(self) -> bool:
        available = self._sts_available
        if available is None:
            available = is_present(STS_WEB_IDENTITY_CREDENTIALS_FETCHER)
        if not available:
            logger.debug(
                f"Unable to find {STS_WEB_IDENTITY_CREDENTIALS_FETCHER}. "
                "Consider upgrading botocore to use STS web identity credentials"
            )
        return available

    def _create_sts_provider(
        self, sts: StsProperties, region_provider: RegionProvider
    ) -> StsWebIdentityCredentialsProvider:
        logger.debug("Creating StsWebIdentityCredentialsProvider")
        sts_client = self._sts_client_factory(region_provider.get_region())
        options = {"async_credential_update": sts.async_credentials_update}
        if sts.role_arn is not None:
            options["role_arn"] = sts.role_arn
        if sts.web_identity_token_file is not None:
            options["web_identity_token_file"] = sts.web_identity_token_file
        if sts.role_session_name is not None:
            options["role_session_name"] = sts.role_session_name
        return StsWebIdentityCredentialsProvider(sts_client, **options)


def create_credentials_provider(
    properties: CredentialsProperties,
    region_provider: RegionProvider,
    sts_available: Optional[bool] = None,
) -> CredentialsProvider:
    """Resolve the credentials provider for ``properties``."""
    return CredentialsProviderResolver(sts_available=sts_available).resolve(
        properties, region_provider
    )
