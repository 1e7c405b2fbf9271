"""Hand a credentials provider to boto3 sessions and clients."""

import logging
from datetime import datetime, timedelta, timezone
from typing import Dict, Optional

import boto3
import botocore.session
from botocore.credentials import (
    CredentialProvider as BotocoreCredentialProvider,
    CredentialResolver,
    Credentials,
    RefreshableCredentials,
)
from botocore.exceptions import BotoCoreError, ClientError

from ..exceptions import CredentialsError
from ..region import RegionProvider
from .providers import AWSCredentials, CredentialsProvider

logger = logging.getLogger(__name__)

# How long credentials without an expiry are used before the provider is asked again
NON_EXPIRING_RECHECK = timedelta(hours=1)


class _ProviderAdapter(BotocoreCredentialProvider):
    """Exposes a :class:`CredentialsProvider` as a botocore credential source."""

    METHOD = "aws-autoconfig"

    def __init__(self, provider: CredentialsProvider):
        super().__init__()
        self._provider = provider

    def load(self) -> Credentials:
        credentials = self._provider.resolve_credentials()
        if credentials.expiration is None:
            return Credentials(
                credentials.access_key_id,
                credentials.secret_access_key,
                credentials.session_token,
                method=self.METHOD,
            )
        return RefreshableCredentials.create_from_metadata(
            self._to_metadata(credentials),
            refresh_using=self._refresh,
            method=self.METHOD,
        )

    def _refresh(self) -> Dict[str, Optional[str]]:
        return self._to_metadata(self._provider.resolve_credentials())

    @staticmethod
    def _to_metadata(credentials: AWSCredentials) -> Dict[str, Optional[str]]:
        expiration = credentials.expiration
        if expiration is None:
            # The source stopped handing out expiring credentials (a chain can
            # fall through to a profile file); ask again later.
            expiration = datetime.now(timezone.utc) + NON_EXPIRING_RECHECK
        return {
            "access_key": credentials.access_key_id,
            "secret_key": credentials.secret_access_key,
            "token": credentials.session_token,
            "expiry_time": expiration.isoformat(),
        }


def create_session(
    provider: CredentialsProvider,
    region_provider: Optional[RegionProvider] = None,
) -> boto3.Session:
    """Create a boto3 session that takes its credentials from ``provider``.

    Args:
        provider: Credentials provider, usually from the resolver
        region_provider: Region for clients created from the session

    Returns:
        Configured boto3 session
    """
    botocore_session = botocore.session.get_session()
    botocore_session.register_component(
        "credential_provider", CredentialResolver(providers=[_ProviderAdapter(provider)])
    )
    region_name = region_provider.get_region() if region_provider is not None else None
    return boto3.Session(botocore_session=botocore_session, region_name=region_name)


def get_account_info(session: boto3.Session) -> Dict[str, str]:
    """Get the AWS account behind the session's credentials."""
    response = session.client("sts").get_caller_identity()
    return {
        "account_id": response["Account"],
        "user_id": response["UserId"],
        "arn": response["Arn"],
    }


def validate_credentials(session: boto3.Session) -> bool:
    """Validate that credentials work by making a simple AWS call."""
    try:
        get_account_info(session)
        return True
    except (CredentialsError, BotoCoreError, ClientError) as e:
        logger.error(f"Credential validation failed: {e}")
        return False
