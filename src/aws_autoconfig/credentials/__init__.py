"""AWS credentials provider configuration."""

from .properties import CredentialsProperties, Profile, StsProperties
from .providers import (
    AWSCredentials,
    CredentialsProvider,
    CredentialsProviderChain,
    DefaultCredentialsProvider,
    InstanceProfileCredentialsProvider,
    ProfileCredentialsProvider,
    StaticCredentialsProvider,
    StsWebIdentityCredentialsProvider,
)
from .resolver import CredentialsProviderResolver, create_credentials_provider
from .session import create_session

__all__ = [
    "AWSCredentials",
    "CredentialsProperties",
    "CredentialsProvider",
    "CredentialsProviderChain",
    "CredentialsProviderResolver",
    "DefaultCredentialsProvider",
    "InstanceProfileCredentialsProvider",
    "Profile",
    "ProfileCredentialsProvider",
    "StaticCredentialsProvider",
    "StsProperties",
    "StsWebIdentityCredentialsProvider",
    "create_credentials_provider",
    "create_session",
]
