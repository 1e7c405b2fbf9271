"""aws-autoconfig - AWS credentials provider configuration."""

__version__ = "0.1.0"

from .config import AutoconfigSettings, load_settings
from .credentials import CredentialsProviderResolver, create_credentials_provider, create_session
from .region import DefaultRegionProvider, RegionProvider, StaticRegionProvider, create_region_provider

__all__ = [
    "AutoconfigSettings",
    "CredentialsProviderResolver",
    "DefaultRegionProvider",
    "RegionProvider",
    "StaticRegionProvider",
    "create_credentials_provider",
    "create_region_provider",
    "create_session",
    "load_settings",
]
