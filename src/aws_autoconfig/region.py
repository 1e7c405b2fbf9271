"""Region providers used when building AWS clients."""

import logging
import os
from abc import ABC, abstractmethod
from typing import Optional

import botocore.session
from pydantic import BaseModel, ConfigDict

from .exceptions import RegionNotFoundError

logger = logging.getLogger(__name__)


class RegionProperties(BaseModel):
    """Region related settings."""

    model_config = ConfigDict(frozen=True)

    static: Optional[str] = None


class RegionProvider(ABC):
    """Base class for region providers."""

    @abstractmethod
    def get_region(self) -> str:
        """Return the active AWS region."""
        pass


class StaticRegionProvider(RegionProvider):
    """Always returns the region it was created with."""

    def __init__(self, region: str):
        if not region:
            raise ValueError("region must not be empty")
        self.region = region

    def get_region(self) -> str:
        return self.region

    def __repr__(self) -> str:
        return f"StaticRegionProvider({self.region!r})"


class DefaultRegionProvider(RegionProvider):
    """Region lookup following the SDK's own precedence.

    ``AWS_REGION`` is checked first, then botocore's config chain
    (``AWS_DEFAULT_REGION`` and the ``region`` setting of the active profile).
    """

    def __init__(self, session: Optional[botocore.session.Session] = None):
        self._session = session

    def get_region(self) -> str:
        region = os.environ.get("AWS_REGION")
        if not region:
            session = self._session or botocore.session.get_session()
            region = session.get_config_variable("region")
        if not region:
            raise RegionNotFoundError(
                "Unable to determine the AWS region. Set AWS_REGION or configure "
                "a static region."
            )
        logger.debug(f"Resolved AWS region '{region}'")
        return region

    def __repr__(self) -> str:
        return "DefaultRegionProvider()"


def create_region_provider(properties: Optional[RegionProperties] = None) -> RegionProvider:
    """Create the region provider for the given settings."""
    if properties is not None and properties.static:
        return StaticRegionProvider(properties.static)
    return DefaultRegionProvider()
