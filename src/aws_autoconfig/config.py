"""Settings loading from the environment, a .env file and YAML."""

import logging
from pathlib import Path
from typing import Optional, Tuple, Type, Union

from pydantic import Field
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
    YamlConfigSettingsSource,
)

from .credentials.properties import CredentialsProperties
from .region import RegionProperties

logger = logging.getLogger(__name__)

ENV_PREFIX = "AWS_AUTOCONFIG_"


class AutoconfigSettings(BaseSettings):
    """Top level settings.

    Environment variables use the ``AWS_AUTOCONFIG_`` prefix and ``__`` for
    nesting, e.g. ``AWS_AUTOCONFIG_CREDENTIALS__STS__ENABLED=true``.
    """

    model_config = SettingsConfigDict(
        env_prefix=ENV_PREFIX,
        env_nested_delimiter="__",
        env_file=".env",
        extra="ignore",
        frozen=True,
    )

    credentials: CredentialsProperties = Field(default_factory=CredentialsProperties)
    region: RegionProperties = Field(default_factory=RegionProperties)

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: Type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> Tuple[PydanticBaseSettingsSource, ...]:
        return (
            init_settings,
            env_settings,
            dotenv_settings,
            YamlConfigSettingsSource(settings_cls),
            file_secret_settings,
        )


def load_settings(config_file: Optional[Union[str, Path]] = None) -> AutoconfigSettings:
    """Load settings, optionally reading a YAML config file as well.

    Environment variables take precedence over values from the file.
    """
    if config_file is None:
        return AutoconfigSettings()

    config_path = Path(config_file)
    if not config_path.is_file():
        raise FileNotFoundError(f"Config file {config_path} does not exist")
    logger.debug(f"Loading settings from {config_path}")

    class FileSettings(AutoconfigSettings):
        model_config = SettingsConfigDict(yaml_file=config_path)

    return FileSettings()


CONFIG_TEMPLATE = """# aws-autoconfig configuration
# Any value can be overridden with AWS_AUTOCONFIG_<SECTION>__<KEY> variables.

credentials:
  # Static keys, only used when both are set
  # access_key: YOUR_ACCESS_KEY
  # secret_key: YOUR_SECRET_KEY
  instance_profile: false
  profile:
    name: default
    # path: /etc/aws/credentials
  sts:
    enabled: false
    # role_arn: arn:aws:iam::123456789012:role/my-role
    # web_identity_token_file: /var/run/secrets/eks.amazonaws.com/serviceaccount/token
    # role_session_name: my-app
    async_credentials_update: false

region:
  static: eu-west-1
"""
