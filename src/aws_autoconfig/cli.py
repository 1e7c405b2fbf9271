"""Command-line interface for aws-autoconfig."""

import logging
from pathlib import Path
from typing import Optional

import click
from botocore.exceptions import BotoCoreError, ClientError

from .config import CONFIG_TEMPLATE, load_settings
from .credentials.providers import CredentialsProvider, CredentialsProviderChain
from .credentials.resolver import create_credentials_provider
from .credentials.session import create_session, get_account_info
from .exceptions import AWSAutoconfigError
from .region import create_region_provider


logger = logging.getLogger(__name__)


def _describe(provider: CredentialsProvider, indent: int = 0) -> None:
    prefix = "  " * indent
    if isinstance(provider, CredentialsProviderChain):
        click.echo(f"{prefix}{provider.name}")
        for member in provider.providers:
            _describe(member, indent + 1)
    else:
        click.echo(f"{prefix}{provider!r}")


@click.group()
@click.option('--debug', is_flag=True, help='Enable debug logging')
def main(debug: bool):
    """Resolve AWS credentials providers from configuration."""
    level = logging.DEBUG if debug else logging.INFO
    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )


@main.command()
@click.option('--config', '-c', type=Path, default=None, help='Config file path')
def describe(config: Optional[Path]):
    """Show which credentials provider the configuration resolves to."""
    try:
        settings = load_settings(config)
        region_provider = create_region_provider(settings.region)
        with create_credentials_provider(settings.credentials, region_provider) as provider:
            _describe(provider)
    except (AWSAutoconfigError, FileNotFoundError, ValueError) as e:
        raise click.ClickException(str(e))


@main.command()
@click.option('--config', '-c', type=Path, default=None, help='Config file path')
def validate(config: Optional[Path]):
    """Resolve credentials and check them against STS."""
    try:
        settings = load_settings(config)
        region_provider = create_region_provider(settings.region)
        with create_credentials_provider(settings.credentials, region_provider) as provider:
            credentials = provider.resolve_credentials()
            account_info = get_account_info(create_session(provider, region_provider))
    except (AWSAutoconfigError, BotoCoreError, ClientError, FileNotFoundError, ValueError) as e:
        raise click.ClickException(str(e))

    click.echo(f"✓ Credentials from {credentials.provider_name} are valid")
    click.echo(f"  Account ID: {account_info['account_id']}")
    click.echo(f"  ARN: {account_info['arn']}")


@main.command()
def config_template():
    """Generate a config file template."""
    click.echo(CONFIG_TEMPLATE, nl=False)


if __name__ == "__main__":
    main()
