"""Tests for credentials provider resolution."""

import logging
from pathlib import Path
from unittest.mock import Mock

import pytest

from aws_autoconfig.credentials import resolver as resolver_module
from aws_autoconfig.credentials.properties import CredentialsProperties, Profile, StsProperties
from aws_autoconfig.credentials.providers import (
    CredentialsProviderChain,
    DefaultCredentialsProvider,
    InstanceProfileCredentialsProvider,
    ProfileCredentialsProvider,
    StaticCredentialsProvider,
    StsWebIdentityCredentialsProvider,
)
from aws_autoconfig.credentials.resolver import (
    STS_WEB_IDENTITY_CREDENTIALS_FETCHER,
    CredentialsProviderResolver,
    create_credentials_provider,
    is_present,
)


@pytest.fixture
def sts_client_factory(sts_client):
    return Mock(return_value=sts_client)


@pytest.fixture
def resolver(sts_client_factory):
    return CredentialsProviderResolver(sts_available=True, sts_client_factory=sts_client_factory)


def test_nothing_configured_returns_default_provider(resolver, region_provider):
    provider = resolver.resolve(CredentialsProperties(), region_provider)

    assert isinstance(provider, DefaultCredentialsProvider)


def test_static_keys_return_static_provider_directly(resolver, region_provider):
    properties = CredentialsProperties(access_key="AK", secret_key="SK")

    provider = resolver.resolve(properties, region_provider)

    assert isinstance(provider, StaticCredentialsProvider)
    credentials = provider.resolve_credentials()
    assert credentials.access_key_id == "AK"
    assert credentials.secret_access_key == "SK"


@pytest.mark.parametrize(
    "access_key, secret_key",
    [("AK", ""), ("AK", None), ("", "SK"), (None, "SK"), ("AK", "   ")],
)
def test_partial_static_keys_are_ignored(resolver, region_provider, access_key, secret_key):
    properties = CredentialsProperties(access_key=access_key, secret_key=secret_key)

    provider = resolver.resolve(properties, region_provider)

    assert isinstance(provider, DefaultCredentialsProvider)


def test_instance_profile_only(resolver, region_provider):
    provider = resolver.resolve(CredentialsProperties(instance_profile=True), region_provider)

    assert isinstance(provider, InstanceProfileCredentialsProvider)


def test_profile_without_path_uses_default_location(resolver, region_provider):
    properties = CredentialsProperties(profile=Profile(name="dev"))

    provider = resolver.resolve(properties, region_provider)

    assert isinstance(provider, ProfileCredentialsProvider)
    assert provider.profile_name == "dev"
    assert provider.path is None


def test_profile_with_path(resolver, region_provider, tmp_path):
    path = tmp_path / "credentials"
    properties = CredentialsProperties(profile=Profile(name="dev", path=path))

    provider = resolver.resolve(properties, region_provider)

    assert isinstance(provider, ProfileCredentialsProvider)
    assert provider.path == path


@pytest.mark.parametrize("path", ["", "   "])
def test_profile_with_blank_path_uses_default_location(
    resolver, region_provider, tmp_path, monkeypatch, path
):
    credentials_file = tmp_path / "shared-credentials"
    credentials_file.write_text(
        "[dev]\naws_access_key_id = AKIDEV\naws_secret_access_key = dev-secret\n"
    )
    monkeypatch.setenv("AWS_SHARED_CREDENTIALS_FILE", str(credentials_file))
    properties = CredentialsProperties(profile=Profile(name="dev", path=path))

    provider = resolver.resolve(properties, region_provider)

    assert isinstance(provider, ProfileCredentialsProvider)
    assert provider.path is None
    assert provider.resolve_credentials().access_key_id == "AKIDEV"


@pytest.mark.parametrize("profile", [Profile(), Profile(name=""), Profile(path=Path("/tmp/creds"))])
def test_profile_without_name_is_ignored(resolver, region_provider, profile):
    provider = resolver.resolve(CredentialsProperties(profile=profile), region_provider)

    assert isinstance(provider, DefaultCredentialsProvider)


def test_sts_enabled(resolver, region_provider, sts_client, sts_client_factory, token_file):
    sts = StsProperties(
        enabled=True,
        role_arn="arn:aws:iam::123456789012:role/app",
        web_identity_token_file=token_file,
        role_session_name="app-session",
    )

    provider = resolver.resolve(CredentialsProperties(sts=sts), region_provider)

    assert isinstance(provider, StsWebIdentityCredentialsProvider)
    sts_client_factory.assert_called_once_with("eu-west-1")
    assert provider.role_arn == "arn:aws:iam::123456789012:role/app"
    assert provider.web_identity_token_file == token_file
    assert provider.role_session_name == "app-session"
    assert provider.async_credential_update is False


def test_sts_disabled_is_ignored_even_when_populated(
    resolver, region_provider, sts_client_factory, token_file
):
    sts = StsProperties(
        enabled=False,
        role_arn="arn:aws:iam::123456789012:role/app",
        web_identity_token_file=token_file,
        role_session_name="app-session",
        async_credentials_update=True,
    )

    provider = resolver.resolve(CredentialsProperties(sts=sts), region_provider)

    assert isinstance(provider, DefaultCredentialsProvider)
    sts_client_factory.assert_not_called()


def test_sts_unavailable_is_skipped_with_debug_log(
    region_provider, sts_client_factory, caplog
):
    resolver = CredentialsProviderResolver(
        sts_available=False, sts_client_factory=sts_client_factory
    )
    properties = CredentialsProperties(sts=StsProperties(enabled=True))

    with caplog.at_level(logging.DEBUG, logger=resolver_module.__name__):
        provider = resolver.resolve(properties, region_provider)

    assert isinstance(provider, DefaultCredentialsProvider)
    sts_client_factory.assert_not_called()
    assert STS_WEB_IDENTITY_CREDENTIALS_FETCHER in caplog.text


def test_unset_sts_fields_are_not_passed(resolver, region_provider, monkeypatch):
    created = Mock()
    monkeypatch.setattr(resolver_module, "StsWebIdentityCredentialsProvider", created)

    resolver.resolve(
        CredentialsProperties(sts=StsProperties(enabled=True, async_credentials_update=True)),
        region_provider,
    )

    _, kwargs = created.call_args
    assert kwargs == {"async_credential_update": True}


def test_unset_role_arn_falls_back_to_environment(resolver, region_provider, monkeypatch):
    monkeypatch.setenv("AWS_ROLE_ARN", "arn:aws:iam::123456789012:role/from-env")

    provider = resolver.resolve(
        CredentialsProperties(sts=StsProperties(enabled=True)), region_provider
    )

    assert provider.role_arn is None
    assert provider._get_config("role_arn") == "arn:aws:iam::123456789012:role/from-env"


def test_static_and_instance_profile_make_a_chain(resolver, region_provider):
    properties = CredentialsProperties(access_key="A", secret_key="B", instance_profile=True)

    provider = resolver.resolve(properties, region_provider)

    assert isinstance(provider, CredentialsProviderChain)
    assert len(provider.providers) == 2
    static, instance = provider.providers
    assert isinstance(static, StaticCredentialsProvider)
    assert static.resolve_credentials().access_key_id == "A"
    assert static.resolve_credentials().secret_access_key == "B"
    assert isinstance(instance, InstanceProfileCredentialsProvider)


def test_chain_follows_insertion_order(resolver, region_provider):
    properties = CredentialsProperties(
        access_key="A",
        secret_key="B",
        instance_profile=True,
        profile=Profile(name="dev"),
        sts=StsProperties(enabled=True),
    )

    provider = resolver.resolve(properties, region_provider)

    assert [type(p) for p in provider.providers] == [
        StaticCredentialsProvider,
        InstanceProfileCredentialsProvider,
        ProfileCredentialsProvider,
        StsWebIdentityCredentialsProvider,
    ]


def test_chain_skips_sources_that_are_not_configured(resolver, region_provider):
    properties = CredentialsProperties(
        profile=Profile(name="dev"),
        sts=StsProperties(enabled=True),
    )

    provider = resolver.resolve(properties, region_provider)

    assert [type(p) for p in provider.providers] == [
        ProfileCredentialsProvider,
        StsWebIdentityCredentialsProvider,
    ]


def test_region_lookup_errors_propagate(resolver):
    region_provider = Mock()
    region_provider.get_region.side_effect = RuntimeError("no region")

    with pytest.raises(RuntimeError, match="no region"):
        resolver.resolve(CredentialsProperties(sts=StsProperties(enabled=True)), region_provider)


def test_create_credentials_provider(region_provider):
    provider = create_credentials_provider(
        CredentialsProperties(access_key="AK", secret_key="SK"), region_provider
    )

    assert isinstance(provider, StaticCredentialsProvider)


def test_sts_support_is_detected_by_default():
    assert is_present(STS_WEB_IDENTITY_CREDENTIALS_FETCHER)


@pytest.mark.parametrize(
    "name",
    ["botocore.credentials.DoesNotExist", "not_a_real_package.module.Thing"],
)
def test_is_present_missing(name):
    assert not is_present(name)


def test_sts_skipped_when_botocore_lacks_web_identity_support(
    region_provider, sts_client_factory, monkeypatch
):
    import botocore.credentials

    monkeypatch.delattr(botocore.credentials, "AssumeRoleWithWebIdentityCredentialFetcher")
    resolver = CredentialsProviderResolver(sts_client_factory=sts_client_factory)
    properties = CredentialsProperties(sts=StsProperties(enabled=True))

    provider = resolver.resolve(properties, region_provider)

    assert isinstance(provider, DefaultCredentialsProvider)
    sts_client_factory.assert_not_called()
