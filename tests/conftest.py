"""Shared fixtures for aws-autoconfig tests."""

import os
from datetime import datetime, timedelta, timezone
from unittest.mock import Mock

import pytest

from aws_autoconfig.region import StaticRegionProvider


@pytest.fixture(autouse=True)
def isolated_aws_environment(monkeypatch, tmp_path):
    """Keep tests away from the real AWS configuration and the network."""
    for name in list(os.environ):
        if name.startswith("AWS_"):
            monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("AWS_CONFIG_FILE", str(tmp_path / "missing-config"))
    monkeypatch.setenv("AWS_SHARED_CREDENTIALS_FILE", str(tmp_path / "missing-credentials"))
    monkeypatch.setenv("AWS_EC2_METADATA_DISABLED", "true")
    monkeypatch.chdir(tmp_path)


@pytest.fixture
def region_provider():
    return StaticRegionProvider("eu-west-1")


@pytest.fixture
def sts_client():
    """Fake STS client answering AssumeRoleWithWebIdentity."""
    client = Mock()
    client.assume_role_with_web_identity.side_effect = lambda **kwargs: {
        "Credentials": {
            "AccessKeyId": "ASIASTS",
            "SecretAccessKey": "sts-secret",
            "SessionToken": "sts-token",
            "Expiration": datetime.now(timezone.utc) + timedelta(hours=1),
        },
        "AssumedRoleUser": {
            "Arn": "arn:aws:sts::123456789012:assumed-role/app/session",
            "AssumedRoleId": "AROA:session",
        },
    }
    return client


@pytest.fixture
def token_file(tmp_path):
    path = tmp_path / "token"
    path.write_text("eyJhbGciOiJSUzI1NiJ9.token")
    return path
