"""Basic usage examples for aws-autoconfig."""

from aws_autoconfig import StaticRegionProvider, create_credentials_provider, create_session
from aws_autoconfig.credentials import CredentialsProperties, Profile, StsProperties


def static_and_profile_example():
    """Static keys first, a named profile as fallback."""
    properties = CredentialsProperties(
        access_key="AKIAEXAMPLE",
        secret_key="example-secret",
        profile=Profile(name="dev"),
    )
    region_provider = StaticRegionProvider("eu-west-1")

    with create_credentials_provider(properties, region_provider) as provider:
        print(f"Resolved provider: {provider!r}")
        credentials = provider.resolve_credentials()
        print(f"Using access key {credentials.access_key_id} from {credentials.provider_name}")


def eks_example():
    """STS web identity as injected into EKS pods.

    Role ARN and token file are read from AWS_ROLE_ARN and
    AWS_WEB_IDENTITY_TOKEN_FILE since they are not set here.
    """
    properties = CredentialsProperties(
        sts=StsProperties(enabled=True, async_credentials_update=True),
    )
    region_provider = StaticRegionProvider("us-east-1")

    with create_credentials_provider(properties, region_provider) as provider:
        s3 = create_session(provider, region_provider).client("s3")
        for bucket in s3.list_buckets()["Buckets"]:
            print(f"  - {bucket['Name']}")


if __name__ == "__main__":
    print("Static keys with profile fallback")
    print("=" * 50)
    static_and_profile_example()

    print("\nSTS web identity")
    print("=" * 50)
    eks_example()
