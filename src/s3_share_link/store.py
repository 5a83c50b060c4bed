"""Object store boundary.

The share flow only needs two capabilities from the store: put an object with
a tag string, and presign a GET for a key. ``ObjectStore`` names them so tests
can substitute an in-memory fake; ``S3ObjectStore`` is the production wiring
over a boto3 S3 client bound to a single bucket.
"""

import logging
from typing import BinaryIO, Optional, Protocol

import boto3
from botocore.config import Config as BotoConfig
from botocore.exceptions import BotoCoreError

from .config import ShareConfig
from .errors import ConfigError

logger = logging.getLogger(__name__)


class ObjectStore(Protocol):
    def put_object(self, key: str, body: BinaryIO, tagging: str) -> None: ...

    def presigned_get_url(self, key: str, expires_in: int) -> str: ...


def make_s3_client(
    region: Optional[str],
    profile: Optional[str],
    endpoint_url: Optional[str],
    use_path_style: bool,
    credentials: Optional[dict],
):
    session_kwargs = {}
    if profile:
        session_kwargs["profile_name"] = profile
    try:
        session = boto3.session.Session(**session_kwargs)
    except BotoCoreError as e:
        raise ConfigError(f"Could not load AWS profile {profile!r}: {e}") from e

    # Without static credentials the default chain must find something, otherwise
    # the put would fail later with a less helpful message.
    if not credentials:
        try:
            found = session.get_credentials()
        except BotoCoreError as e:
            raise ConfigError(f"Could not resolve AWS credentials: {e}") from e
        if found is None:
            raise ConfigError(
                "No AWS credentials found. Set AWS_ACCESS_KEY_ID/AWS_SECRET_ACCESS_KEY, "
                "pass --profile, or configure ~/.aws/credentials."
            )

    # s3v4 keeps X-Amz-Expires in the presigned query string for every region.
    boto_cfg = BotoConfig(
        signature_version="s3v4",
        s3={"addressing_style": "path" if use_path_style else "virtual"},
    )
    client_kwargs = {"region_name": region, "config": boto_cfg, "endpoint_url": endpoint_url}
    if credentials:
        client_kwargs.update(credentials)
    try:
        return session.client("s3", **{k: v for k, v in client_kwargs.items() if v is not None})
    except BotoCoreError as e:
        raise ConfigError(f"Could not create S3 client for region {region!r}: {e}") from e


class S3ObjectStore:
    """``ObjectStore`` backed by a boto3 S3 client."""

    def __init__(self, client, bucket: str) -> None:
        self.client = client
        self.bucket = bucket

    def put_object(self, key: str, body: BinaryIO, tagging: str) -> None:
        self.client.put_object(Bucket=self.bucket, Key=key, Body=body, Tagging=tagging)

    def presigned_get_url(self, key: str, expires_in: int) -> str:
        return self.client.generate_presigned_url(
            ClientMethod="get_object",
            Params={"Bucket": self.bucket, "Key": key},
            ExpiresIn=expires_in,
        )


def build_store(config: ShareConfig, credentials: Optional[dict] = None) -> S3ObjectStore:
    logger.info(
        f"Using s3://{config.bucket} in {config.region}"
        + (f" via {config.endpoint_url}" if config.endpoint_url else "")
        + (" (path-style)" if config.use_path_style else "")
    )
    client = make_s3_client(
        region=config.region,
        profile=config.profile,
        endpoint_url=config.endpoint_url,
        use_path_style=config.use_path_style,
        credentials=credentials,
    )
    return S3ObjectStore(client, config.bucket)
