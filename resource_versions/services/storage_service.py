"""
S3 storage adapter.

Builds one boto3 client for the configured S3-compatible bucket. boto3
clients are thread-safe, so the resulting ObjectStore is shared by every
request.
"""
import logging
from typing import Any, Dict, Iterator

import boto3
from botocore.client import Config
from botocore.exceptions import BotoCoreError, ClientError

from resource_versions.errors import InvalidCredentialsError, StoreConnectionError, StoreError
from resource_versions.models.configuration import BucketConnection, Credentials

logger = logging.getLogger(__name__)


class ObjectStore:
    """Handle on a single bucket. Read-only after construction."""

    def __init__(self, client, bucket_name: str):
        self._client = client
        self._bucket_name = bucket_name

    def __repr__(self) -> str:
        return f"ObjectStore(bucket={self._bucket_name!r}, endpoint={self._client.meta.endpoint_url!r})"

    @property
    def client(self):
        return self._client

    @property
    def bucket_name(self) -> str:
        return self._bucket_name

    def iter_pages(self, prefix: str) -> Iterator[Dict[str, Any]]:
        """Yield raw ``list_objects_v2`` pages for every key under ``prefix``."""
        paginator = self._client.get_paginator("list_objects_v2")
        try:
            for page in paginator.paginate(Bucket=self._bucket_name, Prefix=prefix):
                yield page
        except ClientError as e:
            code = e.response.get("Error", {}).get("Code", "Unknown")
            raise StoreError(
                f"Listing s3://{self._bucket_name}/{prefix} failed ({code}): {e}"
            ) from e
        except BotoCoreError as e:
            raise StoreError(f"Listing s3://{self._bucket_name}/{prefix} failed: {e}") from e


def _check_key(label: str, value: str) -> None:
    if not value:
        raise InvalidCredentialsError(f"{label} is empty")
    if not value.isascii() or not value.isprintable() or any(c.isspace() for c in value):
        raise InvalidCredentialsError(f"{label} contains characters that cannot be used for request signing")


def check_credentials(credentials: Credentials) -> None:
    _check_key("Access key", credentials.access_key)
    _check_key("Secret key", credentials.secret_key)


def build_client(connection: BucketConnection) -> ObjectStore:
    """
    Build the store handle for ``connection``.

    Raises:
        InvalidCredentialsError: the key material cannot sign requests.
        StoreConnectionError: the region or endpoint is unusable.
    """
    check_credentials(connection.credentials)

    region = connection.region
    try:
        client = boto3.session.Session().client(
            service_name="s3",
            region_name=region.region,
            endpoint_url=region.endpoint,
            aws_access_key_id=connection.credentials.access_key,
            aws_secret_access_key=connection.credentials.secret_key,
            config=Config(signature_version="s3v4", s3={"addressing_style": "path"}),
        )
    except (ValueError, BotoCoreError) as e:
        raise StoreConnectionError(
            f"Could not create a client for region '{region.region}' at {region.endpoint}: {e}"
        ) from e

    logger.info(f"Using bucket '{connection.name}' in region '{region.region}' at {region.endpoint}")
    return ObjectStore(client, connection.name)
