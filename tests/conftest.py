"""
Shared fixtures.

1. `bucket_connection` / `configuration`: a complete, valid configuration.

2. `store` + `stubber`:
   - `store` is a real ObjectStore built by `build_client`, pointing at a
     fake endpoint. No request ever leaves the process because `stubber`
     wraps its boto3 client in a `botocore.stub.Stubber`.
   - Queue listing pages with the `queue_page` fixture.

3. `client` (AsyncClient): talks to the FastAPI app through ASGITransport.
   Example: `response = await client.get("/health")`

4. `prompter`: factory for a ScriptedPrompter that answers loader prompts
   from a list and raises EOFError once the list runs out.

5. `restore_root_logger`: use in any test that calls `setup_logging`.
"""

import logging
from typing import AsyncGenerator, List, Optional

import pytest
import pytest_asyncio
from botocore.stub import Stubber
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

from resource_versions.main import create_app
from resource_versions.models.configuration import (
    BucketConnection,
    Configuration,
    Credentials,
    Profile,
    RegionSpec,
)
from resource_versions.services.storage_service import build_client

BUCKET = "packages"


class ScriptedPrompter:
    def __init__(self, answers: List[str]):
        self.answers = list(answers)
        self.asked: List[str] = []
        self.asked_secret: List[str] = []
        self.echoed: List[str] = []

    def _next(self) -> str:
        if not self.answers:
            raise EOFError
        return self.answers.pop(0)

    def ask(self, label: str) -> str:
        self.asked.append(label)
        return self._next()

    def ask_secret(self, label: str) -> str:
        self.asked_secret.append(label)
        return self._next()

    def echo(self, message: str) -> None:
        self.echoed.append(message)


def add_list_page(
    stubber: Stubber,
    prefix: str,
    keys: List[str],
    token: Optional[str] = None,
    next_token: Optional[str] = None,
) -> None:
    """Queue one ``list_objects_v2`` response for ``prefix``."""
    response = {
        "Name": BUCKET,
        "Prefix": prefix,
        "KeyCount": len(keys),
        "IsTruncated": next_token is not None,
    }
    if keys:
        response["Contents"] = [{"Key": key, "Size": 1} for key in keys]
    if next_token is not None:
        response["NextContinuationToken"] = next_token

    expected = {"Bucket": BUCKET, "Prefix": prefix}
    if token is not None:
        expected["ContinuationToken"] = token
    stubber.add_response("list_objects_v2", response, expected)


@pytest.fixture
def prompter():
    return ScriptedPrompter


@pytest.fixture
def bucket_connection() -> BucketConnection:
    return BucketConnection(
        name=BUCKET,
        region=RegionSpec(region="eu-central-1", endpoint="https://s3.test.local"),
        credentials=Credentials(access_key="AKIDEXAMPLE", secret_key="wJalrXUtnFEMI-K7MDENG"),
    )


@pytest.fixture
def configuration(bucket_connection) -> Configuration:
    return Configuration(
        bind_addr="127.0.0.1:8080",
        cors_origins=["https://example.com"],
        bucket_info=bucket_connection,
    )


@pytest.fixture
def store(bucket_connection):
    return build_client(bucket_connection)


@pytest.fixture
def stubber(store):
    with Stubber(store.client) as stub:
        yield stub


@pytest.fixture
def queue_page(stubber):
    """Queue a listing page on the active stubber."""

    def queue(prefix: str, keys: List[str], token: Optional[str] = None, next_token: Optional[str] = None):
        add_list_page(stubber, prefix, keys, token=token, next_token=next_token)

    return queue


@pytest.fixture
def profile() -> Profile:
    return Profile.DEVELOPMENT


@pytest.fixture
def app(configuration, store, profile) -> FastAPI:
    return create_app(configuration, store, profile)


@pytest_asyncio.fixture
async def client(app: FastAPI) -> AsyncGenerator[AsyncClient, None]:
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac


@pytest.fixture
def restore_root_logger():
    """Undo `setup_logging` so handlers do not leak between tests."""
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield root
    for handler in list(root.handlers):
        root.removeHandler(handler)
        if handler not in handlers:
            handler.close()
    for handler in handlers:
        root.addHandler(handler)
    root.setLevel(level)
