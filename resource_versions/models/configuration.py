"""
Configuration Models

Serialized on disk as TOML with kebab-case keys:

    bind-addr = "127.0.0.1:8080"
    cors-origins = []

    [bucket-info]
    name = "packages"

    [bucket-info.region]
    region = "eu-central-1"
    endpoint = "https://s3.example.com"

    [bucket-info.credentials]
    access-key = "..."
    secret-key = "..."
"""
import ipaddress
import logging
import tomllib
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple
from urllib.parse import urlparse

import tomli_w
from pydantic import BaseModel, ConfigDict, Field, field_validator

REDACTED = "<redacted>"


def _kebab(name: str) -> str:
    return name.replace("_", "-")


def split_bind_addr(value: str) -> Tuple[str, int]:
    """Split ``host:port`` (``[v6]:port`` for IPv6) into an IP string and a port."""
    host, sep, port = value.rpartition(":")
    if not sep or not host:
        raise ValueError(f"bind address must be host:port, got {value!r}")
    if host.startswith("[") and host.endswith("]"):
        host = host[1:-1]
        if ipaddress.ip_address(host).version != 6:
            raise ValueError(f"bracketed host must be an IPv6 address, got {value!r}")
    elif ipaddress.ip_address(host).version != 4:
        raise ValueError(f"IPv6 hosts must be bracketed, got {value!r}")
    if not port.isdigit() or not 0 <= int(port) <= 65535:
        raise ValueError(f"invalid port in bind address {value!r}")
    return host, int(port)


def check_endpoint(value: str) -> str:
    parsed = urlparse(value)
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        raise ValueError("endpoint must be an http(s) URL")
    return value


class Profile(str, Enum):
    """Deployment profile selecting default network and policy settings."""

    DEVELOPMENT = "development"
    PRODUCTION = "production"

    @classmethod
    def parse(cls, value: str) -> "Profile":
        aliases = {"dev": cls.DEVELOPMENT, "prod": cls.PRODUCTION}
        key = value.strip().lower()
        if key in aliases:
            return aliases[key]
        try:
            return cls(key)
        except ValueError:
            raise ValueError(
                f"Unknown profile {value!r}, expected one of: {', '.join(p.value for p in cls)}"
            ) from None

    @property
    def file_name(self) -> str:
        return f"{self.value.capitalize()}.toml"

    @property
    def default_bind_addr(self) -> str:
        if self is Profile.PRODUCTION:
            return "0.0.0.0:8080"
        return "127.0.0.1:8080"

    @property
    def default_cors_origins(self) -> List[str]:
        # Production origins have to be filled in by an operator.
        return []

    @property
    def default_log_level(self) -> int:
        if self is Profile.PRODUCTION:
            return logging.INFO
        return logging.DEBUG


class _FileModel(BaseModel):
    model_config = ConfigDict(
        frozen=True,
        populate_by_name=True,
        alias_generator=_kebab,
        extra="ignore",
    )


class RegionSpec(_FileModel):
    """Custom S3-compatible region: a region identifier plus its endpoint URL."""

    region: str = Field(min_length=1)
    endpoint: str

    @field_validator("endpoint")
    @classmethod
    def _check_endpoint(cls, value: str) -> str:
        return check_endpoint(value)


class Credentials(_FileModel):
    access_key: str = Field(min_length=1, repr=False)
    secret_key: str = Field(min_length=1, repr=False)

    def __repr__(self) -> str:
        return f"Credentials({REDACTED})"

    def __repr_args__(self):
        # feeds __rich_repr__ and __pretty__
        yield None, REDACTED

    __str__ = __repr__


class BucketConnection(_FileModel):
    name: str = Field(min_length=1)
    region: RegionSpec
    credentials: Credentials


class PartialConfiguration(_FileModel):
    """Configuration as found on disk, possibly without bucket information."""

    bind_addr: str
    cors_origins: List[str] = Field(default_factory=list)
    bucket_info: Optional[BucketConnection] = None

    @field_validator("bind_addr")
    @classmethod
    def _check_bind_addr(cls, value: str) -> str:
        split_bind_addr(value)
        return value

    @classmethod
    def defaults(cls, profile: Profile) -> "PartialConfiguration":
        return cls(
            bind_addr=profile.default_bind_addr,
            cors_origins=profile.default_cors_origins,
        )

    def complete(self, bucket_info: BucketConnection) -> "Configuration":
        return Configuration(
            bind_addr=self.bind_addr,
            cors_origins=list(self.cors_origins),
            bucket_info=bucket_info,
        )


class Configuration(PartialConfiguration):
    """Complete server configuration. Loaded once at startup and never mutated."""

    bucket_info: BucketConnection

    @property
    def host(self) -> str:
        return split_bind_addr(self.bind_addr)[0]

    @property
    def port(self) -> int:
        return split_bind_addr(self.bind_addr)[1]

    def to_dict(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True)

    def to_toml(self) -> str:
        return tomli_w.dumps(self.to_dict())

    @classmethod
    def from_toml(cls, text: str) -> "Configuration":
        return cls.model_validate(tomllib.loads(text))
