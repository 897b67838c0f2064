"""
Configuration loader.

Reads the per-profile TOML file, asks the operator for whatever bucket
information is missing, and writes the completed configuration back so the
next start does not prompt again. Runs once, before the server starts.
"""
import getpass
import logging
import os
import tempfile
import tomllib
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Tuple

from pydantic import ValidationError as PydanticValidationError

from resource_versions.errors import ConfigIoError, ConfigParseError
from resource_versions.models.configuration import (
    BucketConnection,
    Configuration,
    PartialConfiguration,
    Profile,
    check_endpoint,
)

logger = logging.getLogger(__name__)

FieldPath = Tuple[str, ...]

# Prompt order. Paths are relative to the bucket-info table.
BUCKET_FIELDS: List[Tuple[FieldPath, str, bool]] = [
    (("region", "region"), "Region identifier", False),
    (("region", "endpoint"), "Endpoint URL", False),
    (("name",), "Bucket name", False),
    (("credentials", "access-key"), "Access key", True),
    (("credentials", "secret-key"), "Secret key", True),
]


class TerminalPrompter:
    """Collects answers from the controlling terminal."""

    def ask(self, label: str) -> str:
        return input(f"{label}: ")

    def ask_secret(self, label: str) -> str:
        return getpass.getpass(f"{label} (hidden): ")

    def echo(self, message: str) -> None:
        print(message, flush=True)


def _require_value(value: str) -> str:
    if not value:
        raise ValueError("a value is required")
    return value


def _check_endpoint_answer(value: str) -> str:
    return check_endpoint(_require_value(value))


FIELD_CHECKS: Dict[FieldPath, Callable[[str], str]] = {
    ("region", "endpoint"): _check_endpoint_answer,
}


def field_name(path: FieldPath) -> str:
    return ".".join(("bucket-info",) + path)


def _get(raw: Dict[str, Any], path: FieldPath) -> Any:
    value: Any = raw
    for key in path:
        if not isinstance(value, dict):
            return None
        value = value.get(key)
    return value


def _set(raw: Dict[str, Any], path: FieldPath, value: str) -> None:
    for key in path[:-1]:
        raw = raw.setdefault(key, {})
    raw[path[-1]] = value


def _invalid_paths(err: PydanticValidationError) -> List[FieldPath]:
    """Map pydantic error locations onto the prompted bucket fields."""
    invalid = []
    for path, _, _ in BUCKET_FIELDS:
        for error in err.errors():
            loc = tuple(str(part) for part in error["loc"])
            shared = min(len(loc), len(path))
            if loc[:shared] == path[:shared]:
                invalid.append(path)
                break
    return invalid


def _read_file(path: Path, profile: Profile) -> Tuple[PartialConfiguration, Optional[Dict[str, Any]]]:
    """Return the top-level settings and the raw, unvalidated bucket-info table."""
    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        logger.info(f"No configuration found at {path}, starting from {profile.value} defaults")
        return PartialConfiguration.defaults(profile), None
    except OSError as e:
        raise ConfigIoError(f"Could not read configuration file {path}: {e}") from e

    try:
        data = tomllib.loads(text)
    except tomllib.TOMLDecodeError as e:
        raise ConfigParseError(f"Could not parse configuration file {path}: {e}") from e

    raw_bucket = data.pop("bucket-info", None)
    if raw_bucket is not None and not isinstance(raw_bucket, dict):
        raise ConfigParseError(f"Invalid configuration in {path}: bucket-info must be a table")

    data.setdefault("bind-addr", profile.default_bind_addr)
    data.setdefault("cors-origins", profile.default_cors_origins)
    try:
        partial = PartialConfiguration.model_validate(data)
    except PydanticValidationError as e:
        raise ConfigParseError(f"Invalid configuration in {path}: {e}") from e
    return partial, raw_bucket


def _prompt_field(prompter, label: str, secret: bool, check: Callable[[str], str]) -> str:
    while True:
        answer = prompter.ask_secret(label) if secret else prompter.ask(label)
        try:
            return check(answer.strip())
        except ValueError as e:
            prompter.echo(f"Invalid {label.lower()}: {e}")


def complete_bucket_info(raw_bucket: Dict[str, Any], missing: List[FieldPath], prompter) -> BucketConnection:
    """Prompt for each missing field in order and build the bucket connection."""
    values: Dict[str, Any] = {}
    for path, _, _ in BUCKET_FIELDS:
        if path not in missing:
            _set(values, path, _get(raw_bucket, path))

    try:
        for path, label, secret in BUCKET_FIELDS:
            if path in missing:
                check = FIELD_CHECKS.get(path, _require_value)
                _set(values, path, _prompt_field(prompter, label, secret, check))
    except EOFError as e:
        raise ConfigIoError("Input closed before the bucket configuration was completed") from e

    bucket = BucketConnection.model_validate(values)
    prompter.echo(
        "Using bucket configuration:\n"
        f"  Bucket:   {bucket.name}\n"
        f"  Region:   {bucket.region.region}\n"
        f"  Endpoint: {bucket.region.endpoint}"
    )
    return bucket


def write_config(path: Path, config: Configuration) -> None:
    """Replace ``path`` atomically. The file holds credentials, so it is created 0600."""
    tmp_name = None
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        # mkstemp opens the file with mode 0600
        fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(config.to_toml())
        os.replace(tmp_name, path)
    except OSError as e:
        if tmp_name is not None and os.path.exists(tmp_name):
            os.unlink(tmp_name)
        raise ConfigIoError(f"Could not write configuration file {path}: {e}") from e


def load_config(profile: Profile, config_dir: Path, prompter=None) -> Configuration:
    """
    Load the configuration for ``profile`` from ``config_dir``.

    Missing bucket information is collected interactively with ``prompter``
    (a TerminalPrompter by default) whatever the profile. The result is always
    written back to the profile's file.

    Raises:
        ConfigIoError: the file could not be read or written, or input ended early.
        ConfigParseError: the file exists but is not a valid configuration.
    """
    path = Path(config_dir) / profile.file_name
    logger.info(f"Loading {profile.value} configuration from {path}")
    partial, raw_bucket = _read_file(path, profile)

    all_fields = [p for p, _, _ in BUCKET_FIELDS]
    missing = all_fields
    if raw_bucket is not None:
        try:
            bucket = BucketConnection.model_validate(raw_bucket)
            missing = []
        except PydanticValidationError as e:
            missing = _invalid_paths(e) or all_fields

    if missing:
        logger.warning(
            "Bucket configuration is incomplete, missing: "
            + ", ".join(field_name(p) for p in missing)
        )
        bucket = complete_bucket_info(raw_bucket or {}, missing, prompter or TerminalPrompter())

    config = partial.complete(bucket)
    write_config(path, config)
    logger.info(f"Configuration saved to {path}")
    return config
