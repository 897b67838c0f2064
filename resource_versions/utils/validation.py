"""Validation of caller supplied resource names."""

from resource_versions.errors import ValidationError

MIN_NAME_LENGTH = 2
MAX_NAME_LENGTH = 32


def validate_resource_name(resource_name: str) -> None:
    """Raise ValidationError unless the name is 2-32 bytes (UTF-8) of alphanumerics."""
    if not MIN_NAME_LENGTH <= len(resource_name.encode("utf-8")) <= MAX_NAME_LENGTH:
        raise ValidationError(
            f"Resource names must be between {MIN_NAME_LENGTH}-{MAX_NAME_LENGTH} characters in length"
        )
    if not all(c.isalnum() for c in resource_name):
        raise ValidationError("Resource names must only contain alphanumeric characters")
