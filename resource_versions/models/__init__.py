from resource_versions.models.configuration import (
    BucketConnection,
    Configuration,
    Credentials,
    PartialConfiguration,
    Profile,
    RegionSpec,
)

__all__ = [
    "BucketConnection",
    "Configuration",
    "Credentials",
    "PartialConfiguration",
    "Profile",
    "RegionSpec",
]
