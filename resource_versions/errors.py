"""Error taxonomy for the resource versions service."""


class ResourceVersionsError(Exception):
    """Base class for all service errors."""


class ValidationError(ResourceVersionsError):
    """Caller supplied a malformed resource name."""


class ConfigError(ResourceVersionsError):
    """Configuration could not be loaded. Fatal at startup."""


class ConfigIoError(ConfigError):
    pass


class ConfigParseError(ConfigError):
    pass


class StoreInitError(ResourceVersionsError):
    """The object store client could not be built."""


class InvalidCredentialsError(StoreInitError):
    pass


class StoreConnectionError(StoreInitError):
    pass


class StoreError(ResourceVersionsError):
    """Storage or transport failure while talking to the bucket."""


class CountError(ResourceVersionsError):
    """Counting the versions of a resource failed."""

    def __init__(self, resource_name: str, store_error: StoreError):
        super().__init__(f"Could not count versions of '{resource_name}': {store_error}")
        self.resource_name = resource_name
        self.store_error = store_error
