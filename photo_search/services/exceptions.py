"""Domain-specific exceptions."""


class ServiceError(Exception):
    pass


class ConfigurationError(ServiceError):
    pass


class NetworkFailure(ServiceError):
    """The photo search request was rejected, timed out or returned garbage."""


class PhotoNotFound(ServiceError):
    pass
