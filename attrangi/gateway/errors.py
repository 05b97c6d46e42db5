class GatewayError(Exception):
    """Base class for backend call failures."""

    pass


class NetworkFailure(GatewayError):
    """The call could not be made or the backend answered with a non-success status."""

    pass


class MalformedResponse(GatewayError):
    """The backend answered, but the payload does not have the expected shape."""

    pass
