class GatewayError(RuntimeError):
    """Base class for booking gateway failures that are not "no data" results."""
    pass


class GatewayUpstreamError(GatewayError):
    """Raised when the booking backend fails (timeouts, network errors, 5xx)."""
    pass


class GatewayContractError(GatewayError):
    """Raised when the booking backend answers with a payload of the wrong shape."""
    pass


class InvalidTokenError(ValueError):
    """Raised by the backend service when an access token is not accepted."""
    pass


class MissingFieldsError(ValueError):
    """Raised by the backend service when a request lacks required fields."""

    def __init__(self, fields: list[str], message: str = "Missing required fields") -> None:
        super().__init__(message)
        self.fields = fields


class InvalidTransitionError(RuntimeError):
    """Raised when a session operation is not allowed in the current step."""
    pass
