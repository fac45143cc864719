class FlowycartError(Exception):
    """Base class for every error raised by the Flowycart SDK."""


class InvalidArgumentError(FlowycartError, ValueError):
    """Raised when caller input is malformed, before any request is sent."""


class RequestError(FlowycartError):
    """Raised when the API call fails at the transport, HTTP, or GraphQL level."""

    def __init__(
        self,
        message: str,
        code: int | None = None,
        status_code: int | None = None,
        errors: list[dict] | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.code = code
        self.status_code = status_code
        self.errors: list[dict] = errors or []


class DomainError(FlowycartError):
    """Raised when the API accepted the request but did not produce the object.

    ``status`` is the reason reported by the API, e.g. ``"INVALID_CURRENCY"``.
    """

    def __init__(self, operation: str, status: str | None) -> None:
        message = status if status else f"{operation} failed without a status"
        super().__init__(message)
        self.operation = operation
        self.status = status
