"""Service-level error taxonomy translated to HTTP errors by the routes."""


class ServiceError(Exception):
    """Raised when a business operation cannot be completed."""

    def __init__(self, detail: str, status_code: int = 400) -> None:
        super().__init__(detail)
        self.detail = detail
        self.status_code = status_code


class NotFoundError(ServiceError):
    """A member, request or item does not exist."""

    def __init__(self, detail: str) -> None:
        super().__init__(detail, status_code=404)


class PreconditionViolation(ServiceError):
    """Insufficient balance or stock, already processed request, duplicate account."""


class UpstreamServiceError(ServiceError):
    """A third-party service failed and no fallback applies."""

    def __init__(self, detail: str) -> None:
        super().__init__(detail, status_code=502)
