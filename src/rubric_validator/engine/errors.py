"""Typed failures raised by the evaluation service.

Each error carries the HTTP status the route should answer with, a stable
code for clients, and a message that is safe to return. Anything that must
stay server side (raw model text, credential names) is logged, never put in
the message.
"""

from ..schemas.response import ErrorBody


class ServiceError(Exception):
    status_code: int = 500
    code: str = "SERVICE_ERROR"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_detail(self) -> dict:
        return ErrorBody(code=self.code, message=self.message).model_dump()


class BadRequestError(ServiceError):
    status_code = 400
    code = "BAD_REQUEST"


class MisconfiguredError(ServiceError):
    status_code = 500
    code = "MISCONFIGURED"

    def __init__(self, message: str = "Server configuration error: API key not found"):
        super().__init__(message)


class UpstreamError(ServiceError):
    """Provider answered with a non-success status or could not be reached."""

    code = "UPSTREAM_ERROR"

    def __init__(self, status_code: int, body: str):
        super().__init__(f"Error from provider: {body}")
        self.status_code = status_code
        self.body = body


class UpstreamFormatError(ServiceError):
    code = "UPSTREAM_FORMAT_ERROR"

    def __init__(self, message: str = "Invalid response format from provider"):
        super().__init__(message)


class ParseError(ServiceError):
    code = "PARSE_ERROR"

    def __init__(self, message: str = "Error parsing model response"):
        super().__init__(message)
