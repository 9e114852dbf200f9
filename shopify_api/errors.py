"""Error classes for the Shopify API client."""
from __future__ import annotations

from typing import Any, Mapping, Optional


class ShopifyAPIError(Exception):
    """Base class for every error raised by this package."""

    request_id: Optional[str] = None


class ShopifyConfigError(ShopifyAPIError):
    """Raised when session configuration is missing or invalid."""


class HttpError(ShopifyAPIError):
    """Base class for failures of a single HTTP exchange."""


class InvalidHttpRequestError(HttpError):
    """Raised when an outbound request fails validation before it is sent."""


class InvalidMethodError(InvalidHttpRequestError):
    def __init__(self, method: Any) -> None:
        super().__init__(f"Invalid Http method {method}.")
        self.method = method


class MissingBodyTypeError(InvalidHttpRequestError):
    def __init__(self) -> None:
        super().__init__("Cannot set a body without also setting body_type.")


class MissingBodyError(InvalidHttpRequestError):
    def __init__(self, method: str) -> None:
        super().__init__(f"Cannot use {method} without specifying data.")
        self.method = method


class HttpResponseError(HttpError):
    """Raised for a non-2xx reply from Shopify.

    Attributes:
        code: HTTP status code of the reply.
        message: JSON summary of the error body (see ``serialize_error``).
        error_reference: The ``X-Request-Id`` of the reply, if any.
        body: The parsed response body.
    """

    def __init__(
        self,
        code: int,
        message: str,
        error_reference: Optional[str] = None,
        body: Optional[Mapping[str, Any]] = None,
    ) -> None:
        super().__init__(f"HTTP {code}: {message}")
        self.code = code
        self.message = message
        self.error_reference = error_reference
        self.request_id = error_reference
        self.body = body if body is not None else {}

    @property
    def status_code(self) -> int:
        return self.code


class MaxHttpRetriesExceededError(HttpError):
    """Raised when a retryable status persisted across every allowed attempt."""

    def __init__(
        self,
        code: int,
        tries: int,
        message: str,
        error_reference: Optional[str] = None,
        body: Optional[Mapping[str, Any]] = None,
    ) -> None:
        super().__init__(
            f"Exceeded maximum retry count of {tries}. Last message: {message}"
        )
        self.code = code
        self.tries = tries
        self.message = message
        self.error_reference = error_reference
        self.request_id = error_reference
        self.body = body if body is not None else {}

    @property
    def status_code(self) -> int:
        return self.code


class HttpTransportError(HttpError):
    """Raised when the request never produced an HTTP reply (DNS, TCP, TLS)."""


class PathResolutionError(ShopifyAPIError):
    def __init__(self, resource: str, operation: str) -> None:
        super().__init__(
            f"Cannot resolve path for {resource}::{operation} with provided IDs"
        )
        self.resource = resource
        self.operation = operation


class InvalidPathError(ShopifyAPIError):
    def __init__(self, path: str) -> None:
        super().__init__(f"Invalid REST API path: {path}")
        self.path = path


class ResourceError(ShopifyAPIError):
    """Base class for resource-level failures mapped from HTTP replies."""


class ResourceNotFoundError(ResourceError):
    def __init__(self, resource: str, id: str, request_id: Optional[str] = None) -> None:
        super().__init__(f"{resource} with id {id} not found")
        self.resource = resource
        self.id = id
        self.request_id = request_id


class ResourceValidationError(ResourceError):
    """Raised on a 422 reply; ``errors`` maps field name to messages."""

    def __init__(
        self, errors: Mapping[str, list[str]], request_id: Optional[str] = None
    ) -> None:
        super().__init__(f"Validation failed: {dict(errors)}")
        self.errors = dict(errors)
        self.request_id = request_id


class GraphqlQueryError(ShopifyAPIError):
    """Raised when a GraphQL reply carries a top-level ``errors`` payload."""

    def __init__(self, errors: Any, request_id: Optional[str] = None) -> None:
        snippet = str(errors)
        super().__init__(snippet if len(snippet) <= 300 else snippet[:300])
        self.errors = errors
        self.request_id = request_id
