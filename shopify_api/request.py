"""Outbound request description."""
from __future__ import annotations

import json
from dataclasses import dataclass, replace
from enum import Enum
from typing import Any, Mapping, Optional

from .errors import (
    InvalidHttpRequestError,
    InvalidMethodError,
    MissingBodyError,
    MissingBodyTypeError,
)


class HttpMethod(Enum):
    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    DELETE = "DELETE"

    @property
    def label(self) -> str:
        """Lower-case name, as used in error messages."""
        return self.value.lower()

    @classmethod
    def coerce(cls, method: Any) -> "HttpMethod":
        """Return ``method`` as an ``HttpMethod``, accepting names in any case.

        Raises:
            InvalidMethodError: If ``method`` is not GET, POST, PUT or DELETE.
        """
        if isinstance(method, cls):
            return method
        if isinstance(method, str):
            try:
                return cls(method.upper())
            except ValueError:
                pass
        raise InvalidMethodError(method)


class DataType(Enum):
    JSON = "json"
    GRAPHQL = "graphql"

    @property
    def content_type(self) -> str:
        return "application/json" if self is DataType.JSON else "application/graphql"


@dataclass(frozen=True)
class HttpRequest:
    """Immutable description of a single call to the Shopify API.

    Attributes:
        method: HTTP method (an ``HttpMethod`` or its name).
        path: Path relative to the client's base path, e.g. ``"products.json"``.
        body: Optional JSON-like payload. Requires ``body_type``.
        body_type: Content type of ``body``.
        query: Query string parameters.
        extra_headers: Headers merged over the client defaults; these win.
        tries: Upper bound on total attempts. ``1`` disables retries.
    """

    method: HttpMethod
    path: str
    body: Any = None
    body_type: Optional[DataType] = None
    query: Optional[Mapping[str, str]] = None
    extra_headers: Optional[Mapping[str, str]] = None
    tries: int = 1

    @classmethod
    def build(cls, method: Any, path: str, **kwargs: Any) -> "HttpRequest":
        """Construct a request and validate it immediately."""
        request = cls(method, path, **kwargs)
        request.verify()
        return request

    @property
    def http_method(self) -> HttpMethod:
        return HttpMethod.coerce(self.method)

    def verify(self) -> None:
        """Check the request invariants without touching the network.

        Raises:
            InvalidMethodError: Unknown HTTP method.
            MissingBodyTypeError: ``body`` is set but ``body_type`` is not.
            MissingBodyError: POST or PUT without a ``body``.
            InvalidHttpRequestError: Empty path or non-positive ``tries``.
        """
        method = HttpMethod.coerce(self.method)
        if self.body is not None and self.body_type is None:
            raise MissingBodyTypeError()
        if method in (HttpMethod.POST, HttpMethod.PUT) and self.body is None:
            raise MissingBodyError(method.label)
        if not self.path:
            raise InvalidHttpRequestError("Cannot send a request without a path.")
        if isinstance(self.tries, bool) or not isinstance(self.tries, int) or self.tries < 1:
            raise InvalidHttpRequestError(
                f"tries must be a positive integer, got {self.tries!r}."
            )

    def with_query_param(self, key: str, value: str) -> "HttpRequest":
        query = dict(self.query or {})
        query[key] = value
        return replace(self, query=query)

    def with_header(self, key: str, value: str) -> "HttpRequest":
        headers = dict(self.extra_headers or {})
        headers[key] = value
        return replace(self, extra_headers=headers)

    def serialized_body(self) -> Optional[str]:
        """Body as sent on the wire, or ``None`` when there is no body."""
        if self.body is None:
            return None
        if self.body_type is DataType.GRAPHQL and isinstance(self.body, str):
            return self.body
        return json.dumps(self.body)
