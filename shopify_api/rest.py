"""REST Admin API client."""
from __future__ import annotations

import logging
from typing import Any, Mapping, Optional

from .client import HttpClient
from .errors import InvalidPathError
from .request import DataType, HttpMethod, HttpRequest
from .response import HttpResponse
from .session import ShopifySession
from .transport import Transport

logger = logging.getLogger(__name__)

REST_DEPRECATION_NOTICE = (
    "The REST Admin API is deprecated. Consider migrating to GraphQL. "
    "See: https://www.shopify.com/ca/partners/blog/all-in-on-graphql"
)


def normalize_path(path: str) -> str:
    """Return ``path`` without leading slashes and with exactly one ``.json``.

    Raises:
        InvalidPathError: If nothing is left once the slashes and suffix go.
    """
    stripped = path.lstrip("/")
    if stripped.endswith(".json"):
        stripped = stripped[: -len(".json")]
    if not stripped:
        raise InvalidPathError(path)
    return f"{stripped}.json"


class RestClient:
    """Client for ``/admin/api/<version>/<path>.json`` endpoints.

    Example:
        >>> client = RestClient(ShopifySession("my-store", "shpat_..."))
        >>> client.get("products", query={"limit": "50"}).body["products"]
    """

    def __init__(
        self,
        session: ShopifySession,
        transport: Optional[Transport] = None,
        api_version: Optional[str] = None,
        **client_options: Any,
    ) -> None:
        if api_version is None:
            api_version = session.api_version
        elif api_version == session.api_version:
            logger.debug(
                "Rest client has a redundant API version override to the default %s",
                api_version,
            )
        else:
            logger.debug(
                "Rest client overriding default API version %s with %s",
                session.api_version,
                api_version,
            )
        logger.warning(REST_DEPRECATION_NOTICE)
        self.api_version = api_version
        self.http_client = HttpClient(
            f"/admin/api/{api_version}", session, transport, **client_options
        )

    def get(
        self, path: str, query: Optional[Mapping[str, str]] = None, tries: int = 1
    ) -> HttpResponse:
        return self._request(HttpMethod.GET, path, None, query, tries)

    def post(
        self,
        path: str,
        body: Any,
        query: Optional[Mapping[str, str]] = None,
        tries: int = 1,
    ) -> HttpResponse:
        return self._request(HttpMethod.POST, path, body, query, tries)

    def put(
        self,
        path: str,
        body: Any,
        query: Optional[Mapping[str, str]] = None,
        tries: int = 1,
    ) -> HttpResponse:
        return self._request(HttpMethod.PUT, path, body, query, tries)

    def delete(
        self, path: str, query: Optional[Mapping[str, str]] = None, tries: int = 1
    ) -> HttpResponse:
        return self._request(HttpMethod.DELETE, path, None, query, tries)

    def _request(
        self,
        method: HttpMethod,
        path: str,
        body: Any,
        query: Optional[Mapping[str, str]],
        tries: int,
    ) -> HttpResponse:
        request = HttpRequest.build(
            method,
            normalize_path(path),
            body=body,
            body_type=DataType.JSON if body is not None else None,
            query=dict(query) if query else None,
            tries=tries,
        )
        return self.http_client.request(request)
