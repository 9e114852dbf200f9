"""GraphQL Admin API client."""
from __future__ import annotations

import logging
from typing import Any, Mapping, Optional

from .client import HttpClient
from .request import DataType, HttpMethod, HttpRequest
from .response import HttpResponse
from .session import ShopifySession
from .transport import Transport

logger = logging.getLogger(__name__)

GRAPHQL_PATH = "graphql.json"


class GraphqlClient:
    """Sends GraphQL documents to ``/admin/api/<version>/graphql.json``.

    Replies go through the same retry handling as REST calls. A 200 reply that
    carries GraphQL ``errors`` is still returned; inspect ``response.body``.
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
                "GraphQL client has a redundant API version override to the default %s",
                api_version,
            )
        else:
            logger.debug(
                "GraphQL client overriding default API version %s with %s",
                session.api_version,
                api_version,
            )
        self.api_version = api_version
        self.http_client = HttpClient(
            f"/admin/api/{api_version}", session, transport, **client_options
        )

    def query(
        self,
        query: str,
        variables: Optional[Mapping[str, Any]] = None,
        headers: Optional[Mapping[str, str]] = None,
        tries: int = 1,
        debug: bool = False,
    ) -> HttpResponse:
        """Execute a GraphQL query or mutation.

        Args:
            query: The GraphQL document.
            variables: Optional variables for the document.
            headers: Extra headers for this call only.
            tries: Attempt budget for 429/500 replies (default: no retry).
            debug: Ask Shopify for query cost debug information.

        Returns:
            HttpResponse: The reply; ``body["data"]`` holds the result.

        Example:
            >>> client = GraphqlClient(ShopifySession("my-store", "shpat_..."))
            >>> client.query("{ shop { name } }").body["data"]["shop"]["name"]
        """
        request = HttpRequest(
            HttpMethod.POST,
            GRAPHQL_PATH,
            body={"query": query, "variables": dict(variables) if variables is not None else None},
            body_type=DataType.JSON,
            extra_headers=dict(headers) if headers else None,
            tries=tries,
        )
        if debug:
            request = request.with_query_param("debug", "true")
        return self.http_client.request(request)
