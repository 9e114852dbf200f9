"""Pagination helpers."""
from __future__ import annotations

from typing import Any, Iterable, Mapping

from .errors import GraphqlQueryError
from .graphql import GraphqlClient
from .rest import RestClient

REST_MAX_PAGE_SIZE = 250


def cursor_pages(
    client: GraphqlClient,
    query: str,
    connection_path: list[str],
    variables: Mapping[str, Any] | None = None,
    page_size: int = 250,
    tries: int = 1,
) -> Iterable[dict[str, Any]]:
    """Walk a GraphQL connection page by page and yield its nodes.

    Each page is fetched with ``first`` and ``after`` set in the variables, so
    the document has to declare both. The walk stops once ``pageInfo`` reports
    no further page. A cursor already present under ``variables["after"]`` is
    where the walk starts, which lets a caller resume after a failure.

    Args:
        client: `GraphqlClient` for the shop.
        query: Document whose connection takes `$first` and `$after`.
        connection_path: Keys leading from the reply body to the connection,
            e.g. `["data", "orders"]`.
        variables: Extra variables sent with every page.
        page_size: Page size when `variables` has no positive `first`.
        tries: Attempt budget per page for 429/500 replies.

    Raises:
        GraphqlQueryError: A page came back with top-level `errors`.
        ValueError: `connection_path` does not lead to a connection holding
            `nodes` or `edges`.
    """
    page_vars: dict[str, Any] = dict(variables or {})
    first = page_vars.get("first")
    if not (isinstance(first, int) and first > 0):
        page_vars["first"] = page_size
    page_vars.setdefault("after", None)
    while True:
        response = client.query(query, page_vars, tries=tries)
        body = response.body
        if isinstance(body, dict) and "errors" in body:
            raise GraphqlQueryError(body["errors"], response.request_id)
        connection = _find_connection(body, connection_path)
        yield from _connection_nodes(connection)
        page_info = connection.get("pageInfo") or {}
        if not page_info.get("hasNextPage"):
            return
        page_vars["after"] = page_info.get("endCursor")


def _find_connection(body: Any, connection_path: list[str]) -> dict[str, Any]:
    node = body
    for key in connection_path:
        if not isinstance(node, dict) or key not in node:
            raise ValueError(f"connection_path missing key '{key}'")
        node = node[key]
    if not isinstance(node, dict):
        raise ValueError("connection_path does not lead to a connection object")
    return node


def _connection_nodes(connection: dict[str, Any]) -> list[Any]:
    if "nodes" in connection:
        return connection["nodes"]
    if "edges" in connection:
        return [edge["node"] for edge in connection["edges"]]
    raise ValueError("Connection missing 'nodes' or 'edges'")


def link_pages(
    client: RestClient,
    path: str,
    key: str,
    query: Mapping[str, str] | None = None,
    limit: int = REST_MAX_PAGE_SIZE,
    tries: int = 1,
) -> Iterable[dict[str, Any]]:
    """Yield items of a REST list endpoint, following ``Link`` header cursors.

    Only ``limit`` and ``page_info`` may accompany a cursor, so the filters in
    ``query`` are sent with the first page only.

    Args:
        client: `RestClient` for the shop.
        path: List endpoint, e.g. ``"products"``.
        key: Body member holding the items, e.g. ``"products"``.
        query: Filters for the first page.
        limit: Items per page (default 250, Shopify max).
        tries: Attempt budget per page for 429/500 replies.
    """
    params: dict[str, str] = dict(query or {})
    params["limit"] = str(limit)
    while True:
        response = client.get(path, query=params, tries=tries)
        body = response.body if isinstance(response.body, dict) else {}
        if key not in body:
            raise ValueError(f"Response missing key '{key}'")
        for item in body[key]:
            yield item
        if response.next_page_info is None:
            break
        params = {"limit": str(limit), "page_info": response.next_page_info}
