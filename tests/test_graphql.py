import json
import pathlib
import sys

import pytest

sys.path.insert(0, str(pathlib.Path(__file__).resolve().parents[1]))

from shopify_api.errors import HttpResponseError
from shopify_api.graphql import GraphqlClient
from shopify_api.session import ShopifySession
from shopify_api.transport import RawResponse, Transport


class ListTransport(Transport):
    def __init__(self, responses):
        self.responses = responses
        self.calls = []

    def send(self, method, url, headers, params, data, timeout):
        self.calls.append({"method": method, "url": url, "headers": dict(headers), "params": params, "data": data})
        return self.responses.pop(0)


def make_client(responses, **kwargs):
    transport = ListTransport(responses)
    return GraphqlClient(ShopifySession("test-shop", "token"), transport=transport, **kwargs), transport


def test_query_posts_document_and_variables():
    client, transport = make_client([RawResponse(200, [], '{"data": {"shop": {"name": "Test"}}}')])
    response = client.query("query($id: ID!) { product(id: $id) { title } }", {"id": "gid://shopify/Product/1"})
    call = transport.calls[0]
    assert call["method"] == "POST"
    assert call["url"] == "https://test-shop.myshopify.com/admin/api/2025-10/graphql.json"
    assert call["headers"]["Content-Type"] == "application/json"
    assert json.loads(call["data"]) == {
        "query": "query($id: ID!) { product(id: $id) { title } }",
        "variables": {"id": "gid://shopify/Product/1"},
    }
    assert call["params"] is None
    assert response.body["data"]["shop"]["name"] == "Test"


def test_query_without_variables_sends_null():
    client, transport = make_client([RawResponse(200, [], "{}")])
    client.query("{ shop { name } }")
    assert json.loads(transport.calls[0]["data"])["variables"] is None


def test_query_debug_and_headers():
    client, transport = make_client([RawResponse(200, [], "{}")])
    client.query("{ shop { name } }", headers={"X-GraphQL-Cost-Include-Fields": "true"}, debug=True)
    call = transport.calls[0]
    assert call["params"] == {"debug": "true"}
    assert call["headers"]["X-GraphQL-Cost-Include-Fields"] == "true"


def test_query_retries_throttled_reply(monkeypatch):
    monkeypatch.setattr("time.sleep", lambda s: None)
    client, transport = make_client(
        [RawResponse(429, [("Retry-After", "1")], "{}"), RawResponse(200, [], '{"data": {}}')]
    )
    response = client.query("{ shop { name } }", tries=2)
    assert response.code == 200
    assert len(transport.calls) == 2


def test_query_error_status_raises():
    client, _ = make_client([RawResponse(401, [], '{"errors": "[API] Invalid API key"}')])
    with pytest.raises(HttpResponseError) as exc:
        client.query("{ shop { name } }")
    assert exc.value.code == 401
    assert "Invalid API key" in exc.value.message


def test_graphql_errors_on_200_are_returned():
    client, _ = make_client([RawResponse(200, [], '{"errors": [{"message": "bad"}]}')])
    assert client.query("{ nope }").body["errors"][0]["message"] == "bad"


def test_api_version_override():
    client, transport = make_client([RawResponse(200, [], "{}")], api_version="unstable")
    client.query("{ shop { name } }")
    assert transport.calls[0]["url"].endswith("/admin/api/unstable/graphql.json")
