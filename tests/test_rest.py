import json
import logging
import pathlib
import sys

import pytest

sys.path.insert(0, str(pathlib.Path(__file__).resolve().parents[1]))

from shopify_api.errors import InvalidPathError, MaxHttpRetriesExceededError
from shopify_api.rest import RestClient, normalize_path
from shopify_api.session import ShopifySession
from shopify_api.transport import RawResponse, Transport


class ListTransport(Transport):
    def __init__(self, responses):
        self.responses = responses
        self.calls = []

    def send(self, method, url, headers, params, data, timeout):
        self.calls.append({"method": method, "url": url, "headers": dict(headers), "params": params, "data": data})
        return self.responses.pop(0)


def ok(body):
    return RawResponse(200, [], json.dumps(body))


def make_client(transport, **kwargs):
    return RestClient(ShopifySession("test-shop", "token"), transport=transport, **kwargs)


@pytest.mark.parametrize(
    "path,expected",
    [
        ("products", "products.json"),
        ("/products", "products.json"),
        ("//products.json", "products.json"),
        ("products/123/variants", "products/123/variants.json"),
    ],
)
def test_normalize_path(path, expected):
    assert normalize_path(path) == expected


@pytest.mark.parametrize("path", ["", "/", ".json", "/.json"])
def test_normalize_path_rejects_empty(path):
    with pytest.raises(InvalidPathError):
        normalize_path(path)


def test_get_builds_versioned_url_and_query():
    transport = ListTransport([ok({"products": []})])
    client = make_client(transport)
    response = client.get("products", query={"limit": "50"})
    call = transport.calls[0]
    assert call["method"] == "GET"
    assert call["url"] == "https://test-shop.myshopify.com/admin/api/2025-10/products.json"
    assert call["params"] == {"limit": "50"}
    assert call["data"] is None
    assert "Content-Type" not in call["headers"]
    assert response.body == {"products": []}


def test_post_and_put_send_json_bodies():
    transport = ListTransport([ok({"product": {"id": 1}}), ok({"product": {"id": 1}})])
    client = make_client(transport)
    client.post("products", {"product": {"title": "Hat"}})
    client.put("products/1", {"product": {"title": "Cap"}})
    assert [c["method"] for c in transport.calls] == ["POST", "PUT"]
    assert transport.calls[1]["url"].endswith("/products/1.json")
    assert json.loads(transport.calls[0]["data"]) == {"product": {"title": "Hat"}}
    assert transport.calls[0]["headers"]["Content-Type"] == "application/json"


def test_delete():
    transport = ListTransport([ok({})])
    make_client(transport).delete("products/1")
    assert transport.calls[0]["method"] == "DELETE"
    assert transport.calls[0]["url"].endswith("/products/1.json")


def test_tries_are_passed_to_engine(monkeypatch):
    monkeypatch.setattr("time.sleep", lambda s: None)
    transport = ListTransport([RawResponse(429, [], "{}") for _ in range(2)])
    with pytest.raises(MaxHttpRetriesExceededError):
        make_client(transport).get("products", tries=2)
    assert len(transport.calls) == 2


def test_api_version_override():
    transport = ListTransport([ok({})])
    client = make_client(transport, api_version="2025-01")
    assert client.api_version == "2025-01"
    client.get("shop")
    assert transport.calls[0]["url"] == "https://test-shop.myshopify.com/admin/api/2025-01/shop.json"


def test_logs_rest_deprecation_notice(caplog):
    with caplog.at_level(logging.WARNING, logger="shopify_api.rest"):
        make_client(ListTransport([]))
    assert "The REST Admin API is deprecated" in caplog.text
