import pathlib
import sys

import pytest

sys.path.insert(0, str(pathlib.Path(__file__).resolve().parents[1]))

from shopify_api.errors import ShopifyConfigError
from shopify_api.session import LATEST_API_VERSION, ShopifySession, normalize_shop_domain


@pytest.mark.parametrize(
    "value",
    ["my-store", "my-store.myshopify.com", "https://my-store.myshopify.com/", " My-Store "],
)
def test_normalize_shop_domain(value):
    assert normalize_shop_domain(value) == "my-store.myshopify.com"


@pytest.mark.parametrize(
    "value",
    [
        "",
        "   ",
        "example.com",
        "shop.example.com/path",
        "evil.com/.myshopify.com",
        ".myshopify.com",
        "my store",
        "my_store",
        "-shop",
        "shop-",
        "shop.evil.myshopify.com",
    ],
)
def test_normalize_shop_domain_rejects_invalid(value):
    with pytest.raises(ShopifyConfigError):
        normalize_shop_domain(value)


def test_session_defaults():
    session = ShopifySession("my-store", "token")
    assert session.shop == "my-store.myshopify.com"
    assert session.api_version == LATEST_API_VERSION
    assert session.host_name is None


@pytest.mark.parametrize(
    "host,expected",
    [
        ("https://myapp.example.com", "myapp.example.com"),
        ("http://localhost:3000", "localhost"),
        ("myapp.example.com", "myapp.example.com"),
    ],
)
def test_host_name(host, expected):
    assert ShopifySession("my-store", "token", host=host).host_name == expected


def test_from_env(monkeypatch):
    monkeypatch.setenv("SHOPIFY_SHOP", "env-store")
    monkeypatch.setenv("SHOPIFY_ACCESS_TOKEN", "shpat_123")
    monkeypatch.setenv("SHOPIFY_API_VERSION", "2025-01")
    monkeypatch.setenv("SHOPIFY_API_HOST", "https://proxy.example.com")
    monkeypatch.setenv("SHOPIFY_USER_AGENT_PREFIX", "MyApp/1.0")
    session = ShopifySession.from_env()
    assert session.shop == "env-store.myshopify.com"
    assert session.access_token == "shpat_123"
    assert session.api_version == "2025-01"
    assert session.host_name == "proxy.example.com"
    assert session.user_agent_prefix == "MyApp/1.0"


def test_from_env_requires_shop(monkeypatch):
    monkeypatch.delenv("SHOPIFY_SHOP", raising=False)
    with pytest.raises(ShopifyConfigError):
        ShopifySession.from_env()


def test_from_env_optional_values(monkeypatch):
    monkeypatch.setenv("SHOPIFY_SHOP", "env-store")
    for name in ("SHOPIFY_ACCESS_TOKEN", "SHOPIFY_API_VERSION", "SHOPIFY_API_HOST", "SHOPIFY_USER_AGENT_PREFIX"):
        monkeypatch.delenv(name, raising=False)
    session = ShopifySession.from_env()
    assert session.access_token == ""
    assert session.api_version == LATEST_API_VERSION
    assert session.host is None
    assert session.user_agent_prefix is None


@pytest.mark.parametrize("host", ["https://", "http://:8080"])
def test_unparsable_host_override_is_rejected(host):
    with pytest.raises(ShopifyConfigError):
        ShopifySession("my-store", "token", host=host)
