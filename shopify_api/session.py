"""Session object for the Shopify Admin API."""
from __future__ import annotations

import os
import re
from dataclasses import dataclass
from typing import Optional
from urllib.parse import urlsplit

from .errors import ShopifyConfigError

LATEST_API_VERSION = "2025-10"
SHOP_DOMAIN_SUFFIX = ".myshopify.com"
# lower-case letters, digits and inner hyphens
SHOP_NAME_RE = re.compile(r"[a-z0-9](?:[a-z0-9-]*[a-z0-9])?")


def normalize_shop_domain(shop: str) -> str:
    """Return ``shop`` as a bare ``<name>.myshopify.com`` domain.

    ``my-store``, ``my-store.myshopify.com`` and
    ``https://my-store.myshopify.com/`` all normalize to the same value.

    Raises:
        ShopifyConfigError: If ``shop`` is empty, names a non-Shopify domain, or
            the shop name holds anything but letters, digits and inner
            hyphens.
    """
    domain = shop.strip()
    for scheme in ("https://", "http://"):
        if domain.startswith(scheme):
            domain = domain[len(scheme):]
    domain = domain.rstrip("/").lower()
    if not domain:
        raise ShopifyConfigError("Shop domain must not be empty")
    name = domain[: -len(SHOP_DOMAIN_SUFFIX)] if domain.endswith(SHOP_DOMAIN_SUFFIX) else domain
    if not SHOP_NAME_RE.fullmatch(name):
        raise ShopifyConfigError(f"Invalid shop domain: {shop!r}")
    return name + SHOP_DOMAIN_SUFFIX


@dataclass
class ShopifySession:
    """Credentials and addressing for one Shopify store.

    Attributes:
        shop: The store domain; normalized to ``<name>.myshopify.com``.
        access_token: The API access token for authentication. May be empty for
            unauthenticated calls, in which case no token header is sent.
        api_version: The Shopify API version to use (default: latest stable).
        host: Optional proxy host URL. When set, requests go to this host and
            carry a ``Host`` header naming the real shop.
        user_agent_prefix: Optional text prepended to the ``User-Agent`` header.
    """

    shop: str
    access_token: str = ""
    api_version: str = LATEST_API_VERSION
    host: Optional[str] = None
    user_agent_prefix: Optional[str] = None

    def __post_init__(self) -> None:
        self.shop = normalize_shop_domain(self.shop)
        if self.host and self.host_name is None:
            raise ShopifyConfigError(f"Invalid API host: {self.host!r}")

    @property
    def host_name(self) -> Optional[str]:
        """Host name of the proxy override, or ``None`` when not configured."""
        if not self.host:
            return None
        return urlsplit(self.host if "://" in self.host else f"https://{self.host}").hostname

    @classmethod
    def from_env(cls) -> "ShopifySession":
        """Build a session from ``SHOPIFY_*`` environment variables.

        Raises:
            ShopifyConfigError: If ``SHOPIFY_SHOP`` is not set.
        """
        shop = os.getenv("SHOPIFY_SHOP", "").strip()
        if not shop:
            raise ShopifyConfigError("Missing required environment variable: SHOPIFY_SHOP")
        return cls(
            shop=shop,
            access_token=os.getenv("SHOPIFY_ACCESS_TOKEN", "").strip(),
            api_version=os.getenv("SHOPIFY_API_VERSION", LATEST_API_VERSION).strip(),
            host=os.getenv("SHOPIFY_API_HOST") or None,
            user_agent_prefix=os.getenv("SHOPIFY_USER_AGENT_PREFIX") or None,
        )
