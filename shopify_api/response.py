"""Normalized view of a Shopify API reply."""
from __future__ import annotations

import json
import math
import re
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Iterable, Mapping, Optional, Tuple, Union

if TYPE_CHECKING:
    from .transport import RawResponse

RAW_BODY_KEY = "raw_body"

LINK_HEADER = "link"
API_CALL_LIMIT_HEADER = "x-shopify-shop-api-call-limit"
RETRY_AFTER_HEADER = "retry-after"
REQUEST_ID_HEADER = "x-request-id"
DEPRECATED_REASON_HEADER = "x-shopify-api-deprecated-reason"

_DECIMAL_RE = re.compile(r"[+-]?(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?")

HeadersInput = Union[
    Mapping[str, Union[str, Iterable[str]]],
    Iterable[Tuple[str, str]],
]


def normalize_headers(headers: HeadersInput) -> dict[str, list[str]]:
    """Lower-case header names and collect repeated headers in arrival order."""
    items: Iterable[Any] = headers.items() if isinstance(headers, Mapping) else headers
    result: dict[str, list[str]] = {}
    for name, value in items:
        values = [value] if isinstance(value, str) else list(value)
        result.setdefault(name.lower(), []).extend(values)
    return result


def parse_body(code: int, text: str) -> Any:
    """Parse a reply body.

    An empty body becomes ``{}``. A body that is not JSON is kept verbatim under
    ``RAW_BODY_KEY`` on server errors (``code >= 500``) and dropped otherwise.
    """
    if not text:
        return {}
    try:
        return json.loads(text)
    except ValueError:
        if code >= 500:
            return {RAW_BODY_KEY: text}
        return {}


def _is_unsigned_int(value: str) -> bool:
    return value.isascii() and value.isdigit()


@dataclass(frozen=True)
class ApiCallLimit:
    """REST leaky-bucket state from ``X-Shopify-Shop-Api-Call-Limit: 40/80``."""

    request_count: int
    bucket_size: int

    @classmethod
    def parse(cls, header_value: str) -> Optional["ApiCallLimit"]:
        parts = header_value.split("/")
        if len(parts) != 2 or not all(_is_unsigned_int(p) for p in parts):
            return None
        return cls(request_count=int(parts[0]), bucket_size=int(parts[1]))

    @property
    def remaining(self) -> int:
        return max(self.bucket_size - self.request_count, 0)


@dataclass(frozen=True)
class PaginationInfo:
    prev_page_info: Optional[str] = None
    next_page_info: Optional[str] = None

    @classmethod
    def parse_link_header(cls, header_value: str) -> "PaginationInfo":
        """Extract ``page_info`` cursors from a ``Link`` header.

        Example:
            >>> PaginationInfo.parse_link_header(
            ...     '<https://s.myshopify.com/admin/api/2025-10/products.json?page_info=abc>; rel="next"'
            ... ).next_page_info
            'abc'
        """
        prev_page_info: Optional[str] = None
        next_page_info: Optional[str] = None
        for link in header_value.split(","):
            parts = [part.strip() for part in link.strip().split(";")]
            rel = next(
                (p[len("rel="):].strip('"') for p in parts if p.startswith("rel=")),
                None,
            )
            if rel is None:
                continue
            url = parts[0].lstrip("<").rstrip(">")
            page_info = _extract_page_info(url)
            if page_info is None:
                continue
            if rel == "previous":
                prev_page_info = page_info
            elif rel == "next":
                next_page_info = page_info
        return cls(prev_page_info=prev_page_info, next_page_info=next_page_info)


def _extract_page_info(url: str) -> Optional[str]:
    _, sep, query = url.partition("?")
    if not sep:
        return None
    for param in query.split("&"):
        key, has_value, value = param.partition("=")
        if has_value and key == "page_info":
            return value
    return None


def _parse_retry_after(value: str) -> Optional[float]:
    if not _DECIMAL_RE.fullmatch(value.strip()):
        return None
    seconds = float(value)
    if not math.isfinite(seconds) or seconds < 0:
        return None
    return seconds


@dataclass(frozen=True)
class ApiDeprecationInfo:
    reason: str
    path: Optional[str] = None


@dataclass(frozen=True)
class HttpResponse:
    """A reply from the Shopify API with its platform headers already parsed.

    Header names are lower-cased on construction; every accessor also
    lower-cases its argument, so lookups are case-insensitive.

    Attributes:
        code: HTTP status code.
        headers: Lower-cased header name to the list of values received.
        body: Parsed JSON body (``{}`` when empty).
        prev_page_info: Cursor for the previous page from the ``Link`` header.
        next_page_info: Cursor for the next page from the ``Link`` header.
        api_call_limit: REST call limit bucket state.
        retry_request_after: Seconds from the ``Retry-After`` header.
    """

    code: int
    headers: dict[str, list[str]]
    body: Any = field(default_factory=dict)
    prev_page_info: Optional[str] = field(init=False, default=None)
    next_page_info: Optional[str] = field(init=False, default=None)
    api_call_limit: Optional[ApiCallLimit] = field(init=False, default=None)
    retry_request_after: Optional[float] = field(init=False, default=None)

    def __post_init__(self) -> None:
        object.__setattr__(self, "headers", normalize_headers(self.headers))

        links = self.header_values(LINK_HEADER)
        if links:
            pagination = PaginationInfo.parse_link_header(", ".join(links))
            object.__setattr__(self, "prev_page_info", pagination.prev_page_info)
            object.__setattr__(self, "next_page_info", pagination.next_page_info)

        limit = self.header(API_CALL_LIMIT_HEADER)
        if limit is not None:
            object.__setattr__(self, "api_call_limit", ApiCallLimit.parse(limit))

        retry_after = self.header(RETRY_AFTER_HEADER)
        if retry_after is not None:
            object.__setattr__(self, "retry_request_after", _parse_retry_after(retry_after))

    @classmethod
    def from_raw(cls, raw: "RawResponse") -> "HttpResponse":
        return cls(raw.status_code, raw.headers, parse_body(raw.status_code, raw.text))

    @property
    def is_ok(self) -> bool:
        return 200 <= self.code <= 299

    def header_values(self, name: str) -> list[str]:
        return list(self.headers.get(name.lower(), []))

    def header(self, name: str) -> Optional[str]:
        values = self.headers.get(name.lower())
        return values[0] if values else None

    @property
    def request_id(self) -> Optional[str]:
        return self.header(REQUEST_ID_HEADER)

    @property
    def deprecation_reason(self) -> Optional[str]:
        return self.header(DEPRECATED_REASON_HEADER)

    @property
    def is_deprecated(self) -> bool:
        return self.deprecation_reason is not None

    def deprecation_info(self, path: Optional[str] = None) -> Optional[ApiDeprecationInfo]:
        reason = self.deprecation_reason
        if reason is None:
            return None
        return ApiDeprecationInfo(reason=reason, path=path)

    @property
    def pagination(self) -> Optional[PaginationInfo]:
        if self.prev_page_info is None and self.next_page_info is None:
            return None
        return PaginationInfo(self.prev_page_info, self.next_page_info)
