"""Transport abstractions."""
from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
import os
from typing import Mapping, Optional, Sequence, Tuple, TYPE_CHECKING

from .errors import HttpTransportError

if TYPE_CHECKING:
    import requests

DEFAULT_TIMEOUT = 30.0


@dataclass(frozen=True)
class RawResponse:
    """What a transport hands back: status, headers in arrival order, body text."""

    status_code: int
    headers: Sequence[Tuple[str, str]] = field(default_factory=tuple)
    text: str = ""


class Transport(ABC):
    """Abstract transport interface."""

    @abstractmethod
    def send(
        self,
        method: str,
        url: str,
        headers: Mapping[str, str],
        params: Optional[Mapping[str, str]],
        data: Optional[str],
        timeout: Optional[float],
    ) -> RawResponse:  # noqa: D401
        """Send one HTTP request.

        Raises:
            HttpTransportError: If no HTTP reply was received.
        """
        raise NotImplementedError


class RequestsTransport(Transport):
    """Transport using the requests library.

    Only connection establishment is retried here. Status based retries (429 and
    500) belong to ``HttpClient`` so that ``tries`` stays the single budget.

    Args:
        connect_retries: Retries for failed connection attempts. Defaults to the
            ``SHOPIFY_API_CONNECT_RETRIES`` env var or ``0``.
        backoff: Exponential backoff factor between connection retries.
        timeout: Default per-attempt timeout in seconds. Defaults to the
            ``SHOPIFY_API_TIMEOUT`` env var or ``30``.
    """

    def __init__(
        self,
        *,
        connect_retries: int | None = None,
        backoff: float = 0.5,
        timeout: float | None = None,
    ) -> None:
        import requests
        from requests.adapters import HTTPAdapter
        from urllib3.util import Retry

        retry_total = connect_retries if connect_retries is not None else int(
            os.getenv("SHOPIFY_API_CONNECT_RETRIES", "0")
        )
        self.timeout = timeout if timeout is not None else float(
            os.getenv("SHOPIFY_API_TIMEOUT", str(DEFAULT_TIMEOUT))
        )
        retry = Retry(
            total=retry_total,
            connect=retry_total,
            read=0,
            status=0,
            other=0,
            redirect=False,
            backoff_factor=backoff,
            raise_on_status=False,
            respect_retry_after_header=False,
        )
        adapter = HTTPAdapter(max_retries=retry)
        session = requests.Session()
        session.mount("https://", adapter)
        session.mount("http://", adapter)
        self._session = session

    def send(
        self,
        method: str,
        url: str,
        headers: Mapping[str, str],
        params: Optional[Mapping[str, str]],
        data: Optional[str],
        timeout: Optional[float],
    ) -> RawResponse:
        import requests

        try:
            resp = self._session.request(
                method,
                url,
                headers=dict(headers),
                params=dict(params) if params else None,
                data=data.encode("utf-8") if data is not None else None,
                timeout=timeout if timeout is not None else self.timeout,
            )
        except requests.RequestException as exc:
            raise HttpTransportError(str(exc)) from exc
        return RawResponse(resp.status_code, response_headers(resp), resp.text)

    def close(self) -> None:
        self._session.close()


def response_headers(resp: "requests.Response") -> list[tuple[str, str]]:
    """Header pairs of ``resp`` with repeated headers kept apart.

    ``requests`` folds repeated headers into one comma-joined value, so the
    urllib3 header dict is preferred when it is available.
    """
    raw_headers = getattr(getattr(resp, "raw", None), "headers", None)
    if raw_headers is not None and hasattr(raw_headers, "getlist"):
        return [(name, value) for name in raw_headers for value in raw_headers.getlist(name)]
    return list(resp.headers.items())
