"""HTTP execution engine with retry handling."""
from __future__ import annotations

import json
import logging
import platform
import threading
import time
from typing import Any, Optional

from .errors import HttpResponseError, MaxHttpRetriesExceededError
from .request import HttpRequest
from .response import HttpResponse
from .session import ShopifySession
from .transport import RequestsTransport, Transport

logger = logging.getLogger(__name__)

SDK_VERSION = "0.1.0"

# Seconds to wait before retrying a 500, or a 429 without Retry-After.
RETRY_WAIT_TIME = 1

RETRYABLE_STATUS_CODES = frozenset({429, 500})


def user_agent(prefix: Optional[str] = None) -> str:
    lead = f"{prefix} | " if prefix else ""
    return f"{lead}Shopify API Library v{SDK_VERSION} | Python {platform.python_version()}"


def retry_delay(response: HttpResponse, default: float = RETRY_WAIT_TIME) -> float:
    """Seconds to wait before retrying ``response``.

    A 429 honours ``Retry-After`` when the header parsed; everything else uses
    ``default``.
    """
    if response.code == 429 and response.retry_request_after is not None:
        return response.retry_request_after
    return default


def serialize_error(response: HttpResponse) -> str:
    """Summarize an error reply as a JSON object string.

    Keeps ``errors``, ``error`` and (only alongside ``error``)
    ``error_description`` from the body, and adds an ``error_reference`` naming
    the request id when Shopify sent one.
    """
    body = response.body if isinstance(response.body, dict) else {}
    summary: dict[str, Any] = {}
    if "errors" in body:
        summary["errors"] = body["errors"]
    if "error" in body:
        summary["error"] = body["error"]
        if "error_description" in body:
            summary["error_description"] = body["error_description"]
    request_id = response.request_id
    if request_id is not None:
        summary["error_reference"] = (
            f"If you report this error, please include this id: {request_id}."
        )
    return json.dumps(summary)


class HttpClient:
    """Sends ``HttpRequest`` objects to one shop and retries transient failures.

    The client holds only configuration fixed at construction, so a single
    instance can be shared between threads.

    Args:
        base_path: Path prefix for every request, e.g. ``/admin/api/2025-10``.
        session: Shop, token and optional proxy host.
        transport: Transport implementation (defaults to ``RequestsTransport``).
        retry_wait_time: Default delay between retries, in seconds.
        timeout: Per-attempt timeout passed to the transport. ``None`` leaves
            the transport default in place.
    """

    def __init__(
        self,
        base_path: str,
        session: ShopifySession,
        transport: Optional[Transport] = None,
        retry_wait_time: float = RETRY_WAIT_TIME,
        timeout: Optional[float] = None,
    ) -> None:
        host_name = session.host_name
        self.base_uri = f"https://{host_name or session.shop}"
        self.base_path = base_path
        self.transport = transport if transport is not None else RequestsTransport()
        self.retry_wait_time = retry_wait_time
        self.timeout = timeout

        headers = {
            "User-Agent": user_agent(session.user_agent_prefix),
            "Accept": "application/json",
        }
        if session.host:
            headers["Host"] = session.shop
        if session.access_token:
            headers["X-Shopify-Access-Token"] = session.access_token
        self._default_headers = headers

    @property
    def default_headers(self) -> dict[str, str]:
        return dict(self._default_headers)

    def url_for(self, path: str) -> str:
        return f"{self.base_uri}{self.base_path}/{path}"

    def _headers_for(self, request: HttpRequest) -> dict[str, str]:
        headers = dict(self._default_headers)
        if request.body is not None and request.body_type is not None:
            headers["Content-Type"] = request.body_type.content_type
        if request.extra_headers:
            headers.update(request.extra_headers)
        return headers

    def request(
        self,
        request: HttpRequest,
        *,
        deadline: Optional[float] = None,
        cancel_event: Optional[threading.Event] = None,
    ) -> HttpResponse:
        """Send ``request``, retrying 429 and 500 replies up to ``request.tries``.

        Args:
            request: The request to send. It is verified before any I/O.
            deadline: Optional ``time.monotonic()`` value. No retry is started
                whose backoff would end after it.
            cancel_event: Optional event; once set, no further attempt is made
                and a pending backoff is cut short.

        Returns:
            HttpResponse: The first 2xx reply.

        Raises:
            InvalidHttpRequestError: The request failed validation.
            HttpResponseError: A non-retryable reply, or a retryable one when
                ``tries == 1``.
            MaxHttpRetriesExceededError: A retryable status persisted through
                every attempt while ``tries > 1``.
            HttpTransportError: The transport got no HTTP reply. Not retried.
        """
        request.verify()

        method = request.http_method
        url = self.url_for(request.path)
        headers = self._headers_for(request)
        data = request.serialized_body()

        attempt = 0
        while True:
            attempt += 1
            logger.debug("%s %s (attempt %d of %d)", method.value, url, attempt, request.tries)
            raw = self.transport.send(
                method.value, url, headers, request.query, data, self.timeout
            )
            response = HttpResponse.from_raw(raw)

            if response.is_deprecated:
                logger.warning(
                    "Deprecated request to Shopify API at %s, received reason: %s",
                    request.path,
                    response.deprecation_reason,
                )

            if response.is_ok:
                return response

            message = serialize_error(response)
            if response.code not in RETRYABLE_STATUS_CODES:
                raise self._response_error(response, message)

            if attempt >= request.tries:
                raise self._exhausted_error(response, message, request.tries, attempt)

            delay = retry_delay(response, self.retry_wait_time)
            if self._stop_requested(delay, deadline, cancel_event):
                logger.info(
                    "Stopping retries of %s %s after %d attempt(s)", method.value, url, attempt
                )
                raise self._exhausted_error(response, message, request.tries, attempt)

            logger.warning(
                "%s %s returned %d, retrying in %.2fs (attempt %d of %d)",
                method.value,
                url,
                response.code,
                delay,
                attempt,
                request.tries,
            )
            if cancel_event is not None:
                if cancel_event.wait(delay):
                    logger.info("Retry of %s %s cancelled during backoff", method.value, url)
                    raise self._exhausted_error(response, message, request.tries, attempt)
            else:
                time.sleep(delay)

    @staticmethod
    def _stop_requested(
        delay: float,
        deadline: Optional[float],
        cancel_event: Optional[threading.Event],
    ) -> bool:
        if cancel_event is not None and cancel_event.is_set():
            return True
        return deadline is not None and time.monotonic() + delay > deadline

    @staticmethod
    def _response_error(response: HttpResponse, message: str) -> HttpResponseError:
        return HttpResponseError(
            response.code, message, response.request_id, body=_error_body(response)
        )

    def _exhausted_error(
        self, response: HttpResponse, message: str, tries: int, attempts: int
    ) -> HttpResponseError | MaxHttpRetriesExceededError:
        if tries == 1:
            return self._response_error(response, message)
        return MaxHttpRetriesExceededError(
            response.code,
            attempts,
            message,
            response.request_id,
            body=_error_body(response),
        )


def _error_body(response: HttpResponse) -> dict[str, Any]:
    return response.body if isinstance(response.body, dict) else {"body": response.body}
