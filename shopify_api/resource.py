"""CRUD helpers for REST resources.

Subclass ``RestResource`` and describe where the resource lives:

    >>> class Variant(RestResource):
    ...     NAME = "Variant"
    ...     PLURAL = "variants"
    ...     PATHS = ResourcePathTable([
    ...         ResourcePath(HttpMethod.GET, ResourceOperation.FIND,
    ...                      ("product_id", "id"), "products/{product_id}/variants/{id}"),
    ...         ResourcePath(HttpMethod.GET, ResourceOperation.FIND, ("id",), "variants/{id}"),
    ...     ])
    >>> Variant.find(client, 808, product_id=632).data["title"]
"""
from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, ClassVar, Generic, Mapping, Optional, TypeVar

from .errors import (
    HttpResponseError,
    PathResolutionError,
    ResourceNotFoundError,
    ResourceValidationError,
)
from .paths import ResourceOperation, ResourcePathTable, build_path
from .request import HttpMethod
from .response import ApiCallLimit, HttpResponse, PaginationInfo
from .rest import RestClient

T = TypeVar("T")


def serialize_to_query(params: Optional[Mapping[str, Any]]) -> dict[str, str]:
    """Flatten ``params`` into the string map sent as the query string.

    ``None`` values are dropped, booleans become ``true``/``false``, lists are
    comma-joined and nested mappings are JSON encoded.
    """
    query: dict[str, str] = {}
    for key, value in (params or {}).items():
        if value is None:
            continue
        if isinstance(value, bool):
            query[key] = "true" if value else "false"
        elif isinstance(value, (list, tuple)):
            items = [str(v) for v in value if isinstance(v, (str, int, float)) and not isinstance(v, bool)]
            if items:
                query[key] = ",".join(items)
        elif isinstance(value, Mapping):
            query[key] = json.dumps(value)
        else:
            query[key] = str(value)
    return query


def parse_validation_errors(body: Any) -> dict[str, list[str]]:
    """Normalize the ``errors`` member of a 422 body to ``{field: [messages]}``.

    Bare strings and lists are filed under ``base``.
    """
    errors = body.get("errors") if isinstance(body, Mapping) else None
    result: dict[str, list[str]] = {}
    if isinstance(errors, Mapping):
        for name, messages in errors.items():
            if isinstance(messages, list):
                result[name] = [m for m in messages if isinstance(m, str)]
            elif isinstance(messages, str):
                result[name] = [messages]
            else:
                result[name] = [json.dumps(messages)]
    elif isinstance(errors, list):
        messages = [m for m in errors if isinstance(m, str)]
        if messages:
            result["base"] = messages
    elif isinstance(errors, str):
        result["base"] = [errors]
    return result


@dataclass(frozen=True)
class ResourceResponse(Generic[T]):
    data: T
    pagination: Optional[PaginationInfo] = None
    rate_limit: Optional[ApiCallLimit] = None
    request_id: Optional[str] = None

    @classmethod
    def from_http_response(cls, response: HttpResponse, data: T) -> "ResourceResponse[T]":
        return cls(
            data=data,
            pagination=response.pagination,
            rate_limit=response.api_call_limit,
            request_id=response.request_id,
        )

    @property
    def next_page_info(self) -> Optional[str]:
        return self.pagination.next_page_info if self.pagination else None

    @property
    def prev_page_info(self) -> Optional[str]:
        return self.pagination.prev_page_info if self.pagination else None

    @property
    def has_next_page(self) -> bool:
        return self.next_page_info is not None

    @property
    def has_prev_page(self) -> bool:
        return self.prev_page_info is not None


class RestResource:
    """Base class for REST resources addressed through a ``ResourcePathTable``.

    Instances keep their fields in ``attributes``. Identifiers that appear in
    ``PATHS`` (``id``, ``product_id``, ...) are read from there when saving or
    deleting, so a nested resource goes to its nested path when the parent id
    is known.
    """

    NAME: ClassVar[str]
    PLURAL: ClassVar[str]
    PATHS: ClassVar[ResourcePathTable]
    PREFIX: ClassVar[Optional[str]] = None

    def __init__(self, **attributes: Any) -> None:
        self.attributes = dict(attributes)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.attributes!r})"

    def __eq__(self, other: object) -> bool:
        return type(self) is type(other) and self.attributes == other.attributes  # type: ignore[attr-defined]

    def __getattr__(self, name: str) -> Any:
        attributes = self.__dict__.get("attributes", {})
        if name in attributes:
            return attributes[name]
        raise AttributeError(name)

    @classmethod
    def resource_key(cls) -> str:
        return cls.NAME.lower()

    @classmethod
    def _path_for(cls, operation: ResourceOperation, ids: Mapping[str, Any]) -> str:
        available = {name: value for name, value in ids.items() if value is not None}
        path = cls.PATHS.resolve(operation, available)
        if path is None:
            raise PathResolutionError(cls.NAME, operation.value)
        url = build_path(path.template, available)
        return f"{cls.PREFIX}/{url}" if cls.PREFIX else url

    @classmethod
    def _map_error(cls, exc: HttpResponseError, id: Any = None) -> Exception:
        if exc.code == 404:
            return ResourceNotFoundError(
                cls.NAME, str(id) if id is not None else "unknown", exc.request_id
            )
        if exc.code == 422:
            return ResourceValidationError(parse_validation_errors(exc.body), exc.request_id)
        return exc

    @classmethod
    def _send(
        cls,
        client: RestClient,
        method: HttpMethod,
        path: str,
        body: Any = None,
        query: Optional[Mapping[str, str]] = None,
        id: Any = None,
    ) -> HttpResponse:
        try:
            if method is HttpMethod.GET:
                return client.get(path, query=query)
            if method is HttpMethod.POST:
                return client.post(path, body, query=query)
            if method is HttpMethod.PUT:
                return client.put(path, body, query=query)
            return client.delete(path, query=query)
        except HttpResponseError as exc:
            mapped = cls._map_error(exc, id)
            if mapped is exc:
                raise
            raise mapped from exc

    @classmethod
    def _extract(cls, response: HttpResponse, key: str) -> Any:
        body = response.body if isinstance(response.body, Mapping) else {}
        if key not in body:
            raise HttpResponseError(
                response.code,
                f"Missing key '{key}' in response body",
                response.request_id,
                body=body,
            )
        return body[key]

    @classmethod
    def find(
        cls,
        client: RestClient,
        id: Any,
        params: Optional[Mapping[str, Any]] = None,
        **parent_ids: Any,
    ) -> "ResourceResponse[RestResource]":
        path = cls._path_for(ResourceOperation.FIND, {**parent_ids, "id": id})
        response = cls._send(
            client, HttpMethod.GET, path, query=serialize_to_query(params) or None, id=id
        )
        return ResourceResponse.from_http_response(
            response, cls(**cls._extract(response, cls.resource_key()))
        )

    @classmethod
    def all(
        cls,
        client: RestClient,
        params: Optional[Mapping[str, Any]] = None,
        **parent_ids: Any,
    ) -> "ResourceResponse[list[RestResource]]":
        """List resources; pass parent ids (``product_id=...``) for nested paths."""
        path = cls._path_for(ResourceOperation.ALL, parent_ids)
        response = cls._send(
            client, HttpMethod.GET, path, query=serialize_to_query(params) or None
        )
        items = [cls(**item) for item in cls._extract(response, cls.PLURAL)]
        return ResourceResponse.from_http_response(response, items)

    @classmethod
    def count(
        cls,
        client: RestClient,
        params: Optional[Mapping[str, Any]] = None,
        **parent_ids: Any,
    ) -> int:
        path = cls._path_for(ResourceOperation.COUNT, parent_ids)
        response = cls._send(
            client, HttpMethod.GET, path, query=serialize_to_query(params) or None
        )
        count = cls._extract(response, "count")
        if isinstance(count, bool) or not isinstance(count, int):
            raise HttpResponseError(
                response.code,
                "Missing 'count' in response",
                response.request_id,
                body=response.body,
            )
        return count

    def _ids(self) -> dict[str, Any]:
        return {
            name: self.attributes[name]
            for name in self.PATHS.id_names
            if self.attributes.get(name) is not None
        }

    def save(self, client: RestClient) -> "RestResource":
        """Create the resource when it has no ``id``, update it otherwise."""
        return self._write(client, dict(self.attributes))

    def save_partial(self, client: RestClient, changed_fields: Mapping[str, Any]) -> "RestResource":
        """Update only ``changed_fields`` of an existing resource.

        Raises:
            PathResolutionError: The resource has no ``id`` yet.
        """
        if self.attributes.get("id") is None:
            raise PathResolutionError(self.NAME, ResourceOperation.UPDATE.value)
        return self._write(client, dict(changed_fields))

    def _write(self, client: RestClient, fields: dict[str, Any]) -> "RestResource":
        ids = self._ids()
        id = ids.get("id")
        operation = ResourceOperation.UPDATE if id is not None else ResourceOperation.CREATE
        path = self._path_for(operation, ids)
        body = {self.resource_key(): fields}
        response = self._send(
            client, operation.default_http_method, path, body=body, id=id
        )
        saved = type(self)(**self._extract(response, self.resource_key()))
        self.attributes.update(saved.attributes)
        return saved

    def delete(self, client: RestClient) -> None:
        ids = self._ids()
        if ids.get("id") is None:
            raise PathResolutionError(self.NAME, ResourceOperation.DELETE.value)
        path = self._path_for(ResourceOperation.DELETE, ids)
        self._send(client, HttpMethod.DELETE, path, id=ids["id"])
