"""Public API exports."""
from .client import RETRY_WAIT_TIME, SDK_VERSION, HttpClient
from .errors import (
    GraphqlQueryError,
    HttpError,
    HttpResponseError,
    HttpTransportError,
    InvalidHttpRequestError,
    InvalidMethodError,
    InvalidPathError,
    MaxHttpRetriesExceededError,
    MissingBodyError,
    MissingBodyTypeError,
    PathResolutionError,
    ResourceError,
    ResourceNotFoundError,
    ResourceValidationError,
    ShopifyAPIError,
    ShopifyConfigError,
)
from .graphql import GraphqlClient
from .paginate import cursor_pages, link_pages
from .paths import ResourceOperation, ResourcePath, ResourcePathTable, build_path, get_path
from .request import DataType, HttpMethod, HttpRequest
from .resource import ResourceResponse, RestResource
from .response import ApiCallLimit, ApiDeprecationInfo, HttpResponse, PaginationInfo
from .rest import RestClient
from .session import ShopifySession
from .transport import RawResponse, RequestsTransport, Transport

__version__ = SDK_VERSION

__all__ = [
    "ApiCallLimit",
    "ApiDeprecationInfo",
    "DataType",
    "GraphqlClient",
    "GraphqlQueryError",
    "HttpClient",
    "HttpError",
    "HttpMethod",
    "HttpRequest",
    "HttpResponse",
    "HttpResponseError",
    "HttpTransportError",
    "InvalidHttpRequestError",
    "InvalidMethodError",
    "InvalidPathError",
    "MaxHttpRetriesExceededError",
    "MissingBodyError",
    "MissingBodyTypeError",
    "PaginationInfo",
    "PathResolutionError",
    "RETRY_WAIT_TIME",
    "RawResponse",
    "RequestsTransport",
    "ResourceError",
    "ResourceNotFoundError",
    "ResourceOperation",
    "ResourcePath",
    "ResourcePathTable",
    "ResourceResponse",
    "ResourceValidationError",
    "RestClient",
    "RestResource",
    "ShopifyAPIError",
    "ShopifyConfigError",
    "ShopifySession",
    "Transport",
    "build_path",
    "cursor_pages",
    "get_path",
    "link_pages",
]
