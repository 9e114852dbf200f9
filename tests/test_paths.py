import pathlib
import sys

import pytest

sys.path.insert(0, str(pathlib.Path(__file__).resolve().parents[1]))

from shopify_api.paths import (
    ResourceOperation,
    ResourcePath,
    ResourcePathTable,
    build_path,
    get_path,
    unresolved_placeholders,
)
from shopify_api.request import HttpMethod

NESTED = ResourcePath(
    HttpMethod.GET, ResourceOperation.FIND, ("product_id", "id"), "products/{product_id}/variants/{id}"
)
STANDALONE = ResourcePath(HttpMethod.GET, ResourceOperation.FIND, ("id",), "variants/{id}")
LIST = ResourcePath(HttpMethod.GET, ResourceOperation.ALL, ("product_id",), "products/{product_id}/variants")

VARIANT_PATHS = [STANDALONE, NESTED, LIST]


def test_prefers_the_most_specific_path():
    assert get_path(VARIANT_PATHS, ResourceOperation.FIND, ["product_id", "id"]) is NESTED


def test_falls_back_to_less_specific_path():
    assert get_path(VARIANT_PATHS, ResourceOperation.FIND, ["id"]) is STANDALONE


def test_returns_none_without_matching_ids():
    assert get_path(VARIANT_PATHS, ResourceOperation.FIND, []) is None
    assert get_path(VARIANT_PATHS, ResourceOperation.FIND, ["product_id"]) is None


def test_filters_by_operation():
    assert get_path(VARIANT_PATHS, ResourceOperation.ALL, ["product_id", "id"]) is LIST
    assert get_path(VARIANT_PATHS, ResourceOperation.DELETE, ["id"]) is None


def test_subset_test_ignores_order_and_extra_ids():
    assert get_path(VARIANT_PATHS, ResourceOperation.FIND, ("id", "inventory_item_id", "product_id")) is NESTED


def test_ties_go_to_first_declared():
    first = ResourcePath(HttpMethod.GET, ResourceOperation.FIND, ("id",), "variants/{id}")
    second = ResourcePath(HttpMethod.GET, ResourceOperation.FIND, ("id",), "legacy/variants/{id}")
    assert get_path([first, second], ResourceOperation.FIND, ["id"]) is first
    assert get_path([second, first], ResourceOperation.FIND, ["id"]) is second


def test_table_resolves_like_get_path():
    table = ResourcePathTable(VARIANT_PATHS)
    assert len(table) == 3
    assert list(table) == VARIANT_PATHS
    assert table.id_names == frozenset({"product_id", "id"})
    assert table.for_operation(ResourceOperation.FIND) == (STANDALONE, NESTED)
    for ids in (["product_id", "id"], ["id"], [], ["product_id"]):
        for operation in ResourceOperation:
            assert table.resolve(operation, ids) is get_path(VARIANT_PATHS, operation, ids)


def test_resource_path_rejects_mismatched_ids():
    with pytest.raises(ValueError):
        ResourcePath(HttpMethod.GET, ResourceOperation.FIND, ("id",), "products/{product_id}/variants/{id}")
    with pytest.raises(ValueError):
        ResourcePath(HttpMethod.GET, ResourceOperation.FIND, ("product_id",), "variants/{id}")


def test_repeated_placeholder_counts_once():
    path = ResourcePath(HttpMethod.GET, ResourceOperation.FIND, ("id",), "things/{id}/{id}")
    assert path.id_count == 1
    assert build_path(path.template, {"id": 7}) == "things/7/7"


def test_build_path_interpolates_ids():
    assert build_path(NESTED.template, {"product_id": 123, "id": "456"}) == "products/123/variants/456"


def test_build_path_leaves_unknown_placeholders():
    path = build_path(NESTED.template, {"id": 456})
    assert path == "products/{product_id}/variants/456"
    assert unresolved_placeholders(path) == ["product_id"]
    assert unresolved_placeholders(build_path(NESTED.template, {"product_id": 1, "id": 2})) == []


def test_default_http_methods():
    assert ResourceOperation.FIND.default_http_method is HttpMethod.GET
    assert ResourceOperation.ALL.default_http_method is HttpMethod.GET
    assert ResourceOperation.COUNT.default_http_method is HttpMethod.GET
    assert ResourceOperation.CREATE.default_http_method is HttpMethod.POST
    assert ResourceOperation.UPDATE.default_http_method is HttpMethod.PUT
    assert ResourceOperation.DELETE.default_http_method is HttpMethod.DELETE
