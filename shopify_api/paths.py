"""Path templates for REST resources and selection of the best match.

A resource can usually be reached more than one way. A variant, for example,
lives at both ``products/{product_id}/variants/{id}`` and ``variants/{id}``.
``get_path`` picks the template that uses the most of the identifiers the
caller has, so nested paths win whenever their parent id is known.

Example:
    >>> paths = ResourcePathTable([
    ...     ResourcePath(HttpMethod.GET, ResourceOperation.FIND, ("product_id", "id"),
    ...                  "products/{product_id}/variants/{id}"),
    ...     ResourcePath(HttpMethod.GET, ResourceOperation.FIND, ("id",), "variants/{id}"),
    ... ])
    >>> path = paths.resolve(ResourceOperation.FIND, {"product_id", "id"})
    >>> build_path(path.template, {"product_id": 1, "id": 2})
    'products/1/variants/2'
"""
from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from typing import Any, Collection, Iterable, Iterator, Mapping, Optional, Sequence

from .request import HttpMethod

PLACEHOLDER_RE = re.compile(r"\{([^{}]+)\}")


class ResourceOperation(Enum):
    FIND = "find"
    ALL = "all"
    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"
    COUNT = "count"

    @property
    def default_http_method(self) -> HttpMethod:
        if self is ResourceOperation.CREATE:
            return HttpMethod.POST
        if self is ResourceOperation.UPDATE:
            return HttpMethod.PUT
        if self is ResourceOperation.DELETE:
            return HttpMethod.DELETE
        return HttpMethod.GET


def placeholders(template: str) -> list[str]:
    """Distinct placeholder names in ``template``, in order of appearance."""
    seen: list[str] = []
    for name in PLACEHOLDER_RE.findall(template):
        if name not in seen:
            seen.append(name)
    return seen


@dataclass(frozen=True)
class ResourcePath:
    """One way to address a resource operation.

    Attributes:
        http_method: Method used for this path.
        operation: Operation the path serves.
        ids: Identifier names the template needs, e.g. ``("product_id", "id")``.
        template: URL template with ``{name}`` placeholders.

    Raises:
        ValueError: If ``ids`` and the template's placeholders disagree.
    """

    http_method: HttpMethod
    operation: ResourceOperation
    ids: Sequence[str]
    template: str

    def __post_init__(self) -> None:
        object.__setattr__(self, "ids", tuple(self.ids))
        names = placeholders(self.template)
        if len(names) != len(self.ids) or set(names) != set(self.ids):
            raise ValueError(
                f"Template {self.template!r} has placeholders {names}, "
                f"expected {list(self.ids)}"
            )

    @property
    def id_count(self) -> int:
        return len(self.ids)

    def matches_ids(self, available_ids: Collection[str]) -> bool:
        return all(name in available_ids for name in self.ids)


def get_path(
    paths: Iterable[ResourcePath],
    operation: ResourceOperation,
    available_ids: Iterable[str],
) -> Optional[ResourcePath]:
    """Select the most specific path for ``operation``.

    Only paths whose required ids are all in ``available_ids`` qualify. Among
    those, the one with the most ids wins; on a tie the first declared wins.
    Returns ``None`` when nothing qualifies.
    """
    available = frozenset(available_ids)
    best: Optional[ResourcePath] = None
    for path in paths:
        if path.operation is not operation or not path.matches_ids(available):
            continue
        if best is None or path.id_count > best.id_count:
            best = path
    return best


def build_path(template: str, ids: Mapping[str, Any]) -> str:
    """Substitute ``{name}`` placeholders with ``str(ids[name])``.

    Placeholders without a value are left in place; use
    ``unresolved_placeholders`` to detect them.
    """

    def substitute(match: "re.Match[str]") -> str:
        name = match.group(1)
        return str(ids[name]) if name in ids else match.group(0)

    return PLACEHOLDER_RE.sub(substitute, template)


def unresolved_placeholders(path: str) -> list[str]:
    return placeholders(path)


class ResourcePathTable:
    """Immutable set of paths for one resource, indexed by operation."""

    def __init__(self, paths: Iterable[ResourcePath]) -> None:
        entries = tuple(paths)
        by_operation: dict[ResourceOperation, tuple[ResourcePath, ...]] = {}
        for operation in ResourceOperation:
            by_operation[operation] = tuple(p for p in entries if p.operation is operation)
        self._entries = entries
        self._by_operation = by_operation
        self._id_names = frozenset(name for p in entries for name in p.ids)

    def __iter__(self) -> Iterator[ResourcePath]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        return f"ResourcePathTable({list(self._entries)!r})"

    @property
    def id_names(self) -> frozenset[str]:
        """Every identifier name used by some path in the table."""
        return self._id_names

    def for_operation(self, operation: ResourceOperation) -> tuple[ResourcePath, ...]:
        return self._by_operation[operation]

    def resolve(
        self, operation: ResourceOperation, available_ids: Iterable[str]
    ) -> Optional[ResourcePath]:
        return get_path(self._by_operation[operation], operation, available_ids)
