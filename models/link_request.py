from __future__ import annotations
from collections.abc import Mapping
from types import MappingProxyType
from typing import Any, Dict, Iterator, Optional

from utils.errors import InvalidArgumentError, must_not_be_blank, must_not_be_none

ID_KEY = "id"
ROUTE_NAME_KEY = "routeName"
ROUTE_VALUES_KEY = "routeValues"
TEMPLATED_KEY = "templated"


# -----------------------------------------------------------------------------
# Link Request
# -----------------------------------------------------------------------------
class LinkRequest(Mapping):
    """
    Immutable set of parts describing which link to build.

    The target route is identified by either the ``routeName`` part (builder
    output) or the ``id`` part (parser output), ``routeName`` winning when
    both are present.
    """

    __slots__ = ("_parts",)

    def __init__(self, parts: Mapping[str, Any]):
        if not parts:
            raise InvalidArgumentError("Parameter 'parts' must not be null or empty.")
        self._parts = MappingProxyType(dict(parts))

    def __getitem__(self, key: str) -> Any:
        return self._parts[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._parts)

    def __len__(self) -> int:
        return len(self._parts)

    def __repr__(self) -> str:
        return f"LinkRequest({dict(self._parts)!r})"

    @property
    def parts(self) -> Mapping[str, Any]:
        return self._parts

    @property
    def id(self) -> Optional[str]:
        return self._parts.get(ID_KEY)

    def get_route_name(self) -> Optional[str]:
        route_name = self._parts.get(ROUTE_NAME_KEY)
        if route_name is None:
            route_name = self._parts.get(ID_KEY)
        return route_name

    def get_route_values(self) -> Any:
        return self._parts.get(ROUTE_VALUES_KEY)

    def is_templated(self) -> bool:
        return parse_bool(self._parts.get(TEMPLATED_KEY)) is True


def parse_bool(value: Any) -> Optional[bool]:
    """Boolean parsing that accepts real bools and case-insensitive "true"/"false"."""
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered == "true":
            return True
        if lowered == "false":
            return False
    return None


# -----------------------------------------------------------------------------
# Link Request Builder
# -----------------------------------------------------------------------------
class LinkRequestBuilder:

    def __init__(self, parameters: Dict[str, Any]) -> None:
        self._parameters = dict(parameters)

    @classmethod
    def create_with_route_name(cls, route_name: str) -> "LinkRequestBuilder":
        must_not_be_blank(route_name, "route_name")
        return cls({ROUTE_NAME_KEY: route_name})

    def set(self, key: str, value: Any) -> "LinkRequestBuilder":
        must_not_be_blank(key, "key")
        must_not_be_none(value, "value")
        self._parameters[key] = value
        return self

    def set_if_not_none(self, key: str, value: Any) -> "LinkRequestBuilder":
        must_not_be_blank(key, "key")
        if value is not None:
            self._parameters[key] = value
        return self

    def set_route_values_if_not_none(self, route_values: Any) -> "LinkRequestBuilder":
        return self.set_if_not_none(ROUTE_VALUES_KEY, route_values)

    def set_is_templated(self) -> "LinkRequestBuilder":
        return self.set(TEMPLATED_KEY, True)

    def build(self) -> LinkRequest:
        return LinkRequest(self._parameters)
