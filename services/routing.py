from __future__ import annotations

import dataclasses
import logging
import re
from abc import ABC, abstractmethod
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Annotated, Any, Dict, Iterable, Iterator, Optional, Tuple, Type, get_args, get_origin
from urllib.parse import quote, urlencode

from fastapi import FastAPI, Request
from fastapi.routing import APIRoute
from pydantic import BaseModel
from starlette.convertors import Convertor, PathConvertor, StringConvertor
from starlette.routing import BaseRoute, NoMatchFound, Route, WebSocketRoute

logger = logging.getLogger(__name__)

HTTP_METHOD_ORDER = ("GET", "POST", "PUT", "PATCH", "DELETE", "HEAD", "OPTIONS", "TRACE")

# "{file_path:path}" -> "{file_path}"
_PARAM_CONVERTOR = re.compile(r"\{([^{}:]+):[^{}]+\}")
_PATH_PARAM = re.compile(r"\{([^{}:]+)(?::[^{}]+)?\}")


# -----------------------------------------------------------------------------
# Route Table
# -----------------------------------------------------------------------------
@dataclass(frozen=True)
class RouteEntry:
    name: str
    template: str
    http_methods: Tuple[str, ...] = ()
    query_model: Optional[Type[BaseModel]] = None


class RouteTable(ABC):

    @abstractmethod
    def lookup_by_name(self, name: str) -> Optional[RouteEntry]:
        """Return the route registered under ``name``, or None."""


class StaticRouteTable(RouteTable):
    """Route table over a fixed set of entries (first entry wins on duplicate names)."""

    def __init__(self, entries: Iterable[RouteEntry]) -> None:
        self._entries: Dict[str, RouteEntry] = {}
        for entry in entries:
            self._entries.setdefault(entry.name, entry)

    def lookup_by_name(self, name: str) -> Optional[RouteEntry]:
        return self._entries.get(name)


def order_http_methods(methods: Iterable[str]) -> Tuple[str, ...]:
    """Starlette keeps methods in a set; put them in a stable, conventional order."""
    upper = {method.upper() for method in methods}
    known = [method for method in HTTP_METHOD_ORDER if method in upper]
    return tuple(known + sorted(upper.difference(HTTP_METHOD_ORDER)))


def model_from_annotation(annotation: Any) -> Optional[Type[BaseModel]]:
    """The pydantic model behind an annotation, looking through Annotated and Optional."""
    if get_origin(annotation) is Annotated:
        return model_from_annotation(get_args(annotation)[0])
    if isinstance(annotation, type) and issubclass(annotation, BaseModel):
        return annotation
    for arg in get_args(annotation):
        if arg is type(None):
            continue
        model = model_from_annotation(arg)
        if model is not None:
            return model
    return None


def _query_model(route: APIRoute) -> Optional[Type[BaseModel]]:
    for param in route.dependant.query_params:
        model = model_from_annotation(param.field_info.annotation)
        if model is not None:
            return model
    return None


def route_entry_from(route: BaseRoute, path: Optional[str] = None) -> RouteEntry:
    """``path`` is the full path when the route sits under a mount or included router."""
    template = _PARAM_CONVERTOR.sub(r"{\1}", path or route.path).lstrip("/")
    return RouteEntry(
        name=route.name,
        template=template,
        http_methods=order_http_methods(getattr(route, "methods", None) or ()),
        query_model=_query_model(route) if isinstance(route, APIRoute) else None,
    )


def _child_routes(route: BaseRoute) -> Optional[Iterable[BaseRoute]]:
    if isinstance(route, (Route, WebSocketRoute)):
        return None
    routes = getattr(route, "routes", None)
    if routes is None:
        routes = getattr(getattr(route, "router", None), "routes", None)
    return routes


def _join_path(prefix: str, path: str) -> str:
    if not prefix:
        return path
    # included routers may hand out copies that already carry their prefix
    if path == prefix or path.startswith(prefix + "/"):
        return path
    return prefix.rstrip("/") + path


def iter_routes(routes: Iterable[BaseRoute], prefix: str = "") -> Iterator[Tuple[str, BaseRoute]]:
    """
    Yield ``(full_path, route)`` for every endpoint route, depth first.

    Mounts and included routers are walked in registration order, the same
    order ``url_path_for`` searches them.
    """
    for route in routes:
        children = _child_routes(route)
        if children is not None:
            route_prefix = getattr(route, "path", None) or getattr(route, "prefix", None) or ""
            yield from iter_routes(children, _join_path(prefix, route_prefix))
        elif getattr(route, "path", None) is not None:
            yield _join_path(prefix, route.path), route


class FastAPIRouteTable(RouteTable):
    """Reads the application's registered routes; routes added later are seen too."""

    def __init__(self, app: FastAPI) -> None:
        self._app = app

    def find_route(self, name: str) -> Optional[Tuple[str, BaseRoute]]:
        """Return ``(full_path, route)`` for the first route named ``name``."""
        for path, route in iter_routes(self._app.routes):
            if getattr(route, "name", None) == name:
                return path, route
        return None

    def lookup_by_name(self, name: str) -> Optional[RouteEntry]:
        found = self.find_route(name)
        if found is None:
            return None
        path, route = found
        return route_entry_from(route, path)


# -----------------------------------------------------------------------------
# URL Resolver
# -----------------------------------------------------------------------------
class UrlResolver(ABC):

    @abstractmethod
    def resolve(self, route_name: str, route_values: Any = None) -> Optional[str]:
        """Expand a route name and optional values into a URL path, or None."""


def to_route_values(route_values: Any) -> Dict[str, Any]:
    if route_values is None:
        return {}
    if isinstance(route_values, Mapping):
        return dict(route_values)
    if isinstance(route_values, BaseModel):
        return route_values.model_dump(by_alias=True)
    if dataclasses.is_dataclass(route_values) and not isinstance(route_values, type):
        return dataclasses.asdict(route_values)
    return dict(vars(route_values))


def encode_path_value(value: Any, convertor: Optional[Convertor]) -> Any:
    """Percent-encode text path values; starlette's convertors insert them as-is."""
    if isinstance(convertor, PathConvertor):
        return quote(str(value), safe="/")
    if convertor is None or isinstance(convertor, StringConvertor):
        return quote(str(value), safe="")
    # int, float and uuid convertors format their own values
    return value


class FastAPIUrlResolver(UrlResolver):
    """
    Expands routes with ``app.url_path_for``.

    Values matching the route's path parameters fill the path, percent-encoded;
    the remaining non-None values become the query string.
    """

    def __init__(self, app: FastAPI) -> None:
        self._app = app
        self._routes = FastAPIRouteTable(app)

    def resolve(self, route_name: str, route_values: Any = None) -> Optional[str]:
        found = self._routes.find_route(route_name)
        if found is None:
            logger.warning("Cannot resolve URL: no route named '%s'", route_name)
            return None

        full_path, route = found
        convertors = getattr(route, "param_convertors", {})
        path_param_names = set(_PATH_PARAM.findall(full_path))

        values = to_route_values(route_values)
        path_params = {
            k: encode_path_value(v, convertors.get(k))
            for k, v in values.items() if k in path_param_names
        }
        query_params = {
            k: v for k, v in values.items()
            if k not in path_param_names and v is not None
        }

        try:
            path = str(self._app.url_path_for(route_name, **path_params))
        # starlette convertors reject bad values with assertions
        except (NoMatchFound, ValueError, AssertionError) as e:
            logger.warning("Cannot resolve URL for route '%s' with %s: %s", route_name, values, e)
            return None

        if query_params:
            path = f"{path}?{urlencode(query_params, doseq=True)}"
        return path


# -----------------------------------------------------------------------------
# Request Context
# -----------------------------------------------------------------------------
@dataclass(frozen=True)
class RequestContext:
    """The parts of the inbound request that link building needs."""
    scheme: Optional[str] = None
    host: Optional[str] = None
    route_name: Optional[str] = None
    path_params: Dict[str, Any] = field(default_factory=dict)
    query_params: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_request(cls, request: Request) -> "RequestContext":
        route = request.scope.get("route")
        if route is None:
            endpoint = request.scope.get("endpoint")
            route = next(
                (r for _, r in iter_routes(request.app.routes) if getattr(r, "endpoint", None) is endpoint),
                None,
            )

        query_params: Dict[str, Any] = {}
        for key in request.query_params.keys():
            values = request.query_params.getlist(key)
            query_params[key] = values[0] if len(values) == 1 else values

        return cls(
            scheme=request.url.scheme,
            host=request.url.netloc,
            route_name=getattr(route, "name", None),
            path_params=dict(request.path_params),
            query_params=query_params,
        )

    @property
    def current_route_values(self) -> Dict[str, Any]:
        return {**self.query_params, **self.path_params}
