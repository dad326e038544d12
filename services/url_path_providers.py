from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, List, Optional, Type

from pydantic import BaseModel

from models.link_request import ID_KEY, LinkRequest
from services.routing import RouteEntry, RouteTable, UrlResolver
from utils.errors import (
    InvalidArgumentError,
    LinkResolutionError,
    RouteNotFoundError,
    must_not_be_none,
)
from utils.uri import is_well_formed_uri, strip_template_braces

logger = logging.getLogger(__name__)


@dataclass
class UrlPathProviderContext:
    link_request: LinkRequest
    args: Any = None

    def __post_init__(self) -> None:
        must_not_be_none(self.link_request, "link_request")


class UrlPathProvider(ABC):

    @abstractmethod
    def provide(self, context: UrlPathProviderContext) -> Optional[str]:
        """Return the URL path (or URI template) for the requested link."""


def _require_route_name(link_request: LinkRequest) -> str:
    route_name = link_request.get_route_name()
    if route_name is None or not str(route_name).strip():
        raise InvalidArgumentError(
            f"Parameter 'context.link_request' must contain a value for '{ID_KEY}'."
        )
    return str(route_name)


# -----------------------------------------------------------------------------
# Non-templated
# -----------------------------------------------------------------------------
class NonTemplatedUrlPathProvider(UrlPathProvider):

    def __init__(self, url_resolver: UrlResolver) -> None:
        self._url_resolver = must_not_be_none(url_resolver, "url_resolver")

    def provide(self, context: UrlPathProviderContext) -> Optional[str]:
        must_not_be_none(context, "context")
        route_name = _require_route_name(context.link_request)

        args = context.args
        if args is None:
            args = context.link_request.get_route_values()

        url = self._url_resolver.resolve(route_name, args)
        if url is None or not str(url).strip() or not is_well_formed_uri(str(url)):
            raise LinkResolutionError(
                f"The given '{ID_KEY}' to retrieve the URL did not provide a valid value. "
                f"Value of '{ID_KEY}': {route_name}"
            )

        logger.debug("Resolved route '%s' to '%s'", route_name, url)
        return str(url)


# -----------------------------------------------------------------------------
# Templated
# -----------------------------------------------------------------------------
class QueryNameSelector:
    """Maps the fields of a query model to the names clients send in the query string."""

    def select(self, query_model: Type[BaseModel]) -> List[str]:
        must_not_be_none(query_model, "query_model")

        names = []
        for field_name, field_info in query_model.model_fields.items():
            name = None
            for alternate in (field_info.validation_alias, field_info.alias):
                if isinstance(alternate, str) and alternate.strip():
                    name = alternate
                    break
            names.append(name or field_name)
        return names


class WithTemplatedUrlPathProvider(UrlPathProvider):
    """
    Returns the route's raw template for requests marked ``templated``.

    Placeholders like ``{person_id}`` are left in place for clients to expand,
    and routes that bind a query model get a ``{?name1,name2}`` suffix. Every
    other request is resolved to a concrete path.
    """

    def __init__(
        self,
        route_table: RouteTable,
        url_resolver: UrlResolver,
        query_name_selector: Optional[QueryNameSelector] = None,
    ) -> None:
        self._route_table = must_not_be_none(route_table, "route_table")
        self._selector = query_name_selector or QueryNameSelector()
        self._non_templated = NonTemplatedUrlPathProvider(url_resolver)

    def provide(self, context: UrlPathProviderContext) -> Optional[str]:
        must_not_be_none(context, "context")
        route_name = _require_route_name(context.link_request)

        if not context.link_request.is_templated():
            return self._non_templated.provide(context)

        template = self.get_template(route_name)
        if not template or not template.strip():
            raise LinkResolutionError(
                f"The given '{ID_KEY}' to retrieve the URL template returned a null or empty value. "
                f"Value of '{ID_KEY}': {route_name}"
            )

        path = template if template.startswith("/") else f"/{template}"

        # braces are not legal URI characters, so validate a stripped copy
        if not is_well_formed_uri(strip_template_braces(path)):
            raise LinkResolutionError(
                f"The given '{ID_KEY}' to retrieve the URL template did not provide a valid value. "
                f"Value of '{ID_KEY}': {route_name}"
            )

        logger.debug("Resolved route '%s' to template '%s'", route_name, path)
        return path

    def get_template(self, route_name: str) -> Optional[str]:
        entry = self._route_table.lookup_by_name(route_name)
        if entry is None:
            raise RouteNotFoundError(
                f"The given '{ID_KEY}' to retrieve the URL template does not exist. "
                f"Value of '{ID_KEY}': {route_name}"
            )

        template = entry.template
        query_template = self.get_query_template(entry)
        if template and query_template:
            template = f"{template}{query_template}"
        return template

    def get_query_template(self, entry: RouteEntry) -> Optional[str]:
        if entry.query_model is None:
            return None

        names = self._selector.select(entry.query_model) or []
        if not names:
            return None
        return "{?" + ",".join(names) + "}"
