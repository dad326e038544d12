from __future__ import annotations
from typing import Any, Callable, Dict, Generic, Optional, TypeVar

from models.hateoas import HypermediaDocument
from models.link import HttpLink, Link
from models.link_request import LinkRequestBuilder
from services.hypermedia import HypermediaService
from services.routing import RequestContext
from utils.errors import must_not_be_blank, must_not_be_none

SELF_REL = "self"

TDocument = TypeVar("TDocument", bound=HypermediaDocument)


class HypermediaBuilder(Generic[TDocument]):
    """
    Collects links for one outgoing document.

    ``build()`` returns a copy of the document with the collected links; the
    document passed in is left untouched.
    """

    def __init__(
        self,
        document: TDocument,
        service: HypermediaService,
        context: Optional[RequestContext] = None,
    ) -> None:
        self.document = must_not_be_none(document, "document")
        self.service = must_not_be_none(service, "service")
        self.context = context
        self._links: Dict[str, Link] = dict(document.links or {})

    def add_link(self, rel: str, link: Link) -> "HypermediaBuilder[TDocument]":
        must_not_be_blank(rel, "rel")
        must_not_be_none(link, "link")
        self._links[rel] = link
        return self

    def add_http_link(self, rel: str, href: str, method: str) -> "HypermediaBuilder[TDocument]":
        must_not_be_blank(rel, "rel")
        must_not_be_blank(href, "href")
        must_not_be_blank(method, "method")
        return self.add_link(rel, HttpLink(href=href, method=method))

    def add_route_link(
        self,
        rel: str,
        route_name: str,
        args: Any = None,
        condition: Optional[Callable[[TDocument], bool]] = None,
    ) -> "HypermediaBuilder[TDocument]":
        must_not_be_blank(rel, "rel")
        must_not_be_blank(route_name, "route_name")

        if condition is not None and not condition(self.document):
            return self

        link = self.service.get_link(
            LinkRequestBuilder.create_with_route_name(route_name),
            args,
            context=self.context,
        )
        return self.add_link(rel, link)

    def add_self_route_link(
        self,
        route_name: str,
        args: Any = None,
        condition: Optional[Callable[[TDocument], bool]] = None,
    ) -> "HypermediaBuilder[TDocument]":
        return self.add_route_link(SELF_REL, route_name, args, condition)

    def add_current_self_link(self) -> "HypermediaBuilder[TDocument]":
        must_not_be_none(self.context, "context")
        return self.add_link(SELF_REL, self.service.get_current_link(self.context))

    def add_route_template(self, rel: str, route_name: str) -> "HypermediaBuilder[TDocument]":
        must_not_be_blank(rel, "rel")
        must_not_be_blank(route_name, "route_name")

        link = self.service.get_link(
            LinkRequestBuilder.create_with_route_name(route_name).set_is_templated(),
            context=self.context,
        )
        return self.add_link(rel, link)

    def build(self) -> TDocument:
        return self.document.model_copy(update={"links": dict(self._links)})
