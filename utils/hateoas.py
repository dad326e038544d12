from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, Optional, TypeVar

from fastapi import FastAPI, Request

from config.settings import Settings, settings as default_settings
from models.hateoas import HypermediaDocument
from models.link import Link
from models.person import PersonCollection, PersonRead
from services.hypermedia import HypermediaService, HypermediaServiceBuilder, LinkRequestLike
from services.hypermedia_builder import HypermediaBuilder
from services.routing import FastAPIRouteTable, FastAPIUrlResolver, RequestContext
from utils.errors import LinkResolutionError, register_exception_handlers

logger = logging.getLogger(__name__)

TDocument = TypeVar("TDocument", bound=HypermediaDocument)


# -----------------------------------------------------------------------------
# Setup
# -----------------------------------------------------------------------------
def add_hateoas(
    app: FastAPI,
    configure: Optional[Callable[[HypermediaServiceBuilder], Any]] = None,
    app_settings: Optional[Settings] = None,
) -> HypermediaService:
    """
    Attach a HypermediaService to the app.

    Settings are applied first, then ``configure`` may override them. Routes
    are read at link-building time, so this can run before routers are
    included.
    """
    builder = HypermediaServiceBuilder(FastAPIRouteTable(app), FastAPIUrlResolver(app))
    builder.apply_settings(app_settings or default_settings)
    if configure is not None:
        configure(builder)

    service = builder.build()
    app.state.hypermedia_service = service
    register_exception_handlers(app)

    logger.info(
        "Hypermedia configured with %s and %d enricher(s)",
        type(service).__name__,
        len(service.link_data_enrichers),
    )
    return service


# -----------------------------------------------------------------------------
# Dependencies
# -----------------------------------------------------------------------------
@dataclass
class Hypermedia:
    """Link building bound to the request being served."""
    service: HypermediaService
    context: RequestContext

    def get_link(self, request: Optional[LinkRequestLike] = None, args: Any = None) -> Link:
        return self.service.get_link(request, args, context=self.context)

    def get_current_link(self) -> Link:
        return self.service.get_current_link(self.context)

    def builder(self, document: TDocument) -> HypermediaBuilder[TDocument]:
        return HypermediaBuilder(document, self.service, self.context)


def get_hypermedia_service(request: Request) -> HypermediaService:
    service = getattr(request.app.state, "hypermedia_service", None)
    if service is None:
        raise LinkResolutionError("Hypermedia is not configured for this app. Call add_hateoas(app) first.")
    return service


def get_request_context(request: Request) -> RequestContext:
    return RequestContext.from_request(request)


def get_hypermedia(request: Request) -> Hypermedia:
    return Hypermedia(
        service=get_hypermedia_service(request),
        context=get_request_context(request),
    )


# -----------------------------------------------------------------------------
# Person HATEOAS
# -----------------------------------------------------------------------------
def hateoas_person(hypermedia: Hypermedia, person: PersonRead) -> PersonRead:
    args = {"person_id": person.id}
    return (
        hypermedia.builder(person)
        .add_self_route_link("get_person", args)
        .add_route_link("update", "update_person", args)
        .add_route_link("delete", "delete_person", args)
        .add_route_link("collection", "list_people")
        .build()
    )


def hateoas_people(hypermedia: Hypermedia, collection: PersonCollection) -> PersonCollection:
    return (
        hypermedia.builder(collection)
        .add_current_self_link()
        .add_route_template("find", "get_person")
        .add_route_template("search", "list_people")
        .build()
    )
