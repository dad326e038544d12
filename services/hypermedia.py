from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, List, Optional, Sequence, Union

from models.link import Link
from models.link_request import LinkRequest, LinkRequestBuilder
from services.base_url_providers import (
    BaseUrlProvider,
    CurrentRequestBaseUrlProvider,
    CustomBaseUrlProvider,
    EmptyBaseUrlProvider,
)
from services.enrichers import (
    HttpMethodEnricher,
    IsTemplatedEnricher,
    LinkDataEnricher,
    LinkDataWriter,
)
from services.link_factories import HttpLinkFactory, LinkFactory, LinkFactoryContext
from services.link_request_parser import PipeDelimitedLinkRequestParser
from services.routing import RequestContext, RouteTable, UrlResolver
from services.url_path_providers import (
    NonTemplatedUrlPathProvider,
    UrlPathProvider,
    UrlPathProviderContext,
    WithTemplatedUrlPathProvider,
)
from utils.errors import InvalidArgumentError, LinkResolutionError, must_not_be_none

if TYPE_CHECKING:
    from config.settings import Settings

logger = logging.getLogger(__name__)

LinkRequestLike = Union[str, LinkRequest, LinkRequestBuilder]


# -----------------------------------------------------------------------------
# Hypermedia Service
# -----------------------------------------------------------------------------
class HypermediaService:
    """
    Builds links for named routes.

    One call runs the whole pipeline: link request -> base URL -> URL path ->
    enrichers -> link factory. Every collaborator is read-only; the request
    and context of a call are never shared, so a service can serve
    concurrent requests.
    """

    def __init__(
        self,
        base_url_provider: BaseUrlProvider,
        url_path_provider: UrlPathProvider,
        link_data_enrichers: Sequence[LinkDataEnricher],
        link_factory: LinkFactory,
        link_request_parser: Optional[PipeDelimitedLinkRequestParser] = None,
    ) -> None:
        self._base_url_provider = must_not_be_none(base_url_provider, "base_url_provider")
        self._url_path_provider = must_not_be_none(url_path_provider, "url_path_provider")
        self._link_data_enrichers = tuple(must_not_be_none(link_data_enrichers, "link_data_enrichers"))
        self._link_factory = must_not_be_none(link_factory, "link_factory")
        self._parser = link_request_parser or PipeDelimitedLinkRequestParser()

    @property
    def link_data_enrichers(self) -> Sequence[LinkDataEnricher]:
        return self._link_data_enrichers

    def get_current_link(self, context: RequestContext) -> Link:
        """Link to the route serving the current request, with its path and query values."""
        must_not_be_none(context, "context")
        return self.get_link(None, context.current_route_values, context=context)

    def get_link(
        self,
        request: Optional[LinkRequestLike] = None,
        args: Any = None,
        *,
        context: Optional[RequestContext] = None,
    ) -> Link:
        link_request = self._to_link_request(request, context)
        if request is None and args is None and context is not None:
            args = context.current_route_values

        base_url = self._get_base_url_or_raise(context)
        url_path = self._get_url_path_or_raise(link_request, args)

        link_factory_context = (
            LinkFactoryContext()
            .set_base_url(base_url)
            .set_url_path(url_path)
        )
        self._enrich(link_request, link_factory_context)

        link = self._link_factory.create(link_factory_context)
        logger.debug("Built link %s for %s", link, link_request)
        return link

    def _to_link_request(
        self,
        request: Optional[LinkRequestLike],
        context: Optional[RequestContext],
    ) -> LinkRequest:
        if isinstance(request, LinkRequest):
            return request
        if isinstance(request, LinkRequestBuilder):
            return request.build()
        if isinstance(request, str):
            return self._parser.parse(request)
        if request is not None:
            raise InvalidArgumentError(
                f"Parameter 'request' of type '{type(request).__name__}' is not a link request."
            )

        route_name = context.route_name if context is not None else None
        if not route_name or not route_name.strip():
            raise InvalidArgumentError(
                "Parameter 'request' must not be null or empty when the current route has no name."
            )
        return LinkRequestBuilder.create_with_route_name(route_name).build()

    def _get_base_url_or_raise(self, context: Optional[RequestContext]) -> str:
        base_url = self._base_url_provider.provide(context)
        if base_url is None:
            raise LinkResolutionError("The base URL provider must not return a null value.")
        return base_url

    def _get_url_path_or_raise(self, link_request: LinkRequest, args: Any) -> str:
        url_path = self._url_path_provider.provide(UrlPathProviderContext(link_request, args))
        if url_path is None:
            raise LinkResolutionError("The URL path provider must not return a null value.")
        return url_path

    def _enrich(self, link_request: LinkRequest, context: LinkFactoryContext) -> None:
        writer = LinkDataWriter(context)
        for enricher in self._link_data_enrichers:
            enricher.enrich(link_request, writer)


# -----------------------------------------------------------------------------
# Composition root
# -----------------------------------------------------------------------------
class HypermediaServiceBuilder:
    """
    Selects the collaborators of a ``HypermediaService``.

    Defaults: absolute hrefs from the current request, non-templated paths,
    no enrichers and the plain ``LinkFactory``.
    """

    def __init__(self, route_table: RouteTable, url_resolver: UrlResolver) -> None:
        self.route_table = must_not_be_none(route_table, "route_table")
        self.url_resolver = must_not_be_none(url_resolver, "url_resolver")

        self._base_url_provider: BaseUrlProvider = CurrentRequestBaseUrlProvider()
        self._url_path_provider: UrlPathProvider = NonTemplatedUrlPathProvider(url_resolver)
        self._enrichers: List[LinkDataEnricher] = []
        self._link_factory: LinkFactory = LinkFactory()

    def use_absolute_url_href(self) -> "HypermediaServiceBuilder":
        self._base_url_provider = CurrentRequestBaseUrlProvider()
        return self

    def use_relative_url_href(self) -> "HypermediaServiceBuilder":
        self._base_url_provider = EmptyBaseUrlProvider()
        return self

    def use_custom_base_url_href(self, base_url: str) -> "HypermediaServiceBuilder":
        self._base_url_provider = CustomBaseUrlProvider(base_url)
        return self

    def use_base_url_provider(self, provider: BaseUrlProvider) -> "HypermediaServiceBuilder":
        self._base_url_provider = must_not_be_none(provider, "provider")
        return self

    def add_link_data_enricher(self, enricher: LinkDataEnricher) -> "HypermediaServiceBuilder":
        self._enrichers.append(must_not_be_none(enricher, "enricher"))
        return self

    def use_url_path_provider(self, provider: UrlPathProvider) -> "HypermediaServiceBuilder":
        self._url_path_provider = must_not_be_none(provider, "provider")
        return self

    def use_link_factory(self, factory: LinkFactory) -> "HypermediaServiceBuilder":
        self._link_factory = must_not_be_none(factory, "factory")
        return self

    def use_extended_link(self) -> "HypermediaServiceBuilder":
        """HttpLink output: method and templated flag, URI templates on request."""
        return (
            self
            .add_link_data_enricher(IsTemplatedEnricher())
            .add_link_data_enricher(HttpMethodEnricher(self.route_table))
            .use_url_path_provider(WithTemplatedUrlPathProvider(self.route_table, self.url_resolver))
            .use_link_factory(HttpLinkFactory())
        )

    def apply_settings(self, settings: "Settings") -> "HypermediaServiceBuilder":
        mode = settings.HATEOAS_HREF_MODE
        if mode == "relative":
            self.use_relative_url_href()
        elif mode == "custom":
            self.use_custom_base_url_href(settings.HATEOAS_CUSTOM_BASE_URL)
        else:
            self.use_absolute_url_href()

        if settings.HATEOAS_EXTENDED_LINKS:
            self.use_extended_link()
        return self

    def build(self) -> HypermediaService:
        return HypermediaService(
            base_url_provider=self._base_url_provider,
            url_path_provider=self._url_path_provider,
            link_data_enrichers=list(self._enrichers),
            link_factory=self._link_factory,
        )
