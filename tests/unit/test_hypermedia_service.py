"""
Unit tests for HypermediaService and HypermediaServiceBuilder.
"""

from typing import List, Optional

import pytest

from config.settings import Settings
from models.link import HttpLink, Link
from models.link_request import LinkRequest, LinkRequestBuilder
from services.base_url_providers import (
    BaseUrlProvider,
    CurrentRequestBaseUrlProvider,
    CustomBaseUrlProvider,
    EmptyBaseUrlProvider,
)
from services.enrichers import HttpMethodEnricher, IsTemplatedEnricher, LinkDataEnricher
from services.hypermedia import HypermediaService, HypermediaServiceBuilder
from services.link_factories import HttpLinkFactory, LinkFactory
from services.routing import RequestContext
from services.url_path_providers import NonTemplatedUrlPathProvider, UrlPathProvider
from utils.errors import (
    DuplicateKeyError,
    InvalidArgumentError,
    LinkResolutionError,
    RouteNotFoundError,
)


class NoneBaseUrlProvider(BaseUrlProvider):
    def provide(self, context=None) -> Optional[str]:
        return None


class NoneUrlPathProvider(UrlPathProvider):
    def provide(self, context) -> Optional[str]:
        return None


class RecordingEnricher(LinkDataEnricher):
    """Appends its name to a shared list so call order can be asserted."""

    def __init__(self, name: str, calls: List[str]):
        self.name = name
        self.calls = calls

    def enrich(self, request, writer):
        self.calls.append(self.name)
        writer.write(self.name, True)


@pytest.fixture
def builder(route_table, url_resolver) -> HypermediaServiceBuilder:
    return HypermediaServiceBuilder(route_table, url_resolver)


class TestHypermediaService:
    """Tests for the link building pipeline."""

    def test_builds_absolute_link(self, builder, request_context):
        link = builder.build().get_link("Person", context=request_context)

        assert type(link) is Link
        assert link.href == "https://api.example.com/person/1"

    def test_accepts_request_objects_and_builders(self, builder, request_context):
        service = builder.build()

        by_request = service.get_link(LinkRequest({"id": "Person"}), context=request_context)
        by_builder = service.get_link(LinkRequestBuilder.create_with_route_name("Person"), context=request_context)

        assert by_request == by_builder

    def test_passes_args_to_resolver(self, builder, url_resolver, request_context):
        builder.build().get_link("Person", {"id": 1}, context=request_context)
        assert url_resolver.calls == [("Person", {"id": 1})]

    def test_relative_href(self, builder, request_context):
        link = builder.use_relative_url_href().build().get_link("Person", context=request_context)
        assert link.href == "/person/1"

    def test_custom_href(self, builder):
        link = builder.use_custom_base_url_href("https://cdn.example.com").build().get_link("Person")
        assert link.href == "https://cdn.example.com/person/1"

    def test_extended_templated_link(self, builder, request_context):
        service = builder.use_extended_link().build()

        link = service.get_link("Person|templated=true", context=request_context)

        assert isinstance(link, HttpLink)
        assert link.href == "https://api.example.com/person/{id}"
        assert link.method == "GET"
        assert link.templated is True

    def test_extended_concrete_link(self, builder, request_context):
        link = builder.use_extended_link().build().get_link("People", context=request_context)

        assert link == HttpLink(href="https://api.example.com/people", method="GET")

    def test_omitted_request_uses_current_route(self, builder, url_resolver, request_context):
        link = builder.build().get_link(context=request_context)

        assert link.href == "https://api.example.com/person/1"
        assert url_resolver.calls == [("Person", {"id": "1"})]

    def test_current_link(self, builder, url_resolver):
        context = RequestContext(
            scheme="http",
            host="testserver",
            route_name="People",
            query_params={"search": "ada"},
        )

        link = builder.build().get_current_link(context)

        assert link.href == "http://testserver/people"
        assert url_resolver.calls == [("People", {"search": "ada"})]

    def test_omitted_request_without_route_name_fails(self, builder):
        service = builder.use_relative_url_href().build()

        with pytest.raises(InvalidArgumentError):
            service.get_link()
        with pytest.raises(InvalidArgumentError):
            service.get_link(context=RequestContext(scheme="http", host="testserver"))

    def test_unsupported_request_type_fails(self, builder, request_context):
        with pytest.raises(InvalidArgumentError):
            builder.build().get_link(42, context=request_context)

    def test_parser_errors_propagate(self, builder, request_context):
        with pytest.raises(DuplicateKeyError):
            builder.build().get_link("Person|a=1|a=2", context=request_context)

    def test_absolute_href_without_context_fails(self, builder):
        with pytest.raises(InvalidArgumentError):
            builder.build().get_link("Person")

    def test_none_base_url_fails(self, builder, request_context):
        service = builder.use_base_url_provider(NoneBaseUrlProvider()).build()

        with pytest.raises(LinkResolutionError):
            service.get_link("Person", context=request_context)

    def test_none_url_path_fails(self, builder, request_context):
        service = builder.use_url_path_provider(NoneUrlPathProvider()).build()

        with pytest.raises(LinkResolutionError):
            service.get_link("Person", context=request_context)

    def test_unresolvable_route_fails(self, builder, request_context):
        with pytest.raises(LinkResolutionError):
            builder.build().get_link("Missing", context=request_context)

    def test_unknown_template_fails(self, builder, request_context):
        service = builder.use_extended_link().build()

        with pytest.raises(RouteNotFoundError):
            service.get_link("Missing|templated=true", context=request_context)

    def test_enrichers_run_in_order(self, builder, request_context):
        calls: List[str] = []
        service = (
            builder
            .add_link_data_enricher(RecordingEnricher("first", calls))
            .add_link_data_enricher(RecordingEnricher("second", calls))
            .build()
        )

        service.get_link("Person", context=request_context)
        service.get_link("Person", context=request_context)

        assert calls == ["first", "second", "first", "second"]

    def test_requires_collaborators(self, url_resolver):
        with pytest.raises(InvalidArgumentError):
            HypermediaService(None, NonTemplatedUrlPathProvider(url_resolver), [], LinkFactory())
        with pytest.raises(InvalidArgumentError):
            HypermediaService(EmptyBaseUrlProvider(), None, [], LinkFactory())
        with pytest.raises(InvalidArgumentError):
            HypermediaService(EmptyBaseUrlProvider(), NonTemplatedUrlPathProvider(url_resolver), None, LinkFactory())
        with pytest.raises(InvalidArgumentError):
            HypermediaService(EmptyBaseUrlProvider(), NonTemplatedUrlPathProvider(url_resolver), [], None)


class TestHypermediaServiceBuilder:
    """Tests for the service composition root."""

    def test_defaults(self, builder):
        service = builder.build()

        assert isinstance(service._base_url_provider, CurrentRequestBaseUrlProvider)
        assert isinstance(service._url_path_provider, NonTemplatedUrlPathProvider)
        assert service.link_data_enrichers == ()
        assert type(service._link_factory) is LinkFactory

    def test_extended_link_configuration(self, builder):
        service = builder.use_extended_link().build()
        enrichers = service.link_data_enrichers

        assert [type(e) for e in enrichers] == [IsTemplatedEnricher, HttpMethodEnricher]
        assert isinstance(service._link_factory, HttpLinkFactory)

    def test_later_calls_win(self, builder):
        service = builder.use_relative_url_href().use_absolute_url_href().build()
        assert isinstance(service._base_url_provider, CurrentRequestBaseUrlProvider)

    def test_built_service_does_not_follow_builder(self, builder):
        service = builder.build()
        builder.add_link_data_enricher(IsTemplatedEnricher())

        assert service.link_data_enrichers == ()

    def test_invalid_custom_base_url_fails(self, builder):
        with pytest.raises(InvalidArgumentError):
            builder.use_custom_base_url_href("not a url")

    def test_rejects_none_collaborators(self, builder):
        with pytest.raises(InvalidArgumentError):
            builder.use_base_url_provider(None)
        with pytest.raises(InvalidArgumentError):
            builder.add_link_data_enricher(None)
        with pytest.raises(InvalidArgumentError):
            builder.use_url_path_provider(None)
        with pytest.raises(InvalidArgumentError):
            builder.use_link_factory(None)

    def test_apply_relative_settings(self, builder):
        settings = Settings(HATEOAS_HREF_MODE="relative", HATEOAS_EXTENDED_LINKS=False)

        service = builder.apply_settings(settings).build()

        assert isinstance(service._base_url_provider, EmptyBaseUrlProvider)
        assert service.link_data_enrichers == ()

    def test_apply_custom_settings(self, builder):
        settings = Settings(
            HATEOAS_HREF_MODE="custom",
            HATEOAS_CUSTOM_BASE_URL="https://api.example.com/v1",
            HATEOAS_EXTENDED_LINKS=True,
        )

        service = builder.apply_settings(settings).build()

        assert isinstance(service._base_url_provider, CustomBaseUrlProvider)
        assert service.get_link("Person") == HttpLink(href="https://api.example.com/v1/person/1", method="GET")

    def test_custom_mode_without_base_url_fails(self, builder):
        settings = Settings(HATEOAS_HREF_MODE="custom", HATEOAS_CUSTOM_BASE_URL=None)

        with pytest.raises(InvalidArgumentError):
            builder.apply_settings(settings)
