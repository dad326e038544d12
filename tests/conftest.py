"""
pytest configuration and fixtures.
"""

from typing import Any, Dict, List, Optional, Tuple

import pytest
from pydantic import BaseModel, Field

from services.routing import RequestContext, RouteEntry, StaticRouteTable, UrlResolver


class PeopleQuery(BaseModel):
    """Query model used to exercise URI query templates."""
    search: Optional[str] = None
    sort_by: str = Field("name", alias="sortBy")


class FakeUrlResolver(UrlResolver):
    """URL resolver returning canned URLs and recording its calls."""

    def __init__(self, urls: Optional[Dict[str, Optional[str]]] = None):
        self.urls = urls or {}
        self.calls: List[Tuple[str, Any]] = []

    def resolve(self, route_name: str, route_values: Any = None) -> Optional[str]:
        self.calls.append((route_name, route_values))
        return self.urls.get(route_name)


@pytest.fixture
def route_table() -> StaticRouteTable:
    """Route table with a handful of representative routes."""
    return StaticRouteTable([
        RouteEntry(name="Person", template="person/{id}", http_methods=("GET",)),
        RouteEntry(name="People", template="people", http_methods=("GET", "POST"), query_model=PeopleQuery),
        RouteEntry(name="NoMethods", template="no-methods"),
        RouteEntry(name="Blank", template=""),
        RouteEntry(name="Broken", template="broken path/{id}"),
    ])


@pytest.fixture
def url_resolver() -> FakeUrlResolver:
    """Resolver that knows how to expand 'Person' and 'People'."""
    return FakeUrlResolver({
        "Person": "/person/1",
        "People": "/people",
        "NoMethods": "/no-methods",
    })


@pytest.fixture
def request_context() -> RequestContext:
    """Context of an inbound request served by the 'Person' route."""
    return RequestContext(
        scheme="https",
        host="api.example.com",
        route_name="Person",
        path_params={"id": "1"},
        query_params={},
    )
