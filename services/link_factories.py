from __future__ import annotations
from typing import Any, Callable, Dict, Generic, Optional, Type, TypeVar, Union

from models.link import HttpLink, Link
from models.link_request import TEMPLATED_KEY
from utils.errors import ContextValueTypeError, must_not_be_blank, must_not_be_none

T = TypeVar("T")
TLink = TypeVar("TLink", bound=Link)

BASE_URL_KEY = "baseUrl"
URL_PATH_KEY = "urlPath"
HTTP_METHOD_KEY = "httpMethod"


# -----------------------------------------------------------------------------
# Link Factory Context
# -----------------------------------------------------------------------------
class LinkFactoryContext:
    """
    Key/value bag shared by the enrichers and the link factory of one link.

    Values are never None; setting an existing key replaces its value.
    """

    def __init__(self) -> None:
        self._values: Dict[str, Any] = {}

    def get(self, key: str) -> Any:
        must_not_be_blank(key, "key")
        return self._values.get(key)

    def get_as(self, key: str, value_type: Union[Type[T], tuple]) -> Optional[T]:
        value = self.get(key)
        if value is not None and not isinstance(value, value_type):
            raise ContextValueTypeError(
                f"Value of '{key}' is of type '{type(value).__name__}', "
                f"expected '{getattr(value_type, '__name__', value_type)}'."
            )
        return value

    def set(self, key: str, value: Any) -> "LinkFactoryContext":
        must_not_be_blank(key, "key")
        must_not_be_none(value, "value")
        self._values[key] = value
        return self

    def __contains__(self, key: str) -> bool:
        return key in self._values

    @property
    def base_url(self) -> Optional[str]:
        return self.get_as(BASE_URL_KEY, str)

    @property
    def url_path(self) -> Optional[str]:
        return self.get_as(URL_PATH_KEY, str)

    def set_base_url(self, value: str) -> "LinkFactoryContext":
        return self.set(BASE_URL_KEY, value)

    def set_url_path(self, value: str) -> "LinkFactoryContext":
        return self.set(URL_PATH_KEY, value)

    def get_href(self) -> Optional[str]:
        base_url = self.base_url
        url_path = self.url_path
        if base_url is None and url_path is None:
            return None
        return f"{base_url or ''}{url_path or ''}"

    def map_to(self, create: Callable[[Optional[str], "LinkFactoryContext"], TLink]) -> "LinkMapper[TLink]":
        must_not_be_none(create, "create")
        return LinkMapper(self, create(self.get_href(), self))


# -----------------------------------------------------------------------------
# Link Mapper
# -----------------------------------------------------------------------------
class LinkMapper(Generic[TLink]):
    """
    Fluent helper that copies optional context values onto a link.

    Links are frozen, so each mapping function returns the replacement link
    (typically ``link.model_copy(update=...)``).
    """

    def __init__(self, context: LinkFactoryContext, link: TLink) -> None:
        self.context = must_not_be_none(context, "context")
        self.link = must_not_be_none(link, "link")

    def map_if_existing(
        self,
        key: str,
        value_type: Union[Type[T], tuple],
        mapper: Callable[[TLink, T], TLink],
    ) -> "LinkMapper[TLink]":
        must_not_be_blank(key, "key")
        must_not_be_none(mapper, "mapper")

        value = self.context.get_as(key, value_type)
        if value is not None:
            self.link = mapper(self.link, value)
        return self


# -----------------------------------------------------------------------------
# Link Factories
# -----------------------------------------------------------------------------
class LinkFactory:
    """Builds a plain ``Link``; subclasses override ``do_create`` for richer shapes."""

    def create(self, context: LinkFactoryContext) -> Link:
        must_not_be_none(context, "context")
        return self.do_create(context)

    def do_create(self, context: LinkFactoryContext) -> Link:
        return context.map_to(lambda href, _: Link(href=href)).link


def _map_templated(link: HttpLink, templated: bool) -> HttpLink:
    if templated:
        return link.model_copy(update={"templated": True})
    return link


class HttpLinkFactory(LinkFactory):

    def do_create(self, context: LinkFactoryContext) -> Link:
        return (
            context
            .map_to(lambda href, c: HttpLink(href=href, method=c.get_as(HTTP_METHOD_KEY, str)))
            .map_if_existing(TEMPLATED_KEY, bool, _map_templated)
            .link
        )
