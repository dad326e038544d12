"""
Unit tests for base URL providers.
"""

import pytest

from services.base_url_providers import (
    CurrentRequestBaseUrlProvider,
    CustomBaseUrlProvider,
    EmptyBaseUrlProvider,
)
from services.routing import RequestContext
from utils.errors import InvalidArgumentError


class TestCurrentRequestBaseUrlProvider:

    def test_uses_scheme_and_host(self, request_context):
        assert CurrentRequestBaseUrlProvider().provide(request_context) == "https://api.example.com"

    def test_keeps_port(self):
        context = RequestContext(scheme="http", host="localhost:8000")
        assert CurrentRequestBaseUrlProvider().provide(context) == "http://localhost:8000"

    @pytest.mark.parametrize("context", [None, RequestContext(), RequestContext(scheme="http")])
    def test_requires_request_context(self, context):
        with pytest.raises(InvalidArgumentError):
            CurrentRequestBaseUrlProvider().provide(context)


class TestCustomBaseUrlProvider:

    @pytest.mark.parametrize("base_url", [
        "https://api.example.com",
        "http://localhost:8000/api",
        "/api",
    ])
    def test_returns_configured_url_verbatim(self, base_url, request_context):
        assert CustomBaseUrlProvider(base_url).provide(request_context) == base_url

    def test_ignores_request_context(self):
        assert CustomBaseUrlProvider("https://api.example.com").provide() == "https://api.example.com"

    @pytest.mark.parametrize("base_url", [
        None,
        "",
        "   ",
        "not a url",
        "api.example.com",
        "https://",
        "ftp://files.example.com",
        "https://api.example.com/a b",
    ])
    def test_rejects_blank_or_malformed(self, base_url):
        with pytest.raises(InvalidArgumentError):
            CustomBaseUrlProvider(base_url)


class TestEmptyBaseUrlProvider:

    def test_returns_empty_string(self, request_context):
        assert EmptyBaseUrlProvider().provide(request_context) == ""
        assert EmptyBaseUrlProvider().provide() == ""
