"""Test configuration and fakes standing in for the browser engine."""

import asyncio
import itertools

import pytest

from netledger.network.ledger import NetworkLedger
from netledger.network.models import Exchange

_guids = itertools.count(1)


class FakeRequest:
    """Duck-typed stand-in for a patchright Request."""

    def __init__(self, method="GET", url="https://example.com/", resource_type="document", post_data=None, guid=None):
        self._guid = guid or f"request@{next(_guids)}"
        self.method = method
        self.url = url
        self.resource_type = resource_type
        self.post_data_buffer = post_data


class FakeResponse:
    """Duck-typed stand-in for a patchright Response."""

    def __init__(self, request=None, status=200, headers=None, body=b"", error=None, header_error=None, delay=0.0):
        self.request = request
        self.status = status
        self._headers = headers or {}
        self._body = body
        self._error = error
        self._header_error = header_error
        self._delay = delay
        self.body_calls = 0

    async def all_headers(self):
        if self._delay:
            await asyncio.sleep(self._delay)
        if self._header_error:
            raise self._header_error
        return dict(self._headers)

    async def body(self):
        self.body_calls += 1
        if self._error:
            raise self._error
        return self._body


class FakePage:
    """Minimal event emitter with the Page.on / remove_listener surface."""

    def __init__(self):
        self.handlers = {}

    def on(self, event, handler):
        self.handlers.setdefault(event, []).append(handler)

    def remove_listener(self, event, handler):
        self.handlers.get(event, []).remove(handler)

    def emit(self, event, arg):
        for handler in list(self.handlers.get(event, [])):
            handler(arg)


def make_exchange(id, method="GET", resource_type="document", url=None, body=None, response=None):
    return Exchange(
        id=id,
        method=method,
        url=url or f"https://example.com/{id}",
        resource_type=resource_type,
        request_body=body,
        response=response,
    )


@pytest.fixture
def ledger() -> NetworkLedger:
    return NetworkLedger()


@pytest.fixture
def page() -> FakePage:
    return FakePage()


@pytest.fixture
def mixed_ledger(ledger: NetworkLedger) -> NetworkLedger:
    """Ledger with a realistic mix of methods and resource types."""
    ledger.record(make_exchange("d1", "GET", "document"))
    ledger.record(make_exchange("s1", "GET", "script"))
    ledger.record(make_exchange("x1", "POST", "xhr", body=b'{"q":"term"}'))
    ledger.record(make_exchange("i1", "GET", "image"))
    ledger.record(make_exchange("f1", "PUT", "fetch"))
    ledger.record(make_exchange("i2", "POST", "image"))
    return ledger
