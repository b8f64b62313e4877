"""Tests for summary records and the JSONL listing."""

import json

import pytest

from netledger.network.models import FilterCriteria, TruncationLimits
from netledger.network.projector import list_requests, project

from conftest import FakeResponse, make_exchange


@pytest.mark.asyncio
async def test_project_pending_exchange():
    record = await project(make_exchange("r1", "GET", "document", url="https://example.com/"))
    assert record.id == "r1"
    assert record.status is None
    assert record.response_headers == {}
    assert record.request_body_snippet is None


@pytest.mark.asyncio
async def test_project_answered_exchange():
    response = FakeResponse(status=404, headers={"content-type": "text/html", "server": "nginx"})
    record = await project(make_exchange("r2", "GET", "document", response=response))
    assert record.status == 404
    assert record.response_headers == {"content-type": "text/html", "server": "nginx"}


@pytest.mark.asyncio
async def test_request_body_snippet_is_capped():
    body = b"a" * 1000
    record = await project(make_exchange("r3", "POST", "xhr", body=body), TruncationLimits(request_body_bytes=300))
    assert record.request_body_snippet == "a" * 300


@pytest.mark.asyncio
async def test_header_fetch_failure_still_projects():
    response = FakeResponse(status=200, header_error=RuntimeError("Target page closed\nstack..."))
    record = await project(make_exchange("r4", response=response))
    assert record.status == 200
    assert record.response_headers == {}


@pytest.mark.asyncio
async def test_summary_line_uses_wire_field_names():
    record = await project(make_exchange("x", "POST", "xhr", body=b"q=1"))
    line = record.to_line()
    data = json.loads(line)
    assert set(data) == {"id", "method", "url", "status", "resourceType", "request_body_snippet", "response_headers"}
    assert data["resourceType"] == "xhr"
    assert "\n" not in line


@pytest.mark.asyncio
async def test_list_requests_one_line_per_match_in_ledger_order(ledger):
    # Earlier entries answer their header fetch later
    ledger.record(make_exchange("a", "GET", "xhr", response=FakeResponse(headers={"n": "a"}, delay=0.03)))
    ledger.record(make_exchange("b", "GET", "script"))
    ledger.record(make_exchange("c", "POST", "fetch", response=FakeResponse(headers={"n": "c"}, delay=0.01)))
    ledger.record(make_exchange("d", "GET", "document", response=FakeResponse(headers={"n": "d"})))

    lines = await list_requests(ledger, FilterCriteria(resource_types={"xhr", "fetch", "document"}))

    records = [json.loads(line) for line in lines]
    assert [r["id"] for r in records] == ["a", "c", "d"]
    assert [r["response_headers"]["n"] for r in records] == ["a", "c", "d"]


@pytest.mark.asyncio
async def test_list_requests_without_criteria_lists_everything(mixed_ledger):
    lines = await list_requests(mixed_ledger)
    assert len(lines) == len(mixed_ledger)


@pytest.mark.asyncio
async def test_list_requests_empty_ledger(ledger):
    assert await list_requests(ledger, FilterCriteria(methods={"GET"})) == []
