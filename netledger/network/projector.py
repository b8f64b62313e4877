"""
Exchange projector — summary records and the JSONL listing.
"""

from __future__ import annotations

import asyncio

from netledger.log import setup_logging
from netledger.network.filters import select
from netledger.network.ledger import NetworkLedger
from netledger.network.models import Exchange, FilterCriteria, SummaryRecord, TruncationLimits
from netledger.network.truncation import first_line

log = setup_logging("projector")


def body_snippet(body: bytes | None, max_bytes: int) -> str | None:
    if not body:
        return None
    return body[:max_bytes].decode("utf-8", errors="replace")


async def project(exchange: Exchange, limits: TruncationLimits | None = None) -> SummaryRecord:
    """
    Build the summary record of one exchange.

    Header retrieval is the only await. If it fails the record is still
    produced, with empty headers.
    """
    limits = limits or TruncationLimits()
    response = exchange.response
    headers: dict[str, str] = {}
    if response is not None:
        try:
            headers = dict(await response.all_headers())
        except Exception as e:
            log.warning(f"Header fetch failed for {exchange.id}: {first_line(e)}")

    return SummaryRecord(
        id=exchange.id,
        method=exchange.method,
        url=exchange.url,
        status=response.status if response is not None else None,
        resource_type=exchange.resource_type,
        request_body_snippet=body_snippet(exchange.request_body, limits.request_body_bytes),
        response_headers=headers,
    )


async def list_requests(
    ledger: NetworkLedger,
    criteria: FilterCriteria | None = None,
    limits: TruncationLimits | None = None,
) -> list[str]:
    """
    Select matching exchanges and return one JSON line per exchange.

    Header fetches run concurrently; output keeps ledger order.
    """
    criteria = criteria or FilterCriteria()
    matched = select(ledger.all(), criteria)
    records = await asyncio.gather(*(project(exchange, limits) for exchange in matched))
    log.info(f"Listed {len(records)}/{len(ledger)} exchanges")
    return [record.to_line() for record in records]
