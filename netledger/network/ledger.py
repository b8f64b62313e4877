"""
Network Ledger — append-only record of every exchange a page makes.

Requests are recorded in the order they are initiated. A response, when it
arrives, is attached to the existing entry rather than appended, so the
entry keeps its identity and position for the whole page lifetime.
"""

from __future__ import annotations

from patchright.async_api import Page, Request, Response

from netledger.log import setup_logging
from netledger.network.models import Exchange
from netledger.network.truncation import first_line

log = setup_logging("network")


class NetworkLedger:
    """Ordered exchanges plus an id index. Entries are never removed."""

    def __init__(self) -> None:
        self._entries: list[Exchange] = []
        self._index: dict[str, Exchange] = {}
        self._page: Page | None = None

    def __len__(self) -> int:
        return len(self._entries)

    # ── Mutators ────────────────────────────────────────────────

    def record(self, exchange: Exchange) -> bool:
        """Append a new pending exchange. Returns False for a known id."""
        if exchange.id in self._index:
            log.debug(f"Duplicate request id ignored: {exchange.id}")
            return False
        self._index[exchange.id] = exchange
        self._entries.append(exchange)
        log.debug(f"REQ  {exchange.method} {exchange.url[:120]}")
        return True

    def attach_response(self, request_id: str, response: Response) -> bool:
        """
        Attach a response to a recorded exchange.

        Only the first attach takes effect; browsers may re-fire completion
        events, and those repeats are no-ops. Responses for requests that
        were never recorded (issued before the ledger started) are ignored.
        """
        exchange = self._index.get(request_id)
        if exchange is None:
            log.debug(f"Response for unknown request id ignored: {request_id}")
            return False
        if exchange.response is not None:
            return False
        exchange.response = response
        log.debug(f"RESP {response.status} {exchange.url[:120]}")
        return True

    # ── Readers ─────────────────────────────────────────────────

    def all(self) -> list[Exchange]:
        """Snapshot of all exchanges in initiation order."""
        return list(self._entries)

    def lookup(self, request_id: str) -> Exchange | None:
        return self._index.get(request_id)

    # ── Page binding ────────────────────────────────────────────

    @property
    def active(self) -> bool:
        return self._page is not None

    def start(self, page: Page) -> None:
        """Start recording requests and responses from a page."""
        if self._page is not None:
            return
        page.on("request", self._on_request)
        page.on("response", self._on_response)
        self._page = page
        log.info("Network ledger started")

    def stop(self) -> None:
        """Stop listening. Recorded exchanges stay available."""
        if self._page is None:
            return
        self._page.remove_listener("request", self._on_request)
        self._page.remove_listener("response", self._on_response)
        self._page = None
        log.info(f"Network ledger stopped — {len(self._entries)} exchanges recorded")

    def _on_request(self, request: Request) -> None:
        try:
            self.record(Exchange.from_request(request))
        except Exception as e:
            log.warning(f"Could not record request: {first_line(e)}")

    def _on_response(self, response: Response) -> None:
        try:
            self.attach_response(response.request._guid, response)
        except Exception as e:
            log.warning(f"Could not attach response: {first_line(e)}")
