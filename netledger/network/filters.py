"""
Filter engine — selects ledger entries by method and resource type.
"""

from __future__ import annotations

from netledger.network.models import Exchange, FilterCriteria


def matches(exchange: Exchange, criteria: FilterCriteria) -> bool:
    """
    True if the exchange passes the criteria.

    Note the combination is an OR: with both sets given, an entry that
    matches only the method or only the resource type still passes.
    ``methods={"POST"}, resource_types={"image"}`` yields every POST and
    every image. Empty sets impose no constraint.
    """
    if not criteria.methods and not criteria.resource_types:
        return True
    if criteria.methods and exchange.method in criteria.methods:
        return True
    if criteria.resource_types and exchange.resource_type in criteria.resource_types:
        return True
    return False


def select(snapshot: list[Exchange], criteria: FilterCriteria) -> list[Exchange]:
    """Entries of a ledger snapshot passing the criteria, in ledger order."""
    return [exchange for exchange in snapshot if matches(exchange, criteria)]
