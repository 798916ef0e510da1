"""
Bid ledger
"""

from collections.abc import Iterator
from dataclasses import dataclass
from datetime import datetime

from bidhouse.apps.english_auction.domain.model import Address


@dataclass(slots=True, frozen=True)
class Bid:
    """
    Accepted bid
    """

    bidder: Address
    amount: int
    placed_at: datetime


class BidLedger:
    """
    Append-only record of accepted bids in the order they were accepted.

    The last bid is the leading bid. Because every bid must beat the previous one by the configured increase,
    amounts strictly increase along the ledger.
    """

    def __init__(self):
        self._bids: list[Bid] = []

    def __len__(self) -> int:
        return len(self._bids)

    def __iter__(self) -> Iterator[Bid]:
        return iter(self._bids)

    def __bool__(self) -> bool:
        return bool(self._bids)

    @property
    def bids(self) -> tuple[Bid, ...]:
        """
        :return: bids in chronological order
        """
        return tuple(self._bids)

    @property
    def last(self) -> Bid | None:
        """
        :return: the leading bid, or None if no bids have been placed
        """
        return self._bids[-1] if self._bids else None

    def append(self, bid: Bid):
        """
        Records an accepted bid
        """
        self._bids.append(bid)
