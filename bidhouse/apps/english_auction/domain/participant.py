"""
Bidder registry
"""

from collections.abc import Iterator
from dataclasses import dataclass, replace

from bidhouse.apps.english_auction.domain.model import Address


@dataclass(slots=True)
class Participant:
    """
    Per-bidder accounting record.

    Invariant while the auction is active: total_deposited >= current_offer
    """

    # most recent bid placed by the bidder
    current_offer: int = 0
    # value sent with bids and not yet returned
    total_deposited: int = 0
    is_registered: bool = False

    @property
    def surplus(self) -> int:
        """
        Deposits that are not backing the current offer
        """
        return self.total_deposited - self.current_offer


class BidderRegistry:
    """
    Participant records keyed by bidder, iterated in order of first bid.

    Bidders are only ever added through `record_bid`, which registers a bidder at most once.
    Records are never removed, only zeroed out at settlement.
    """

    def __init__(self):
        self._participants: dict[Address, Participant] = {}

    def __contains__(self, bidder: object) -> bool:
        return bidder in self._participants

    def __len__(self) -> int:
        return len(self._participants)

    def __iter__(self) -> Iterator[Address]:
        return iter(self._participants)

    @property
    def bidders(self) -> tuple[Address, ...]:
        """
        :return: registered bidders in order of first bid
        """
        return tuple(self._participants)

    def get(self, bidder: Address) -> Participant:
        """
        :return: a copy of the bidder's record - unregistered bidders get an empty, unregistered record
        """
        participant = self._participants.get(bidder)
        if participant is None:
            return Participant()
        return replace(participant)

    def total_deposited(self) -> int:
        """
        :return: sum of all participant deposits
        """
        return sum(
            participant.total_deposited for participant in self._participants.values()
        )

    def record_bid(self, bidder: Address, amount: int) -> Participant:
        """
        Registers the bidder on their first bid.
        The amount becomes the bidder's current offer and is added to their deposits.
        """
        participant = self._participants.get(bidder)
        if participant is None:
            participant = Participant(is_registered=True)
            self._participants[bidder] = participant
        participant.current_offer = amount
        participant.total_deposited += amount
        return replace(participant)

    def release_surplus(self, bidder: Address) -> int:
        """
        Removes the bidder's surplus from their deposits. The current offer is left untouched.

        :return: surplus amount, zero for unregistered bidders
        """
        participant = self._participants.get(bidder)
        if participant is None:
            return 0
        surplus = participant.surplus
        participant.total_deposited -= surplus
        return surplus

    def close_out(self, bidder: Address, clear_offer: bool = True) -> Participant:
        """
        Zeroes out the bidder's deposits, and their current offer if `clear_offer` is set.
        The winner keeps their current offer, which remains the record of the winning bid.

        :return: the record as it was before it was zeroed out
        :exception KeyError: if the bidder is not registered
        """
        participant = self._participants[bidder]
        closed = replace(participant)
        if clear_offer:
            participant.current_offer = 0
        participant.total_deposited = 0
        return closed

    def copy(self) -> "BidderRegistry":
        """
        :return: deep copy, preserving registration order
        """
        registry = BidderRegistry()
        registry._participants = {
            bidder: replace(participant)
            for bidder, participant in self._participants.items()
        }
        return registry
