"""
Settlement arithmetic
"""

from dataclasses import dataclass

from bidhouse.apps.english_auction.domain.config import AuctionConfig
from bidhouse.apps.english_auction.domain.model import Address
from bidhouse.apps.english_auction.domain.participant import Participant


@dataclass(slots=True, frozen=True)
class Payout:
    """
    Settlement payout to a single bidder
    """

    bidder: Address
    # amount owed before the return discount
    refundable: int
    # amount transferred
    amount: int

    @property
    def withheld(self) -> int:
        """
        Return discount kept by the owner
        """
        return self.refundable - self.amount


@dataclass(slots=True, frozen=True)
class SettlementReport:
    """
    Outcome of a successful settlement
    """

    winner: Address | None
    winning_amount: int
    # in bidder registration order
    payouts: tuple[Payout, ...]
    # custodied value transferred to the owner after the payouts
    owner_sweep: int

    @property
    def total_paid(self) -> int:
        """
        Total value that left custody, including the owner sweep
        """
        return sum(payout.amount for payout in self.payouts) + self.owner_sweep


def refundable_amount(
    participant: Participant, is_winner: bool, winning_amount: int
) -> int:
    """
    Losers are owed everything they deposited.
    The winner's deposits back the winning bid, so only deposits above the winning amount are owed.
    """
    if is_winner:
        return participant.total_deposited - winning_amount
    return participant.total_deposited


def compute_payout(
    config: AuctionConfig,
    bidder: Address,
    participant: Participant,
    winner: Address,
    winning_amount: int,
) -> Payout:
    """
    :param participant: the bidder's record before it was closed out
    """
    refundable = refundable_amount(participant, bidder == winner, winning_amount)
    return Payout(
        bidder=bidder,
        refundable=refundable,
        amount=config.discounted(refundable),
    )
