"""
Auction solvency health check
"""

from dataclasses import dataclass

from bidhouse.apps.english_auction.auction import EnglishAuction
from bidhouse.apps.english_auction.domain.model import Address
from bidhouse.core.health_check import (
    HealthCheck,
    HealthCheckImpact,
    RedHealthCheck,
    YellowHealthCheck,
)


@dataclass
class EscrowShortfall(RedHealthCheck):
    """
    Escrow balance does not cover the deposits recorded for bidders, e.g., after an emergency withdrawal
    """

    balance: int
    total_deposited: int


@dataclass
class UnbackedOffer(RedHealthCheck):
    """
    Bidder's deposits do not cover their current offer
    """

    bidder: Address
    current_offer: int
    total_deposited: int


class AuctionSuspended(YellowHealthCheck):
    """
    Auction is suspended by the owner
    """


class SolvencyHealthCheck(HealthCheck):
    """
    Checks that escrowed funds back every bidder's claim while the auction is unsettled.

    Once settled, all deposits have been paid out and there is nothing left to check.
    """

    def __init__(self, auction: EnglishAuction):
        super().__init__(
            name="auction_solvency",
            impact=HealthCheckImpact.HIGH,
            description="Escrow covers bidder deposits, and deposits cover offers",
            tags={"accounting", "escrow"},
        )
        self.auction = auction

    def execute(self):
        if self.auction.settled:
            return

        balance = self.auction.escrow.balance
        total_deposited = self.auction.total_deposited
        if balance < total_deposited:
            raise EscrowShortfall(balance=balance, total_deposited=total_deposited)

        for bidder in self.auction.bidders:
            participant = self.auction.participant(bidder)
            if participant.total_deposited < participant.current_offer:
                raise UnbackedOffer(
                    bidder=bidder,
                    current_offer=participant.current_offer,
                    total_deposited=participant.total_deposited,
                )

        if self.auction.suspended:
            raise AuctionSuspended()
