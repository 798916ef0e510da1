"""
Auction lifecycle model
"""

from enum import IntEnum, auto


class AuctionPhase(IntEnum):
    """
    Bidding is open while the current time is at or before the deadline.

    - Once the deadline passes the auction is closed but unsettled. Bids and surplus claims are rejected,
      and the winner can be revealed.
    - The owner settles the auction once: losers are refunded their deposits, the winner is refunded any deposits
      above the winning bid (both less the return discount), and the remaining custodied value goes to the owner.

    Suspension is not a phase. It is an administrative pause layered on top of every phase.
    """

    ACTIVE = auto()
    CLOSED_UNSETTLED = auto()
    CLOSED_SETTLED = auto()

    def __repr__(self) -> str:
        return f"{self.name}({self.value})"
