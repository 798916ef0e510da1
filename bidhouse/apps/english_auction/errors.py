"""
English auction errors

Every error is raised before any state is mutated, or from inside an atomic unit that is rolled back.
Thus, a failed operation never leaves partial effects behind and can be retried.
"""

from dataclasses import dataclass
from datetime import datetime

from bidhouse.apps.english_auction.domain.model import Address


class AuctionError(Exception):
    """
    Base class for English auction errors
    """


@dataclass
class AuctionClosedError(AuctionError):
    """
    Raised when an operation requires bidding to be open, but the deadline has passed
    """

    deadline: datetime

    def __str__(self) -> str:
        return f"auction closed at {self.deadline.isoformat()}"


@dataclass
class AuctionStillActiveError(AuctionError):
    """
    Raised when an operation requires the auction to be closed, but the deadline has not yet passed
    """

    deadline: datetime

    def __str__(self) -> str:
        return f"auction is active until {self.deadline.isoformat()}"


class AuctionSuspendedError(AuctionError):
    """
    Auction is administratively suspended
    """


class AuctionNotSuspendedError(AuctionError):
    """
    Emergency withdrawal requires the auction to be suspended
    """


class AlreadySettledError(AuctionError):
    """
    The auction can only be settled once
    """


class NoBidsError(AuctionError):
    """
    No bids have been placed
    """


@dataclass
class BidTooLowError(AuctionError):
    """
    Raised when a bid does not beat the running maximum by the configured increase
    """

    amount: int
    # smallest amount that would have been accepted
    min_bid: int

    def __str__(self) -> str:
        return f"bid of {self.amount} is too low - minimum bid is {self.min_bid}"


@dataclass
class TransferFailedError(AuctionError):
    """
    Raised when the escrow fails to transfer funds to the receiver
    """

    receiver: Address
    amount: int

    def __str__(self) -> str:
        return f"failed to transfer {self.amount} to {self.receiver}"


@dataclass
class UnauthorizedError(AuctionError):
    """
    Raised when the caller is not the auction owner
    """

    caller: Address

    def __str__(self) -> str:
        return f"caller is not the auction owner: {self.caller}"
