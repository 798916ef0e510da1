"""
Auction configuration
"""

from dataclasses import dataclass
from datetime import timedelta


@dataclass(slots=True, frozen=True)
class AuctionConfig:
    """
    Fixed when the auction is created.

    Percentages are whole numbers, e.g., 5 means 5%.
    All percentage arithmetic truncates toward zero.
    """

    # initial running maximum - the first bid must beat it by `bid_increase_pct`
    starting_floor: int
    # initial deadline = creation time + duration
    duration: timedelta

    # minimum percentage a new bid must exceed the running maximum by
    bid_increase_pct: int = 5
    # percentage withheld from every settlement payout
    return_discount_pct: int = 2
    # a bid placed within this window of the deadline pushes the deadline out by the same window
    extension_window: timedelta = timedelta(minutes=10)

    def __post_init__(self):
        """
        :exception ValueError: if any setting is out of range
        """
        if self.starting_floor < 0:
            raise ValueError("starting_floor must not be negative")
        if self.duration <= timedelta(0):
            raise ValueError("duration must be positive")
        if self.bid_increase_pct < 0:
            raise ValueError("bid_increase_pct must not be negative")
        if not 0 <= self.return_discount_pct <= 100:
            raise ValueError("return_discount_pct must be between 0 and 100")
        if self.extension_window < timedelta(0):
            raise ValueError("extension_window must not be negative")

    def bid_threshold(self, highest_amount: int) -> int:
        """
        A new bid must be strictly greater than the threshold.
        """
        return highest_amount * (100 + self.bid_increase_pct) // 100

    def min_bid(self, highest_amount: int) -> int:
        """
        :return: the smallest amount that would be accepted as the next bid
        """
        return self.bid_threshold(highest_amount) + 1

    def discounted(self, amount: int) -> int:
        """
        :return: amount less the return discount
        """
        return amount * (100 - self.return_discount_pct) // 100
